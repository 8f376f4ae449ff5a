"""Number resolver for numerals, simple fractions and Spanish number words."""
import re
from fractions import Fraction
from typing import Optional

from apps.order_parser.services.lexicon import (
    collapse_whitespace,
    fold_text,
    resolve_fraction_word,
    resolve_number_word,
)

DECIMAL_RE = re.compile(r"^\d+(?:\.\d+)?$")
SIMPLE_FRACTION_RE = re.compile(r"^(\d+)/(\d+)$")

# Anything a speaker or transcriber might have meant as a numeral. Grammars
# capture this loose shape so that "1.2.3" is reported as an invalid numeral
# instead of being silently split.
NUMERAL_SHAPE = r"\d(?:[\d.,/]*\d)?"


def resolve_number(text: str) -> Optional[Fraction]:
    """
    Resolve a numeric fragment into an exact rational value.

    Accepted forms, in priority order:
        1. integer or decimal numeral: "2", "0.5"
        2. simple fraction with non-zero denominator: "1/2"
        3. fraction word: "medio", "un cuarto", "tres cuartos"
        4. cardinal word 0-100: "dos", "veintidós", "cien"

    Args:
        text: Fragment to resolve

    Returns:
        Fraction value, or None when the fragment is not a number
        (malformed numerals such as "1.2.3" or "1/0" included)
    """
    fragment = collapse_whitespace(fold_text(text or ""))
    if not fragment:
        return None

    if DECIMAL_RE.match(fragment):
        return Fraction(fragment)

    match = SIMPLE_FRACTION_RE.match(fragment)
    if match:
        denominator = int(match.group(2))
        if denominator == 0:
            return None
        return Fraction(int(match.group(1)), denominator)

    fraction = resolve_fraction_word(fragment)
    if fraction is not None:
        return fraction

    cardinal = resolve_number_word(fragment)
    if cardinal is not None:
        return Fraction(cardinal)

    return None


def is_number(text: str) -> bool:
    """Check whether a fragment resolves to a number."""
    return resolve_number(text) is not None
