"""
Spanish lexicon for order lines.

Single source of truth for number words, fraction words and unit words.
Keys are lower-case and accent-free; every lookup folds its input first.
The grammar alternations in phrase_matchers are generated from these tables.
"""
import re
import unicodedata
from fractions import Fraction
from typing import Dict, Iterable, Optional, Tuple

from apps.order_parser.models import CanonicalUnit


_UNITS: Dict[str, int] = {
    "cero": 0,
    "uno": 1,
    "un": 1,
    "una": 1,
    "dos": 2,
    "tres": 3,
    "cuatro": 4,
    "cinco": 5,
    "seis": 6,
    "siete": 7,
    "ocho": 8,
    "nueve": 9,
}

_TEENS: Dict[str, int] = {
    "diez": 10,
    "once": 11,
    "doce": 12,
    "trece": 13,
    "catorce": 14,
    "quince": 15,
    "dieciseis": 16,
    "diecisiete": 17,
    "dieciocho": 18,
    "diecinueve": 19,
}

# Twenties are written as one word in Spanish: veinte, veintiuno ... veintinueve
_TWENTIES: Dict[str, int] = {
    "veinte": 20,
    "veintiuno": 21,
    "veintiun": 21,
    "veintiuna": 21,
    "veintidos": 22,
    "veintitres": 23,
    "veinticuatro": 24,
    "veinticinco": 25,
    "veintiseis": 26,
    "veintisiete": 27,
    "veintiocho": 28,
    "veintinueve": 29,
}

_TENS: Dict[str, int] = {
    "treinta": 30,
    "cuarenta": 40,
    "cincuenta": 50,
    "sesenta": 60,
    "setenta": 70,
    "ochenta": 80,
    "noventa": 90,
}


def _build_cardinals() -> Dict[str, int]:
    table: Dict[str, int] = {}
    table.update(_UNITS)
    table.update(_TEENS)
    table.update(_TWENTIES)
    table.update(_TENS)
    # 31..99: "treinta y uno", "cuarenta y dos", ...
    for tens_word, tens_value in _TENS.items():
        for unit_word, unit_value in _UNITS.items():
            if unit_value == 0:
                continue
            table[f"{tens_word} y {unit_word}"] = tens_value + unit_value
    table["cien"] = 100
    return table


NUMBER_WORDS: Dict[str, int] = _build_cardinals()

FRACTION_WORDS: Dict[str, Fraction] = {
    "medio": Fraction(1, 2),
    "media": Fraction(1, 2),
    "un medio": Fraction(1, 2),
    "cuarto": Fraction(1, 4),
    "un cuarto": Fraction(1, 4),
    "tres cuartos": Fraction(3, 4),
}

UNIT_WORDS: Dict[str, CanonicalUnit] = {
    # Kilogram
    "kilo": CanonicalUnit.KILOGRAM,
    "kilos": CanonicalUnit.KILOGRAM,
    "kilogramo": CanonicalUnit.KILOGRAM,
    "kilogramos": CanonicalUnit.KILOGRAM,
    "kg": CanonicalUnit.KILOGRAM,
    "kgs": CanonicalUnit.KILOGRAM,
    # Gram
    "gramo": CanonicalUnit.GRAM,
    "gramos": CanonicalUnit.GRAM,
    "g": CanonicalUnit.GRAM,
    "gr": CanonicalUnit.GRAM,
    "grs": CanonicalUnit.GRAM,
    # Unit
    "unidad": CanonicalUnit.UNIT,
    "unidades": CanonicalUnit.UNIT,
    "und": CanonicalUnit.UNIT,
    "unds": CanonicalUnit.UNIT,
    # Sack
    "saco": CanonicalUnit.SACK,
    "sacos": CanonicalUnit.SACK,
    # Dozen
    "docena": CanonicalUnit.DOZEN,
    "docenas": CanonicalUnit.DOZEN,
    "docn": CanonicalUnit.DOZEN,
    "docns": CanonicalUnit.DOZEN,
}

# Cardinals the quantity/price grammars accept as a spoken amount.
# Larger cardinals are only accepted by the product-price fallback.
SMALL_NUMBER_WORDS: Tuple[str, ...] = (
    "una", "uno", "un", "dos", "tres", "cuatro", "cinco",
    "seis", "siete", "ocho", "nueve", "diez",
)

# A second quantity clause ("y medio", "con un cuarto") only takes these
# cardinals, besides fraction words and numerals.
SECONDARY_NUMBER_WORDS: Tuple[str, ...] = ("una", "uno", "un")

ARTICLES = frozenset({"el", "la", "los", "las", "un", "una"})

_WHITESPACE_RE = re.compile(r"\s+")


def _fold_char(char: str) -> str:
    base = "".join(
        c for c in unicodedata.normalize("NFD", char) if not unicodedata.combining(c)
    ).lower()
    # Keep a 1:1 character mapping so folded spans index the original text
    return base if len(base) == 1 else char


def fold_text(text: str) -> str:
    """Lower-case and strip diacritics, keeping the same length as the input.

    Examples:
        "SÉIS"      -> "seis"
        "Veintidós" -> "veintidos"
    """
    return "".join(_fold_char(c) for c in text)


def collapse_whitespace(text: str) -> str:
    """Trim and collapse runs of whitespace into single spaces."""
    return _WHITESPACE_RE.sub(" ", text or "").strip()


def _lookup_key(text: str) -> str:
    return collapse_whitespace(fold_text(unicodedata.normalize("NFC", text or "")))


_FRACTION_WORDS_NO_SPACE: Dict[str, Fraction] = {
    key.replace(" ", ""): value for key, value in FRACTION_WORDS.items()
}


def resolve_number_word(token: str) -> Optional[int]:
    """Resolve a Spanish cardinal word (0-100) to its integer value.

    Returns:
        Integer value or None if the token is not a known cardinal
    """
    return NUMBER_WORDS.get(_lookup_key(token))


def resolve_fraction_word(phrase: str) -> Optional[Fraction]:
    """Resolve a fraction word ("medio", "un cuarto", "tres cuartos").

    The space inside two-word forms is optional ("uncuarto").

    Returns:
        Fraction value or None if the phrase is not a fraction word
    """
    key = _lookup_key(phrase)
    value = FRACTION_WORDS.get(key)
    if value is None:
        value = _FRACTION_WORDS_NO_SPACE.get(key.replace(" ", ""))
    return value


def resolve_unit_word(token: str) -> CanonicalUnit:
    """Resolve a unit word to its canonical unit; unknown words give NONE."""
    return UNIT_WORDS.get(_lookup_key(token), CanonicalUnit.NONE)


def word_alternation(words: Iterable[str], optional_space: bool = False) -> str:
    """Build a regex alternation from lexicon words, longest first.

    Args:
        words: Lexicon keys (already folded)
        optional_space: Let the space inside multi-word entries be dropped,
            so that "un cuarto" also matches "uncuarto"

    Returns:
        Alternation body without surrounding group
    """
    joiner = r"\s?" if optional_space else r"\s"
    ordered = sorted(set(words), key=len, reverse=True)
    return "|".join(joiner.join(re.escape(part) for part in w.split(" ")) for w in ordered)
