"""
Phrase matchers for order lines.

Each matcher recognizes one phrase shape and either carves the whole phrase
into raw fragments or declines. Matching runs on folded text (lower-case,
no diacritics); fragments are sliced from the original text so the subject
keeps its case and numerals are reported as typed.
"""
import re
from dataclasses import dataclass
from typing import Optional, Pattern, Tuple

from apps.order_parser.models import CanonicalUnit, PhraseShape
from apps.order_parser.services.lexicon import (
    FRACTION_WORDS,
    NUMBER_WORDS,
    SECONDARY_NUMBER_WORDS,
    SMALL_NUMBER_WORDS,
    UNIT_WORDS,
    fold_text,
    word_alternation,
)
from apps.order_parser.services.number_resolver import NUMERAL_SHAPE, is_number
from apps.order_parser.services.unit_resolver import resolve_unit


# ---------------------------------------------------------------------------
# Grammar building blocks (generated from the lexicon tables)
# ---------------------------------------------------------------------------

_NUMERAL = rf"{NUMERAL_SHAPE}(?!\d|[.,/]\d)"
_FRACTIONS = word_alternation(FRACTION_WORDS, optional_space=True)


def _amount(words) -> str:
    # Fraction words go first so "un cuarto" wins over "un"
    return rf"(?:(?:{_FRACTIONS}|{word_alternation(words)})\b|{_NUMERAL})"


QUANTITY = _amount(SMALL_NUMBER_WORDS)
SECONDARY_QUANTITY = _amount(SECONDARY_NUMBER_WORDS)
CARDINAL_AMOUNT = rf"(?:(?:{word_alternation(NUMBER_WORDS)})\b|{_NUMERAL})"
UNIT = rf"(?:{word_alternation(UNIT_WORDS)})\b"

_CURRENCY_WORD = r"\b(?:sol|soles|centimo|centimos)\b"
_PRICE_CONNECTOR = r"(?:(?:cuesta|a|en)\s+)?"
# "papa a 2", "papa cuesta treinta y cinco": a subject never ends in a connector
_TRAILING_CONNECTORS = frozenset({"y", "con", "a", "en", "cuesta"})
_SECOND_CLAUSE = (
    rf"(?:\s+(?:y|con)\s+(?P<qty2>{SECONDARY_QUANTITY})(?:\s*(?P<unit2>{UNIT}))?)?"
)


@dataclass(frozen=True)
class QuantityClause:
    """Raw quantity fragment with its optional unit fragment."""

    amount: str
    unit: Optional[str] = None


@dataclass(frozen=True)
class PhraseMatch:
    """Fragments carved out of a phrase by one matcher."""

    shape: PhraseShape
    subject: str
    quantity: Optional[QuantityClause] = None
    secondary: Optional[QuantityClause] = None
    price_amount: Optional[str] = None
    price_centimos: Optional[str] = None

    @property
    def is_price(self) -> bool:
        return self.price_amount is not None


class PhraseMatcher:
    """Base class: anchored match of one phrase shape."""

    shape: PhraseShape
    pattern: Pattern[str]

    def attempt(self, folded: str, original: str) -> Optional[PhraseMatch]:
        """
        Try to match the whole phrase.

        Args:
            folded: Folded phrase (see lexicon.fold_text), used for matching
            original: Phrase with original case, same length as folded

        Returns:
            PhraseMatch with raw fragments, or None when the shape does not fit
        """
        if self.declines(folded):
            return None
        match = self.pattern.match(folded)
        if not match:
            return None
        subject = _group(match, original, "subject")
        # A bare number or unit word is never a product name ("3 2", "2 kilos")
        if subject is None or is_number(subject) or resolve_unit(subject) != CanonicalUnit.NONE:
            return None
        return self.build(match, original, subject)

    def declines(self, folded: str) -> bool:
        return False

    def build(self, match, original: str, subject: str) -> Optional[PhraseMatch]:
        raise NotImplementedError


def _group(match, original: str, name: str) -> Optional[str]:
    start, end = match.span(name)
    if start < 0:
        return None
    return original[start:end]


def _ends_with_connector(subject: str) -> bool:
    return fold_text(subject).rsplit(" ", 1)[-1] in _TRAILING_CONNECTORS


def _quantity_clauses(match, original: str) -> Tuple[QuantityClause, Optional[QuantityClause]]:
    primary = QuantityClause(
        amount=_group(match, original, "qty"),
        unit=_group(match, original, "unit"),
    )
    secondary = None
    if _group(match, original, "qty2") is not None:
        secondary = QuantityClause(
            amount=_group(match, original, "qty2"),
            unit=_group(match, original, "unit2"),
        )
    return primary, secondary


class PriceMatcher(PhraseMatcher):
    """<subject> [a|en|cuesta] <amount> soles [y|con] [<centimos>] [centimos]"""

    shape = PhraseShape.PRICE
    pattern = re.compile(
        rf"^(?P<subject>.+?)\s+{_PRICE_CONNECTOR}(?P<amount>{QUANTITY})\s*sol(?:es)?\b"
        rf"(?:\s+(?:y|con)\b)?(?:\s+(?P<centimos>{QUANTITY}))?(?:\s*centimos?\b)?$"
    )

    def build(self, match, original: str, subject: str) -> PhraseMatch:
        return PhraseMatch(
            shape=self.shape,
            subject=subject,
            price_amount=_group(match, original, "amount"),
            price_centimos=_group(match, original, "centimos"),
        )


class ForwardQuantityMatcher(PhraseMatcher):
    """<subject> <qty> [<unit>] [y|con <qty2> [<unit2>]]"""

    shape = PhraseShape.QUANTITY_FORWARD
    pattern = re.compile(
        rf"^(?!\d)(?!(?:{_FRACTIONS}|{word_alternation(SMALL_NUMBER_WORDS)})\b)(?!{UNIT})"
        rf"(?P<subject>.+?)\s+(?P<qty>{QUANTITY})(?:\s*(?P<unit>{UNIT}))?{_SECOND_CLAUSE}$"
    )
    _currency = re.compile(_CURRENCY_WORD)

    def declines(self, folded: str) -> bool:
        return bool(self._currency.search(folded))

    def build(self, match, original: str, subject: str) -> Optional[PhraseMatch]:
        if _ends_with_connector(subject):
            return None
        primary, secondary = _quantity_clauses(match, original)
        return PhraseMatch(shape=self.shape, subject=subject, quantity=primary, secondary=secondary)


class ReversedQuantityMatcher(PhraseMatcher):
    """<qty> [<unit>] [y|con <qty2> [<unit2>]] [de|del] <subject>"""

    shape = PhraseShape.QUANTITY_REVERSED
    pattern = re.compile(
        rf"^(?P<qty>{QUANTITY})(?:\s*(?P<unit>{UNIT}))?{_SECOND_CLAUSE}"
        rf"\s+(?:(?:de|del)\s+)?(?P<subject>.+)$"
    )
    _currency = re.compile(_CURRENCY_WORD)
    _subject_connectors = frozenset({"de", "del"})

    def declines(self, folded: str) -> bool:
        return bool(self._currency.search(folded))

    def build(self, match, original: str, subject: str) -> Optional[PhraseMatch]:
        # "2 kilos de" has no product after the connector
        if fold_text(subject) in self._subject_connectors:
            return None
        primary, secondary = _quantity_clauses(match, original)
        return PhraseMatch(shape=self.shape, subject=subject, quantity=primary, secondary=secondary)


class ProductPriceMatcher(PhraseMatcher):
    """<subject> [a|en|cuesta] <amount> [soles] [[y|con] <centimos> [centimos]]

    Loose fallback where both amounts may be any cardinal word up to "cien".
    """

    shape = PhraseShape.PRODUCT_PRICE
    pattern = re.compile(
        rf"^(?P<subject>.+?)\s+{_PRICE_CONNECTOR}(?P<amount>{CARDINAL_AMOUNT})(?:\s*sol(?:es)?\b)?"
        rf"(?:\s+(?:(?:y|con)\s+)?(?P<centimos>{CARDINAL_AMOUNT})(?:\s*centimos?\b)?)?$"
    )

    def build(self, match, original: str, subject: str) -> Optional[PhraseMatch]:
        if _ends_with_connector(subject):
            return None
        return PhraseMatch(
            shape=self.shape,
            subject=subject,
            price_amount=_group(match, original, "amount"),
            price_centimos=_group(match, original, "centimos"),
        )


# Priority order: the first full match wins
MATCHERS: Tuple[PhraseMatcher, ...] = (
    PriceMatcher(),
    ForwardQuantityMatcher(),
    ReversedQuantityMatcher(),
    ProductPriceMatcher(),
)
