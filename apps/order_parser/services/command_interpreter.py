"""Command interpreter: turns a free-text order line into a Command."""
import re
import unicodedata
from fractions import Fraction
from typing import Iterable, List, Optional, Sequence, Tuple

import structlog

from apps.order_parser.config import config
from apps.order_parser.models import (
    CanonicalUnit,
    Command,
    FailureKind,
    ParseFailure,
    ParseResult,
    ParsedPrice,
    ParsedQuantity,
    PhraseShape,
)
from apps.order_parser.services.lexicon import ARTICLES, collapse_whitespace, fold_text
from apps.order_parser.services.number_resolver import resolve_number
from apps.order_parser.services.phrase_matchers import (
    MATCHERS,
    PhraseMatch,
    PhraseMatcher,
    QuantityClause,
)
from apps.order_parser.services.unit_resolver import resolve_unit, units_compatible
from apps.order_parser.utils.error_handler import ErrorHandler, PhraseResolutionError
from apps.order_parser.utils.logger_utils import sanitize_for_logging

logger = structlog.get_logger()

# A leading "." or "," before a digit belongs to the numeral (".5")
_EDGE_PUNCTUATION_RE = re.compile(r"^(?:[\s;:!?¡¿]|[.,](?!\d))+|[\s.,;:!?¡¿]+$")
_SUBJECT_EDGE_RE = re.compile(r"^[\s.,;:!?¡¿\-_\"'()]+|[\s.,;:!?¡¿\-_\"'()]+$")


class CommandInterpreter:
    """Interpreter for Spanish order line phrases."""

    def __init__(
        self,
        strict_unit_combination: Optional[bool] = None,
        strip_leading_articles: Optional[bool] = None,
        matchers: Sequence[PhraseMatcher] = MATCHERS,
    ):
        """
        Initialize interpreter.

        Args:
            strict_unit_combination: Fail on quantity clauses with different
                units instead of keeping the primary one (defaults to config)
            strip_leading_articles: Drop "el/la/los/las/un/una" in front of
                the product name (defaults to config)
            matchers: Phrase matchers in priority order
        """
        if strict_unit_combination is None:
            strict_unit_combination = config.STRICT_UNIT_COMBINATION
        if strip_leading_articles is None:
            strip_leading_articles = config.STRIP_LEADING_ARTICLES
        self.strict_unit_combination = strict_unit_combination
        self.strip_leading_articles = strip_leading_articles
        self.matchers = tuple(matchers)

    @staticmethod
    def normalize_phrase(raw_phrase: Optional[str]) -> str:
        """
        Normalize a raw phrase before matching.

        Applies NFC composition, collapses whitespace and drops sentence
        punctuation at both ends ("¿papa 2 kilos?" -> "papa 2 kilos").
        """
        text = unicodedata.normalize("NFC", raw_phrase or "")
        text = collapse_whitespace(text)
        return _EDGE_PUNCTUATION_RE.sub("", text)

    @staticmethod
    def normalize_subject(subject: str, strip_articles: bool = True) -> str:
        """
        Normalize a product name fragment.

        Trims, collapses interior whitespace, removes punctuation at the edges
        and, when followed by more text, a leading article. Case is kept.

        Examples:
            "  la   Papa amarilla " -> "Papa amarilla"
            "la"                    -> "la"
        """
        text = _SUBJECT_EDGE_RE.sub("", collapse_whitespace(subject))
        if strip_articles:
            head, _, rest = text.partition(" ")
            if rest and fold_text(head) in ARTICLES:
                text = rest
        return text

    def interpret(self, raw_phrase: Optional[str]) -> ParseResult:
        """
        Interpret one order line.

        Args:
            raw_phrase: Free text such as "papa 2 kilos" or "dos kilos de papa"

        Returns:
            ParseResult holding a Command, or a ParseFailure when the phrase
            does not fit any shape or a captured fragment is invalid
        """
        phrase = self.normalize_phrase(raw_phrase)
        folded = fold_text(phrase)

        for matcher in self.matchers:
            match = matcher.attempt(folded, phrase)
            if match is None:
                continue
            try:
                command, warnings = self._build_command(match)
            except PhraseResolutionError as e:
                ErrorHandler.log_parse_failure(
                    e.failure, phrase=phrase, max_length=config.LOG_PHRASE_MAX_LENGTH
                )
                return ParseResult.fail(e.failure)

            logger.debug(
                "phrase_interpreted",
                phrase=sanitize_for_logging(phrase, config.LOG_PHRASE_MAX_LENGTH),
                shape=match.shape.value,
                subject=command.subject,
                low_confidence=command.low_confidence,
            )
            return ParseResult.success(command, warnings)

        failure = ParseFailure(FailureKind.NO_SHAPE_MATCHED)
        logger.warning(
            "phrase_not_understood",
            phrase=sanitize_for_logging(phrase, config.LOG_PHRASE_MAX_LENGTH),
            phrase_length=len(phrase),
        )
        return ParseResult.fail(failure)

    def interpret_many(self, phrases: Iterable[Optional[str]]) -> List[ParseResult]:
        """Interpret several phrases, one result per phrase, order kept."""
        return [self.interpret(phrase) for phrase in phrases]

    def _build_command(self, match: PhraseMatch) -> Tuple[Command, Tuple[ParseFailure, ...]]:
        subject = self.normalize_subject(match.subject, self.strip_leading_articles)
        if not subject:
            raise PhraseResolutionError(
                ParseFailure(FailureKind.EMPTY_SUBJECT, fragment=match.subject, shape=match.shape)
            )

        if match.is_price:
            price = self._resolve_price(match)
            return Command(subject=subject, price=price, shape=match.shape), ()

        quantity, warnings = self._resolve_quantity(match)
        command = Command(
            subject=subject,
            quantity=quantity,
            shape=match.shape,
            low_confidence=bool(warnings),
        )
        return command, warnings

    @staticmethod
    def _resolve_amount(fragment: str, shape: PhraseShape) -> Fraction:
        value = resolve_number(fragment)
        if value is None:
            raise PhraseResolutionError(
                ParseFailure(FailureKind.INVALID_NUMERAL, fragment=fragment, shape=shape)
            )
        return value

    def _resolve_quantity(self, match: PhraseMatch) -> Tuple[ParsedQuantity, Tuple[ParseFailure, ...]]:
        primary_value, primary_unit = self._resolve_clause(match.quantity, match.shape)
        if match.secondary is None:
            return ParsedQuantity(value=primary_value, unit=primary_unit), ()

        secondary_value, secondary_unit = self._resolve_clause(match.secondary, match.shape)

        if units_compatible(primary_unit, secondary_unit):
            unit = primary_unit if primary_unit != CanonicalUnit.NONE else secondary_unit
            return ParsedQuantity(value=primary_value + secondary_value, unit=unit), ()

        failure = ParseFailure(
            FailureKind.INCOMPATIBLE_UNIT_COMBINATION,
            fragment=match.secondary.unit,
            shape=match.shape,
        )
        logger.warning(
            "unit_combination_incompatible",
            primary_unit=primary_unit.value,
            secondary_unit=secondary_unit.value,
            strict=self.strict_unit_combination,
        )
        if self.strict_unit_combination:
            raise PhraseResolutionError(failure)

        quantity = ParsedQuantity(
            value=primary_value,
            unit=primary_unit,
            secondary_value=secondary_value,
            secondary_unit=secondary_unit,
        )
        return quantity, (failure,)

    def _resolve_clause(self, clause: QuantityClause, shape: PhraseShape) -> Tuple[Fraction, CanonicalUnit]:
        return self._resolve_amount(clause.amount, shape), resolve_unit(clause.unit)

    def _resolve_price(self, match: PhraseMatch) -> ParsedPrice:
        """
        Resolve soles and céntimos fragments into a price.

        A fractional amount is split into soles and céntimos ("2.5" -> 2 / 50).
        A céntimos fragment below one is a fraction of a sol ("y medio" -> 50);
        otherwise it is a count of céntimos and must be a whole number in [0, 99].
        """
        shape = match.shape
        amount = self._resolve_amount(match.price_amount, shape)
        soles = amount.numerator // amount.denominator
        amount_cents = (amount - soles) * 100
        if amount_cents.denominator != 1:
            raise PhraseResolutionError(
                ParseFailure(FailureKind.INVALID_NUMERAL, fragment=match.price_amount, shape=shape)
            )

        if match.price_centimos is None:
            return ParsedPrice(soles=soles, centimos=int(amount_cents))

        if amount_cents:
            # "2.5 soles con 20" names the céntimos twice
            raise PhraseResolutionError(
                ParseFailure(FailureKind.INVALID_NUMERAL, fragment=match.price_centimos, shape=shape)
            )

        value = self._resolve_amount(match.price_centimos, shape)
        cents = value * 100 if value < 1 else value
        if cents.denominator != 1 or not 0 <= cents <= 99:
            raise PhraseResolutionError(
                ParseFailure(FailureKind.INVALID_NUMERAL, fragment=match.price_centimos, shape=shape)
            )
        return ParsedPrice(soles=soles, centimos=int(cents))


def interpret(raw_phrase: Optional[str]) -> ParseResult:
    """Interpret one phrase with a default-configured interpreter."""
    return CommandInterpreter().interpret(raw_phrase)
