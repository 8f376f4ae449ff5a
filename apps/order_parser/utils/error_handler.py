"""Error handling utilities for user-friendly parse failure messages."""
from typing import Optional
import structlog

from apps.order_parser.models import FailureKind, ParseFailure

logger = structlog.get_logger()


class OrderParserError(Exception):
    """Base error for the order line parser."""


class PhraseResolutionError(OrderParserError):
    """A matched phrase could not be turned into a command."""

    def __init__(self, failure: ParseFailure):
        super().__init__(failure.message)
        self.failure = failure


class ErrorHandler:
    """Utility class for classifying parse failures and generating user messages."""

    @staticmethod
    def get_user_message_for_parse_failure(failure: ParseFailure) -> str:
        """
        Get user-friendly message for a parse failure.

        Args:
            failure: Failure returned by the interpreter

        Returns:
            User-friendly message in Spanish
        """
        if failure.kind == FailureKind.NO_SHAPE_MATCHED:
            return "❓ No entendí la línea. Escríbela como «papa 2 kilos» o «papa 3 soles con 50»."

        if failure.kind == FailureKind.INVALID_NUMERAL:
            fragment = failure.fragment or ""
            return f"🔢 No pude leer la cantidad «{fragment}». Revisa el número e inténtalo otra vez."

        if failure.kind == FailureKind.INCOMPATIBLE_UNIT_COMBINATION:
            return "⚖️ La línea mezcla unidades distintas. Indica una sola unidad por producto."

        if failure.kind == FailureKind.EMPTY_SUBJECT:
            return "🛒 Falta el nombre del producto."

        return "❌ No se pudo procesar la línea."

    @staticmethod
    def classify_parse_failure(failure: ParseFailure) -> str:
        """
        Classify a failure by what the caller should do with it.

        Args:
            failure: Failure returned by the interpreter

        Returns:
            'clarify' when the user should rephrase the line,
            'diagnostic' when the failure points at a lexicon or grammar gap
        """
        if failure.kind in (FailureKind.NO_SHAPE_MATCHED, FailureKind.EMPTY_SUBJECT):
            return "clarify"
        return "diagnostic"

    @staticmethod
    def log_parse_failure(failure: ParseFailure, phrase: Optional[str] = None, max_length: int = 200):
        """
        Log a failure with the offending fragment for later grammar refinement.

        Args:
            failure: Failure returned by the interpreter
            phrase: Phrase that produced it (truncated)
            max_length: Maximum logged phrase length
        """
        category = ErrorHandler.classify_parse_failure(failure)
        fields = {
            "failure_kind": failure.kind.value,
            "category": category,
            "fragment": failure.fragment,
            "shape": failure.shape.value if failure.shape else None,
        }
        if phrase is not None:
            fields["phrase"] = phrase[:max_length]

        if category == "diagnostic":
            logger.warning("parse_failure_diagnostic", **fields)
        else:
            logger.info("parse_failure_clarify", **fields)
