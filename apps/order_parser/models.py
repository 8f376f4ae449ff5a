"""Domain types produced by the order line interpreter."""
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from fractions import Fraction
from typing import Optional, Dict, Any, Tuple


class CanonicalUnit(str, Enum):
    """Closed set of units every unit word normalizes to."""

    KILOGRAM = "KILOGRAM"
    GRAM = "GRAM"
    UNIT = "UNIT"
    SACK = "SACK"
    DOZEN = "DOZEN"
    NONE = "NONE"


class PhraseShape(str, Enum):
    """Phrase grammars, in the order the interpreter tries them."""

    PRICE = "PRICE"
    QUANTITY_FORWARD = "QUANTITY_FORWARD"
    QUANTITY_REVERSED = "QUANTITY_REVERSED"
    PRODUCT_PRICE = "PRODUCT_PRICE"


class FailureKind(str, Enum):
    """Reasons an interpretation can fail."""

    NO_SHAPE_MATCHED = "NO_SHAPE_MATCHED"
    INVALID_NUMERAL = "INVALID_NUMERAL"
    INCOMPATIBLE_UNIT_COMBINATION = "INCOMPATIBLE_UNIT_COMBINATION"
    EMPTY_SUBJECT = "EMPTY_SUBJECT"


def _number_to_json(value: Fraction) -> Any:
    if value.denominator == 1:
        return value.numerator
    return float(value)


@dataclass(frozen=True)
class ParsedQuantity:
    """Quantity extracted from a phrase.

    secondary_value/secondary_unit are only set when a second quantity clause
    could not be folded into value.
    """

    value: Fraction
    unit: CanonicalUnit = CanonicalUnit.NONE
    secondary_value: Optional[Fraction] = None
    secondary_unit: Optional[CanonicalUnit] = None

    def __post_init__(self):
        if self.value < 0:
            raise ValueError(f"Quantity must be non-negative, got {self.value}")

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "value": _number_to_json(self.value),
            "unit": self.unit.value,
        }
        if self.secondary_value is not None:
            data["secondary_value"] = _number_to_json(self.secondary_value)
            data["secondary_unit"] = (self.secondary_unit or CanonicalUnit.NONE).value
        return data


@dataclass(frozen=True)
class ParsedPrice:
    """Price in soles and céntimos."""

    soles: int
    centimos: int = 0

    def __post_init__(self):
        if self.soles < 0:
            raise ValueError(f"Soles must be non-negative, got {self.soles}")
        if not 0 <= self.centimos <= 99:
            raise ValueError(f"Centimos must be in [0, 99], got {self.centimos}")

    @property
    def total(self) -> Decimal:
        """Price as a decimal amount of soles."""
        return Decimal(self.soles) + Decimal(self.centimos) / Decimal(100)

    def to_dict(self) -> Dict[str, Any]:
        return {"soles": self.soles, "centimos": self.centimos}


@dataclass(frozen=True)
class Command:
    """Structured draft of an order line."""

    subject: str
    quantity: Optional[ParsedQuantity] = None
    price: Optional[ParsedPrice] = None
    # Provenance only, not part of equality
    shape: Optional[PhraseShape] = field(default=None, compare=False)
    low_confidence: bool = False

    def __post_init__(self):
        if self.quantity is None and self.price is None:
            raise ValueError("Command requires a quantity or a price")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "subject": self.subject,
            "quantity": self.quantity.to_dict() if self.quantity else None,
            "price": self.price.to_dict() if self.price else None,
            "shape": self.shape.value if self.shape else None,
            "low_confidence": self.low_confidence,
        }


_FAILURE_MESSAGES = {
    FailureKind.NO_SHAPE_MATCHED: "phrase does not fit any recognized grammar",
    FailureKind.INVALID_NUMERAL: "numeric fragment could not be converted",
    FailureKind.INCOMPATIBLE_UNIT_COMBINATION: "quantity clauses use different units",
    FailureKind.EMPTY_SUBJECT: "product name is empty",
}


@dataclass(frozen=True)
class ParseFailure:
    """Classified interpretation failure."""

    kind: FailureKind
    fragment: Optional[str] = None
    shape: Optional[PhraseShape] = field(default=None, compare=False)

    @property
    def message(self) -> str:
        base = _FAILURE_MESSAGES[self.kind]
        if self.fragment is not None:
            return f"{base}: '{self.fragment}'"
        return base

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "fragment": self.fragment,
            "shape": self.shape.value if self.shape else None,
            "message": self.message,
        }


@dataclass(frozen=True)
class ParseResult:
    """Outcome of interpreting one phrase: a command or a failure."""

    command: Optional[Command] = None
    failure: Optional[ParseFailure] = None
    warnings: Tuple[ParseFailure, ...] = field(default_factory=tuple)

    def __post_init__(self):
        if (self.command is None) == (self.failure is None):
            raise ValueError("ParseResult holds exactly one of command or failure")

    @classmethod
    def success(cls, command: Command, warnings: Tuple[ParseFailure, ...] = ()) -> "ParseResult":
        return cls(command=command, warnings=tuple(warnings))

    @classmethod
    def fail(cls, failure: ParseFailure) -> "ParseResult":
        return cls(failure=failure)

    @property
    def ok(self) -> bool:
        return self.command is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ok": self.ok,
            "command": self.command.to_dict() if self.command else None,
            "failure": self.failure.to_dict() if self.failure else None,
            "warnings": [w.to_dict() for w in self.warnings],
        }
