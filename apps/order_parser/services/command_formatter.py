"""Canonical text for commands, readable back by the interpreter."""
from decimal import Decimal
from fractions import Fraction
from typing import Dict, Tuple

from apps.order_parser.models import CanonicalUnit, Command, ParsedPrice, ParsedQuantity

# (singular, plural) abbreviations; every entry is a unit word of the lexicon
_UNIT_ABBREVIATIONS: Dict[CanonicalUnit, Tuple[str, str]] = {
    CanonicalUnit.KILOGRAM: ("kg", "kg"),
    CanonicalUnit.GRAM: ("g", "g"),
    CanonicalUnit.UNIT: ("und", "unds"),
    CanonicalUnit.SACK: ("saco", "sacos"),
    CanonicalUnit.DOZEN: ("docena", "docenas"),
}


def _terminates(denominator: int) -> bool:
    for factor in (2, 5):
        while denominator % factor == 0:
            denominator //= factor
    return denominator == 1


class CommandFormatter:
    """Formatter producing the canonical phrase for a Command."""

    @staticmethod
    def format_value(value: Fraction) -> str:
        """
        Format a rational quantity.

        Examples:
            Fraction(2)    -> "2"
            Fraction(5, 2) -> "2.5"
            Fraction(1, 3) -> "1/3"
        """
        if value.denominator == 1:
            return str(value.numerator)
        if _terminates(value.denominator):
            text = format(Decimal(value.numerator) / Decimal(value.denominator), "f")
            return text.rstrip("0").rstrip(".")
        return f"{value.numerator}/{value.denominator}"

    @staticmethod
    def format_unit(unit: CanonicalUnit, value: Fraction) -> str:
        """Unit abbreviation for a value; empty for CanonicalUnit.NONE."""
        if unit not in _UNIT_ABBREVIATIONS:
            return ""
        singular, plural = _UNIT_ABBREVIATIONS[unit]
        return singular if value == 1 else plural

    @staticmethod
    def format_quantity(quantity: ParsedQuantity) -> str:
        parts = [CommandFormatter.format_value(quantity.value)]
        unit_text = CommandFormatter.format_unit(quantity.unit, quantity.value)
        if unit_text:
            parts.append(unit_text)
        if quantity.secondary_value is not None:
            parts.extend(["y", CommandFormatter.format_value(quantity.secondary_value)])
            secondary_unit = quantity.secondary_unit or CanonicalUnit.NONE
            unit_text = CommandFormatter.format_unit(secondary_unit, quantity.secondary_value)
            if unit_text:
                parts.append(unit_text)
        return " ".join(parts)

    @staticmethod
    def format_price(price: ParsedPrice) -> str:
        text = f"{price.soles} soles"
        if price.centimos:
            text += f" con {price.centimos} centimos"
        return text

    @staticmethod
    def to_canonical_text(command: Command) -> str:
        """
        Render a command as the canonical phrase for its content.

        Args:
            command: Interpreted command

        Returns:
            "<subject> <quantity> [<unit>]" for quantity commands,
            "<subject> <soles> soles [con <centimos> centimos]" for price commands
        """
        if command.quantity is not None:
            return f"{command.subject} {CommandFormatter.format_quantity(command.quantity)}"
        return f"{command.subject} {CommandFormatter.format_price(command.price)}"
