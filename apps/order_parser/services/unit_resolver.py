"""Unit resolver: maps unit words to canonical units."""
from typing import Optional

from apps.order_parser.models import CanonicalUnit
from apps.order_parser.services.lexicon import resolve_unit_word


def resolve_unit(text: Optional[str]) -> CanonicalUnit:
    """
    Resolve a unit fragment to a canonical unit.

    Total function: missing or unknown input gives CanonicalUnit.NONE, which
    tells the caller to take the unit from the product itself.

    Args:
        text: Unit fragment ("kilos", "Kg", "docena") or None

    Returns:
        Canonical unit
    """
    if not text:
        return CanonicalUnit.NONE
    return resolve_unit_word(text)


def units_compatible(primary: CanonicalUnit, secondary: CanonicalUnit) -> bool:
    """Check whether two quantity clauses can be summed.

    A NONE on either side means "same unit as the other clause".
    """
    if primary == CanonicalUnit.NONE or secondary == CanonicalUnit.NONE:
        return True
    return primary == secondary
