"""Pytest configuration and fixtures."""
import pytest

from apps.order_parser.services.command_interpreter import CommandInterpreter


@pytest.fixture
def interpreter() -> CommandInterpreter:
    """Interpreter with explicit, non-strict settings."""
    return CommandInterpreter(strict_unit_combination=False, strip_leading_articles=True)


@pytest.fixture
def strict_interpreter() -> CommandInterpreter:
    """Interpreter that fails on quantity clauses with different units."""
    return CommandInterpreter(strict_unit_combination=True, strip_leading_articles=True)
