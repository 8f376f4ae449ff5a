"""Unit tests for the phrase matchers, each shape in isolation."""
import pytest

from apps.order_parser.models import PhraseShape
from apps.order_parser.services.lexicon import fold_text
from apps.order_parser.services.phrase_matchers import (
    MATCHERS,
    ForwardQuantityMatcher,
    PriceMatcher,
    ProductPriceMatcher,
    QuantityClause,
    ReversedQuantityMatcher,
)


def attempt(matcher, phrase):
    return matcher.attempt(fold_text(phrase), phrase)


class TestMatcherOrder:
    """Test cases for the matcher priority list."""

    def test_priority_order(self):
        """Shapes are tried price, forward, reversed, product-price."""
        assert [m.shape for m in MATCHERS] == [
            PhraseShape.PRICE,
            PhraseShape.QUANTITY_FORWARD,
            PhraseShape.QUANTITY_REVERSED,
            PhraseShape.PRODUCT_PRICE,
        ]


class TestPriceMatcher:
    """Test cases for the price-first shape."""

    @pytest.fixture
    def matcher(self):
        return PriceMatcher()

    def test_soles_with_centimos(self, matcher):
        """'papa 3 soles con 50' carves subject, amount and centimos."""
        match = attempt(matcher, "papa 3 soles con 50")
        assert match.shape == PhraseShape.PRICE
        assert match.subject == "papa"
        assert match.price_amount == "3"
        assert match.price_centimos == "50"
        assert match.is_price

    def test_bare_soles(self, matcher):
        """A phrase without centimos leaves the group empty."""
        match = attempt(matcher, "arroz 4 soles")
        assert match.subject == "arroz"
        assert match.price_amount == "4"
        assert match.price_centimos is None

    def test_singular_sol_and_word_amount(self, matcher):
        """'un sol' is accepted."""
        match = attempt(matcher, "pan un sol")
        assert match.price_amount == "un"

    def test_singular_sol_with_centimos(self, matcher):
        """'sol' takes a céntimos clause like 'soles'."""
        match = attempt(matcher, "pan un sol con 20")
        assert match.subject == "pan"
        assert match.price_amount == "un"
        assert match.price_centimos == "20"

    def test_centimos_keyword_and_accent(self, matcher):
        """'céntimos' after the amount is consumed; accents kept in fragments."""
        match = attempt(matcher, "Limón 2 soles y 20 céntimos")
        assert match.subject == "Limón"
        assert match.price_centimos == "20"

    def test_price_connector_not_in_subject(self, matcher):
        """'a' between subject and amount is a connector."""
        match = attempt(matcher, "papa a 3 soles")
        assert match.subject == "papa"

    @pytest.mark.parametrize("phrase", [
        "papa 2 kilos",
        "papa a dos soles con cincuenta",
        "3 soles",
        "papa soles",
        "papa 3 sole",
    ])
    def test_declines(self, matcher, phrase):
        """Phrases outside the shape are declined."""
        assert attempt(matcher, phrase) is None


class TestForwardQuantityMatcher:
    """Test cases for the subject-first quantity shape."""

    @pytest.fixture
    def matcher(self):
        return ForwardQuantityMatcher()

    def test_quantity_with_unit(self, matcher):
        """'papa 2 kilos' gives one clause with unit."""
        match = attempt(matcher, "papa 2 kilos")
        assert match.subject == "papa"
        assert match.quantity == QuantityClause(amount="2", unit="kilos")
        assert match.secondary is None
        assert not match.is_price

    def test_quantity_without_unit(self, matcher):
        """The unit is optional."""
        match = attempt(matcher, "papa amarilla tres")
        assert match.subject == "papa amarilla"
        assert match.quantity == QuantityClause(amount="tres", unit=None)

    def test_glued_unit(self, matcher):
        """A unit may follow a numeral without a space."""
        match = attempt(matcher, "azúcar 2kg")
        assert match.quantity == QuantityClause(amount="2", unit="kg")

    def test_second_clause(self, matcher):
        """'y medio' becomes a secondary clause."""
        match = attempt(matcher, "papa 2 kilos y medio")
        assert match.quantity == QuantityClause(amount="2", unit="kilos")
        assert match.secondary == QuantityClause(amount="medio", unit=None)

    def test_second_clause_with_unit(self, matcher):
        """The secondary clause can carry its own unit."""
        match = attempt(matcher, "arroz 1 saco con 2 kilos")
        assert match.secondary == QuantityClause(amount="2", unit="kilos")

    def test_case_preserved(self, matcher):
        """Fragments are sliced from the original text."""
        match = attempt(matcher, "PAPA Huayro 2 KILOS")
        assert match.subject == "PAPA Huayro"
        assert match.quantity.unit == "KILOS"

    def test_subject_starting_with_unit_letter(self, matcher):
        """Subjects that merely start like a unit abbreviation are fine."""
        match = attempt(matcher, "garbanzos 2 kilos")
        assert match.subject == "garbanzos"

    def test_malformed_numeral_is_captured(self, matcher):
        """Numeral-shaped fragments are captured whole for the resolver."""
        match = attempt(matcher, "papa 1.2.3 kilos")
        assert match.quantity.amount == "1.2.3"

    @pytest.mark.parametrize("phrase", [
        "2 manzanas",
        "dos kilos de papa",
        "kilo de papa 2",
        "papa 3 soles con 50",
        "papa 50 céntimos",
        "papa a 2",
        "papa cuesta treinta y cinco",
        "papa",
    ])
    def test_declines(self, matcher, phrase):
        """Leading numbers, currency words and price connectors decline."""
        assert attempt(matcher, phrase) is None


class TestReversedQuantityMatcher:
    """Test cases for the quantity-first shape."""

    @pytest.fixture
    def matcher(self):
        return ReversedQuantityMatcher()

    def test_quantity_unit_de_subject(self, matcher):
        """'dos kilos de papa'."""
        match = attempt(matcher, "dos kilos de papa")
        assert match.shape == PhraseShape.QUANTITY_REVERSED
        assert match.subject == "papa"
        assert match.quantity == QuantityClause(amount="dos", unit="kilos")

    def test_two_clauses(self, matcher):
        """'dos kilos y medio de papa'."""
        match = attempt(matcher, "dos kilos y medio de papa")
        assert match.quantity == QuantityClause(amount="dos", unit="kilos")
        assert match.secondary == QuantityClause(amount="medio", unit=None)
        assert match.subject == "papa"

    def test_fraction_word_quantity(self, matcher):
        """'un cuarto' is read as one quantity, not 'un' + subject."""
        match = attempt(matcher, "un cuarto de pollo")
        assert match.quantity == QuantityClause(amount="un cuarto", unit=None)
        assert match.subject == "pollo"

    def test_without_de(self, matcher):
        """'de' is optional."""
        match = attempt(matcher, "2 papas")
        assert match.quantity == QuantityClause(amount="2", unit=None)
        assert match.subject == "papas"

    def test_media_docena(self, matcher):
        """'media docena de huevos'."""
        match = attempt(matcher, "media docena de huevos")
        assert match.quantity == QuantityClause(amount="media", unit="docena")
        assert match.subject == "huevos"

    @pytest.mark.parametrize("phrase", [
        "2", "2 kilos", "3 2", "papa 2 kilos", "2 soles de papa", "2 kilos de", "dos kilos del",
    ])
    def test_declines(self, matcher, phrase):
        """Missing, numeric, unit-only or connector-only subjects and currency words decline."""
        assert attempt(matcher, phrase) is None


class TestProductPriceMatcher:
    """Test cases for the loose product-price fallback."""

    @pytest.fixture
    def matcher(self):
        return ProductPriceMatcher()

    def test_spelled_out_price(self, matcher):
        """'papa a dos soles con cincuenta'."""
        match = attempt(matcher, "papa a dos soles con cincuenta")
        assert match.shape == PhraseShape.PRODUCT_PRICE
        assert match.subject == "papa"
        assert match.price_amount == "dos"
        assert match.price_centimos == "cincuenta"

    def test_compound_cardinal(self, matcher):
        """Multi-word cardinals are one amount."""
        match = attempt(matcher, "papa cuesta treinta y cinco")
        assert match.subject == "papa"
        assert match.price_amount == "treinta y cinco"
        assert match.price_centimos is None

    def test_without_soles_keyword(self, matcher):
        """'soles' is optional."""
        match = attempt(matcher, "queso en veinte cincuenta")
        assert match.subject == "queso"
        assert match.price_amount == "veinte"
        assert match.price_centimos == "cincuenta"

    @pytest.mark.parametrize("phrase", [
        "2", "cincuenta", "papa", "papa 2 kilos", "papa con 2", "papa 2 kilos y dos",
    ])
    def test_declines(self, matcher, phrase):
        """A subject not ending in a connector and a trailing amount are required."""
        assert attempt(matcher, phrase) is None
