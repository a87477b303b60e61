"""
Tests para las primitivas numéricas compartidas
"""

import pytest
from decimal import Decimal

from villing.common.numbers import (
    FloatParts, compare_strings, decimal_to_json_number, format_currency,
    normalize_text, round_currency, split_into_integer_and_fraction,
    to_decimal, to_number
)
from villing.core.config import Settings


class TestToDecimal:

    def test_numbers_and_strings(self):
        assert to_decimal(10) == Decimal("10")
        assert to_decimal(0.1) == Decimal("0.1")
        assert to_decimal("1,250,000") == Decimal("1250000")
        assert to_decimal(Decimal("3.5")) == Decimal("3.5")

    @pytest.mark.parametrize("value", [None, "", "abc", True, float("nan")])
    def test_invalid_values_are_nan(self, value):
        assert to_decimal(value).is_nan()

    def test_to_number_keeps_none(self):
        assert to_number(None) is None
        assert to_number("abc") == Decimal("0")
        assert to_number(float("inf")) == Decimal("0")
        assert to_number("2,500") == Decimal("2500")


class TestRounding:

    @pytest.mark.parametrize("value,expected", [
        ("10.5", "11"),
        ("10.49", "10"),
        ("-10.5", "-11"),
        ("-0.4", "0"),
        ("17100.0", "17100"),
    ])
    def test_round_half_up(self, value, expected):
        assert round_currency(Decimal(value)) == Decimal(expected)

    def test_negative_zero_is_zero(self):
        assert str(round_currency(Decimal("-0.4"))) == "0"

    def test_nan_propagates(self):
        assert round_currency(Decimal("NaN")).is_nan()


class TestSplitIntoIntegerAndFraction:
    """Separación de pesos y centavos para visualización"""

    def test_truncates_cents(self):
        assert split_into_integer_and_fraction(1234.567) == FloatParts(Decimal("1234"), "56")

    def test_pads_cents(self):
        assert split_into_integer_and_fraction(0.05) == FloatParts(Decimal("0"), "05")
        assert split_into_integer_and_fraction(5) == FloatParts(Decimal("5"), "00")

    def test_negative_truncates_toward_zero(self):
        parts = split_into_integer_and_fraction(Decimal("-1234.567"))
        assert parts.integer == Decimal("-1234")
        assert parts.decimal == "56"

    def test_string_input(self):
        assert split_into_integer_and_fraction("107,100.9") == FloatParts(Decimal("107100"), "90")

    def test_nan(self):
        parts = split_into_integer_and_fraction(float("nan"))
        assert parts.integer.is_nan()
        assert parts.decimal == "NaN"


class TestFormatCurrency:

    @pytest.mark.parametrize("value,expected", [
        (107100, "107,100"),
        (-1500, "-1,500"),
        (Decimal("1234.5"), "1,235"),
        (0, "0"),
        (999, "999"),
        (float("nan"), "NaN"),
    ])
    def test_format(self, value, expected):
        assert format_currency(value) == expected


class TestText:

    def test_normalize(self):
        assert normalize_text("  Intereses a las  CESANTÍAS ") == "intereses a las cesantias"
        assert normalize_text(None) == ""

    def test_compare(self):
        assert compare_strings("Pensión", "pension")
        assert not compare_strings("Pensión", "Pensión voluntaria")


class TestJsonNumbers:

    def test_integral_values_are_int(self):
        value = decimal_to_json_number(Decimal("52000.00"))
        assert value == 52000
        assert isinstance(value, int)

    def test_fractional_values_are_float(self):
        assert decimal_to_json_number(Decimal("8.3333333")) == pytest.approx(8.3333333)


class TestSettings:

    def test_defaults(self):
        settings = Settings(_env_file=None)
        assert settings.APP_NAME == "Villing"
        assert settings.PAYROLL_TRANSPORT_AID_MONTHLY == Decimal("162000")

    def test_bool_parsing(self):
        settings = Settings(_env_file=None, DEBUG="'false'", DEFAULT_TAX_INCLUDED="1")
        assert settings.DEBUG is False
        assert settings.DEFAULT_TAX_INCLUDED is True

    def test_retention_bounds(self):
        with pytest.raises(ValueError):
            Settings(_env_file=None, DEFAULT_RETENTION=Decimal("120"))
