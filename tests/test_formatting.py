"""Tests for display formatting helpers."""

from decimal import Decimal

from journal_drill.formatting import format_calc_key, format_currency, format_percentage


class TestFormatting:
    """Tests for currency, rate and label formatting."""

    def test_currency(self):
        """Test dollar formatting with separators and cents."""
        assert format_currency(Decimal("1234.5")) == "$1,234.50"
        assert format_currency(324332.69) == "$324,332.69"
        assert format_currency(0) == "$0.00"

    def test_currency_rounds_half_up(self):
        """Test rounding to cents."""
        assert format_currency(Decimal("10.005")) == "$10.01"

    def test_negative_currency(self):
        """Test the sign goes before the dollar sign."""
        assert format_currency(Decimal("-920.87")) == "-$920.87"

    def test_missing_values(self):
        """Test N/A for missing amounts and rates."""
        assert format_currency(None) == "N/A"
        assert format_percentage(None) == "N/A"

    def test_percentage(self):
        """Test rate formatting."""
        assert format_percentage(0.085) == "8.50%"
        assert format_percentage(0.1) == "10.00%"

    def test_calc_key(self):
        """Test camelCase labels become Title Case words."""
        assert format_calc_key("presentValueOfPrincipal") == "Present Value Of Principal"
        assert format_calc_key("premium") == "Premium"
