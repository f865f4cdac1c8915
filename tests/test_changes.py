"""
Unit tests for percentage change computation and formatting.
"""

import math

import pytest

from cloud_cost_summary.core.changes import format_percentage, percentage_change


class TestPercentageChange:
    """Test percentage change between periods."""

    def test_increase(self):
        """Test a 10% increase."""
        assert percentage_change(110.0, 100.0) == pytest.approx(10.0)

    def test_decrease(self):
        """Test a 20% decrease."""
        assert percentage_change(200.0, 250.0) == pytest.approx(-20.0)

    def test_equal_amounts_is_zero(self):
        """Test identical amounts give zero change."""
        assert percentage_change(42.5, 42.5) == 0

    def test_zero_previous_is_undefined(self):
        """Test previous of zero returns None instead of dividing."""
        assert percentage_change(100.0, 0.0) is None

    def test_zero_previous_and_current(self):
        """Test zero against zero is still undefined."""
        assert percentage_change(0.0, 0.0) is None

    def test_result_is_finite(self):
        """Test tiny previous values still give finite results."""
        change = percentage_change(100.0, 0.01)
        assert math.isfinite(change)


class TestFormatPercentage:
    """Test whole-number percentage formatting."""

    def test_rounds_to_whole_number(self):
        """Test rounding to nearest whole percent."""
        assert format_percentage(12.6) == "13%"
        assert format_percentage(-4.2) == "-4%"

    def test_undefined_change(self):
        """Test None renders as n/a."""
        assert format_percentage(None) == "n/a"

    def test_zero(self):
        """Test zero change."""
        assert format_percentage(0.0) == "0%"

    @pytest.mark.parametrize("change", [-0.0, -0.2, -0.49])
    def test_small_decrease_has_no_negative_zero(self, change):
        """Test changes rounding to zero never print a minus sign."""
        assert format_percentage(change) == "0%"

    def test_small_decrease_from_amounts(self):
        """Test a fractional decrease between amounts formats as 0%."""
        assert format_percentage(percentage_change(999.0, 1000.0)) == "0%"
