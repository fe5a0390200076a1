"""Tests for naira/kobo conversion at the API boundary."""

import pytest
from marketplace.shared.money import format_price, to_minor_units
from protean.exceptions import ValidationError


class TestToMinorUnits:
    @pytest.mark.parametrize(
        "value, expected",
        [
            (1500, 150000),
            (1500.5, 150050),
            ("1500", 150000),
            ("₦1,500", 150000),
            ("₦ 1,500.50", 150050),
            ("NGN 2,000", 200000),
            ("0.005", 1),
            (0, 0),
        ],
    )
    def test_converts(self, value, expected):
        assert to_minor_units(value) == expected

    @pytest.mark.parametrize("value", ["", "₦", "abc", "-5", -1, None, True])
    def test_rejects_invalid(self, value):
        with pytest.raises(ValidationError):
            to_minor_units(value)


class TestFormatPrice:
    @pytest.mark.parametrize(
        "minor, expected",
        [(150000, "₦1,500.00"), (150050, "₦1,500.50"), (0, "₦0.00"), (123456789, "₦1,234,567.89")],
    )
    def test_formats(self, minor, expected):
        assert format_price(minor) == expected
