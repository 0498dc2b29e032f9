"""Tests for price parsing and the donation/owner split."""

from decimal import Decimal

import pytest

from donation_gallery.core.accounting import (
    describe_purchase,
    describe_split,
    format_amount,
    from_wei,
    parse_price,
    split_payment,
    to_wei,
)
from donation_gallery.core.exceptions import ValidationError


# ---------------------------------------------------------------------------
# split_payment
# ---------------------------------------------------------------------------

class TestSplitPayment:
    def test_ten_percent_of_five_hundredths(self):
        result = split_payment(Decimal("0.05"), 10)
        assert result.donated_amount == Decimal("0.005")
        assert result.owner_amount == Decimal("0.045")
        assert format_amount(result.donated_amount) == "0.005"
        assert format_amount(result.owner_amount) == "0.045"

    @pytest.mark.parametrize("rate", [0, 1, 7, 10, 33, 50, 99, 100])
    @pytest.mark.parametrize("price", ["0", "0.01", "0.05", "1", "3.14159", "1234.5"])
    def test_parts_add_up_and_donation_matches_rate(self, price, rate):
        total = Decimal(price)
        result = split_payment(total, rate)
        assert result.donated_amount + result.owner_amount == total
        assert result.donated_amount == total * rate / 100

    def test_zero_rate_gives_everything_to_owner(self):
        result = split_payment(Decimal("2"), 0)
        assert result.donated_amount == 0
        assert result.owner_amount == Decimal("2")

    def test_full_rate_donates_everything(self):
        result = split_payment(Decimal("2"), 100)
        assert result.donated_amount == Decimal("2")
        assert result.owner_amount == 0

    def test_sub_wei_donation_truncated_and_owner_absorbs_remainder(self):
        one_wei = Decimal("1e-18")
        result = split_payment(one_wei, 33)
        assert result.donated_amount == 0
        assert result.owner_amount == one_wei

    def test_owner_rate_is_complement(self):
        assert split_payment(Decimal("1"), 10).owner_rate == 90

    @pytest.mark.parametrize("rate", [-1, 101])
    def test_rate_out_of_range_rejected(self, rate):
        with pytest.raises(ValidationError):
            split_payment(Decimal("1"), rate)


# ---------------------------------------------------------------------------
# parse_price
# ---------------------------------------------------------------------------

class TestParsePrice:
    def test_plain_decimal(self):
        assert parse_price("0.05") == Decimal("0.05")

    def test_surrounding_whitespace_ignored(self):
        assert parse_price("  1.5 ") == Decimal("1.5")

    def test_zero_is_allowed(self):
        assert parse_price("0") == 0

    @pytest.mark.parametrize("value", ["", "abc", "1,5", "NaN", "Infinity"])
    def test_non_numeric_rejected(self, value):
        with pytest.raises(ValidationError):
            parse_price(value)

    def test_negative_rejected(self):
        with pytest.raises(ValidationError, match="negative"):
            parse_price("-0.01")

    def test_more_than_eighteen_decimals_rejected(self):
        with pytest.raises(ValidationError, match="decimals"):
            parse_price("0.0000000000000000001")

    @pytest.mark.parametrize("value", ["1e80", "1E+60", "2e59"])
    def test_amounts_beyond_uint256_rejected(self, value):
        with pytest.raises(ValidationError, match="larger"):
            parse_price(value)

    def test_largest_whole_ether_amount_accepted(self):
        assert parse_price("1e59") == Decimal("1e59")

    def test_tiny_exponent_rejected_as_sub_wei(self):
        with pytest.raises(ValidationError):
            parse_price("1e-999999999")


# ---------------------------------------------------------------------------
# Units and formatting
# ---------------------------------------------------------------------------

class TestUnits:
    def test_to_wei(self):
        assert to_wei(Decimal("0.01")) == 10**16

    def test_from_wei(self):
        assert from_wei(10**16) == Decimal("0.01")

    def test_fractional_wei_rejected(self):
        with pytest.raises(ValidationError):
            to_wei(Decimal("1e-19"))

    def test_large_amount_converts_exactly(self):
        assert to_wei(Decimal("123456789.123456789123456789")) == 123456789123456789123456789


class TestFormatting:
    @pytest.mark.parametrize(
        "amount, expected",
        [
            ("0.0050", "0.005"),
            ("10", "10"),
            ("1E+1", "10"),
            ("0", "0"),
            ("0.000", "0"),
            ("0.000000000000000001", "0.000000000000000001"),
        ],
    )
    def test_format_amount(self, amount, expected):
        assert format_amount(Decimal(amount)) == expected

    def test_describe_split_names_amounts_percentages_and_recipient(self):
        text = describe_split(split_payment(Decimal("0.05"), 10), "R")
        assert "0.005 ETH (10%)" in text
        assert "donated to R" in text
        assert "0.045 ETH (90%)" in text

    def test_describe_purchase_starts_with_total(self):
        text = describe_purchase(split_payment(Decimal("0.05"), 10), "R", currency="ETH")
        assert text.startswith("Purchase completed. You paid 0.05 ETH")
