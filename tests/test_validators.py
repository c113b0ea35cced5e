"""
==============================================================================
Validator Tests
==============================================================================

Tests for digit normalization and inventory field validators.

==============================================================================
"""

import pytest

from scanstock.utils.validators import (
    BarcodeValidator,
    PriceValidator,
    QuantityValidator,
    ShortcodeValidator,
    digits_only,
    normalize_digits,
)


class TestDigitNormalization:
    """Tests for Persian/Arabic-Indic digit conversion."""

    def test_persian_digits(self):
        assert normalize_digits("۰۱۲۳۴۵۶۷۸۹") == "0123456789"

    def test_arabic_indic_digits(self):
        assert normalize_digits("٠١٢٣٤٥٦٧٨٩") == "0123456789"

    def test_other_characters_kept(self):
        """Test normalization only touches digits."""
        assert normalize_digits("۱۲۳abc٤") == "123abc4"

    @pytest.mark.parametrize("value", [None, ""])
    def test_empty(self, value):
        assert normalize_digits(value) == ""

    def test_digits_only(self):
        """Test non-digits are dropped after normalization."""
        assert digits_only(" ۱۲-۳٤ x5 ") == "12345"


class TestShortcodeValidator:
    """Tests for 7-digit shortcodes."""

    @pytest.fixture
    def validator(self) -> ShortcodeValidator:
        return ShortcodeValidator()

    @pytest.mark.parametrize("raw, expected", [
        ("1234567", "1234567"),
        ("۱۲۳۴۵۶۷", "1234567"),
        ("١٢٣٤٥٦٧", "1234567"),
        (" 123-4567 ", "1234567"),
    ])
    def test_valid(self, validator: ShortcodeValidator, raw: str, expected: str):
        """Test valid shortcodes are normalized."""
        assert validator.validate(raw) == (True, expected, None)

    @pytest.mark.parametrize("raw", ["123456", "12345678", "abcdefg"])
    def test_wrong_length(self, validator: ShortcodeValidator, raw: str):
        """Test anything but exactly 7 digits is rejected."""
        is_valid, normalized, error = validator.validate(raw)
        assert is_valid is False
        assert normalized is None
        assert error is not None

    @pytest.mark.parametrize("raw", [None, "", "   "])
    def test_missing(self, validator: ShortcodeValidator, raw):
        """Test a missing shortcode is rejected."""
        assert validator.validate(raw) == (False, None, "Shortcode is required")

    def test_is_valid(self, validator: ShortcodeValidator):
        assert validator.is_valid("7654321")
        assert not validator.is_valid("765432")


class TestBarcodeValidator:
    """Tests for manually typed barcodes."""

    def test_normalizes_digits(self):
        """Test Persian digits and separators."""
        assert BarcodeValidator().validate("۴۰۰ ۶۳۸۱ ۳۳۳۹۳۱") == (True, "4006381333931", None)

    @pytest.mark.parametrize("raw", [None, "", "abc"])
    def test_required(self, raw):
        """Test empty results are rejected."""
        is_valid, normalized, error = BarcodeValidator().validate(raw)
        assert not is_valid
        assert error == "Barcode is required"

    def test_too_long(self):
        is_valid, _, _ = BarcodeValidator().validate("1" * 65)
        assert not is_valid


class TestNumericValidators:
    """Tests for price and quantity."""

    @pytest.mark.parametrize("qty, ok", [(1, True), (99999, True), (0, False), (-3, False), (100000, False)])
    def test_quantity(self, qty: int, ok: bool):
        is_valid, error = QuantityValidator().validate(qty)
        assert is_valid is ok
        assert (error is None) is ok

    @pytest.mark.parametrize("price, ok", [(0.0, True), (12.5, True), (-0.01, False), (float("nan"), False)])
    def test_price(self, price: float, ok: bool):
        is_valid, _ = PriceValidator().validate(price)
        assert is_valid is ok
