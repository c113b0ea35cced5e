"""
==============================================================================
Validation Utilities Module
==============================================================================

Validation classes for inventory input.

This module implements:
- normalize_digits: Persian/Arabic-Indic digits to ASCII
- ShortcodeValidator: 7-digit product shortcodes
- BarcodeValidator: Manually typed barcodes
- QuantityValidator / PriceValidator: Numeric product fields

Validation Rules for Shortcodes:
-------------------------------
- Persian and Arabic-Indic digits are converted to ASCII
- Every non-digit character is removed
- Exactly 7 digits remain

==============================================================================
"""

from __future__ import annotations

import re
from typing import Optional, Tuple

from scanstock.scanner.engine import MAX_CODE_LENGTH


# Extended Arabic-Indic (Persian) ۰-۹ and Arabic-Indic ٠-٩
_DIGIT_TABLE = str.maketrans(
    "۰۱۲۳۴۵۶۷۸۹٠١٢٣٤٥٦٧٨٩",
    "01234567890123456789",
)

_NON_DIGITS = re.compile(r"[^0-9]")


def normalize_digits(value: Optional[str]) -> str:
    """
    Convert Persian/Arabic-Indic digits to ASCII.

    Example:
        >>> normalize_digits("۱۲۳abc٤")
        '123abc4'
    """
    if not value:
        return ""
    return value.translate(_DIGIT_TABLE)


def digits_only(value: Optional[str]) -> str:
    """Normalize digits, then drop every non-digit character."""
    return _NON_DIGITS.sub("", normalize_digits(value))


class ShortcodeValidator:
    """
    Validator for 7-digit product shortcodes.

    Example:
        >>> validator = ShortcodeValidator()
        >>> validator.validate("۱۲۳-۴۵۶۷")
        (True, '1234567', None)
    """

    LENGTH = 7

    def validate(self, shortcode: Optional[str]) -> Tuple[bool, Optional[str], Optional[str]]:
        """
        Validate and normalize a shortcode.

        Returns:
            Tuple of (is_valid, normalized_shortcode, error_message)
        """
        normalized = digits_only(shortcode.strip() if shortcode else shortcode)

        if not normalized:
            return False, None, "Shortcode is required"

        if len(normalized) != self.LENGTH:
            return False, None, f"Shortcode must be exactly {self.LENGTH} digits"

        return True, normalized, None

    def is_valid(self, shortcode: Optional[str]) -> bool:
        """Quick validation check."""
        is_valid, _, _ = self.validate(shortcode)
        return is_valid


class BarcodeValidator:
    """
    Validator for manually entered barcodes.

    Manual entry keeps digits only, after digit normalization.
    """

    MAX_LENGTH = MAX_CODE_LENGTH

    def validate(self, barcode: Optional[str]) -> Tuple[bool, Optional[str], Optional[str]]:
        """
        Validate and normalize a manual barcode.

        Returns:
            Tuple of (is_valid, normalized_barcode, error_message)
        """
        normalized = digits_only(barcode.strip() if barcode else barcode)

        if not normalized:
            return False, None, "Barcode is required"

        if len(normalized) > self.MAX_LENGTH:
            return False, None, f"Barcode cannot exceed {self.MAX_LENGTH} digits"

        return True, normalized, None


class QuantityValidator:
    """
    Validator for product quantities.
    """

    MIN_QUANTITY = 1
    MAX_QUANTITY = 99999

    def validate(self, qty: int) -> Tuple[bool, Optional[str]]:
        """
        Validate a quantity value.

        Returns:
            Tuple of (is_valid, error_message)
        """
        if qty < self.MIN_QUANTITY:
            return False, f"Quantity must be at least {self.MIN_QUANTITY}"

        if qty > self.MAX_QUANTITY:
            return False, f"Quantity cannot exceed {self.MAX_QUANTITY}"

        return True, None


class PriceValidator:
    """
    Validator for product prices.
    """

    def validate(self, price: float) -> Tuple[bool, Optional[str]]:
        """
        Validate a price value.

        Returns:
            Tuple of (is_valid, error_message)
        """
        if price != price:  # NaN
            return False, "Price must be a number"

        if price < 0:
            return False, "Price cannot be negative"

        return True, None
