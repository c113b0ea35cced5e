"""
==============================================================================
Utilities Package
==============================================================================

Utility classes and functions for the application.

Modules:
--------
- validators: Digit normalization and inventory field validation

==============================================================================
"""

from .validators import (
    BarcodeValidator,
    PriceValidator,
    QuantityValidator,
    ShortcodeValidator,
    digits_only,
    normalize_digits,
)

__all__ = [
    "BarcodeValidator",
    "PriceValidator",
    "QuantityValidator",
    "ShortcodeValidator",
    "digits_only",
    "normalize_digits",
]
