"""
==============================================================================
Product Schemas Module
==============================================================================

Request and response schemas for inventory operations.

Field Normalization:
-------------------
- name is stripped and must not be empty
- shortcode: Persian/Arabic-Indic digits become ASCII, non-digits are
  dropped, an empty result means "no shortcode". Length is checked by the
  inventory service.

==============================================================================
"""

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from scanstock.scanner.engine import MAX_CODE_LENGTH, BarcodeFormat
from scanstock.utils.validators import digits_only


def _normalize_shortcode(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    normalized = digits_only(str(value).strip())
    return normalized or None


def _strip_name(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("Name is required")
    return value


class ProductCreate(BaseModel):
    """Schema for saving a new product."""

    barcode: Optional[str] = Field(
        default=None,
        max_length=MAX_CODE_LENGTH,
        description="Scanned barcode (MANUAL_<timestamp> is generated if omitted)"
    )
    format: Optional[BarcodeFormat] = Field(default=None, description="Barcode format")
    name: str = Field(..., min_length=1, max_length=200)
    price: float = Field(..., allow_inf_nan=False, description="Price, >= 0")
    quantity: int = Field(default=1, description="Quantity, >= 1")
    shortcode: Optional[str] = Field(default=None, description="Optional 7-digit shortcode")

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        return _strip_name(value)

    @field_validator("barcode")
    @classmethod
    def strip_barcode(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return value.strip() or None

    @field_validator("shortcode", mode="before")
    @classmethod
    def normalize_shortcode(cls, value: Optional[str]) -> Optional[str]:
        return _normalize_shortcode(value)


class ProductUpdate(BaseModel):
    """
    Schema for editing an existing product.

    Omitted fields keep their value. An empty shortcode clears it.
    """

    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    price: Optional[float] = Field(default=None, allow_inf_nan=False)
    quantity: Optional[int] = Field(default=None)
    shortcode: Optional[str] = Field(default=None)

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return _strip_name(value)

    @field_validator("shortcode", mode="before")
    @classmethod
    def normalize_shortcode(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        # Empty string is kept to signal "clear the shortcode"
        return _normalize_shortcode(value) or ""


class ManualBarcodeRequest(BaseModel):
    """Barcode typed in by hand."""

    barcode: str = Field(..., description="Digits; Persian/Arabic-Indic digits accepted")


class ManualShortcodeRequest(BaseModel):
    """Product created from a shortcode and name only."""

    shortcode: str = Field(..., description="Exactly 7 digits")
    name: str = Field(..., min_length=1, max_length=200)

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        return _strip_name(value)


class ProductResponse(BaseModel):
    """Product as returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    barcode: str
    shortcode: Optional[str] = None
    format: str
    name: str
    price: float
    quantity: int
    scan_date: date
    expire_date: date
    timestamp: datetime


class ProductListResponse(BaseModel):
    """List of products."""

    success: bool = True
    total: int = Field(ge=0)
    products: List[ProductResponse]


class ProductDraft(BaseModel):
    """Pre-filled values for a product that does not exist yet."""

    barcode: str
    format: str
