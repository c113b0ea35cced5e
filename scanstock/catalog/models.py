"""
==============================================================================
Reference Models Module
==============================================================================

Pydantic models for the reference barcode document.

==============================================================================
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ReferenceDocument(BaseModel):
    """
    Reference barcode list as published by the external source.

    Expected JSON shape:
        {"barcodes": ["4006381333931", "5449000000996", ...]}

    Unknown top-level keys are ignored. Entries are stripped and empty
    entries dropped.
    """

    model_config = ConfigDict(extra="ignore")

    barcodes: List[str] = Field(..., description="Reference barcode values")

    @field_validator("barcodes", mode="before")
    @classmethod
    def coerce_barcodes(cls, value):
        """Accept numeric entries (JSON numbers) as strings."""
        if not isinstance(value, list):
            raise ValueError("barcodes must be an array")
        return [
            str(item) for item in value
            if isinstance(item, (str, int)) and not isinstance(item, bool)
        ]

    @field_validator("barcodes")
    @classmethod
    def strip_barcodes(cls, value: List[str]) -> List[str]:
        return [item.strip() for item in value if item and item.strip()]


class ReferenceStats(BaseModel):
    """Reference catalog status for health and API responses."""

    source: str
    loaded: bool
    total_barcodes: int = Field(ge=0)
    load_attempts: int = Field(ge=0)
    loaded_at: Optional[str] = None
    last_error: Optional[str] = None
