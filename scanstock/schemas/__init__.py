"""
==============================================================================
Schemas Package - Pydantic Models
==============================================================================

Request and response schemas using Pydantic for validation.

This package provides:
- Common: Shared response schemas
- Product: Inventory CRUD schemas
- Scan: Scan confirmation request/response schemas

==============================================================================
"""

from .common import MessageResponse
from .product import (
    ProductCreate,
    ProductUpdate,
    ProductResponse,
    ProductListResponse,
    ProductDraft,
    ManualBarcodeRequest,
    ManualShortcodeRequest,
)
from .scan import ScanAction, ObserveRequest, ScanOutcome, ScanStateResponse

__all__ = [
    # Common
    "MessageResponse",
    # Product
    "ProductCreate",
    "ProductUpdate",
    "ProductResponse",
    "ProductListResponse",
    "ProductDraft",
    "ManualBarcodeRequest",
    "ManualShortcodeRequest",
    # Scan
    "ScanAction",
    "ObserveRequest",
    "ScanOutcome",
    "ScanStateResponse",
]
