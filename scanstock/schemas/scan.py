"""
==============================================================================
Scan Schemas Module
==============================================================================

Request and response schemas for the scan confirmation flow.

==============================================================================
"""

import enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from scanstock.scanner.engine import MAX_CODE_LENGTH, Classification, EngineStats
from scanstock.schemas.product import ProductDraft, ProductResponse


class ScanAction(str, enum.Enum):
    """
    Inventory reaction suggested for a confirmed scan.

    - CREATE: no product has this barcode; offer the product form pre-filled
    - EDIT: a product with this barcode exists; offer to edit it
    """

    CREATE = "create"
    EDIT = "edit"

    def __str__(self) -> str:
        return self.value


class ObserveRequest(BaseModel):
    """One decode attempt submitted by a client-side detector."""

    present: bool = Field(default=True, description="False when the frame had no code")
    code: Optional[str] = Field(default=None, max_length=MAX_CODE_LENGTH)
    format: Optional[str] = Field(default=None, description="Barcode format name")


class ScanOutcome(BaseModel):
    """Classification plus the suggested inventory reaction."""

    classification: Classification
    action: Optional[ScanAction] = None
    product: Optional[ProductResponse] = None
    draft: Optional[ProductDraft] = None

    def to_dict(self) -> Dict[str, Any]:
        """Flatten into the JSON shape sent to clients."""
        return {
            **self.classification.to_dict(),
            "action": self.action.value if self.action else None,
            "product": self.product.model_dump(mode="json") if self.product else None,
            "draft": self.draft.model_dump(mode="json") if self.draft else None,
        }


class ScanStateResponse(BaseModel):
    """Snapshot of a scanning session."""

    success: bool = True
    required_frames: int
    window: List[str]
    accepted: List[str]
    stats: EngineStats
    reference_loaded: bool
    reference_size: int = Field(ge=0)
