"""
==============================================================================
Catalog Package - Reference Barcodes
==============================================================================

Reference barcode set ("BigDB") used to classify newly accepted scans.

Classes:
--------
- ReferenceDocument: Pydantic model of the published JSON document
- ReferenceCatalog: Loader and membership set
- ReferenceLoadTaskManager: Background load with retry

==============================================================================
"""

from .models import ReferenceDocument, ReferenceStats
from .catalog import ReferenceCatalog, get_reference_catalog, init_reference_catalog
from .loader import ReferenceLoadTaskManager

__all__ = [
    "ReferenceDocument",
    "ReferenceStats",
    "ReferenceCatalog",
    "get_reference_catalog",
    "init_reference_catalog",
    "ReferenceLoadTaskManager",
]
