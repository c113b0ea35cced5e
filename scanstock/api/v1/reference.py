"""
==============================================================================
Reference Set Endpoints
==============================================================================

Status, membership lookup and reload of the reference barcode set.

==============================================================================
"""

import logging

from fastapi import APIRouter, Depends

from scanstock.catalog import ReferenceCatalog
from scanstock.core.dependencies import get_catalog_dep


# Module logger
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reference", tags=["Reference"])


@router.get("")
async def reference_status(catalog: ReferenceCatalog = Depends(get_catalog_dep)):
    """Reference set status."""
    return {
        "success": True,
        "stats": catalog.get_stats()
    }


@router.get("/{code}")
async def reference_lookup(code: str, catalog: ReferenceCatalog = Depends(get_catalog_dep)):
    """Check whether a barcode is in the reference set."""
    return {
        "success": True,
        "code": code,
        "in_reference": code in catalog,
        "reference_loaded": catalog.is_loaded
    }


@router.post("/reload")
async def reload_reference(catalog: ReferenceCatalog = Depends(get_catalog_dep)):
    """
    Reload the reference set from the configured source.

    The request body is ignored. A failed reload keeps the current set;
    the response reports the error.
    """
    logger.info(f"🔄 Reference reload requested ({catalog.source})")
    loaded = await catalog.load_async()
    return {
        "success": loaded,
        "stats": catalog.get_stats()
    }
