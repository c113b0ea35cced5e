"""
==============================================================================
FastAPI Dependencies Module
==============================================================================

Dependency injection for database sessions, services and pagination.

Dependency Hierarchy:
--------------------
                    ┌─────────────────┐
                    │   get_db()      │
                    └────────┬────────┘
                             │
                ┌────────────▼────────────┐
                │ get_inventory_service() │
                └─────────────────────────┘

        ┌─────────────────────┐     ┌─────────────────────────┐
        │ get_session_dep()   │     │ get_catalog_dep()       │
        │ (global ScanSession)│     │ (global ReferenceCatalog)│
        └─────────────────────┘     └─────────────────────────┘

Usage Examples:
--------------
    @router.get("/products")
    def list_products(service: InventoryService = Depends(get_inventory_service)):
        ...

==============================================================================
"""

from __future__ import annotations

import logging
from typing import Dict

from fastapi import Depends, Query
from sqlalchemy.orm import Session

from scanstock.catalog import ReferenceCatalog, get_reference_catalog
from scanstock.db.database import get_db
from scanstock.services.inventory_service import InventoryService
from scanstock.services.scan_session import ScanSession, get_scan_session


# Module logger
logger = logging.getLogger(__name__)


# =============================================================================
# SERVICE DEPENDENCIES
# =============================================================================

def get_inventory_service(db: Session = Depends(get_db)) -> InventoryService:
    """FastAPI dependency providing an InventoryService bound to the request session."""
    return InventoryService(db)


def get_session_dep() -> ScanSession:
    """FastAPI dependency providing the process-wide scan session."""
    return get_scan_session()


def get_catalog_dep() -> ReferenceCatalog:
    """FastAPI dependency providing the global reference catalog."""
    return get_reference_catalog()


# =============================================================================
# PAGINATION DEPENDENCY
# =============================================================================

def get_pagination(
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(100, ge=1, le=500, description="Items per page")
) -> Dict[str, int]:
    """
    FastAPI dependency for pagination parameters.

    Returns:
        Dictionary with page, page_size, and offset

    Usage:
        @router.get("/products")
        def list_products(pagination: dict = Depends(get_pagination)):
            service.list_products(pagination["offset"], pagination["page_size"])
    """
    return {
        "page": page,
        "page_size": page_size,
        "offset": (page - 1) * page_size
    }
