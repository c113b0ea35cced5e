"""
==============================================================================
Services Package - Business Logic Layer
==============================================================================

Service classes implementing business logic.

This package provides:
- InventoryService: Product CRUD plus the manual and scan flows
- ScanSession: Confirmation engine with inventory reactions

Architecture Pattern: Service Layer
----------------------------------
    ┌─────────────────┐
    │ API / WebSocket │
    └────────┬────────┘
             │
    ┌────────▼────────┐
    │   ScanSession   │  ← Confirmation + reactions
    └────────┬────────┘
             │
    ┌────────▼────────┐
    │InventoryService │  ← Business rules
    └────────┬────────┘
             │
    ┌────────▼────────┐
    │   SQLAlchemy    │  ← Data Access
    └─────────────────┘

Usage:
------
    from scanstock.services import InventoryService, get_scan_session

    outcome = get_scan_session().process(attempt, InventoryService(db))

==============================================================================
"""

from .inventory_service import InventoryService
from .scan_session import ScanSession, get_scan_session, reset_scan_session

__all__ = [
    "InventoryService",
    "ScanSession",
    "get_scan_session",
    "reset_scan_session",
]
