"""
==============================================================================
Database Package
==============================================================================

SQLAlchemy infrastructure and the inventory ORM model.

Architecture:
------------
├── database.py   - DatabaseManager class, session factory, get_db
├── models.py     - InventoryProduct ORM model
└── init_db.py    - DatabaseInitializer for setup

Usage:
------
    from scanstock.db import DatabaseManager, InventoryProduct

    with DatabaseManager().session_scope() as session:
        products = session.query(InventoryProduct).all()

==============================================================================
"""

from .database import DatabaseManager, Base, get_db, get_database_manager
from .models import InventoryProduct, MANUAL_BARCODE_PREFIX, SHORTCODE_BARCODE_PREFIX
from .init_db import DatabaseInitializer, init_db

__all__ = [
    "DatabaseManager",
    "Base",
    "get_db",
    "get_database_manager",
    "InventoryProduct",
    "MANUAL_BARCODE_PREFIX",
    "SHORTCODE_BARCODE_PREFIX",
    "DatabaseInitializer",
    "init_db",
]
