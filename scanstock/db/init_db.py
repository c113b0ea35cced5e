"""
==============================================================================
Database Initialization Module
==============================================================================

Table creation and development reset for the inventory store.

Usage:
------
    from scanstock.db import init_db

    init_db()

==============================================================================
"""

from __future__ import annotations

import logging
from typing import Optional

from scanstock.db.database import DatabaseManager
# Imported for its side effect of registering the tables on Base.metadata
from scanstock.db import models  # noqa: F401


# Module logger
logger = logging.getLogger(__name__)


class DatabaseInitializer:
    """
    Database initialization manager.

    Example:
        >>> initializer = DatabaseInitializer()
        >>> initializer.initialize()
    """

    def __init__(self, db_manager: Optional[DatabaseManager] = None) -> None:
        self._db_manager = db_manager or DatabaseManager()

    def initialize(self) -> None:
        """Create tables and verify the connection."""
        logger.info("Initializing database...")
        self._db_manager.create_tables()

        if not self._db_manager.verify_connection():
            logger.error("❌ Database connection check failed")
            return

        logger.info("✅ Database initialization complete")


def init_db() -> None:
    """Initialize the database with default settings."""
    DatabaseInitializer().initialize()
