"""
==============================================================================
SQLAlchemy ORM Models Module
==============================================================================

Persisted inventory of scanned products.

Database Schema:
---------------

    ┌─────────────────────────────────────────────────────────────────┐
    │                           products                              │
    ├─────────────────────────────────────────────────────────────────┤
    │ id (INTEGER, PK, AUTO INCREMENT)                                │
    │ barcode (VARCHAR, UNIQUE, NOT NULL)                             │
    │ shortcode (VARCHAR(7), UNIQUE, NULLABLE)                        │
    │ format (VARCHAR, NOT NULL)                                      │
    │ name (VARCHAR, NOT NULL)                                        │
    │ price (FLOAT, >= 0)                                             │
    │ quantity (INTEGER, >= 1)                                        │
    │ scan_date (DATE)                                                │
    │ expire_date (DATE)                                              │
    │ timestamp (DATETIME, creation time)                             │
    │ updated_at (DATETIME, AUTO UPDATE)                              │
    └─────────────────────────────────────────────────────────────────┘

Barcodes for hand-entered records:
---------------------------------
- MANUAL_<epoch ms>     product saved without a scanned barcode
- SHORTCODE_<7 digits>  product created from a shortcode only

==============================================================================
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    Float,
    Integer,
    String,
    func,
)

from scanstock.db.database import Base
from scanstock.scanner.engine import MAX_CODE_LENGTH


MANUAL_BARCODE_PREFIX = "MANUAL_"
SHORTCODE_BARCODE_PREFIX = "SHORTCODE_"


class InventoryProduct(Base):
    """
    Product record in the local inventory.

    Attributes:
        id: Primary key
        barcode: Scanned (or synthetic) barcode, unique
        shortcode: Optional 7-digit shortcode, unique when present
        format: Barcode format name (e.g. EAN_13, MANUAL, SHORTCODE)
        name: Display name
        price: Unit price (>= 0)
        quantity: Stock quantity (>= 1)
        scan_date: Date the product was first recorded
        expire_date: scan_date plus the configured expiry period
        timestamp: Creation time
    """

    __tablename__ = "products"
    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_products_price_non_negative"),
        CheckConstraint("quantity >= 1", name="ck_products_quantity_positive"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    barcode = Column(String(MAX_CODE_LENGTH), unique=True, nullable=False, index=True)
    shortcode = Column(String(7), unique=True, nullable=True, index=True)
    format = Column(String(20), nullable=False, default="MANUAL")
    name = Column(String(200), nullable=False)
    price = Column(Float, nullable=False, default=0.0)
    quantity = Column(Integer, nullable=False, default=1)
    scan_date = Column(Date, nullable=False)
    expire_date = Column(Date, nullable=False)
    timestamp = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=True, onupdate=func.now())

    @property
    def is_manual(self) -> bool:
        """True for records created without a scanned barcode."""
        return self.barcode.startswith((MANUAL_BARCODE_PREFIX, SHORTCODE_BARCODE_PREFIX))

    def __repr__(self) -> str:
        return f"<InventoryProduct(id={self.id}, barcode={self.barcode!r}, name={self.name!r})>"
