"""
==============================================================================
Inventory Service Module
==============================================================================

Product inventory management: CRUD plus the hand-entry and scan flows.

This module implements:
- InventoryService: Class handling product records

Business Rules:
--------------
- name required, price >= 0, quantity between 1 and 99999
- shortcode optional; exactly 7 digits and unique when present
- barcode unique; products saved without one get MANUAL_<epoch ms>
- products created from a shortcode get barcode SHORTCODE_<shortcode>,
  format SHORTCODE, price 0 and quantity 1
- expire_date = scan_date + expiry_days (30 by default)

Scan Flow:
---------
A confirmed or hand-typed barcode either matches an existing record
(offer EDIT) or not (offer CREATE with a pre-filled draft).

==============================================================================
"""

from __future__ import annotations

import logging
import time
from datetime import datetime, timedelta
from typing import List, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from scanstock.config import get_settings
from scanstock.core import exceptions
from scanstock.db.models import (
    InventoryProduct,
    MANUAL_BARCODE_PREFIX,
    SHORTCODE_BARCODE_PREFIX,
)
from scanstock.scanner.engine import BarcodeFormat
from scanstock.schemas.product import ProductCreate, ProductDraft, ProductUpdate
from scanstock.schemas.scan import ScanAction
from scanstock.utils.validators import (
    BarcodeValidator,
    PriceValidator,
    QuantityValidator,
    ShortcodeValidator,
)


# Module logger
logger = logging.getLogger(__name__)


ScanPreparation = Tuple[ScanAction, Optional[InventoryProduct], Optional[ProductDraft]]


class InventoryService:
    """
    Inventory management service.

    Attributes:
        _db: Database session
        _expiry_days: Days added to the scan date for the expire date

    Example:
        >>> service = InventoryService(db_session)
        >>> product = service.create_product(ProductCreate(
        ...     barcode="4006381333931", format="EAN_13",
        ...     name="Pencil", price=1.5, quantity=10
        ... ))
        >>> action, existing, draft = service.prepare_scan("4006381333931")
        >>> action
        <ScanAction.EDIT: 'edit'>
    """

    def __init__(self, db: Session, expiry_days: Optional[int] = None) -> None:
        """
        Initialize the inventory service.

        Args:
            db: SQLAlchemy database session
            expiry_days: Override for the configured expiry period
        """
        self._db = db
        self._expiry_days = expiry_days if expiry_days is not None else get_settings().expiry_days
        self._shortcode_validator = ShortcodeValidator()
        self._barcode_validator = BarcodeValidator()
        self._price_validator = PriceValidator()
        self._quantity_validator = QuantityValidator()

    # =========================================================================
    # READ OPERATIONS
    # =========================================================================

    def list_products(self, offset: int = 0, limit: Optional[int] = None) -> List[InventoryProduct]:
        """List products in the order they were added."""
        query = self._db.query(InventoryProduct).order_by(InventoryProduct.id).offset(offset)
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def count_products(self) -> int:
        return self._db.query(InventoryProduct).count()

    def get_product(self, product_id: int) -> InventoryProduct:
        """
        Get product by ID.

        Raises:
            AppException: PRODUCT_NOT_FOUND
        """
        product = self._db.get(InventoryProduct, product_id)
        if product is None:
            raise exceptions.product_not_found(product_id)
        return product

    def find_by_barcode(self, barcode: str) -> Optional[InventoryProduct]:
        return self._db.query(InventoryProduct).filter(
            InventoryProduct.barcode == barcode
        ).first()

    def find_by_shortcode(self, shortcode: str) -> Optional[InventoryProduct]:
        return self._db.query(InventoryProduct).filter(
            InventoryProduct.shortcode == shortcode
        ).first()

    # =========================================================================
    # CREATE OPERATIONS
    # =========================================================================

    def create_product(self, data: ProductCreate) -> InventoryProduct:
        """
        Save a new product.

        Raises:
            AppException: VALIDATION_ERROR, SHORTCODE_INVALID, SHORTCODE_EXISTS,
                BARCODE_EXISTS
        """
        self._check_price(data.price)
        self._check_quantity(data.quantity)
        shortcode = self._check_shortcode(data.shortcode)

        barcode = data.barcode or f"{MANUAL_BARCODE_PREFIX}{int(time.time() * 1000)}"
        if self.find_by_barcode(barcode):
            raise exceptions.barcode_exists(barcode)

        product = self._new_product(
            barcode=barcode,
            fmt=data.format.value if data.format else BarcodeFormat.MANUAL.value,
            name=data.name,
            price=data.price,
            quantity=data.quantity,
            shortcode=shortcode,
        )
        self._save(product)

        logger.info(f"✅ Product saved: {product.name} ({product.barcode})")
        return product

    def add_by_shortcode(self, shortcode: str, name: str) -> InventoryProduct:
        """
        Create a product from a shortcode and a name only.

        Raises:
            AppException: SHORTCODE_INVALID, SHORTCODE_EXISTS, VALIDATION_ERROR
        """
        is_valid, normalized, error = self._shortcode_validator.validate(shortcode)
        if not is_valid:
            raise exceptions.shortcode_invalid(error)

        name = (name or "").strip()
        if not name:
            raise exceptions.validation_error("Please enter product name", "name")

        if self.find_by_shortcode(normalized):
            raise exceptions.shortcode_exists(normalized)

        barcode = f"{SHORTCODE_BARCODE_PREFIX}{normalized}"
        if self.find_by_barcode(barcode):
            raise exceptions.barcode_exists(barcode)

        product = self._new_product(
            barcode=barcode,
            fmt=BarcodeFormat.SHORTCODE.value,
            name=name,
            price=0.0,
            quantity=1,
            shortcode=normalized,
        )
        self._save(product)

        logger.info(f"✅ Product added by shortcode: {name} ({normalized})")
        return product

    # =========================================================================
    # UPDATE / DELETE OPERATIONS
    # =========================================================================

    def update_product(self, product_id: int, data: ProductUpdate) -> InventoryProduct:
        """
        Edit name, price, quantity or shortcode of a product.

        Raises:
            AppException: PRODUCT_NOT_FOUND, VALIDATION_ERROR, SHORTCODE_INVALID,
                SHORTCODE_EXISTS
        """
        product = self.get_product(product_id)

        if data.price is not None:
            self._check_price(data.price)
        if data.quantity is not None:
            self._check_quantity(data.quantity)

        if data.shortcode is not None:
            product.shortcode = self._check_shortcode(data.shortcode or None, exclude_id=product.id)
        if data.name is not None:
            product.name = data.name
        if data.price is not None:
            product.price = data.price
        if data.quantity is not None:
            product.quantity = data.quantity

        self._save(product)

        logger.info(f"✅ Product updated: {product.name} (id={product.id})")
        return product

    def delete_product(self, product_id: int) -> None:
        """
        Delete a product.

        Raises:
            AppException: PRODUCT_NOT_FOUND
        """
        product = self.get_product(product_id)
        self._db.delete(product)
        self._db.commit()

        logger.info(f"🗑️ Product deleted: {product.name} (id={product_id})")

    # =========================================================================
    # SCAN FLOW
    # =========================================================================

    def prepare_scan(
        self,
        barcode: str,
        fmt: Optional[BarcodeFormat] = None
    ) -> ScanPreparation:
        """
        Decide between editing an existing record and creating a new one.

        Returns:
            Tuple of (action, existing_product, draft)
        """
        existing = self.find_by_barcode(barcode)
        if existing is not None:
            return ScanAction.EDIT, existing, None

        draft = ProductDraft(
            barcode=barcode,
            format=(fmt or BarcodeFormat.MANUAL).value
        )
        return ScanAction.CREATE, None, draft

    def manual_barcode(self, raw_barcode: str) -> ScanPreparation:
        """
        Hand-typed barcode: normalize digits, then run the scan flow.

        Raises:
            AppException: BARCODE_REQUIRED
        """
        is_valid, barcode, error = self._barcode_validator.validate(raw_barcode)
        if not is_valid:
            raise exceptions.barcode_required(error)

        return self.prepare_scan(barcode, BarcodeFormat.MANUAL)

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _check_shortcode(
        self,
        shortcode: Optional[str],
        exclude_id: Optional[int] = None
    ) -> Optional[str]:
        """Validate an optional shortcode and check it is unused."""
        if not shortcode:
            return None

        is_valid, normalized, error = self._shortcode_validator.validate(shortcode)
        if not is_valid:
            raise exceptions.shortcode_invalid(error)

        existing = self.find_by_shortcode(normalized)
        if existing is not None and existing.id != exclude_id:
            raise exceptions.shortcode_exists(normalized)

        return normalized

    def _check_price(self, price: float) -> None:
        is_valid, error = self._price_validator.validate(price)
        if not is_valid:
            raise exceptions.validation_error(error, "price")

    def _check_quantity(self, quantity: int) -> None:
        is_valid, error = self._quantity_validator.validate(quantity)
        if not is_valid:
            raise exceptions.validation_error(error, "quantity")

    def _new_product(
        self,
        barcode: str,
        fmt: str,
        name: str,
        price: float,
        quantity: int,
        shortcode: Optional[str]
    ) -> InventoryProduct:
        now = datetime.utcnow()
        return InventoryProduct(
            barcode=barcode,
            shortcode=shortcode,
            format=fmt,
            name=name,
            price=price,
            quantity=quantity,
            scan_date=now.date(),
            expire_date=(now + timedelta(days=self._expiry_days)).date(),
            timestamp=now,
        )

    def _save(self, product: InventoryProduct) -> None:
        try:
            self._db.add(product)
            self._db.commit()
            self._db.refresh(product)
        except IntegrityError:
            self._db.rollback()
            logger.warning(f"Integrity conflict saving product {product.barcode}")
            raise exceptions.product_conflict()
