"""
==============================================================================
Inventory Product Endpoints
==============================================================================

CRUD for stored products plus the hand-entry flows (typed barcode,
shortcode-only product).

==============================================================================
"""

from typing import Optional

from fastapi import APIRouter, Depends, status

from scanstock.core import exceptions
from scanstock.core.dependencies import get_inventory_service, get_pagination
from scanstock.db.models import InventoryProduct
from scanstock.schemas.common import MessageResponse
from scanstock.schemas.product import (
    ManualBarcodeRequest,
    ManualShortcodeRequest,
    ProductCreate,
    ProductDraft,
    ProductListResponse,
    ProductResponse,
    ProductUpdate,
)
from scanstock.schemas.scan import ScanAction
from scanstock.services.inventory_service import InventoryService


router = APIRouter(prefix="/products", tags=["Products"])


class ProductController:
    """Controller for inventory product operations."""

    def __init__(self, service: InventoryService):
        self._service = service

    @staticmethod
    def _product(product: InventoryProduct) -> dict:
        return {
            "success": True,
            "product": ProductResponse.model_validate(product)
        }

    @staticmethod
    def _prepared(
        action: ScanAction,
        product: Optional[InventoryProduct],
        draft: Optional[ProductDraft]
    ) -> dict:
        return {
            "success": True,
            "action": action.value,
            "product": ProductResponse.model_validate(product) if product else None,
            "draft": draft,
        }

    def list_all(self, offset: int, limit: int) -> ProductListResponse:
        """List stored products."""
        products = self._service.list_products(offset=offset, limit=limit)
        return ProductListResponse(
            total=self._service.count_products(),
            products=[ProductResponse.model_validate(p) for p in products]
        )

    def get(self, product_id: int) -> dict:
        return self._product(self._service.get_product(product_id))

    def get_by_barcode(self, barcode: str) -> dict:
        """Get product by barcode."""
        product = self._service.find_by_barcode(barcode)
        if product is None:
            raise exceptions.barcode_not_found(barcode)
        return self._product(product)

    def create(self, data: ProductCreate) -> dict:
        return self._product(self._service.create_product(data))

    def update(self, product_id: int, data: ProductUpdate) -> dict:
        return self._product(self._service.update_product(product_id, data))

    def delete(self, product_id: int) -> MessageResponse:
        self._service.delete_product(product_id)
        return MessageResponse(message=f"Product {product_id} deleted")

    def manual_barcode(self, data: ManualBarcodeRequest) -> dict:
        """Typed barcode: edit if stored, else a create draft."""
        return self._prepared(*self._service.manual_barcode(data.barcode))

    def manual_shortcode(self, data: ManualShortcodeRequest) -> dict:
        return self._product(self._service.add_by_shortcode(data.shortcode, data.name))


@router.get("", response_model=ProductListResponse)
async def list_products(
    pagination: dict = Depends(get_pagination),
    service: InventoryService = Depends(get_inventory_service)
):
    """List stored products in the order they were added."""
    controller = ProductController(service)
    return controller.list_all(pagination["offset"], pagination["page_size"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_product(
    data: ProductCreate,
    service: InventoryService = Depends(get_inventory_service)
):
    """
    Save a new product.

    Without a barcode the product is stored as MANUAL_<epoch ms>.
    The expire date is set to the scan date plus the configured period.
    """
    controller = ProductController(service)
    return controller.create(data)


@router.post("/manual-barcode")
async def manual_barcode(
    data: ManualBarcodeRequest,
    service: InventoryService = Depends(get_inventory_service)
):
    """Look up a hand-typed barcode and suggest edit or create."""
    controller = ProductController(service)
    return controller.manual_barcode(data)


@router.post("/manual-shortcode", status_code=status.HTTP_201_CREATED)
async def manual_shortcode(
    data: ManualShortcodeRequest,
    service: InventoryService = Depends(get_inventory_service)
):
    """Create a product from a 7-digit shortcode and a name."""
    controller = ProductController(service)
    return controller.manual_shortcode(data)


@router.get("/barcode/{barcode}")
async def get_product_by_barcode(
    barcode: str,
    service: InventoryService = Depends(get_inventory_service)
):
    """Get product by barcode."""
    controller = ProductController(service)
    return controller.get_by_barcode(barcode)


@router.get("/{product_id}")
async def get_product(
    product_id: int,
    service: InventoryService = Depends(get_inventory_service)
):
    """Get product by ID."""
    controller = ProductController(service)
    return controller.get(product_id)


@router.put("/{product_id}")
async def update_product(
    product_id: int,
    data: ProductUpdate,
    service: InventoryService = Depends(get_inventory_service)
):
    """Edit name, price, quantity or shortcode."""
    controller = ProductController(service)
    return controller.update(product_id, data)


@router.delete("/{product_id}", response_model=MessageResponse)
async def delete_product(
    product_id: int,
    service: InventoryService = Depends(get_inventory_service)
):
    """Delete a product."""
    controller = ProductController(service)
    return controller.delete(product_id)
