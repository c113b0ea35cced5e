"""
==============================================================================
API v1 Endpoints
==============================================================================

Version 1 of the REST API.

Routers:
--------
- health: Health check endpoints
- products: Inventory product CRUD and manual entry
- scan: Scan confirmation session
- reference: Reference barcode set

==============================================================================
"""

from . import health, products, scan, reference

__all__ = ["health", "products", "scan", "reference"]
