"""
==============================================================================
API Router
==============================================================================

Mounts the v1 routers (health, products, scan, reference) under
/api/v1. WebSocket routes are mounted separately by the application.

==============================================================================
"""

from typing import Iterable

from fastapi import APIRouter

from scanstock.api.v1 import health, products, reference, scan

API_PREFIX = "/api/v1"

V1_ROUTERS = (
    health.router,
    products.router,
    scan.router,
    reference.router,
)


def build_api_router(routers: Iterable[APIRouter] = V1_ROUTERS) -> APIRouter:
    """Build the versioned API router from the given sub-routers."""
    api = APIRouter(prefix=API_PREFIX)
    for sub_router in routers:
        api.include_router(sub_router)
    return api


api_router = build_api_router()
