"""
==============================================================================
Scan Confirmation Endpoints
==============================================================================

REST access to the process-wide scanning session, for clients that decode
frames themselves and submit one attempt per frame.

Flow:
-----
    client decoder ──► POST /scan/observe ──► pending
                   ──► POST /scan/observe ──► pending
                   ──► POST /scan/observe ──► found_in_reference + action

==============================================================================
"""

import logging

from fastapi import APIRouter, Depends

from scanstock.catalog import ReferenceCatalog
from scanstock.core import exceptions
from scanstock.core.dependencies import (
    get_catalog_dep,
    get_inventory_service,
    get_session_dep,
)
from scanstock.scanner.engine import BarcodeFormat, DecodeAttempt
from scanstock.schemas.common import MessageResponse
from scanstock.schemas.scan import ObserveRequest, ScanStateResponse
from scanstock.services.inventory_service import InventoryService
from scanstock.services.scan_session import ScanSession


# Module logger
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/scan", tags=["Scan"])


def to_attempt(data: ObserveRequest) -> DecodeAttempt:
    """
    Convert a submitted observation into a DecodeAttempt.

    Raises:
        AppException: INVALID_FORMAT for an unknown format name
    """
    fmt = BarcodeFormat.parse(data.format)
    if data.format and fmt is None:
        raise exceptions.invalid_format(data.format)

    code = (data.code or "").strip()
    if not data.present or not code:
        return DecodeAttempt.absent()
    return DecodeAttempt.of(code, fmt)


@router.post("/observe")
async def observe(
    data: ObserveRequest,
    session: ScanSession = Depends(get_session_dep),
    service: InventoryService = Depends(get_inventory_service)
):
    """
    Submit one decode attempt.

    Returns the classification; confirmed codes carry the suggested
    inventory action (create with draft, or edit with the stored product).
    """
    outcome = session.process(to_attempt(data), service)
    return {"success": True, **outcome.to_dict()}


@router.post("/reset", response_model=MessageResponse)
async def reset(session: ScanSession = Depends(get_session_dep)):
    """Start a new scanning session (window and accepted codes cleared)."""
    session.reset()
    logger.info("Scan session reset")
    return MessageResponse(message="Scan session reset")


@router.get("/state", response_model=ScanStateResponse)
async def state(
    session: ScanSession = Depends(get_session_dep),
    catalog: ReferenceCatalog = Depends(get_catalog_dep)
):
    """Current window, accepted codes and counters."""
    window, accepted, stats = session.snapshot()
    return ScanStateResponse(
        required_frames=session.engine.required_frames,
        window=window,
        accepted=accepted,
        stats=stats,
        reference_loaded=catalog.is_loaded,
        reference_size=len(catalog),
    )
