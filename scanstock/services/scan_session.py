"""
==============================================================================
Scan Session Service Module
==============================================================================

One scanning session: a ScanConfirmationEngine plus the inventory
reactions applied to its classifications.

Reactions:
---------
Two independently configurable reactions follow a confirmation:

    ┌─────────────────────────┬──────────────────────────┬────────────────────┐
    │ Classification          │ Setting                  │ Suggested action   │
    ├─────────────────────────┼──────────────────────────┼────────────────────┤
    │ FOUND_IN_REFERENCE      │ prompt_on_new_scan       │ EDIT if the record │
    │ NOT_IN_REFERENCE        │                          │ exists, else CREATE│
    ├─────────────────────────┼──────────────────────────┼────────────────────┤
    │ ALREADY_SCANNED         │ edit_on_duplicate_scan   │ EDIT if the record │
    │                         │                          │ exists             │
    ├─────────────────────────┼──────────────────────────┼────────────────────┤
    │ PENDING                 │ -                        │ none               │
    └─────────────────────────┴──────────────────────────┴────────────────────┘

Thread Safety:
-------------
The engine mutates its window and accepted set on every observation, so
process() holds a lock around the engine call. The shared session
is reached concurrently by REST requests and background threads.

==============================================================================
"""

from __future__ import annotations

import logging
import threading
from typing import Collection, List, Optional, Tuple

from scanstock.config import get_settings
from scanstock.scanner.engine import (
    REQUIRED_FRAMES,
    Classification,
    DecodeAttempt,
    EngineStats,
    ScanConfirmationEngine,
    ScanStatus,
)
from scanstock.schemas.product import ProductResponse
from scanstock.schemas.scan import ScanAction, ScanOutcome
from scanstock.services.inventory_service import InventoryService


# Module logger
logger = logging.getLogger(__name__)


class ScanSession:
    """
    Scanning session owning one confirmation engine.

    Example:
        >>> session = ScanSession(reference=get_reference_catalog())
        >>> outcome = session.process(attempt, InventoryService(db))
        >>> outcome.classification.status
        <ScanStatus.PENDING: 'pending'>
    """

    def __init__(
        self,
        reference: Optional[Collection[str]] = None,
        required_frames: int = REQUIRED_FRAMES,
        prompt_on_new_scan: bool = True,
        edit_on_duplicate_scan: bool = True
    ) -> None:
        """
        Initialize the session.

        Args:
            reference: Reference container (e.g. the ReferenceCatalog)
            required_frames: Consecutive reads needed to confirm a code
            prompt_on_new_scan: Suggest create/edit for newly accepted codes
            edit_on_duplicate_scan: Suggest edit for already-scanned codes
        """
        self._engine = ScanConfirmationEngine(reference, required_frames)
        self._lock = threading.Lock()
        self.prompt_on_new_scan = prompt_on_new_scan
        self.edit_on_duplicate_scan = edit_on_duplicate_scan

    @classmethod
    def from_settings(cls, reference: Optional[Collection[str]] = None) -> ScanSession:
        """Create a session configured from application settings."""
        settings = get_settings()
        return cls(
            reference=reference,
            required_frames=settings.required_frames,
            prompt_on_new_scan=settings.prompt_on_new_scan,
            edit_on_duplicate_scan=settings.edit_on_duplicate_scan,
        )

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def engine(self) -> ScanConfirmationEngine:
        return self._engine

    @property
    def reference(self) -> Collection[str]:
        return self._engine.reference

    # =========================================================================
    # OPERATIONS
    # =========================================================================

    def observe(self, attempt: DecodeAttempt) -> Classification:
        """Feed one attempt through the engine (serialized)."""
        with self._lock:
            return self._engine.observe(attempt)

    def process(
        self,
        attempt: DecodeAttempt,
        inventory: Optional[InventoryService] = None
    ) -> ScanOutcome:
        """
        Observe one attempt and attach the suggested inventory reaction.

        Args:
            attempt: Decode attempt for the current frame
            inventory: Inventory service; without it no reaction is attached

        Returns:
            ScanOutcome with classification and optional action
        """
        classification = self.observe(attempt)
        outcome = ScanOutcome(classification=classification)

        status = classification.status
        if inventory is None or not status.is_confirmed:
            return outcome

        if status.is_new and self.prompt_on_new_scan:
            action, existing, draft = inventory.prepare_scan(
                classification.code, classification.format
            )
            return ScanOutcome(
                classification=classification,
                action=action,
                product=ProductResponse.model_validate(existing) if existing else None,
                draft=draft,
            )

        if status is ScanStatus.ALREADY_SCANNED and self.edit_on_duplicate_scan:
            existing = inventory.find_by_barcode(classification.code)
            if existing is not None:
                logger.debug(f"Duplicate scan of stored product: {existing.name}")
                return ScanOutcome(
                    classification=classification,
                    action=ScanAction.EDIT,
                    product=ProductResponse.model_validate(existing),
                )

        return outcome

    def reset(self) -> None:
        """Restart the session (window and accepted codes cleared)."""
        with self._lock:
            self._engine.reset()

    def snapshot(self) -> Tuple[List[str], List[str], EngineStats]:
        """Return (window, accepted, stats) captured under the lock."""
        with self._lock:
            return (
                self._engine.window,
                sorted(self._engine.accepted),
                self._engine.stats(),
            )


# =============================================================================
# SINGLETON INSTANCE MANAGEMENT
# =============================================================================

_session_instance: Optional[ScanSession] = None
_session_lock = threading.Lock()


def get_scan_session() -> ScanSession:
    """
    Get the process-wide scanning session used by the REST API.

    The session reads the global reference catalog, so a reference load
    that completes later is visible without recreating the session.
    """
    global _session_instance
    with _session_lock:
        if _session_instance is None:
            from scanstock.catalog import get_reference_catalog

            _session_instance = ScanSession.from_settings(get_reference_catalog())
        return _session_instance


def reset_scan_session() -> None:
    """Drop the process-wide session; the next call builds a fresh one."""
    global _session_instance
    with _session_lock:
        _session_instance = None
