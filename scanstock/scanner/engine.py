"""
==============================================================================
Scan Confirmation Engine Module
==============================================================================

Temporal confirmation and deduplication of per-frame barcode reads.

A code is accepted only after it has been read in REQUIRED_FRAMES
consecutive observations. Accepted codes are deduplicated for the
lifetime of the session and classified once against a reference set.

Decision Flow:
-------------
    DecodeAttempt
         │
         ▼
    present? ── no ──▶ PENDING
         │
         ▼
    window.append(code)         (bounded deque, FIFO eviction)
         │
         ▼
    window.count(code) < k ──▶ PENDING
         │
         ▼
    window.clear()
         │
         ▼
    code in accepted ──▶ ALREADY_SCANNED
         │
         ▼
    accepted.add(code)
         │
         ▼
    code in reference ──▶ FOUND_IN_REFERENCE
                      └─▶ NOT_IN_REFERENCE

The engine performs no I/O and holds no timer or loop state. Callers own
the frame loop and must serialize calls to observe().

==============================================================================
"""

from __future__ import annotations

import enum
import logging
from collections import deque
from typing import Any, Collection, Deque, Dict, FrozenSet, List, Optional, Set

from pydantic import BaseModel, ConfigDict, Field


# Module logger
logger = logging.getLogger(__name__)


REQUIRED_FRAMES = 3

# Longest code accepted from any decoder; matches the inventory barcode column
MAX_CODE_LENGTH = 64


# =============================================================================
# ENUMS
# =============================================================================

class BarcodeFormat(str, enum.Enum):
    """
    Barcode symbologies accepted by the scanner.

    MANUAL and SHORTCODE tag codes typed in by hand rather than decoded.
    """

    CODE_128 = "CODE_128"
    CODE_39 = "CODE_39"
    CODE_93 = "CODE_93"
    EAN_13 = "EAN_13"
    EAN_8 = "EAN_8"
    UPC_A = "UPC_A"
    UPC_E = "UPC_E"
    CODABAR = "CODABAR"
    I2OF5 = "I2OF5"
    TWO_OF_FIVE = "2OF5"
    MANUAL = "MANUAL"
    SHORTCODE = "SHORTCODE"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional[BarcodeFormat]:
        """
        Parse a format name leniently ("ean_13", "EAN-13", "ean13").

        Returns:
            Matching BarcodeFormat or None if unsupported
        """
        if not value:
            return None

        key = value.strip().upper().replace("-", "_")
        try:
            return cls(key)
        except ValueError:
            pass

        compact = key.replace("_", "")
        for member in cls:
            if member.value.replace("_", "") == compact:
                return member
        return None


class ScanStatus(str, enum.Enum):
    """
    Outcome of a single observation.

    - PENDING: not (yet) confirmed
    - ALREADY_SCANNED: confirmed again after being accepted earlier
    - FOUND_IN_REFERENCE: newly accepted and listed in the reference set
    - NOT_IN_REFERENCE: newly accepted and missing from the reference set
    """

    PENDING = "pending"
    ALREADY_SCANNED = "already_scanned"
    FOUND_IN_REFERENCE = "found_in_reference"
    NOT_IN_REFERENCE = "not_in_reference"

    def __str__(self) -> str:
        return self.value

    @property
    def is_confirmed(self) -> bool:
        """True for every status except PENDING."""
        return self is not ScanStatus.PENDING

    @property
    def is_new(self) -> bool:
        """True when the code was accepted for the first time."""
        return self in (ScanStatus.FOUND_IN_REFERENCE, ScanStatus.NOT_IN_REFERENCE)


# =============================================================================
# MODELS
# =============================================================================

class DecodeAttempt(BaseModel):
    """
    One frame's decode observation.

    Attributes:
        present: Whether a barcode was read in this frame
        code: Decoded value (only meaningful when present)
        format: Symbology of the decoded value
    """

    model_config = ConfigDict(frozen=True)

    present: bool = False
    code: Optional[str] = None
    format: Optional[BarcodeFormat] = None

    @classmethod
    def absent(cls) -> DecodeAttempt:
        """Attempt for a frame with no readable barcode."""
        return cls(present=False)

    @classmethod
    def of(cls, code: str, format: Optional[BarcodeFormat] = None) -> DecodeAttempt:
        """Attempt carrying a decoded code."""
        return cls(present=True, code=code, format=format)


class Classification(BaseModel):
    """
    Classification emitted for each observation.

    code and format are set for every status except PENDING.
    """

    model_config = ConfigDict(frozen=True)

    status: ScanStatus
    code: Optional[str] = None
    format: Optional[BarcodeFormat] = None

    @classmethod
    def pending(cls) -> Classification:
        return cls(status=ScanStatus.PENDING)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-ready dictionary."""
        return {
            "status": self.status.value,
            "code": self.code,
            "format": self.format.value if self.format else None,
        }


class EngineStats(BaseModel):
    """Counters describing one scanning session."""

    frames_observed: int = Field(default=0, ge=0)
    codes_observed: int = Field(default=0, ge=0)
    confirmations: int = Field(default=0, ge=0)
    duplicates: int = Field(default=0, ge=0)
    accepted: int = Field(default=0, ge=0)


# =============================================================================
# ENGINE
# =============================================================================

class ScanConfirmationEngine:
    """
    Frame-confirmation filter with session deduplication.

    Attributes:
        required_frames: Window capacity and confirmation threshold
        window: Snapshot of the confirmation window (oldest first)
        accepted: Snapshot of codes accepted this session

    Example:
        >>> engine = ScanConfirmationEngine(reference={"4006381333931"})
        >>> attempt = DecodeAttempt.of("4006381333931", BarcodeFormat.EAN_13)
        >>> [engine.observe(attempt).status.value for _ in range(3)]
        ['pending', 'pending', 'found_in_reference']
    """

    def __init__(
        self,
        reference: Optional[Collection[str]] = None,
        required_frames: int = REQUIRED_FRAMES
    ) -> None:
        """
        Initialize the engine.

        Args:
            reference: Container of reference codes (membership only)
            required_frames: Consecutive identical reads needed to confirm

        Raises:
            ValueError: If required_frames is less than 1
        """
        if required_frames < 1:
            raise ValueError(f"required_frames must be >= 1, got {required_frames}")

        self._required_frames = required_frames
        self._window: Deque[str] = deque(maxlen=required_frames)
        self._accepted: Set[str] = set()
        self._reference: Collection[str] = reference if reference is not None else frozenset()
        self._stats = EngineStats()

        logger.debug(f"Engine created (required_frames={required_frames})")

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def required_frames(self) -> int:
        return self._required_frames

    @property
    def window(self) -> List[str]:
        """Current confirmation window, oldest observation first."""
        return list(self._window)

    @property
    def accepted(self) -> FrozenSet[str]:
        """Codes accepted in this session."""
        return frozenset(self._accepted)

    @property
    def reference(self) -> Collection[str]:
        return self._reference

    # =========================================================================
    # OPERATIONS
    # =========================================================================

    def observe(self, attempt: DecodeAttempt) -> Classification:
        """
        Feed one frame's decode attempt through the confirmation filter.

        Args:
            attempt: Observation for the current frame

        Returns:
            Classification for this observation
        """
        self._stats.frames_observed += 1

        if not attempt.present or not attempt.code:
            return Classification.pending()

        code = attempt.code
        self._stats.codes_observed += 1

        # deque(maxlen=k) evicts the oldest entry on overflow
        self._window.append(code)

        if self._window.count(code) < self._required_frames:
            return Classification.pending()

        self._window.clear()
        self._stats.confirmations += 1

        if code in self._accepted:
            self._stats.duplicates += 1
            logger.debug(f"Already scanned: {code}")
            return Classification(
                status=ScanStatus.ALREADY_SCANNED,
                code=code,
                format=attempt.format
            )

        self._accepted.add(code)
        self._stats.accepted = len(self._accepted)

        if code in self._reference:
            status = ScanStatus.FOUND_IN_REFERENCE
        else:
            status = ScanStatus.NOT_IN_REFERENCE

        logger.info(f"Accepted {code} ({attempt.format or 'unknown'}): {status.value}")
        return Classification(status=status, code=code, format=attempt.format)

    def set_reference(self, reference: Optional[Collection[str]]) -> None:
        """Replace the reference container (None means empty)."""
        self._reference = reference if reference is not None else frozenset()

    def reset(self) -> None:
        """Start a new session: clear window, accepted codes and counters."""
        self._window.clear()
        self._accepted.clear()
        self._stats = EngineStats()
        logger.info("Scan session reset")

    def stats(self) -> EngineStats:
        """Copy of the session counters."""
        return self._stats.model_copy()

    def __repr__(self) -> str:
        return (
            f"ScanConfirmationEngine(required_frames={self._required_frames}, "
            f"window={list(self._window)!r}, accepted={len(self._accepted)})"
        )
