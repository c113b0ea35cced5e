"""
==============================================================================
Scanner Package - Barcode Detection and Confirmation
==============================================================================

Classes:
--------
- ScanConfirmationEngine: Frame-confirmation filter with deduplication
- BarcodeScanner: OpenCV/pyzbar frame decoder and live camera loop

==============================================================================
"""

from .engine import (
    MAX_CODE_LENGTH,
    REQUIRED_FRAMES,
    BarcodeFormat,
    Classification,
    DecodeAttempt,
    EngineStats,
    ScanConfirmationEngine,
    ScanStatus,
)
from .core import BarcodeScanner, ScannerColors

__all__ = [
    "MAX_CODE_LENGTH",
    "REQUIRED_FRAMES",
    "BarcodeFormat",
    "Classification",
    "DecodeAttempt",
    "EngineStats",
    "ScanConfirmationEngine",
    "ScanStatus",
    "BarcodeScanner",
    "ScannerColors",
]
