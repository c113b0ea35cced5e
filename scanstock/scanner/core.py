"""
==============================================================================
Barcode Scanner Core Module
==============================================================================

Frame decoding front end for the scan confirmation engine.

Features:
---------
- pyzbar decoding of OpenCV frames into DecodeAttempt observations
- Single-code mode: the first supported symbology in a frame wins
- Base64 frame decoding for WebSocket clients
- Local live camera loop with colored feedback boxes:
  - GREEN: code found in the reference list
  - ORANGE: code accepted but not in the reference list
  - BLUE: code already scanned this session
  - YELLOW: code read, waiting for confirmation

==============================================================================
"""

from __future__ import annotations

import base64
import binascii
import logging
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple

import cv2
import numpy as np
from pyzbar.pyzbar import decode

from .engine import MAX_CODE_LENGTH, BarcodeFormat, DecodeAttempt, ScanStatus

if TYPE_CHECKING:
    from scanstock.schemas.scan import ScanOutcome
    from scanstock.services.inventory_service import InventoryService
    from scanstock.services.scan_session import ScanSession


# Module logger
logger = logging.getLogger(__name__)


# zbar symbology names mapped to supported formats
ZBAR_FORMATS: Dict[str, BarcodeFormat] = {
    "CODE128": BarcodeFormat.CODE_128,
    "CODE39": BarcodeFormat.CODE_39,
    "CODE93": BarcodeFormat.CODE_93,
    "EAN13": BarcodeFormat.EAN_13,
    "EAN8": BarcodeFormat.EAN_8,
    "UPCA": BarcodeFormat.UPC_A,
    "UPCE": BarcodeFormat.UPC_E,
    "CODABAR": BarcodeFormat.CODABAR,
    "I25": BarcodeFormat.I2OF5,
}


# =============================================================================
# COLOR CONSTANTS (BGR format for OpenCV)
# =============================================================================

class ScannerColors:
    """Color constants for detection feedback (BGR)."""

    GREEN = (0, 255, 0)
    ORANGE = (0, 165, 255)
    BLUE = (255, 0, 0)
    YELLOW = (0, 255, 255)

    TEXT_BLACK = (0, 0, 0)
    TEXT_WHITE = (255, 255, 255)

    @classmethod
    def for_status(cls, status: ScanStatus) -> tuple:
        return {
            ScanStatus.FOUND_IN_REFERENCE: cls.GREEN,
            ScanStatus.NOT_IN_REFERENCE: cls.ORANGE,
            ScanStatus.ALREADY_SCANNED: cls.BLUE,
        }.get(status, cls.YELLOW)


class BarcodeScanner:
    """
    Decoder that turns video frames into DecodeAttempt observations.

    Example:
        >>> scanner = BarcodeScanner()
        >>> attempt = scanner.read_attempt(frame)
        >>> outcome = session.process(attempt, inventory)
    """

    def __init__(self, camera_index: int = 0) -> None:
        """
        Initialize scanner instance.

        Args:
            camera_index: Camera device index (0 = default)
        """
        self._camera_index = camera_index
        self._cap = None

        logger.debug(f"Scanner created (camera {camera_index})")

    # =========================================================================
    # FRAME DECODING
    # =========================================================================

    @staticmethod
    def map_format(zbar_type: str) -> Optional[BarcodeFormat]:
        """Map a zbar symbology name to a supported format (None if unsupported)."""
        return ZBAR_FORMATS.get((zbar_type or "").upper())

    def _first_supported(self, frame: np.ndarray):
        """Return (barcode, format) for the first supported read, or (None, None)."""
        try:
            barcodes = decode(frame)
        except Exception as e:
            logger.error(f"Decode error: {e}")
            return None, None

        for barcode in barcodes:
            fmt = self.map_format(barcode.type)
            if fmt is None:
                logger.debug(f"Ignoring unsupported symbology: {barcode.type}")
                continue
            return barcode, fmt

        return None, None

    def detect(self, frame: Optional[np.ndarray]) -> Tuple[DecodeAttempt, Optional[Any]]:
        """
        Decode one frame and keep the raw pyzbar result for drawing.

        Returns:
            Tuple of (attempt, barcode); barcode is None when nothing was read
        """
        if frame is None or frame.size == 0:
            return DecodeAttempt.absent(), None

        barcode, fmt = self._first_supported(frame)
        if barcode is None:
            return DecodeAttempt.absent(), None

        try:
            code = barcode.data.decode("utf-8").strip()
        except UnicodeDecodeError:
            logger.warning("Barcode payload is not valid UTF-8")
            return DecodeAttempt.absent(), None

        if not code:
            return DecodeAttempt.absent(), None

        if len(code) > MAX_CODE_LENGTH:
            logger.warning(f"Ignoring {len(code)}-character barcode (max {MAX_CODE_LENGTH})")
            return DecodeAttempt.absent(), None

        return DecodeAttempt.of(code, fmt), barcode

    def read_attempt(self, frame: Optional[np.ndarray]) -> DecodeAttempt:
        """
        Decode one frame.

        Args:
            frame: OpenCV image (numpy array)

        Returns:
            DecodeAttempt, absent when nothing supported was read
        """
        attempt, _ = self.detect(frame)
        return attempt

    @staticmethod
    def decode_base64_frame(data: str) -> Optional[np.ndarray]:
        """
        Decode a base64-encoded image (optionally a data URL) to a frame.

        Returns:
            OpenCV image or None if the payload is not a decodable image
        """
        if not data or not isinstance(data, str):
            return None

        if data.startswith("data:") and "," in data:
            data = data.split(",", 1)[1]

        try:
            img_data = base64.b64decode(data, validate=True)
        except (binascii.Error, ValueError):
            logger.debug("Invalid base64 frame payload")
            return None

        nparr = np.frombuffer(img_data, np.uint8)
        if nparr.size == 0:
            return None

        return cv2.imdecode(nparr, cv2.IMREAD_COLOR)

    # =========================================================================
    # DRAWING
    # =========================================================================

    def _draw_colored_box(
        self,
        frame: np.ndarray,
        barcode,
        label: str,
        color: tuple,
        thickness: int = 3
    ) -> None:
        """Draw a colored bounding box with a label above it."""
        x, y, w, h = barcode.rect

        cv2.rectangle(frame, (x, y), (x + w, y + h), color, thickness)

        font = cv2.FONT_HERSHEY_SIMPLEX
        font_scale = 0.6
        font_thickness = 2

        label_size, _ = cv2.getTextSize(label, font, font_scale, font_thickness)
        label_y = y - 10 if y - 10 > label_size[1] else y + h + label_size[1] + 10
        cv2.rectangle(
            frame,
            (x, label_y - label_size[1] - 5),
            (x + label_size[0] + 10, label_y + 5),
            color,
            -1
        )

        text_color = ScannerColors.TEXT_BLACK if color in (
            ScannerColors.GREEN, ScannerColors.YELLOW
        ) else ScannerColors.TEXT_WHITE
        cv2.putText(frame, label, (x + 5, label_y), font, font_scale, text_color, font_thickness)

    # =========================================================================
    # CAMERA METHODS
    # =========================================================================

    def scan_camera_live(
        self,
        session: ScanSession,
        inventory: Optional[InventoryService] = None,
        duration_seconds: int = 30,
        window_name: str = "Barcode Scanner"
    ) -> List[ScanOutcome]:
        """
        Live camera scanning through a ScanSession.

        Args:
            session: Session receiving one attempt per frame
            inventory: Inventory service for create/edit suggestions
            duration_seconds: How long to scan (0 = until 'q' is pressed)
            window_name: OpenCV window name

        Returns:
            Confirmed (non-pending) outcomes in scan order
        """
        self._cap = cv2.VideoCapture(self._camera_index)

        if not self._cap.isOpened():
            logger.error(f"Cannot open camera {self._camera_index}")
            return []

        logger.info("📷 Starting live scan (press 'q' to quit)")

        outcomes = []
        start_time = cv2.getTickCount()

        try:
            while True:
                ret, frame = self._cap.read()
                if not ret:
                    logger.warning("Failed to read frame")
                    break

                attempt, barcode = self.detect(frame)
                outcome = session.process(attempt, inventory)
                status = outcome.classification.status

                if barcode is not None:
                    label = f"{status.value}: {attempt.code}"
                    self._draw_colored_box(frame, barcode, label, ScannerColors.for_status(status))

                if status.is_confirmed:
                    outcomes.append(outcome)
                    logger.info(f"✓ {attempt.code} → {status.value}")

                cv2.imshow(window_name, frame)

                if cv2.waitKey(1) & 0xFF == ord("q"):
                    logger.info("User pressed 'q' - stopping scan")
                    break

                if duration_seconds > 0:
                    elapsed = (cv2.getTickCount() - start_time) / cv2.getTickFrequency()
                    if elapsed >= duration_seconds:
                        logger.info(f"Duration {duration_seconds}s reached")
                        break
        finally:
            self._cap.release()
            self._cap = None
            cv2.destroyAllWindows()

        logger.info(f"📊 Confirmed scans: {len(outcomes)}")
        return outcomes

    def close(self) -> None:
        """Release the camera if it is open."""
        if self._cap:
            self._cap.release()
            self._cap = None
        logger.debug("Scanner closed")
