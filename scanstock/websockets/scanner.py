"""
==============================================================================
Scanner WebSocket Module
==============================================================================

Real-time barcode scanning via WebSocket connection. Each connection owns
its own ScanSession, so confirmation windows and accepted codes are never
shared between clients.

Protocol:
---------
Client → server:
    {"type": "frame", "frame": "<base64 image or data URL>"}
    {"type": "code", "code": "4006381333931", "format": "EAN_13"}
    {"type": "reset"}
    {"type": "stop"}

Server → client:
    {"type": "ready", "required_frames": 3, "reference_loaded": true}
    {"type": "classification", "status": "found_in_reference", "code": ...,
     "format": ..., "action": "create", "product": null, "draft": {...}}
    {"type": "reset"}
    {"type": "error", "code": "INVALID_FRAME", "message": "..."}

Pending observations produce no reply.

==============================================================================
"""

import json
import logging
from typing import Optional

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from sqlalchemy.orm import Session

from scanstock.catalog import get_reference_catalog
from scanstock.db.database import get_db
from scanstock.scanner import MAX_CODE_LENGTH, BarcodeFormat, BarcodeScanner, DecodeAttempt
from scanstock.services.inventory_service import InventoryService
from scanstock.services.scan_session import ScanSession


# Module logger
logger = logging.getLogger(__name__)

router = APIRouter()


class ScannerWebSocketHandler:
    """
    Handler for scanning WebSocket connections.

    Manages the lifecycle of a scanning session:
    - Session creation
    - Frame decoding or client-decoded codes
    - Classification reporting
    """

    def __init__(self, websocket: WebSocket, db: Session):
        self._websocket = websocket
        self._inventory = InventoryService(db)
        self._scanner = BarcodeScanner()
        self._session = ScanSession.from_settings(get_reference_catalog())

    async def send_error(self, message: str, code: str = "ERROR") -> None:
        """Send error message to client."""
        await self._websocket.send_json({
            "type": "error",
            "code": code,
            "message": message
        })

    async def report(self, attempt: DecodeAttempt) -> None:
        """Run one attempt through the session and send non-pending outcomes."""
        outcome = self._session.process(attempt, self._inventory)

        if not outcome.classification.status.is_confirmed:
            return

        logger.info(f"✓ {outcome.classification.code} → {outcome.classification.status.value}")
        await self._websocket.send_json({"type": "classification", **outcome.to_dict()})

    async def handle_frame(self, data: dict) -> None:
        """Handle frame message from client."""
        payload = data.get("frame")
        if not isinstance(payload, str):
            await self.send_error("Frame must be a base64 string", "INVALID_MESSAGE")
            return

        frame = self._scanner.decode_base64_frame(payload)
        if frame is None:
            await self.send_error("Frame is not a decodable image", "INVALID_FRAME")
            return

        await self.report(self._scanner.read_attempt(frame))

    async def handle_code(self, data: dict) -> None:
        """Handle a code decoded on the client side."""
        raw_format: Optional[str] = data.get("format")
        code = data.get("code")
        if not all(v is None or isinstance(v, str) for v in (code, raw_format)):
            await self.send_error("Code and format must be strings", "INVALID_MESSAGE")
            return

        code = (code or "").strip()
        if len(code) > MAX_CODE_LENGTH:
            await self.send_error(
                f"Code cannot exceed {MAX_CODE_LENGTH} characters", "INVALID_MESSAGE"
            )
            return

        fmt = BarcodeFormat.parse(raw_format)
        if raw_format and fmt is None:
            await self.send_error(f"Unsupported barcode format: {raw_format}", "INVALID_FORMAT")
            return

        if not code:
            await self.report(DecodeAttempt.absent())
            return

        await self.report(DecodeAttempt.of(code, fmt))

    async def handle_reset(self) -> None:
        self._session.reset()
        await self._websocket.send_json({"type": "reset"})

    async def run(self) -> None:
        """Main handler loop."""
        await self._websocket.accept()
        logger.info("📱 Scanner WebSocket connected")

        await self._websocket.send_json({
            "type": "ready",
            "required_frames": self._session.engine.required_frames,
            "reference_loaded": get_reference_catalog().is_loaded
        })

        try:
            while True:
                try:
                    data = json.loads(await self._websocket.receive_text())
                except ValueError:
                    await self.send_error("Message is not valid JSON", "INVALID_MESSAGE")
                    continue

                if not isinstance(data, dict):
                    await self.send_error("Message must be a JSON object", "INVALID_MESSAGE")
                    continue

                message_type = data.get("type")

                if message_type == "frame":
                    await self.handle_frame(data)

                elif message_type == "code":
                    await self.handle_code(data)

                elif message_type == "reset":
                    await self.handle_reset()

                elif message_type == "stop":
                    logger.info("🛑 Client requested stop")
                    await self._websocket.close()
                    break

                else:
                    await self.send_error(f"Unknown message type: {message_type}", "INVALID_MESSAGE")

        except WebSocketDisconnect:
            logger.info("📱 Client disconnected")
        finally:
            self._scanner.close()
            logger.info("✅ Scanner WebSocket closed")


@router.websocket("/ws/scan")
async def websocket_scan(websocket: WebSocket, db: Session = Depends(get_db)):
    """WebSocket endpoint for barcode scanning."""
    handler = ScannerWebSocketHandler(websocket, db)
    await handler.run()
