"""
==============================================================================
API Integration Tests
==============================================================================

Tests for REST API endpoints and the scanning WebSocket.

==============================================================================
"""

import base64

import cv2
import numpy as np
import pytest
from fastapi.testclient import TestClient

from scanstock.catalog import ReferenceCatalog
from scanstock.scanner import MAX_CODE_LENGTH
from scanstock.scanner import core as scanner_core


A = "4006381333931"
B = "5449000000996"


def observe(client: TestClient, code, fmt: str = "EAN_13", present: bool = True) -> dict:
    response = client.post(
        "/api/v1/scan/observe",
        json={"present": present, "code": code, "format": fmt}
    )
    assert response.status_code == 200
    return response.json()


def create_product(client: TestClient, **overrides) -> dict:
    payload = {"barcode": A, "format": "EAN_13", "name": "Pencil", "price": 1.5, "quantity": 4}
    payload.update(overrides)
    response = client.post("/api/v1/products", json=payload)
    assert response.status_code == 201, response.text
    return response.json()["product"]


class TestHealthEndpoints:
    """Tests for health check endpoints."""

    def test_health_check(self, client: TestClient):
        """Test health check returns status."""
        response = client.get("/api/v1/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] in ["healthy", "degraded"]
        assert data["components"]["reference"] == "not_loaded"

    def test_health_reports_reference(self, client: TestClient, loaded_reference: ReferenceCatalog):
        data = client.get("/api/v1/health").json()
        assert data["components"]["reference"] == "healthy"
        assert data["details"]["reference_barcodes"] == 3

    def test_readiness_probe(self, client: TestClient):
        """Test readiness probe."""
        response = client.get("/api/v1/health/ready")
        assert response.status_code == 200
        assert response.json()["ready"] is True

    def test_liveness_probe(self, client: TestClient):
        """Test liveness probe."""
        response = client.get("/api/v1/health/live")
        assert response.status_code == 200
        assert response.json()["alive"] is True

    def test_root(self, client: TestClient):
        data = client.get("/").json()
        assert data["websocket"] == "/ws/scan"


class TestProductEndpoints:
    """Tests for inventory product endpoints."""

    def test_create_and_get(self, client: TestClient):
        product = create_product(client, shortcode="۱۲۳۴۵۶۷")
        assert product["shortcode"] == "1234567"
        assert product["format"] == "EAN_13"

        response = client.get(f"/api/v1/products/{product['id']}")
        assert response.status_code == 200
        assert response.json()["product"]["barcode"] == A

    def test_create_without_barcode(self, client: TestClient):
        """Test a manual product gets a generated barcode."""
        product = create_product(client, barcode=None, format=None)
        assert product["barcode"].startswith("MANUAL_")
        assert product["format"] == "MANUAL"

    def test_list(self, client: TestClient):
        create_product(client)
        create_product(client, barcode=B, name="Cola")

        data = client.get("/api/v1/products").json()
        assert data["success"] is True
        assert data["total"] == 2
        assert [p["name"] for p in data["products"]] == ["Pencil", "Cola"]

    def test_get_by_barcode(self, client: TestClient):
        create_product(client)
        response = client.get(f"/api/v1/products/barcode/{A}")
        assert response.status_code == 200
        assert response.json()["product"]["name"] == "Pencil"

    def test_get_by_barcode_missing(self, client: TestClient):
        response = client.get(f"/api/v1/products/barcode/{B}")
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "PRODUCT_NOT_FOUND"

    def test_invalid_shortcode(self, client: TestClient):
        response = client.post(
            "/api/v1/products",
            json={"name": "Pencil", "price": 1.0, "shortcode": "123"}
        )
        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "SHORTCODE_INVALID"
        assert "timestamp" in error

    def test_negative_price(self, client: TestClient):
        response = client.post("/api/v1/products", json={"name": "Pencil", "price": -2})
        assert response.status_code == 422
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_duplicate_barcode(self, client: TestClient):
        create_product(client)
        response = client.post(
            "/api/v1/products",
            json={"barcode": A, "name": "Again", "price": 1.0}
        )
        assert response.status_code == 409
        assert response.json()["error"]["code"] == "BARCODE_EXISTS"

    def test_update(self, client: TestClient):
        product = create_product(client)
        response = client.put(
            f"/api/v1/products/{product['id']}",
            json={"quantity": 9, "shortcode": "7654321"}
        )
        assert response.status_code == 200
        updated = response.json()["product"]
        assert updated["quantity"] == 9
        assert updated["shortcode"] == "7654321"
        assert updated["name"] == "Pencil"

    def test_delete(self, client: TestClient):
        product = create_product(client)
        response = client.delete(f"/api/v1/products/{product['id']}")
        assert response.status_code == 200
        assert response.json()["success"] is True

        assert client.get(f"/api/v1/products/{product['id']}").status_code == 404

    def test_manual_barcode_create(self, client: TestClient):
        response = client.post("/api/v1/products/manual-barcode", json={"barcode": "۵۴۴۹۰۰۰۰۰۰۹۹۶"})
        assert response.status_code == 200
        data = response.json()
        assert data["action"] == "create"
        assert data["draft"] == {"barcode": B, "format": "MANUAL"}
        assert data["product"] is None

    def test_manual_barcode_edit(self, client: TestClient):
        product = create_product(client)
        data = client.post("/api/v1/products/manual-barcode", json={"barcode": A}).json()
        assert data["action"] == "edit"
        assert data["product"]["id"] == product["id"]

    def test_manual_barcode_empty(self, client: TestClient):
        response = client.post("/api/v1/products/manual-barcode", json={"barcode": "  "})
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "BARCODE_REQUIRED"

    def test_manual_shortcode(self, client: TestClient):
        response = client.post(
            "/api/v1/products/manual-shortcode",
            json={"shortcode": "7654321", "name": "Milk"}
        )
        assert response.status_code == 201
        product = response.json()["product"]
        assert product["barcode"] == "SHORTCODE_7654321"
        assert product["format"] == "SHORTCODE"
        assert product["price"] == 0
        assert product["quantity"] == 1

    def test_manual_shortcode_duplicate(self, client: TestClient):
        client.post("/api/v1/products/manual-shortcode", json={"shortcode": "7654321", "name": "Milk"})
        response = client.post(
            "/api/v1/products/manual-shortcode",
            json={"shortcode": "7654321", "name": "Bread"}
        )
        assert response.status_code == 409
        assert response.json()["error"]["code"] == "SHORTCODE_EXISTS"


class TestScanEndpoints:
    """Tests for the shared scanning session."""

    def test_confirmation_sequence(self, client: TestClient, loaded_reference: ReferenceCatalog):
        """Test [A, A, A] confirms on the third observation."""
        assert observe(client, A)["status"] == "pending"
        assert observe(client, A)["status"] == "pending"

        data = observe(client, A)
        assert data["status"] == "found_in_reference"
        assert data["code"] == A
        assert data["format"] == "EAN_13"
        assert data["action"] == "create"
        assert data["draft"]["barcode"] == A

    def test_empty_reference(self, client: TestClient):
        """Test confirmations before any reference load are not in reference."""
        for _ in range(3):
            data = observe(client, B)
        assert data["status"] == "not_in_reference"

    def test_absent_frames(self, client: TestClient):
        data = observe(client, None, fmt=None, present=False)
        assert data["status"] == "pending"
        assert data["code"] is None

    def test_duplicate_offers_edit(self, client: TestClient):
        product = create_product(client, barcode=B)
        for _ in range(3):
            observe(client, B)
        for _ in range(3):
            data = observe(client, B)

        assert data["status"] == "already_scanned"
        assert data["action"] == "edit"
        assert data["product"]["id"] == product["id"]

    def test_invalid_format(self, client: TestClient):
        response = client.post("/api/v1/scan/observe", json={"code": A, "format": "QR_CODE"})
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_FORMAT"

    def test_long_scan_draft_can_be_saved(self, client: TestClient):
        """Test the draft offered for the longest accepted code is storable."""
        code = "7" * MAX_CODE_LENGTH
        for _ in range(3):
            data = observe(client, code, fmt="CODE_128")

        assert data["action"] == "create"
        product = create_product(client, **data["draft"], name="Cable", price=2.0)
        assert product["barcode"] == code
        assert product["format"] == "CODE_128"

    def test_overlong_code_rejected(self, client: TestClient):
        """Test codes too long to store never enter the session."""
        response = client.post(
            "/api/v1/scan/observe",
            json={"code": "7" * (MAX_CODE_LENGTH + 1), "format": "CODE_128"}
        )
        assert response.status_code == 422
        assert client.get("/api/v1/scan/state").json()["window"] == []

    def test_blank_code_is_absent(self, client: TestClient):
        for _ in range(3):
            data = observe(client, "   ", fmt="CODE_128")
        assert data["status"] == "pending"
        assert client.get("/api/v1/scan/state").json()["window"] == []

    def test_state_and_reset(self, client: TestClient):
        for _ in range(3):
            observe(client, A)
        observe(client, B)

        state = client.get("/api/v1/scan/state").json()
        assert state["required_frames"] == 3
        assert state["window"] == [B]
        assert state["accepted"] == [A]
        assert state["stats"]["confirmations"] == 1
        assert state["reference_loaded"] is False

        assert client.post("/api/v1/scan/reset").status_code == 200
        state = client.get("/api/v1/scan/state").json()
        assert state["window"] == []
        assert state["accepted"] == []


class TestReferenceEndpoints:
    """Tests for reference set endpoints."""

    def test_status(self, client: TestClient, loaded_reference: ReferenceCatalog):
        data = client.get("/api/v1/reference").json()
        assert data["stats"]["loaded"] is True
        assert data["stats"]["total_barcodes"] == 3

    def test_lookup(self, client: TestClient, loaded_reference: ReferenceCatalog):
        assert client.get(f"/api/v1/reference/{A}").json()["in_reference"] is True
        assert client.get("/api/v1/reference/000").json()["in_reference"] is False

    def test_reload(self, client: TestClient, loaded_reference: ReferenceCatalog, make_reference):
        """Test reload re-reads the configured source."""
        make_reference(["111", "222"], name="bigdb.json")
        response = client.post("/api/v1/reference/reload")

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["stats"]["total_barcodes"] == 2
        assert client.get("/api/v1/reference/111").json()["in_reference"] is True

    def test_reload_ignores_client_source(
        self,
        client: TestClient,
        loaded_reference: ReferenceCatalog,
        reference_file,
        make_reference
    ):
        """Test a source in the request body cannot redirect the load."""
        other = make_reference(["999"], name="other.json")
        response = client.post("/api/v1/reference/reload", json={"source": str(other)})

        assert response.status_code == 200
        data = response.json()
        assert data["stats"]["source"] == str(reference_file)
        assert data["stats"]["total_barcodes"] == 3
        assert client.get("/api/v1/reference/999").json()["in_reference"] is False

    def test_failed_reload_keeps_set(self, client: TestClient, loaded_reference: ReferenceCatalog, reference_file):
        reference_file.unlink()
        data = client.post("/api/v1/reference/reload").json()

        assert data["success"] is False
        assert data["stats"]["total_barcodes"] == 3
        assert data["stats"]["last_error"] is not None


class TestScannerWebSocket:
    """Tests for the /ws/scan protocol."""

    def test_code_messages(self, client: TestClient, loaded_reference: ReferenceCatalog):
        """Test client-decoded codes produce one classification per confirmation."""
        with client.websocket_connect("/ws/scan") as ws:
            ready = ws.receive_json()
            assert ready["type"] == "ready"
            assert ready["required_frames"] == 3
            assert ready["reference_loaded"] is True

            for _ in range(3):
                ws.send_json({"type": "code", "code": A, "format": "ean_13"})

            message = ws.receive_json()
            assert message["type"] == "classification"
            assert message["status"] == "found_in_reference"
            assert message["code"] == A
            assert message["action"] == "create"

            ws.send_json({"type": "stop"})

    def test_sessions_are_per_connection(self, client: TestClient):
        """Test a new connection does not remember earlier confirmations."""
        for _ in range(2):
            with client.websocket_connect("/ws/scan") as ws:
                ws.receive_json()
                for _ in range(3):
                    ws.send_json({"type": "code", "code": B})
                assert ws.receive_json()["status"] == "not_in_reference"
                ws.send_json({"type": "stop"})

    def test_reset(self, client: TestClient):
        with client.websocket_connect("/ws/scan") as ws:
            ws.receive_json()
            ws.send_json({"type": "code", "code": B})
            ws.send_json({"type": "reset"})
            assert ws.receive_json() == {"type": "reset"}

            for _ in range(3):
                ws.send_json({"type": "code", "code": B})
            assert ws.receive_json()["status"] == "not_in_reference"
            ws.send_json({"type": "stop"})

    def test_blank_code_is_absent(self, client: TestClient):
        """Test whitespace-only codes never fill the window."""
        with client.websocket_connect("/ws/scan") as ws:
            ws.receive_json()
            for _ in range(3):
                ws.send_json({"type": "code", "code": "   ", "format": "CODE_128"})
            ws.send_json({"type": "reset"})
            assert ws.receive_json() == {"type": "reset"}
            ws.send_json({"type": "stop"})

    def test_code_is_stripped(self, client: TestClient):
        with client.websocket_connect("/ws/scan") as ws:
            ws.receive_json()
            for code in (B, f" {B}", f"{B}\n"):
                ws.send_json({"type": "code", "code": code})
            message = ws.receive_json()
            assert message["code"] == B
            ws.send_json({"type": "stop"})

    def test_frame_message(self, client: TestClient, monkeypatch):
        """Test base64 frames are decoded and confirmed."""
        class FakeBarcode:
            data = A.encode()
            type = "EAN13"
            rect = (0, 0, 10, 10)

        monkeypatch.setattr(scanner_core, "decode", lambda image: [FakeBarcode()])

        ok, buffer = cv2.imencode(".png", np.full((40, 40, 3), 255, dtype=np.uint8))
        frame = base64.b64encode(buffer.tobytes()).decode("ascii")

        with client.websocket_connect("/ws/scan") as ws:
            ws.receive_json()
            for _ in range(3):
                ws.send_json({"type": "frame", "frame": frame})
            message = ws.receive_json()
            assert message["status"] == "not_in_reference"
            assert message["format"] == "EAN_13"
            ws.send_json({"type": "stop"})

    @pytest.mark.parametrize("message, code", [
        ({"type": "frame", "frame": "@@@"}, "INVALID_FRAME"),
        ({"type": "code", "code": A, "format": "QR"}, "INVALID_FORMAT"),
        ({"type": "frame", "frame": 123}, "INVALID_MESSAGE"),
        ({"type": "frame"}, "INVALID_MESSAGE"),
        ({"type": "code", "code": 123}, "INVALID_MESSAGE"),
        ({"type": "code", "code": "1" * (MAX_CODE_LENGTH + 1)}, "INVALID_MESSAGE"),
        ({"type": "dance"}, "INVALID_MESSAGE"),
    ])
    def test_errors(self, client: TestClient, message: dict, code: str):
        with client.websocket_connect("/ws/scan") as ws:
            ws.receive_json()
            ws.send_json(message)
            error = ws.receive_json()
            assert error["type"] == "error"
            assert error["code"] == code
            ws.send_json({"type": "stop"})

    def test_invalid_json(self, client: TestClient):
        with client.websocket_connect("/ws/scan") as ws:
            ws.receive_json()
            ws.send_text("not json")
            assert ws.receive_json()["code"] == "INVALID_MESSAGE"
            ws.send_json({"type": "stop"})
