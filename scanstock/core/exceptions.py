"""
Application Exception Handling

Single AppException class for all application errors with FastAPI integration.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse


class AppException(Exception):
    """
    Unified application exception for all error scenarios.

    Provides consistent error response format across the entire API.

    Usage:
        raise AppException("Product not found", "PRODUCT_NOT_FOUND", 404)
        raise AppException("Shortcode in use", "SHORTCODE_EXISTS", 409, {"shortcode": "1234567"})

    Error Codes:
        Inventory:
            - PRODUCT_NOT_FOUND (404)
            - BARCODE_REQUIRED (400)
            - BARCODE_EXISTS (409)
            - SHORTCODE_INVALID (400)
            - SHORTCODE_EXISTS (409)
            - PRODUCT_CONFLICT (409)

        Scanning:
            - INVALID_FORMAT (400)

        General:
            - VALIDATION_ERROR (422)
            - INTERNAL_ERROR (500)
    """

    def __init__(
        self,
        message: str,
        code: str,
        status_code: int = 400,
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize application exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code (e.g., "PRODUCT_NOT_FOUND")
            status_code: HTTP status code (default: 400)
            details: Additional error context (optional)
        """
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        self.timestamp = datetime.utcnow().isoformat()
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for JSON response."""
        error_dict = {
            "success": False,
            "error": {
                "code": self.code,
                "message": self.message,
                "timestamp": self.timestamp
            }
        }

        if self.details:
            error_dict["error"]["details"] = self.details

        return error_dict


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """
    FastAPI exception handler for AppException.

    Converts AppException to consistent JSON error response.
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register all exception handlers with FastAPI app.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(AppException, app_exception_handler)


# ============================================
# CONVENIENCE FACTORY FUNCTIONS
# ============================================

def product_not_found(product_id: Optional[Any] = None) -> AppException:
    """Create product not found exception."""
    details = {"product_id": product_id} if product_id is not None else {}
    return AppException("Product not found", "PRODUCT_NOT_FOUND", 404, details)


def barcode_not_found(barcode: str) -> AppException:
    """Create product-by-barcode not found exception."""
    return AppException(
        f"No product with barcode '{barcode}'",
        "PRODUCT_NOT_FOUND",
        404,
        {"barcode": barcode}
    )


def barcode_required(message: str = "Please enter barcode") -> AppException:
    """Create missing barcode exception."""
    return AppException(message, "BARCODE_REQUIRED", 400)


def barcode_exists(barcode: str) -> AppException:
    """Create duplicate barcode exception."""
    return AppException(
        f"Barcode '{barcode}' already exists",
        "BARCODE_EXISTS",
        409,
        {"barcode": barcode}
    )


def shortcode_invalid(reason: str) -> AppException:
    """Create invalid shortcode exception."""
    return AppException(reason, "SHORTCODE_INVALID", 400, {"reason": reason})


def shortcode_exists(shortcode: str) -> AppException:
    """Create shortcode already used exception."""
    return AppException(
        "Shortcode already used by another product",
        "SHORTCODE_EXISTS",
        409,
        {"shortcode": shortcode}
    )


def product_conflict() -> AppException:
    """Create uniqueness conflict exception (barcode or shortcode)."""
    return AppException(
        "Product conflicts with an existing record",
        "PRODUCT_CONFLICT",
        409
    )


def invalid_format(value: str) -> AppException:
    """Create unsupported barcode format exception."""
    return AppException(
        f"Unsupported barcode format: {value}",
        "INVALID_FORMAT",
        400,
        {"format": value}
    )


def validation_error(message: str, field: Optional[str] = None) -> AppException:
    """Create validation error exception."""
    details = {"field": field} if field else {}
    return AppException(message, "VALIDATION_ERROR", 422, details)
