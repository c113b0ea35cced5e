"""
==============================================================================
Core Package
==============================================================================

Core utilities and infrastructure for the application.

Modules:
--------
- exceptions: AppException class and error factory functions
- dependencies: FastAPI dependency injection functions

Usage:
------
    from scanstock.core import AppException

    # Or use exception factory functions via module
    from scanstock.core import exceptions
    raise exceptions.product_not_found(42)

FastAPI dependencies live in scanstock.core.dependencies.

==============================================================================
"""

from .exceptions import (
    AppException,
    register_exception_handlers,
)

__all__ = [
    "AppException",
    "register_exception_handlers",
]
