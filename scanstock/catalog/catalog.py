"""
==============================================================================
Reference Catalog Module
==============================================================================

Reference barcode set ("BigDB") loaded from a JSON document.

Features:
---------
- Local file or http(s) URL sources
- Pydantic validation of the document shape
- Failed loads never raise: the current set is kept (empty before the
  first successful load) and the error is recorded
- Atomic swap of an immutable frozenset, so readers never see a partial set
- Synchronous load() and thread-offloaded load_async()

JSON Structure:
--------------
{
  "barcodes": ["4006381333931", "5449000000996", ...]
}

==============================================================================
"""

from __future__ import annotations

import asyncio
import json
import logging
import threading
from datetime import datetime
from pathlib import Path
from typing import FrozenSet, Iterator, Optional

import requests

from .models import ReferenceDocument, ReferenceStats


# Module logger
logger = logging.getLogger(__name__)


class ReferenceCatalog:
    """
    Read-only membership set of reference barcodes.

    Supports the container protocol, so it can be handed directly to a
    ScanConfirmationEngine as its reference.

    Example:
        >>> catalog = ReferenceCatalog("data/bigdb.json")
        >>> catalog.load()
        True
        >>> "4006381333931" in catalog
        True
    """

    def __init__(self, source: str, timeout: float = 10.0) -> None:
        """
        Initialize an empty catalog.

        Args:
            source: Local path or http(s) URL of the reference document
            timeout: HTTP timeout in seconds for remote sources
        """
        self._source = source
        self._timeout = timeout
        self._codes: FrozenSet[str] = frozenset()
        self._loaded = False
        self._loaded_at: Optional[datetime] = None
        self._last_error: Optional[str] = None
        self._load_attempts = 0
        self._load_lock = threading.Lock()

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def source(self) -> str:
        return self._source

    @property
    def is_loaded(self) -> bool:
        """True once a load has succeeded."""
        return self._loaded

    @property
    def last_error(self) -> Optional[str]:
        return self._last_error

    # =========================================================================
    # CONTAINER PROTOCOL
    # =========================================================================

    def __contains__(self, code: object) -> bool:
        return code in self._codes

    def __len__(self) -> int:
        return len(self._codes)

    def __iter__(self) -> Iterator[str]:
        return iter(self._codes)

    def contains(self, code: str) -> bool:
        """Check whether a code is in the reference set."""
        return code in self._codes

    # =========================================================================
    # LOADING
    # =========================================================================

    @staticmethod
    def is_remote(source: str) -> bool:
        return source.lower().startswith(("http://", "https://"))

    def _read(self, source: str) -> str:
        """Read the raw document text from a file or URL."""
        if self.is_remote(source):
            response = requests.get(source, timeout=self._timeout)
            response.raise_for_status()
            return response.text

        return Path(source).read_text(encoding="utf-8")

    def load(self, source: Optional[str] = None) -> bool:
        """
        Load the reference set.

        Args:
            source: Override source; becomes the catalog source on success

        Returns:
            True on success, False if the load failed
        """
        source = source or self._source

        with self._load_lock:
            self._load_attempts += 1

            try:
                document = ReferenceDocument.model_validate(json.loads(self._read(source)))
            except (OSError, ValueError, requests.RequestException) as e:
                # ValueError covers JSONDecodeError and pydantic ValidationError
                self._last_error = f"{type(e).__name__}: {e}"
                logger.error(f"❌ Reference load failed ({source}): {self._last_error}")
                return False

            self._codes = frozenset(document.barcodes)
            self._source = source
            self._loaded = True
            self._loaded_at = datetime.utcnow()
            self._last_error = None

        logger.info(f"✅ Loaded {len(self._codes)} reference barcodes from {source}")
        return True

    async def load_async(self, source: Optional[str] = None) -> bool:
        """Run load() in a worker thread."""
        return await asyncio.to_thread(self.load, source)

    def clear(self) -> None:
        """Drop the reference set (back to the not-loaded state)."""
        with self._load_lock:
            self._codes = frozenset()
            self._loaded = False
            self._loaded_at = None
        logger.info("Reference set cleared")

    # =========================================================================
    # UTILITY METHODS
    # =========================================================================

    def get_stats(self) -> ReferenceStats:
        """Get catalog status."""
        return ReferenceStats(
            source=self._source,
            loaded=self._loaded,
            total_barcodes=len(self._codes),
            load_attempts=self._load_attempts,
            loaded_at=self._loaded_at.isoformat() if self._loaded_at else None,
            last_error=self._last_error,
        )

    def __repr__(self) -> str:
        return f"ReferenceCatalog(source={self._source!r}, barcodes={len(self._codes)})"


# =============================================================================
# SINGLETON INSTANCE MANAGEMENT
# =============================================================================

_catalog_instance: Optional[ReferenceCatalog] = None


def get_reference_catalog() -> ReferenceCatalog:
    """
    Get the global reference catalog, creating an empty one from settings
    on first access.
    """
    global _catalog_instance
    if _catalog_instance is None:
        from scanstock.config import get_settings

        settings = get_settings()
        _catalog_instance = ReferenceCatalog(
            settings.reference_source,
            timeout=settings.reference_timeout_seconds
        )
    return _catalog_instance


def init_reference_catalog(source: str, timeout: float = 10.0) -> ReferenceCatalog:
    """
    Replace the global reference catalog with a new, empty one.

    Args:
        source: Local path or http(s) URL of the reference document
        timeout: HTTP timeout for remote sources

    Returns:
        ReferenceCatalog instance (not yet loaded)
    """
    global _catalog_instance
    _catalog_instance = ReferenceCatalog(source, timeout=timeout)
    return _catalog_instance
