"""
==============================================================================
Reference Loader Module
==============================================================================

Background loading of the reference barcode set.

This module implements:
- ReferenceLoadTaskManager: asyncio task that loads the ReferenceCatalog

Background Task:
---------------
The application starts serving immediately. The task:
1. Loads the reference document (file read or HTTP fetch in a worker thread)
2. On failure, waits reference_retry_seconds and tries again
3. Exits after the first successful load

Scans classified before the load completes see an empty reference and are
reported NOT_IN_REFERENCE.

==============================================================================
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from .catalog import ReferenceCatalog, get_reference_catalog
from scanstock.config import get_settings


# Module logger
logger = logging.getLogger(__name__)


class ReferenceLoadTaskManager:
    """
    Manager for the background reference load task.

    Example:
        >>> manager = ReferenceLoadTaskManager()
        >>> manager.start()  # Start background task
        >>> # ... application runs ...
        >>> manager.stop()   # Stop on shutdown
    """

    def __init__(
        self,
        catalog: Optional[ReferenceCatalog] = None,
        retry_seconds: Optional[float] = None
    ) -> None:
        """
        Initialize the task manager.

        Args:
            catalog: Catalog to load (global catalog if None)
            retry_seconds: Delay between failed attempts (settings if None)
        """
        settings = get_settings()
        self._catalog = catalog if catalog is not None else get_reference_catalog()
        self._retry_seconds = (
            retry_seconds if retry_seconds is not None
            else settings.reference_retry_seconds
        )
        self._task: Optional[asyncio.Task] = None
        self._running = False

    @property
    def catalog(self) -> ReferenceCatalog:
        return self._catalog

    async def _load_loop(self) -> None:
        """Load until the first success."""
        logger.info(f"🔄 Reference load task started ({self._catalog.source})")

        while self._running:
            try:
                if await self._catalog.load_async():
                    break

                logger.warning(
                    f"Reference not loaded, retrying in {self._retry_seconds}s"
                )
                await asyncio.sleep(self._retry_seconds)

            except asyncio.CancelledError:
                logger.info("🛑 Reference load task cancelled")
                raise
            except Exception as e:
                logger.error(f"Reference load task error: {e}")
                await asyncio.sleep(self._retry_seconds)

        self._running = False

    def start(self) -> asyncio.Task:
        """
        Start the background load task.

        Returns:
            The asyncio Task object
        """
        if self._task is None or self._task.done():
            self._running = True
            self._task = asyncio.create_task(self._load_loop())
            logger.info("✅ Reference load task scheduled")
        return self._task

    def stop(self) -> None:
        """Stop the background load task."""
        self._running = False
        if self._task and not self._task.done():
            self._task.cancel()
            logger.info("🛑 Reference load task stopped")

    @property
    def is_running(self) -> bool:
        """Check if task is running."""
        return self._running and self._task is not None and not self._task.done()
