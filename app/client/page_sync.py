"""
Client-side page list reconciliation.

Polls GET /pages every `interval` seconds and replaces the local list
wholesale whenever the id:updatedAt fingerprint changes. Ticks are skipped
(not queued) while the client is hidden.
"""

import asyncio
import logging
from typing import Any, Callable, Dict, List, Optional

import httpx

from app.core.config import settings

logger = logging.getLogger(__name__)

PageDict = Dict[str, Any]


class PageSyncError(Exception):
    """Page list could not be fetched."""

    pass


def fingerprint(pages: List[PageDict]) -> str:
    """Sorted, comma-joined `id:updatedAt` pairs."""
    return ",".join(sorted(f"{p['id']}:{p['updatedAt']}" for p in pages))


class PageSync:
    """Keeps a local copy of the workspace page list in sync with the server."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        interval: Optional[float] = None,
        is_visible: Optional[Callable[[], bool]] = None,
        on_change: Optional[Callable[[List[PageDict]], None]] = None,
        initial_pages: Optional[List[PageDict]] = None,
    ):
        self.client = client
        self.interval = settings.SYNC_INTERVAL_SECONDS if interval is None else interval
        self.is_visible = is_visible or (lambda: True)
        self.on_change = on_change
        self.pages: List[PageDict] = list(initial_pages or [])
        self.last_fingerprint = fingerprint(self.pages)
        self.running = False
        self.task: Optional[asyncio.Task] = None

    async def fetch_pages(self) -> List[PageDict]:
        try:
            response = await self.client.get("/pages")
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            raise PageSyncError(f"Failed to fetch pages: {e}") from e
        except ValueError as e:
            raise PageSyncError(f"Invalid page list payload: {e}") from e

        if isinstance(data, dict):
            data = data.get("pages", [])
        if not isinstance(data, list):
            raise PageSyncError("Invalid page list payload")
        return data

    async def tick(self) -> bool:
        """Run one reconciliation pass. Returns True if the local list was replaced."""
        if not self.is_visible():
            return False

        try:
            pages = await self.fetch_pages()
            current = fingerprint(pages)
        except (PageSyncError, KeyError, TypeError) as e:
            # erreur transitoire: on réessaiera au prochain tick
            logger.warning(f"Page sync tick failed: {e}")
            return False

        if current == self.last_fingerprint:
            return False

        self.pages = pages
        self.last_fingerprint = current
        logger.debug(f"Page list changed, {len(pages)} pages")
        if self.on_change:
            self.on_change(pages)
        return True

    async def run(self) -> None:
        self.running = True
        while self.running:
            await self.tick()
            await asyncio.sleep(self.interval)

    async def start(self) -> None:
        if self.task is not None and not self.task.done():
            return
        self.task = asyncio.create_task(self.run())
        logger.info("Page sync started")

    async def stop(self) -> None:
        self.running = False
        if self.task is not None:
            self.task.cancel()
            try:
                await self.task
            except asyncio.CancelledError:
                pass
            self.task = None
        logger.info("Page sync stopped")


def create_page_sync(base_url: str, token: str, **kwargs) -> PageSync:
    """Build a PageSync with an authenticated httpx client."""
    client = httpx.AsyncClient(
        base_url=base_url,
        headers={"Authorization": f"Bearer {token}"},
        timeout=10.0,
    )
    return PageSync(client, **kwargs)
