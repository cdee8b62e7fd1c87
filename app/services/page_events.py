"""Page change notifications

Registre pub/sub en mémoire, clé = id de page. Pas de file durable:
un handler enregistré après un emit() ne verra jamais cet événement.
Les emits viennent des routes synchrones (threadpool de FastAPI), les
abonnés SSE vivent dans la boucle asyncio: le pont passe par une
asyncio.Queue alimentée avec call_soon_threadsafe.
"""

import asyncio
import json
import logging
import threading
from datetime import datetime
from typing import AsyncIterator, Awaitable, Callable, Dict, Optional, Set, Union

logger = logging.getLogger(__name__)

PageEvent = Dict[str, str]
Handler = Callable[[PageEvent], None]


class PageEventHub:
    def __init__(self):
        self._listeners: Dict[str, Set[Handler]] = {}
        self._lock = threading.Lock()

    def subscribe(self, page_id: str, handler: Handler) -> Callable[[], None]:
        with self._lock:
            self._listeners.setdefault(page_id, set()).add(handler)
        logger.debug("Subscribed to page", extra={"event": "page_subscribe", "page_id": page_id})

        def unsubscribe():
            # idempotent: un second appel ne fait rien
            with self._lock:
                handlers = self._listeners.get(page_id)
                if handlers is None or handler not in handlers:
                    return
                handlers.discard(handler)
                if not handlers:
                    del self._listeners[page_id]
            logger.debug("Unsubscribed from page", extra={"event": "page_unsubscribe", "page_id": page_id})

        return unsubscribe

    def emit(self, page_id: str, updated_at: Union[datetime, str]) -> int:
        if isinstance(updated_at, datetime):
            updated_at = updated_at.isoformat()
        with self._lock:
            handlers = list(self._listeners.get(page_id, ()))

        event = {"pageId": page_id, "updatedAt": updated_at}
        delivered = 0
        for handler in handlers:
            try:
                handler(event)
                delivered += 1
            except Exception:
                logger.exception("Page event handler failed", extra={"page_id": page_id})
        return delivered

    def subscriber_count(self, page_id: str) -> int:
        with self._lock:
            return len(self._listeners.get(page_id, ()))

    def open_channel(self, page_id: str, loop: Optional[asyncio.AbstractEventLoop] = None) -> "PageChannel":
        """Abonnement sous forme de file: à appeler depuis la boucle qui lira la file."""
        loop = loop or asyncio.get_running_loop()
        queue: asyncio.Queue = asyncio.Queue()

        def push(event: PageEvent):
            loop.call_soon_threadsafe(queue.put_nowait, event)

        return PageChannel(page_id, queue, self.subscribe(page_id, push))


class PageChannel:
    def __init__(self, page_id: str, queue: asyncio.Queue, unsubscribe: Callable[[], None]):
        self.page_id = page_id
        self._queue = queue
        self._unsubscribe = unsubscribe

    async def get(self) -> PageEvent:
        return await self._queue.get()

    def close(self):
        self._unsubscribe()


def format_sse(data: dict) -> str:
    return f"data: {json.dumps(data)}\n\n"


HEARTBEAT_FRAME = ": heartbeat\n\n"

# instance unique du process
page_events = PageEventHub()


async def page_event_stream(
    page_id: str,
    is_disconnected: Callable[[], Awaitable[bool]],
    keepalive_seconds: float = 30.0,
    hub: Optional[PageEventHub] = None,
) -> AsyncIterator[str]:
    """Frames SSE pour une connexion: connected, puis update à chaque emit,
    et un heartbeat toutes les `keepalive_seconds` indépendamment des emits."""
    loop = asyncio.get_running_loop()
    channel = (hub or page_events).open_channel(page_id, loop)
    next_heartbeat = loop.time() + keepalive_seconds
    try:
        yield format_sse({"type": "connected", "pageId": page_id})
        while not await is_disconnected():
            timeout = max(next_heartbeat - loop.time(), 0)
            try:
                event = await asyncio.wait_for(channel.get(), timeout=timeout)
            except asyncio.TimeoutError:
                next_heartbeat += keepalive_seconds
                yield HEARTBEAT_FRAME
                continue
            yield format_sse({"type": "update", **event})
    finally:
        # fermeture du client (ou annulation par starlette): on se désabonne
        channel.close()
