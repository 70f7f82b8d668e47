"""
Ordered single-reader channel carrying audit events to one client
"""
import asyncio
import logging

from models import AuditEvent

logger = logging.getLogger(__name__)

_CLOSED = object()

class ProgressChannel:
    """Append-only event queue written by the auditor and read by one consumer"""

    def __init__(self):
        self._queue = asyncio.Queue()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def publish(self, event: AuditEvent):
        """Append an event; publishing after close is a programming error"""
        if self._closed:
            raise RuntimeError("Cannot publish to a closed progress channel")
        logger.debug(f"Publishing {event.kind} event")
        await self._queue.put(event)

    def close(self):
        """Mark the end of the stream; later calls have no effect"""
        if self._closed:
            return
        self._closed = True
        self._queue.put_nowait(_CLOSED)

    def __aiter__(self):
        return self._events()

    async def _events(self):
        while True:
            item = await self._queue.get()
            if item is _CLOSED:
                return
            yield item
