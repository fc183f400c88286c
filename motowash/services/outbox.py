# motowash/services/outbox.py
"""
Outbox for optimistic, local-first mutations.

Every accepted mutation calls enqueue() with the full post-mutation
collection. The payload is serialized right away, then delivered by a
background task so the caller never waits on the network. Deliveries for
one collection run one at a time; a snapshot that has been superseded by a
newer one before its turn is dropped, since the newer one carries everything.

A failed delivery is logged and surfaced through the Notifier. The in-memory
store is never rolled back.
"""

import asyncio
from typing import Iterable

from motowash.exceptions import PersistenceFailure
from motowash.schemas.entities import CollectionName, WireModel
from motowash.services.notification_service import Notifier
from motowash.services.sync_adapter import SyncAdapter
from motowash.utils.logger import get_logger

logger = get_logger(__name__)


class Outbox:
    def __init__(self, adapter: SyncAdapter, notifier: Notifier):
        self.adapter = adapter
        self.notifier = notifier
        self.failures = 0
        self._tasks: set[asyncio.Task] = set()
        self._locks: dict[CollectionName, asyncio.Lock] = {}
        self._latest: dict[CollectionName, int] = {}

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def enqueue(self, collection: CollectionName, items: list[WireModel], passthrough: Iterable = ()):
        """`passthrough` holds raw items the loader could not read; they are sent back unchanged."""
        collection = CollectionName(collection)
        payload = [item.to_wire() for item in items] + list(passthrough)
        seq = self._latest.get(collection, 0) + 1
        self._latest[collection] = seq

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # Called from plain sync code (scripts): deliver inline
            asyncio.run(self._deliver(collection, payload, seq))
            return

        task = loop.create_task(self._deliver(collection, payload, seq))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _deliver(self, collection: CollectionName, payload: list[dict], seq: int):
        lock = self._locks.setdefault(collection, asyncio.Lock())
        async with lock:
            if seq < self._latest[collection]:
                logger.debug(f"[SYNC] {collection.value} #{seq} superseded by #{self._latest[collection]}")
                return
            try:
                await self.adapter.persist(collection, payload)
            except PersistenceFailure as e:
                self._report(e)
            except Exception as e:
                logger.error(f"[SYNC] Unexpected error persisting {collection.value}: {e}", exc_info=True)
                self._report(PersistenceFailure(collection.value, str(e)))

    def _report(self, failure: PersistenceFailure):
        self.failures += 1
        logger.warning(f"[SYNC] {failure}; local state kept")
        self.notifier.error(f"Error guardando {failure.collection} en la nube")

    async def flush(self):
        """Wait for every delivery queued so far (shutdown, tests)."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))
