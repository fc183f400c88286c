# motowash/services/sync_adapter.py
"""
Sync Adapter: the boundary between the in-memory store and the durable
key-value blob store.

  load_all()                   one-shot fetch at startup; any failure yields
                               empty collections so the shop keeps working
  persist(collection, items)   full-snapshot overwrite of one collection;
                               raises PersistenceFailure, never retries

HttpSyncAdapter talks to GET /api/data + POST /api/sync of a remote backend.
KvSyncAdapter writes straight into the local kv_store table.
"""

import asyncio
from typing import Optional

import httpx
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from motowash.config import settings
from motowash.database import SessionLocal
from motowash.exceptions import PersistenceFailure
from motowash.schemas.entities import ENTITY_TYPES, CollectionName, StoreSnapshot
from motowash.services.kv_service import read_all_collections, write_collection
from motowash.utils.logger import get_logger

logger = get_logger(__name__)

_SNAPSHOT_FIELDS = {
    CollectionName.MOTOS: "vehicles",
    CollectionName.WORKERS: "workers",
    CollectionName.SERVICES: "services",
    CollectionName.WORKSHOPS: "workshops",
    CollectionName.EXPENSES: "expenses",
}


def parse_snapshot(payload: dict) -> StoreSnapshot:
    """
    Parse the five wire arrays item by item. A malformed item is logged and
    kept aside in `unparsed`, so one bad record cannot empty a whole
    collection and the next full-collection write still carries it.
    """
    parsed = {}
    unparsed = {}
    for name, field in _SNAPSHOT_FIELDS.items():
        model = ENTITY_TYPES[name]
        items = []
        for raw in payload.get(name.value) or []:
            try:
                items.append(model.model_validate(raw))
            except ValidationError as e:
                logger.warning(f"[SYNC] Keeping unreadable {name.value} item as-is {raw!r}: {e.error_count()} error(s)")
                unparsed.setdefault(name.value, []).append(raw)
        parsed[field] = items
    return StoreSnapshot(**parsed, unparsed=unparsed)


class SyncAdapter:
    """Base adapter. Subclasses implement _fetch() and persist()."""

    async def load_all(self) -> StoreSnapshot:
        try:
            payload = await self._fetch()
        except Exception as e:
            logger.error(f"[SYNC] Initial load failed, starting with empty data: {e}", exc_info=True)
            return StoreSnapshot()
        if not isinstance(payload, dict):
            logger.error(f"[SYNC] Initial load returned {type(payload).__name__}, expected an object")
            return StoreSnapshot()
        snapshot = parse_snapshot(payload)
        logger.info(f"[SYNC] Loaded {len(snapshot.vehicles)} vehicles from {self}")
        return snapshot

    async def _fetch(self) -> dict:
        raise NotImplementedError

    async def persist(self, collection: CollectionName, data: list[dict]):
        raise NotImplementedError


class HttpSyncAdapter(SyncAdapter):
    def __init__(self, base_url: str, api_key: Optional[str] = None,
                 timeout: float = settings.SYNC_TIMEOUT_SECONDS,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._headers = {"Authorization": f"Bearer {api_key}"} if api_key else {}
        self._transport = transport

    def __str__(self):
        return self.base_url

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=self.base_url, headers=self._headers,
                                 timeout=self.timeout, transport=self._transport)

    async def _fetch(self) -> dict:
        async with self._client() as client:
            response = await client.get("/api/data")
            response.raise_for_status()
            return response.json()

    async def persist(self, collection: CollectionName, data: list[dict]):
        name = CollectionName(collection).value
        try:
            async with self._client() as client:
                response = await client.post("/api/sync", json={"type": name, "data": data})
        except httpx.HTTPError as e:
            raise PersistenceFailure(name, f"{type(e).__name__}: {e}") from e

        if response.status_code != 200:
            raise PersistenceFailure(name, f"HTTP {response.status_code}", status_code=response.status_code)
        try:
            ok = response.json().get("success") is True
        except ValueError:
            ok = False
        if not ok:
            raise PersistenceFailure(name, "server did not confirm the write", status_code=200)
        logger.debug(f"[SYNC] {name}: {len(data)} items pushed to {self.base_url}")


class KvSyncAdapter(SyncAdapter):
    """Same-process store: SQLAlchemy calls run in a worker thread."""

    def __init__(self, session_factory=SessionLocal):
        self._session_factory = session_factory

    def __str__(self):
        return "local kv_store"

    def _read(self) -> dict:
        db = self._session_factory()
        try:
            return read_all_collections(db)
        finally:
            db.close()

    def _write(self, collection: CollectionName, data: list[dict]):
        db = self._session_factory()
        try:
            write_collection(db, collection, data)
        finally:
            db.close()

    async def _fetch(self) -> dict:
        return await asyncio.to_thread(self._read)

    async def persist(self, collection: CollectionName, data: list[dict]):
        try:
            await asyncio.to_thread(self._write, collection, data)
        except SQLAlchemyError as e:
            raise PersistenceFailure(CollectionName(collection).value, str(e)) from e


def build_sync_adapter() -> SyncAdapter:
    if settings.SYNC_BASE_URL:
        return HttpSyncAdapter(settings.SYNC_BASE_URL, api_key=settings.STORE_API_KEY)
    return KvSyncAdapter()
