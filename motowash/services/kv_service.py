# motowash/services/kv_service.py
"""
Key-value blob store helpers over the kv_store table.
Values are opaque JSON; the store never looks inside a collection.
"""

from datetime import datetime
from typing import Any, Optional
from sqlalchemy.orm import Session
from motowash.config import settings
from motowash.models.kv_entry import KvEntry
from motowash.schemas.entities import CollectionName
from motowash.utils.logger import get_logger

logger = get_logger(__name__)


def collection_key(name: CollectionName) -> str:
    return f"{settings.KV_KEY_PREFIX}{CollectionName(name).value}"


def kv_get(db: Session, key: str) -> Optional[Any]:
    row = db.query(KvEntry).filter(KvEntry.key == key).first()
    return row.value if row else None


def kv_set(db: Session, key: str, value: Any):
    """Upsert one key. Always commits immediately."""
    row = db.query(KvEntry).filter(KvEntry.key == key).first()
    if row is None:
        db.add(KvEntry(key=key, value=value, updated_at=datetime.utcnow()))
    else:
        row.value = value
        row.updated_at = datetime.utcnow()
    db.commit()


def read_all_collections(db: Session) -> dict[str, list]:
    """Every collection keyed by its wire name; missing keys read as []."""
    keys = {collection_key(name): name.value for name in CollectionName}
    rows = db.query(KvEntry).filter(KvEntry.key.in_(list(keys))).all()
    found = {row.key: row.value for row in rows}
    return {wire: found.get(key) or [] for key, wire in keys.items()}


def write_collection(db: Session, name: CollectionName, data: list):
    kv_set(db, collection_key(name), data)
    logger.info(f"[KV] {collection_key(name)} ← {len(data)} items")
