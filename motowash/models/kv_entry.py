# motowash/models/kv_entry.py
"""
Key-value blob table. One row per collection (starwash_motos,
starwash_workers...), value = the full JSON array last synced.
"""

from sqlalchemy import Column, String, DateTime, JSON
from motowash.database import Base


class KvEntry(Base):
    __tablename__ = "kv_store"

    key = Column(String(200), primary_key=True)
    value = Column(JSON, nullable=False)
    updated_at = Column(DateTime)

    def __repr__(self):
        size = len(self.value) if isinstance(self.value, list) else "?"
        return f"<KvEntry {self.key} items={size}>"
