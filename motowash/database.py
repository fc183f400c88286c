# motowash/database.py
"""
Database connection, session management, and table creation.
Uses SQLAlchemy. The only table is the key-value blob store behind
/api/data and /api/sync; SQLite by default, PostgreSQL via DATABASE_URL.
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
from motowash.config import settings


def _engine_kwargs(url: str) -> dict:
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool   # one shared in-memory DB (tests)
        return kwargs
    return {
        "pool_pre_ping": True,          # Auto-reconnect if DB connection drops
        "pool_size": 5,
        "max_overflow": 10,
    }


engine = create_engine(settings.DATABASE_URL, echo=False, **_engine_kwargs(settings.DATABASE_URL))

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """FastAPI dependency: yields a DB session and closes it after request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables():
    """Creates all DB tables on startup. Safe to call multiple times."""
    from motowash.models.kv_entry import KvEntry   # noqa

    Base.metadata.create_all(bind=engine)
