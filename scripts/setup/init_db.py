# scripts/setup/init_db.py
"""
Initialize database: creates the kv_store table and seeds a starter catalog.
Run once before first launch. Existing collections are never overwritten.
Usage: python scripts/setup/init_db.py [--no-seed]
"""

import sys
import os
import argparse
import uuid
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from motowash.database import create_tables, engine, SessionLocal
from motowash.config import settings
from motowash.schemas.entities import CollectionName, Service, Worker, Workshop
from motowash.services.kv_service import collection_key, kv_get, write_collection
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

DEFAULT_SERVICES = [
    # name, price, workshop price, worker commission, workshop worker commission
    ("Lavado Básico", 15000, 12000, 5000, 4000),
    ("Lavado Completo", 25000, 20000, 8000, 6000),
    ("Lavado + Polichado", 40000, 32000, 12000, 10000),
]

DEFAULT_WORKERS = ["Lavador 1", "Lavador 2"]


def _seed(db, name: CollectionName, items: list):
    if kv_get(db, collection_key(name)):
        print(f"   • {name.value}: already has data, skipped")
        return
    write_collection(db, name, [item.to_wire() for item in items])
    print(f"   ✓ {name.value}: {len(items)} seeded")


def main():
    parser = argparse.ArgumentParser(description="Create tables and seed the starter catalog")
    parser.add_argument("--no-seed", action="store_true", help="Only create tables")
    args = parser.parse_args()

    print(f"🗄️  {settings.SHOP_NAME} DB Initialization")
    print("=" * 40)
    print(f"📡 Database: {settings.DATABASE_URL}")

    # Test connection
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        print("✅ Database connection OK")
    except SQLAlchemyError as e:
        print(f"❌ Cannot connect to database: {e}")
        sys.exit(1)

    print("\n📋 Creating tables...")
    create_tables()
    print("✅ kv_store ready")

    if not args.no_seed:
        print("\n🌱 Seeding catalog...")
        services = [
            Service(id=str(uuid.uuid4()), name=name, price=price, workshop_price=w_price,
                    worker_commission=commission, workshop_worker_commission=w_commission)
            for name, price, w_price, commission, w_commission in DEFAULT_SERVICES
        ]
        workers = [Worker(id=str(uuid.uuid4()), name=name) for name in DEFAULT_WORKERS]
        db = SessionLocal()
        try:
            _seed(db, CollectionName.SERVICES, services)
            _seed(db, CollectionName.WORKERS, workers)
            _seed(db, CollectionName.WORKSHOPS, [Workshop(id=str(uuid.uuid4()), name="Taller Aliado")])
            for name in (CollectionName.MOTOS, CollectionName.EXPENSES):
                if kv_get(db, collection_key(name)) is None:
                    write_collection(db, name, [])
        finally:
            db.close()

    print("\n🎉 Database ready! You can now start the backend:")
    print(f"   uvicorn motowash.main:app --host {settings.BACKEND_IP} --port {settings.BACKEND_PORT} --reload")


if __name__ == "__main__":
    main()
