# motowash/routers/health.py
"""
System health check endpoint.
Returns status of backend + KV database + in-memory store + sync outbox.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from motowash.database import get_db
from motowash.deps import get_shop
from motowash.services.shop_session import ShopSession
from datetime import datetime

router = APIRouter()


@router.get("/health", summary="System health check")
def health_check(db: Session = Depends(get_db), shop: ShopSession = Depends(get_shop)):
    """
    Returns:
    - Backend status
    - Database connectivity
    - Whether the startup load finished, and sync delivery counters
    """
    result = {
        "status": "ok",
        "timestamp": datetime.utcnow().isoformat(),
        "backend": "ok",
        "database": "unknown",
        "store": "loading" if shop.loading else "ready",
        "sync": {
            "adapter": str(shop.outbox.adapter),
            "pending": shop.outbox.pending,
            "failures": shop.outbox.failures,
        },
    }

    try:
        db.execute(text("SELECT 1"))
        result["database"] = "ok"
    except SQLAlchemyError as e:
        result["database"] = f"error: {str(e)}"
        result["status"] = "degraded"

    if shop.loading or shop.outbox.failures:
        result["status"] = "degraded"
    return result
