# motowash/routers/store_api.py
"""
Key-value blob store consumed by the sync adapter.
GET  /api/data  all five collections, [] for any never written
POST /api/sync  overwrite one collection with the full array sent
The store does not validate entities; it keeps whatever the client synced.
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from motowash.database import get_db
from motowash.schemas.entities import CollectionName
from motowash.services.kv_service import read_all_collections, write_collection
from motowash.utils.logger import get_logger

router = APIRouter()
logger = get_logger(__name__)

_VALID_TYPES = {name.value for name in CollectionName}


@router.get("/data", summary="Every collection in one document")
def get_data(db: Session = Depends(get_db)):
    return read_all_collections(db)


@router.post("/sync", summary="Replace one collection")
async def sync_collection(request: Request, db: Session = Depends(get_db)):
    try:
        body = await request.json()
    except ValueError:
        return JSONResponse(status_code=400, content={"error": "Invalid JSON"})

    kind = body.get("type") if isinstance(body, dict) else None
    data = body.get("data") if isinstance(body, dict) else None
    if kind not in _VALID_TYPES:
        logger.warning(f"[KV] Rejected sync with type={kind!r}")
        return JSONResponse(status_code=400, content={"error": "Invalid type"})
    if not isinstance(data, list):
        return JSONResponse(status_code=400, content={"error": "data must be an array"})

    write_collection(db, CollectionName(kind), data)
    return {"success": True}
