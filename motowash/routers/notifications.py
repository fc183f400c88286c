# motowash/routers/notifications.py
"""Recent operator notifications (newest first) for the front-desk toasts."""

from fastapi import APIRouter, Depends
from motowash.deps import get_shop
from motowash.schemas.notification import NotificationOut
from motowash.services.shop_session import ShopSession

router = APIRouter()


@router.get("/notifications", response_model=list[NotificationOut])
def list_notifications(limit: int = 20, shop: ShopSession = Depends(get_shop)):
    return shop.notifier.recent(limit)
