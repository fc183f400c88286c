# motowash/services/notification_service.py
"""
Operator notification side channel (the toasts of the front desk) and the
outbound WhatsApp link used to tell a customer the motorcycle is ready.
Both are fire-and-forget: nothing here can fail a workflow operation.
"""

from collections import deque
from typing import Optional
from urllib.parse import quote

from motowash.config import settings
from motowash.schemas.entities import Vehicle, VehicleStatus
from motowash.schemas.notification import NotificationOut
from motowash.utils.logger import get_logger
from motowash.utils.timeutil import utcnow_ms

logger = get_logger(__name__)

_LOG_LEVELS = {"success": "info", "info": "info", "warning": "warning", "error": "error"}


class Notifier:
    """Keeps the last N notifications in memory and mirrors each one to the log."""

    def __init__(self, maxlen: int = settings.NOTIFICATION_BUFFER_SIZE):
        self._items = deque(maxlen=maxlen)

    def notify(self, level: str, message: str) -> NotificationOut:
        item = NotificationOut(level=level, message=message, created_at=utcnow_ms())
        self._items.append(item)
        getattr(logger, _LOG_LEVELS.get(level, "info"))(f"[NOTIFY][{level.upper()}] {message}")
        return item

    def success(self, message: str):
        return self.notify("success", message)

    def warning(self, message: str):
        return self.notify("warning", message)

    def error(self, message: str):
        return self.notify("error", message)

    def recent(self, limit: int = 20) -> list[NotificationOut]:
        """Newest first."""
        return list(reversed(self._items))[:limit]


def customer_ready_link(vehicle: Vehicle, shop_name: str = settings.SHOP_NAME,
                        country_code: str = settings.WHATSAPP_COUNTRY_CODE) -> Optional[str]:
    """Pre-filled wa.me link for a ready vehicle with a phone, else None."""
    phone = "".join(ch for ch in vehicle.phone if ch.isdigit())
    if vehicle.status != VehicleStatus.READY or not phone:
        return None
    # "+57 300...", "0057 300..." and "57300..." already carry a country code
    if vehicle.phone.strip().startswith(("+", "00")):
        number = phone.lstrip("0")
    elif len(phone) > 10 and phone.startswith(country_code):
        number = phone
    else:
        number = f"{country_code}{phone}"
    message = f"Hola! Tu moto con placa {vehicle.plate} está lista para ser recogida en {shop_name}."
    return f"https://wa.me/{number}?text={quote(message)}"
