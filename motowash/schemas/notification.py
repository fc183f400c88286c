# motowash/schemas/notification.py
from datetime import datetime
from typing import Optional

from motowash.schemas.entities import CamelModel


class NotificationOut(CamelModel):
    level: str           # success | info | warning | error
    message: str
    created_at: datetime


class CustomerLinkOut(CamelModel):
    vehicle_id: str
    plate: str
    phone: Optional[str]
    url: Optional[str]    # None when the vehicle is not ready or has no phone
