# motowash/schemas/entities.py
"""
Entity models shared by the in-memory store and the sync wire format.
Field names are snake_case in Python and camelCase on the wire
(serviceId, entryTime...), matching the documents kept in the blob store.
"""

from enum import Enum
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator
from pydantic.alias_generators import to_camel

from motowash.utils.timeutil import ensure_utc, to_iso


class VehicleStatus(str, Enum):
    WAITING = "waiting"
    WASHING = "washing"
    READY = "ready"
    DELIVERED = "delivered"


class CollectionName(str, Enum):
    MOTOS = "motos"
    WORKERS = "workers"
    SERVICES = "services"
    WORKSHOPS = "workshops"
    EXPENSES = "expenses"


class CamelModel(BaseModel):
    """snake_case in Python, camelCase in JSON; either is accepted on input."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class WireModel(CamelModel):
    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Vehicle(WireModel):
    id: str
    plate: str
    phone: str = ""
    service_id: str
    workshop_id: Optional[str] = None     # None = walk-in customer
    worker_id: Optional[str] = None       # None = waiting pool
    status: VehicleStatus = VehicleStatus.WAITING
    entry_time: datetime
    completion_time: Optional[datetime] = None

    @field_validator("workshop_id", "worker_id", mode="before")
    @classmethod
    def _blank_ref_is_none(cls, v):
        return v or None

    @field_validator("phone", mode="before")
    @classmethod
    def _phone_or_empty(cls, v):
        return v or ""

    @field_validator("entry_time", "completion_time")
    @classmethod
    def _utc(cls, v):
        return ensure_utc(v)

    @field_serializer("entry_time", "completion_time", when_used="json")
    def _iso(self, v: Optional[datetime]):
        return to_iso(v) if v else None

    @property
    def is_workshop(self) -> bool:
        return self.workshop_id is not None


class Service(WireModel):
    id: str
    name: str
    price: int = Field(ge=0)
    workshop_price: int = Field(ge=0)
    worker_commission: int = Field(ge=0)
    workshop_worker_commission: Optional[int] = Field(default=None, ge=0)


class Worker(WireModel):
    id: str
    name: str
    active: bool = True


class Workshop(WireModel):
    id: str
    name: str
    active: bool = True


class Expense(WireModel):
    id: str
    description: str
    amount: int = Field(ge=0)
    date: datetime

    @field_validator("date")
    @classmethod
    def _utc(cls, v):
        return ensure_utc(v)

    @field_serializer("date", when_used="json")
    def _iso(self, v: datetime):
        return to_iso(v)


class StoreSnapshot(BaseModel):
    """Everything GET /api/data returns, already parsed into entities."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    vehicles: list[Vehicle] = Field(default_factory=list, alias="motos")
    workers: list[Worker] = Field(default_factory=list)
    services: list[Service] = Field(default_factory=list)
    workshops: list[Workshop] = Field(default_factory=list)
    expenses: list[Expense] = Field(default_factory=list)
    # Raw items per wire collection name that failed validation; written back untouched
    unparsed: dict[str, list] = Field(default_factory=dict, exclude=True)

    def to_wire(self) -> dict:
        wire = self.model_dump(mode="json", by_alias=True, exclude_none=True)
        for name, raw in self.unparsed.items():
            wire[name] = wire.get(name, []) + list(raw)
        return wire

    @field_validator("vehicles", "workers", "services", "workshops", "expenses", mode="before")
    @classmethod
    def _null_is_empty(cls, v):
        return v or []


ENTITY_TYPES = {
    CollectionName.MOTOS: Vehicle,
    CollectionName.WORKERS: Worker,
    CollectionName.SERVICES: Service,
    CollectionName.WORKSHOPS: Workshop,
    CollectionName.EXPENSES: Expense,
}
