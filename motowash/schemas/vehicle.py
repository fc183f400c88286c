# motowash/schemas/vehicle.py
from typing import Optional

from motowash.schemas.entities import CamelModel, Vehicle


class VehicleCreate(CamelModel):
    plate: str = ""               # blank → "SIN PLACA"
    phone: Optional[str] = None
    service_id: str
    workshop_id: Optional[str] = None   # None = walk-in customer


class TransitionRequest(CamelModel):
    status: str                   # waiting | washing | ready | delivered
    worker_id: Optional[str] = None


class AssignmentRequest(CamelModel):
    vehicle_id: str
    worker_id: str


class PendingAssignmentOut(CamelModel):
    pending: bool
    vehicle_id: Optional[str] = None
    worker_id: Optional[str] = None


class WorkerLaneOut(CamelModel):
    worker_id: str
    worker_name: str
    washing: list[Vehicle]
    ready: list[Vehicle]


class BoardOut(CamelModel):
    loading: bool
    waiting: list[Vehicle]
    lanes: list[WorkerLaneOut]


class QuoteOut(CamelModel):
    service_id: str
    workshop_id: Optional[str]
    price: int
