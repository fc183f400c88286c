# motowash/services/entity_store.py
"""
In-memory authoritative collections: vehicles, workers, services, workshops,
expenses. Pure data. The workflow, catalog and finance services borrow these
lists and never keep copies of their own.
"""

from typing import Optional

from motowash.exceptions import NotFound
from motowash.schemas.entities import (
    CollectionName, Expense, Service, StoreSnapshot, Vehicle, VehicleStatus, Worker, Workshop,
)
from motowash.utils.logger import get_logger

logger = get_logger(__name__)

_ATTRS = {
    CollectionName.MOTOS: "vehicles",
    CollectionName.WORKERS: "workers",
    CollectionName.SERVICES: "services",
    CollectionName.WORKSHOPS: "workshops",
    CollectionName.EXPENSES: "expenses",
}

_KINDS = {
    CollectionName.MOTOS: "Vehicle",
    CollectionName.WORKERS: "Worker",
    CollectionName.SERVICES: "Service",
    CollectionName.WORKSHOPS: "Workshop",
    CollectionName.EXPENSES: "Expense",
}


class EntityStore:
    def __init__(self):
        self.vehicles: list[Vehicle] = []
        self.workers: list[Worker] = []
        self.services: list[Service] = []
        self.workshops: list[Workshop] = []
        self.expenses: list[Expense] = []
        # Items the loader could not read, per collection; re-sent with every write
        self.unparsed: dict[CollectionName, list] = {}

    # ── Bulk ──────────────────────────────────────────────────────────────
    def load(self, snapshot: StoreSnapshot):
        """Replace every collection with the snapshot contents."""
        self.vehicles = [_normalize_vehicle(v) for v in snapshot.vehicles]
        self.workers = list(snapshot.workers)
        self.services = list(snapshot.services)
        self.workshops = list(snapshot.workshops)
        self.expenses = list(snapshot.expenses)
        self.unparsed = {CollectionName(name): list(raw) for name, raw in snapshot.unparsed.items() if raw}
        logger.info(
            f"Store loaded: {len(self.vehicles)} vehicles, {len(self.workers)} workers, "
            f"{len(self.services)} services, {len(self.workshops)} workshops, "
            f"{len(self.expenses)} expenses"
        )
        for name, raw in self.unparsed.items():
            logger.warning(f"{len(raw)} unreadable {name.value} item(s) kept for write-back")

    def snapshot(self) -> StoreSnapshot:
        return StoreSnapshot(
            vehicles=list(self.vehicles), workers=list(self.workers), services=list(self.services),
            workshops=list(self.workshops), expenses=list(self.expenses),
            unparsed={name.value: list(raw) for name, raw in self.unparsed.items()},
        )

    def collection(self, name: CollectionName) -> list:
        return getattr(self, _ATTRS[CollectionName(name)])

    def passthrough(self, name: CollectionName) -> list:
        return self.unparsed.get(CollectionName(name), [])

    # ── Generic by-id access ──────────────────────────────────────────────
    def find(self, name: CollectionName, entity_id: Optional[str]):
        if entity_id is None:
            return None
        return next((e for e in self.collection(name) if e.id == entity_id), None)

    def require(self, name: CollectionName, entity_id: Optional[str]):
        entity = self.find(name, entity_id)
        if entity is None:
            raise NotFound(_KINDS[CollectionName(name)], entity_id)
        return entity

    def add(self, name: CollectionName, entity):
        self.collection(name).append(entity)
        return entity

    def replace(self, name: CollectionName, entity):
        """Swap the stored entity having the same id, keeping list order."""
        items = self.collection(name)
        for i, existing in enumerate(items):
            if existing.id == entity.id:
                items[i] = entity
                return entity
        raise NotFound(_KINDS[CollectionName(name)], entity.id)

    def remove(self, name: CollectionName, entity_id: str):
        items = self.collection(name)
        for i, existing in enumerate(items):
            if existing.id == entity_id:
                return items.pop(i)
        raise NotFound(_KINDS[CollectionName(name)], entity_id)

    # ── Typed shortcuts ───────────────────────────────────────────────────
    def get_vehicle(self, vehicle_id: str) -> Vehicle:
        return self.require(CollectionName.MOTOS, vehicle_id)

    def get_worker(self, worker_id: str) -> Worker:
        return self.require(CollectionName.WORKERS, worker_id)

    def services_by_id(self) -> dict[str, Service]:
        return {s.id: s for s in self.services}

    def active_workers(self) -> list[Worker]:
        return [w for w in self.workers if w.active]

    def active_workshops(self) -> list[Workshop]:
        return [w for w in self.workshops if w.active]


def _normalize_vehicle(vehicle: Vehicle) -> Vehicle:
    """Older clients left workerId on vehicles dragged back to the waiting pool."""
    if vehicle.status == VehicleStatus.WAITING and vehicle.worker_id is not None:
        logger.warning(f"Vehicle {vehicle.id} ({vehicle.plate}) waiting with worker {vehicle.worker_id}, cleared")
        return vehicle.model_copy(update={"worker_id": None})
    return vehicle
