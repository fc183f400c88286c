# motowash/services/workflow_service.py
"""
Workflow Engine: vehicle status machine and worker assignment rules.

    waiting ──assign──▶ washing ──▶ ready ──▶ delivered
       ▲                  │  ▲        │
       └────unassign──────┘  └reassign┘ (other worker, via propose + confirm)
       └────unassign───────────────────┘

Transitions only happen on explicit operator intent. workerId is set iff the
status is washing, ready or delivered. completionTime is stamped the first
time a vehicle becomes ready and never overwritten. Delivered is terminal.

Assignments dropped on a worker lane go through propose → confirm so the
operator can confirm; confirm re-checks the vehicle and worker first.
Every accepted mutation hands the full vehicle list to the outbox.
"""

import uuid
from dataclasses import dataclass
from typing import Optional, Union

from motowash.config import settings
from motowash.exceptions import InvalidTransition, MissingWorker, NotFound
from motowash.schemas.entities import CollectionName, Vehicle, VehicleStatus
from motowash.services.entity_store import EntityStore
from motowash.services.notification_service import Notifier
from motowash.services.outbox import Outbox
from motowash.utils.logger import get_logger
from motowash.utils.timeutil import utcnow_ms

logger = get_logger(__name__)

DEFAULT_PLATE = "SIN PLACA"

TRANSITIONS = {
    VehicleStatus.WAITING: {VehicleStatus.WASHING},
    VehicleStatus.WASHING: {VehicleStatus.WASHING, VehicleStatus.READY, VehicleStatus.WAITING},
    VehicleStatus.READY: {VehicleStatus.READY, VehicleStatus.DELIVERED, VehicleStatus.WAITING},
    VehicleStatus.DELIVERED: set(),
}

ASSIGNABLE = {VehicleStatus.WAITING, VehicleStatus.WASHING}


@dataclass(frozen=True)
class NoPendingIntent:
    pass


@dataclass(frozen=True)
class PendingAssignment:
    vehicle_id: str
    worker_id: str


NO_PENDING = NoPendingIntent()
PendingIntent = Union[NoPendingIntent, PendingAssignment]


class WorkflowEngine:
    def __init__(self, store: EntityStore, outbox: Outbox, notifier: Notifier,
                 reset_completion_on_unassign: bool = settings.RESET_COMPLETION_ON_UNASSIGN):
        self.store = store
        self.outbox = outbox
        self.notifier = notifier
        self.reset_completion_on_unassign = reset_completion_on_unassign
        self.pending: PendingIntent = NO_PENDING

    # ── Intake ────────────────────────────────────────────────────────────
    def create_vehicle(self, plate: str, service_id: str, phone: str = "",
                       workshop_id: Optional[str] = None) -> Vehicle:
        self.store.require(CollectionName.SERVICES, service_id)
        if workshop_id:
            workshop = self.store.require(CollectionName.WORKSHOPS, workshop_id)
            if not workshop.active:
                logger.warning(f"[WORKFLOW] Intake from inactive workshop {workshop.name}")

        vehicle = Vehicle(
            id=str(uuid.uuid4()),
            plate=(plate or "").strip().upper() or DEFAULT_PLATE,
            phone=(phone or "").strip(),
            service_id=service_id,
            workshop_id=workshop_id or None,
            worker_id=None,
            status=VehicleStatus.WAITING,
            entry_time=utcnow_ms(),
        )
        self.store.add(CollectionName.MOTOS, vehicle)
        self._persist()
        logger.info(f"[WORKFLOW] Intake {vehicle.plate} ({vehicle.id}) service={service_id} workshop={workshop_id}")
        self.notifier.success(f"Moto {vehicle.plate} ingresada a sala de espera")
        return vehicle

    # ── Transitions ───────────────────────────────────────────────────────
    def request_transition(self, vehicle_id: str, target_status, worker_id: Optional[str] = None) -> Vehicle:
        """
        Move a vehicle along one edge of the table. Handing a washing vehicle
        to a different worker is refused here; it goes through
        propose_assignment / confirm_assignment.
        """
        return self._transition(vehicle_id, target_status, worker_id, confirmed=False)

    def _commit_assignment(self, vehicle_id: str, worker_id: str) -> Vehicle:
        return self._transition(vehicle_id, VehicleStatus.WASHING, worker_id, confirmed=True)

    def _transition(self, vehicle_id: str, target_status, worker_id: Optional[str], confirmed: bool) -> Vehicle:
        vehicle = self.store.get_vehicle(vehicle_id)
        current = vehicle.status
        try:
            target = VehicleStatus(target_status)
        except ValueError:
            raise InvalidTransition(vehicle_id, current.value, str(target_status)) from None
        if target not in TRANSITIONS[current]:
            raise InvalidTransition(vehicle_id, current.value, target.value)

        if target == VehicleStatus.WASHING:
            if not worker_id:
                raise MissingWorker(vehicle_id)
            worker = self.store.get_worker(worker_id)
            if current == VehicleStatus.WASHING and vehicle.worker_id == worker_id:
                return vehicle
            if current == VehicleStatus.WASHING and not confirmed:
                logger.info(f"[WORKFLOW] {vehicle.plate}: reassignment to {worker_id} needs confirmation")
                raise InvalidTransition(vehicle_id, current.value, target.value)
            if not worker.active:
                logger.warning(f"[WORKFLOW] {vehicle.plate} assigned to inactive worker {worker.name}")
                self.notifier.warning(f"{worker.name} está inactivo")
            updates = {"status": target, "worker_id": worker_id}

        elif target == VehicleStatus.READY:
            if current == VehicleStatus.READY:
                return vehicle
            updates = {"status": target}
            if vehicle.completion_time is None:
                updates["completion_time"] = utcnow_ms()

        elif target == VehicleStatus.DELIVERED:
            updates = {"status": target}

        else:
            updates = {"status": target, "worker_id": None}
            if self.reset_completion_on_unassign:
                updates["completion_time"] = None

        updated = vehicle.model_copy(update=updates)
        self.store.replace(CollectionName.MOTOS, updated)
        self._persist()
        logger.info(
            f"[WORKFLOW] {updated.plate}: {current.value} → {target.value} "
            f"worker={updated.worker_id} completed={updated.completion_time}"
        )
        self._announce(updated, current)
        return updated

    def _announce(self, vehicle: Vehicle, previous: VehicleStatus):
        if vehicle.status == VehicleStatus.READY:
            self.notifier.success(f"Moto {vehicle.plate} marcada como LISTA")
        elif vehicle.status == VehicleStatus.DELIVERED:
            self.notifier.success(f"Moto {vehicle.plate} entregada y pagada")
        elif vehicle.status == VehicleStatus.WASHING:
            worker = self.store.find(CollectionName.WORKERS, vehicle.worker_id)
            self.notifier.success(f"Moto {vehicle.plate} asignada a {worker.name if worker else vehicle.worker_id}")
        elif previous != VehicleStatus.WAITING:
            self.notifier.success(f"Moto {vehicle.plate} devuelta a sala de espera")

    # ── Two-phase assignment ──────────────────────────────────────────────
    def propose_assignment(self, vehicle_id: str, worker_id: str) -> PendingAssignment:
        """Validate a drop on a worker lane and hold it until confirmed."""
        self._check_assignable(vehicle_id, worker_id)
        self.pending = PendingAssignment(vehicle_id=vehicle_id, worker_id=worker_id)
        logger.debug(f"[WORKFLOW] Pending assignment {vehicle_id} → {worker_id}")
        return self.pending

    def confirm_assignment(self, vehicle_id: Optional[str] = None, worker_id: Optional[str] = None) -> Vehicle:
        """
        Commit the pending assignment. When ids are given they must match the
        pending one, so a confirmation dialog never commits a different drop.
        """
        pending = self.pending
        if not isinstance(pending, PendingAssignment):
            raise NotFound("Pending assignment", vehicle_id)
        if (vehicle_id and vehicle_id != pending.vehicle_id) or (worker_id and worker_id != pending.worker_id):
            raise NotFound("Pending assignment", vehicle_id)

        self.pending = NO_PENDING
        self._check_assignable(pending.vehicle_id, pending.worker_id)
        return self._commit_assignment(pending.vehicle_id, pending.worker_id)

    def cancel_assignment(self) -> PendingIntent:
        dropped, self.pending = self.pending, NO_PENDING
        return dropped

    def _check_assignable(self, vehicle_id: str, worker_id: str):
        vehicle = self.store.get_vehicle(vehicle_id)
        if not worker_id:
            raise MissingWorker(vehicle_id)
        self.store.get_worker(worker_id)
        if vehicle.status not in ASSIGNABLE:
            raise InvalidTransition(vehicle_id, vehicle.status.value, VehicleStatus.WASHING.value)

    # ── Deletion ──────────────────────────────────────────────────────────
    def delete_vehicle(self, vehicle_id: str) -> Vehicle:
        """Unconditional, from any status."""
        removed = self.store.remove(CollectionName.MOTOS, vehicle_id)
        if isinstance(self.pending, PendingAssignment) and self.pending.vehicle_id == vehicle_id:
            self.pending = NO_PENDING
        self._persist()
        logger.info(f"[WORKFLOW] Deleted {removed.plate} ({removed.id}) in status {removed.status.value}")
        self.notifier.success("Moto eliminada")
        return removed

    # ── Board views ───────────────────────────────────────────────────────
    def waiting_pool(self) -> list[Vehicle]:
        return [v for v in self.store.vehicles if v.status == VehicleStatus.WAITING]

    def worker_lane(self, worker_id: str) -> dict[str, list[Vehicle]]:
        """Vehicles a worker is washing or has ready; delivered ones leave the lane."""
        mine = [v for v in self.store.vehicles if v.worker_id == worker_id]
        return {
            "washing": [v for v in mine if v.status == VehicleStatus.WASHING],
            "ready": [v for v in mine if v.status == VehicleStatus.READY],
        }

    def _persist(self):
        self.outbox.enqueue(CollectionName.MOTOS, self.store.vehicles, self.store.passthrough(CollectionName.MOTOS))
