# motowash/services/catalog_service.py
"""
Catalog management: workers, services (prices + commissions), workshops and
expenses. Same write path as the workflow: mutate the store, enqueue the
full collection, notify.

Deleting a worker, service or workshop leaves its vehicles untouched; the
finance engine prices vehicles with a missing service at zero.
"""

import uuid
from typing import Optional

from pydantic import BaseModel, ValidationError

from motowash.exceptions import InvalidEntity
from motowash.schemas.catalog import ServiceCreate, ServiceUpdate
from motowash.schemas.entities import CollectionName, Expense, Service, Worker, Workshop
from motowash.services.entity_store import EntityStore
from motowash.services.notification_service import Notifier
from motowash.services.outbox import Outbox
from motowash.utils.logger import get_logger
from motowash.utils.timeutil import utcnow_ms

logger = get_logger(__name__)


def _new_id() -> str:
    return str(uuid.uuid4())


def _clean_name(value: Optional[str], what: str) -> str:
    name = (value or "").strip()
    if not name:
        raise InvalidEntity(f"{what} name cannot be empty")
    return name


class CatalogService:
    def __init__(self, store: EntityStore, outbox: Outbox, notifier: Notifier):
        self.store = store
        self.outbox = outbox
        self.notifier = notifier

    # ── Shared write path ─────────────────────────────────────────────────
    def _commit(self, name: CollectionName, message: Optional[str] = None):
        self.outbox.enqueue(name, self.store.collection(name), self.store.passthrough(name))
        if message:
            self.notifier.success(message)

    def _build(self, model: type[BaseModel], data: dict):
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise InvalidEntity(f"Invalid {model.__name__}: {e.errors()[0]['msg']}") from e

    def _update(self, name: CollectionName, entity_id: str, changes: dict):
        """Re-validate the merged entity so updates keep every invariant."""
        existing = self.store.require(name, entity_id)
        merged = self._build(type(existing), {**existing.model_dump(), **changes})
        self.store.replace(name, merged)
        self._commit(name)
        logger.info(f"[CATALOG] Updated {name.value} {entity_id}: {changes}")
        return merged

    def _delete(self, name: CollectionName, entity_id: str, message: str):
        removed = self.store.remove(name, entity_id)
        self._commit(name, message)
        logger.info(f"[CATALOG] Deleted {name.value} {entity_id}")
        return removed

    # ── Workers ───────────────────────────────────────────────────────────
    def add_worker(self, name: str) -> Worker:
        worker = Worker(id=_new_id(), name=_clean_name(name, "Worker"), active=True)
        self.store.add(CollectionName.WORKERS, worker)
        self._commit(CollectionName.WORKERS, "Trabajador agregado")
        logger.info(f"[CATALOG] Worker {worker.name} ({worker.id}) added")
        return worker

    def update_worker(self, worker_id: str, name: Optional[str] = None, active: Optional[bool] = None) -> Worker:
        changes = {}
        if name is not None:
            changes["name"] = _clean_name(name, "Worker")
        if active is not None:
            changes["active"] = active
        return self._update(CollectionName.WORKERS, worker_id, changes)

    def delete_worker(self, worker_id: str) -> Worker:
        return self._delete(CollectionName.WORKERS, worker_id, "Trabajador eliminado")

    # ── Services ──────────────────────────────────────────────────────────
    def add_service(self, data: ServiceCreate) -> Service:
        fields = data.model_dump()
        fields["name"] = _clean_name(fields["name"], "Service")
        service = self._build(Service, {"id": _new_id(), **fields})
        self.store.add(CollectionName.SERVICES, service)
        self._commit(CollectionName.SERVICES, "Servicio creado")
        logger.info(f"[CATALOG] Service {service.name} price={service.price}/{service.workshop_price}")
        return service

    def update_service(self, service_id: str, data: ServiceUpdate) -> Service:
        changes = data.model_dump(exclude_unset=True)
        if "name" in changes:
            changes["name"] = _clean_name(changes["name"], "Service")
        return self._update(CollectionName.SERVICES, service_id, changes)

    def delete_service(self, service_id: str) -> Service:
        return self._delete(CollectionName.SERVICES, service_id, "Servicio eliminado")

    # ── Workshops ─────────────────────────────────────────────────────────
    def add_workshop(self, name: str) -> Workshop:
        workshop = Workshop(id=_new_id(), name=_clean_name(name, "Workshop"), active=True)
        self.store.add(CollectionName.WORKSHOPS, workshop)
        self._commit(CollectionName.WORKSHOPS, "Taller agregado")
        logger.info(f"[CATALOG] Workshop {workshop.name} ({workshop.id}) added")
        return workshop

    def update_workshop(self, workshop_id: str, name: Optional[str] = None, active: Optional[bool] = None) -> Workshop:
        changes = {}
        if name is not None:
            changes["name"] = _clean_name(name, "Workshop")
        if active is not None:
            changes["active"] = active
        return self._update(CollectionName.WORKSHOPS, workshop_id, changes)

    def delete_workshop(self, workshop_id: str) -> Workshop:
        return self._delete(CollectionName.WORKSHOPS, workshop_id, "Taller eliminado")

    # ── Expenses ──────────────────────────────────────────────────────────
    def add_expense(self, description: str, amount: int) -> Expense:
        description = (description or "").strip()
        if not description:
            raise InvalidEntity("Expense description cannot be empty")
        expense = self._build(Expense, {"id": _new_id(), "description": description,
                                        "amount": amount, "date": utcnow_ms()})
        self.store.add(CollectionName.EXPENSES, expense)
        self._commit(CollectionName.EXPENSES, "Gasto registrado")
        logger.info(f"[CATALOG] Expense {expense.description}: {expense.amount}")
        return expense

    def delete_expense(self, expense_id: str) -> Expense:
        return self._delete(CollectionName.EXPENSES, expense_id, "Gasto eliminado")
