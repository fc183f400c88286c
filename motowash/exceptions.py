# motowash/exceptions.py
"""
Error taxonomy for the wash-shop core.
Validation errors abort the operation with no mutation; PersistenceFailure
is reported but never rolls back the in-memory store.
"""

from typing import Optional


class WashShopError(Exception):
    """Base exception for all wash-shop errors."""


class NotFound(WashShopError):
    """Referenced entity id does not exist."""

    def __init__(self, kind: str, entity_id: Optional[str]):
        self.kind = kind
        self.entity_id = entity_id
        super().__init__(f"{kind} '{entity_id}' not found")


class InvalidTransition(WashShopError):
    """Requested status change is not an edge of the workflow table."""

    def __init__(self, vehicle_id: str, current: str, target: str):
        self.vehicle_id = vehicle_id
        self.current = current
        self.target = target
        super().__init__(f"Vehicle {vehicle_id}: cannot move from '{current}' to '{target}'")


class MissingWorker(WashShopError):
    """Transition to washing without a worker id."""

    def __init__(self, vehicle_id: str):
        self.vehicle_id = vehicle_id
        super().__init__(f"Vehicle {vehicle_id}: a worker is required to start washing")


class InvalidEntity(WashShopError):
    """Catalog input rejected (blank name, negative amount...)."""


class StoreNotReady(WashShopError):
    """Mutation attempted while the startup load is still pending."""

    def __init__(self):
        super().__init__("Data is still loading, try again in a moment")


class NotAuthorized(WashShopError):
    """Operation needs the admin capability."""

    def __init__(self, operation: str = "this operation"):
        self.operation = operation
        super().__init__(f"Admin session required for {operation}")


class PersistenceFailure(WashShopError):
    """Remote sync call failed. In-memory state is kept as the source of truth."""

    def __init__(self, collection: str, detail: str, status_code: Optional[int] = None):
        self.collection = collection
        self.detail = detail
        self.status_code = status_code
        super().__init__(f"Could not persist '{collection}': {detail}")
