# motowash/services/shop_session.py
"""
One running shop: the entity store plus the services that act on it.

  - startup:  load() pulls every collection through the sync adapter; until
              it finishes, loading is True and every mutation is refused
  - operator: intake, transitions and assignments need no credential
  - admin:    catalog, finance and vehicle deletion need is_admin=True,
              decided by the auth boundary before the call reaches here
"""

from motowash.config import settings
from motowash.exceptions import NotAuthorized, StoreNotReady
from motowash.schemas.entities import Vehicle
from motowash.services.catalog_service import CatalogService
from motowash.services.entity_store import EntityStore
from motowash.services.notification_service import Notifier
from motowash.services.outbox import Outbox
from motowash.services.sync_adapter import SyncAdapter
from motowash.services.workflow_service import WorkflowEngine
from motowash.utils.logger import get_logger

logger = get_logger(__name__)


class ShopSession:
    def __init__(self, adapter: SyncAdapter, notifier: Notifier = None,
                 reset_completion_on_unassign: bool = settings.RESET_COMPLETION_ON_UNASSIGN):
        self.store = EntityStore()
        self.notifier = notifier or Notifier()
        self.outbox = Outbox(adapter, self.notifier)
        self.workflow = WorkflowEngine(self.store, self.outbox, self.notifier, reset_completion_on_unassign)
        self._catalog = CatalogService(self.store, self.outbox, self.notifier)
        self.loading = True

    async def load(self):
        self.loading = True
        snapshot = await self.outbox.adapter.load_all()
        self.store.load(snapshot)
        for name, raw in self.store.unparsed.items():
            self.notifier.warning(f"{len(raw)} registro(s) de {name.value} no se pudieron leer; se conservan sin cambios")
        self.loading = False

    async def close(self):
        await self.outbox.flush()
        if self.outbox.failures:
            logger.warning(f"[SYNC] Session closed with {self.outbox.failures} failed deliveries")

    # ── Guards ────────────────────────────────────────────────────────────
    def ensure_ready(self):
        if self.loading:
            raise StoreNotReady()

    @staticmethod
    def require_admin(is_admin: bool, operation: str):
        if not is_admin:
            raise NotAuthorized(operation)

    # ── Entry points ──────────────────────────────────────────────────────
    def operator(self) -> WorkflowEngine:
        """Workflow engine for board actions, once data is loaded."""
        self.ensure_ready()
        return self.workflow

    def catalog(self, is_admin: bool) -> CatalogService:
        self.require_admin(is_admin, "catalog changes")
        self.ensure_ready()
        return self._catalog

    def delete_vehicle(self, vehicle_id: str, is_admin: bool) -> Vehicle:
        self.require_admin(is_admin, "deleting vehicles")
        return self.operator().delete_vehicle(vehicle_id)
