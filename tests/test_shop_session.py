# tests/test_shop_session.py
"""Unit tests for the shop session: startup load, admin gating, catalog edits."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from unittest.mock import MagicMock, AsyncMock
from motowash.exceptions import InvalidEntity, NotAuthorized, NotFound, StoreNotReady
from motowash.schemas.catalog import ServiceCreate, ServiceUpdate
from motowash.schemas.entities import CollectionName, StoreSnapshot, Vehicle, VehicleStatus, Worker
from motowash.services.auth_service import AdminSessions
from motowash.services.finance_service import totals_for
from motowash.services.notification_service import customer_ready_link
from motowash.services.shop_session import ShopSession
from motowash.services.sync_adapter import parse_snapshot
from motowash.utils.timeutil import utcnow_ms


def make_adapter(snapshot=None):
    adapter = MagicMock()
    adapter.load_all = AsyncMock(return_value=snapshot or StoreSnapshot())
    adapter.persist = AsyncMock()
    return adapter


async def loaded_shop(snapshot=None):
    shop = ShopSession(make_adapter(snapshot))
    await shop.load()
    return shop


def basic_service():
    return ServiceCreate(name="Básico", price=20000, workshop_price=15000, worker_commission=5000)


class TestLoading:
    def test_mutations_refused_until_loaded(self):
        shop = ShopSession(make_adapter())
        assert shop.loading
        with pytest.raises(StoreNotReady):
            shop.operator()
        with pytest.raises(StoreNotReady):
            shop.catalog(is_admin=True)

    @pytest.mark.asyncio
    async def test_load_fills_store(self):
        shop = await loaded_shop(StoreSnapshot(workers=[Worker(id="w1", name="Ana")]))
        assert not shop.loading
        assert shop.operator() is shop.workflow
        assert shop.store.workers[0].name == "Ana"

    @pytest.mark.asyncio
    async def test_legacy_waiting_vehicle_loses_worker(self):
        stale = Vehicle(id="m1", plate="ABC12D", service_id="s1", worker_id="w1",
                        status="waiting", entry_time=utcnow_ms())
        shop = await loaded_shop(StoreSnapshot(vehicles=[stale]))
        assert shop.store.get_vehicle("m1").worker_id is None

    @pytest.mark.asyncio
    async def test_close_flushes_outbox(self):
        shop = await loaded_shop()
        shop.catalog(is_admin=True).add_worker("Ana")
        await shop.close()
        assert shop.outbox.pending == 0
        shop.outbox.adapter.persist.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_unreadable_expense_survives_next_write(self):
        snapshot = parse_snapshot({"expenses": [
            {"id": "e1", "description": "Jabón", "amount": 1500.5, "date": "2026-02-20T10:30:00.000Z"},
            {"id": "e2", "description": "Agua", "amount": 3000, "date": "2026-02-20T10:30:00.000Z"},
        ]})
        shop = await loaded_shop(snapshot)
        assert [e.id for e in shop.store.expenses] == ["e2"]
        assert shop.notifier.recent(1)[0].level == "warning"

        added = shop.catalog(True).add_expense("Trapos", 1000)
        await shop.close()

        collection, payload = shop.outbox.adapter.persist.await_args.args
        assert collection == CollectionName.EXPENSES
        assert [e["id"] for e in payload] == ["e2", added.id, "e1"]
        assert payload[2]["amount"] == 1500.5


class TestAdminGating:
    @pytest.mark.asyncio
    async def test_catalog_needs_admin(self):
        shop = await loaded_shop()
        with pytest.raises(NotAuthorized):
            shop.catalog(is_admin=False)

    @pytest.mark.asyncio
    async def test_delete_vehicle_needs_admin(self):
        shop = await loaded_shop()
        service = shop.catalog(True).add_service(basic_service())
        v = shop.operator().create_vehicle("abc12d", service.id)

        with pytest.raises(NotAuthorized):
            shop.delete_vehicle(v.id, is_admin=False)
        assert shop.store.get_vehicle(v.id)

        shop.delete_vehicle(v.id, is_admin=True)
        with pytest.raises(NotFound):
            shop.store.get_vehicle(v.id)

    def test_admin_sessions(self):
        sessions = AdminSessions("s3cret")
        assert sessions.login("wrong") is None
        token = sessions.login("s3cret")
        assert sessions.is_admin(token)
        assert not sessions.is_admin(None)
        assert sessions.logout(token)
        assert not sessions.is_admin(token)


class TestCatalog:
    @pytest.mark.asyncio
    async def test_service_crud(self):
        shop = await loaded_shop()
        catalog = shop.catalog(True)
        service = catalog.add_service(basic_service())
        assert service.workshop_worker_commission is None

        updated = catalog.update_service(service.id, ServiceUpdate(price=22000))
        assert updated.price == 22000
        assert updated.workshop_price == 15000

        catalog.delete_service(service.id)
        assert shop.store.services == []

    @pytest.mark.asyncio
    async def test_invalid_input_rejected(self):
        shop = await loaded_shop()
        catalog = shop.catalog(True)
        with pytest.raises(InvalidEntity):
            catalog.add_worker("   ")
        with pytest.raises(InvalidEntity):
            catalog.add_expense("", 1000)
        with pytest.raises(InvalidEntity):
            catalog.add_expense("Jabón", -5)
        with pytest.raises(NotFound):
            catalog.update_worker("ghost", active=False)
        assert shop.store.workers == [] and shop.store.expenses == []

    @pytest.mark.asyncio
    async def test_deactivated_worker_leaves_roster(self):
        shop = await loaded_shop()
        catalog = shop.catalog(True)
        worker = catalog.add_worker("Ana")
        catalog.update_worker(worker.id, active=False)
        assert shop.store.active_workers() == []
        assert shop.store.get_worker(worker.id).name == "Ana"

    @pytest.mark.asyncio
    async def test_deleting_service_zeroes_its_vehicles(self):
        shop = await loaded_shop()
        catalog = shop.catalog(True)
        service = catalog.add_service(basic_service())
        worker = catalog.add_worker("Ana")
        v = shop.operator().create_vehicle("abc12d", service.id)
        shop.operator().request_transition(v.id, "washing", worker.id)
        shop.operator().request_transition(v.id, "ready")
        assert totals_for(shop.store).revenue == 20000

        catalog.delete_service(service.id)
        assert shop.store.get_vehicle(v.id).status == VehicleStatus.READY
        assert totals_for(shop.store).revenue == 0

    @pytest.mark.asyncio
    async def test_expense_reduces_net(self):
        shop = await loaded_shop()
        expense = shop.catalog(True).add_expense("Jabón", 3000)
        assert expense.date is not None
        assert totals_for(shop.store).net == -3000
        await shop.close()
        shop.outbox.adapter.persist.assert_awaited_with(CollectionName.EXPENSES, [expense.to_wire()])


class TestCustomerLink:
    def test_link_only_for_ready_vehicle_with_phone(self):
        ready = Vehicle(id="m1", plate="ABC12D", phone="300 123 4567", service_id="s1",
                        worker_id="w1", status="ready", entry_time=utcnow_ms())
        url = customer_ready_link(ready, shop_name="StarWash", country_code="57")
        assert url.startswith("https://wa.me/573001234567?text=")
        assert "ABC12D" in url

        assert customer_ready_link(ready.model_copy(update={"phone": ""})) is None
        assert customer_ready_link(ready.model_copy(update={"status": VehicleStatus.WASHING})) is None

    def test_phone_with_country_code_not_doubled(self):
        ready = Vehicle(id="m1", plate="ABC12D", phone="+57 300 123 4567", service_id="s1",
                        worker_id="w1", status="ready", entry_time=utcnow_ms())
        for phone in ("+57 300 123 4567", "0057 3001234567", "573001234567"):
            url = customer_ready_link(ready.model_copy(update={"phone": phone}), country_code="57")
            assert url.startswith("https://wa.me/573001234567?text=")
