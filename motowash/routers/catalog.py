# motowash/routers/catalog.py
"""Workers, services, workshops and expenses. Reads are open except expenses; writes need an admin session."""

from fastapi import APIRouter, Depends
from motowash.deps import get_shop, is_admin
from motowash.schemas.catalog import (
    ExpenseCreate, ServiceCreate, ServiceUpdate, WorkerCreate, WorkerUpdate, WorkshopCreate, WorkshopUpdate,
)
from motowash.schemas.entities import Expense, Service, Worker, Workshop
from motowash.services.shop_session import ShopSession

router = APIRouter()


# ── Workers ──────────────────────────────────────────────────────────────────

@router.get("/workers", response_model=list[Worker], summary="Workers; active_only for the board roster")
async def list_workers(active_only: bool = False, shop: ShopSession = Depends(get_shop)):
    return shop.store.active_workers() if active_only else shop.store.workers


@router.post("/workers", response_model=Worker, status_code=201)
async def add_worker(body: WorkerCreate, admin: bool = Depends(is_admin), shop: ShopSession = Depends(get_shop)):
    return shop.catalog(admin).add_worker(body.name)


@router.patch("/workers/{worker_id}", response_model=Worker, summary="Rename or (de)activate a worker")
async def update_worker(worker_id: str, body: WorkerUpdate, admin: bool = Depends(is_admin),
                        shop: ShopSession = Depends(get_shop)):
    return shop.catalog(admin).update_worker(worker_id, name=body.name, active=body.active)


@router.delete("/workers/{worker_id}", response_model=Worker)
async def delete_worker(worker_id: str, admin: bool = Depends(is_admin), shop: ShopSession = Depends(get_shop)):
    return shop.catalog(admin).delete_worker(worker_id)


# ── Services ─────────────────────────────────────────────────────────────────

@router.get("/services", response_model=list[Service])
async def list_services(shop: ShopSession = Depends(get_shop)):
    return shop.store.services


@router.post("/services", response_model=Service, status_code=201)
async def add_service(body: ServiceCreate, admin: bool = Depends(is_admin), shop: ShopSession = Depends(get_shop)):
    return shop.catalog(admin).add_service(body)


@router.patch("/services/{service_id}", response_model=Service, summary="Change prices or commissions")
async def update_service(service_id: str, body: ServiceUpdate, admin: bool = Depends(is_admin),
                         shop: ShopSession = Depends(get_shop)):
    return shop.catalog(admin).update_service(service_id, body)


@router.delete("/services/{service_id}", response_model=Service)
async def delete_service(service_id: str, admin: bool = Depends(is_admin), shop: ShopSession = Depends(get_shop)):
    return shop.catalog(admin).delete_service(service_id)


# ── Workshops ────────────────────────────────────────────────────────────────

@router.get("/workshops", response_model=list[Workshop], summary="Workshops; active_only for intake")
async def list_workshops(active_only: bool = False, shop: ShopSession = Depends(get_shop)):
    return shop.store.active_workshops() if active_only else shop.store.workshops


@router.post("/workshops", response_model=Workshop, status_code=201)
async def add_workshop(body: WorkshopCreate, admin: bool = Depends(is_admin), shop: ShopSession = Depends(get_shop)):
    return shop.catalog(admin).add_workshop(body.name)


@router.patch("/workshops/{workshop_id}", response_model=Workshop)
async def update_workshop(workshop_id: str, body: WorkshopUpdate, admin: bool = Depends(is_admin),
                          shop: ShopSession = Depends(get_shop)):
    return shop.catalog(admin).update_workshop(workshop_id, name=body.name, active=body.active)


@router.delete("/workshops/{workshop_id}", response_model=Workshop)
async def delete_workshop(workshop_id: str, admin: bool = Depends(is_admin), shop: ShopSession = Depends(get_shop)):
    return shop.catalog(admin).delete_workshop(workshop_id)


# ── Expenses ─────────────────────────────────────────────────────────────────

@router.get("/expenses", response_model=list[Expense], summary="Expenses, newest first (admin)")
async def list_expenses(admin: bool = Depends(is_admin), shop: ShopSession = Depends(get_shop)):
    shop.require_admin(admin, "expenses")
    return sorted(shop.store.expenses, key=lambda e: e.date, reverse=True)


@router.post("/expenses", response_model=Expense, status_code=201)
async def add_expense(body: ExpenseCreate, admin: bool = Depends(is_admin), shop: ShopSession = Depends(get_shop)):
    return shop.catalog(admin).add_expense(body.description, body.amount)


@router.delete("/expenses/{expense_id}", response_model=Expense)
async def delete_expense(expense_id: str, admin: bool = Depends(is_admin), shop: ShopSession = Depends(get_shop)):
    return shop.catalog(admin).delete_expense(expense_id)
