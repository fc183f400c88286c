# motowash/routers/finance.py
"""Manager figures: statistics, salaries, workshop billing, history. All admin-only."""

from fastapi import APIRouter, Depends, Query
from datetime import date, datetime
from typing import Optional
from motowash.config import settings
from motowash.deps import get_shop, is_admin
from motowash.schemas.finance import HistoryItemOut, PeriodSummary, WorkerSalaryOut, WorkshopBillOut
from motowash.services import finance_service
from motowash.services.finance_service import TimeWindow, day_window
from motowash.services.shop_session import ShopSession

router = APIRouter()


def _today() -> date:
    return datetime.now(settings.TIMEZONE).date()


def _range(start: Optional[date], end: Optional[date]) -> Optional[TimeWindow]:
    """Inclusive day range in shop time; None when neither bound is given (lifetime)."""
    if start is None and end is None:
        return None
    tz = settings.TIMEZONE
    first = day_window(start or end, tz)
    last = day_window(end or start, tz)
    return TimeWindow(first.start, last.end)


@router.get("/finance/summary", response_model=PeriodSummary, summary="Daily + monthly revenue, commissions, net")
async def get_summary(target_date: Optional[date] = None, admin: bool = Depends(is_admin),
                      shop: ShopSession = Depends(get_shop)):
    shop.require_admin(admin, "statistics")
    return finance_service.period_summary(shop.store, target_date or _today(), settings.TIMEZONE)


@router.get("/finance/salaries", response_model=list[WorkerSalaryOut], summary="Accumulated salary per worker")
async def get_salaries(start: Optional[date] = None, end: Optional[date] = None,
                       admin: bool = Depends(is_admin), shop: ShopSession = Depends(get_shop)):
    shop.require_admin(admin, "salaries")
    return finance_service.worker_salaries(shop.store, _range(start, end))


@router.get("/finance/salaries/{worker_id}", response_model=WorkerSalaryOut)
async def get_salary(worker_id: str, start: Optional[date] = None, end: Optional[date] = None,
                     admin: bool = Depends(is_admin), shop: ShopSession = Depends(get_shop)):
    shop.require_admin(admin, "salaries")
    return finance_service.worker_salary(shop.store, worker_id, _range(start, end))


@router.get("/finance/workshops/bills", response_model=list[WorkshopBillOut], summary="Every workshop's bill for a day")
async def get_workshop_bills(target_date: Optional[date] = None, admin: bool = Depends(is_admin),
                             shop: ShopSession = Depends(get_shop)):
    shop.require_admin(admin, "workshop billing")
    day = target_date or _today()
    return [finance_service.workshop_daily_bill(shop.store, w.id, day, settings.TIMEZONE)
            for w in shop.store.workshops]


@router.get("/finance/workshops/{workshop_id}/bill", response_model=WorkshopBillOut)
async def get_workshop_bill(workshop_id: str, target_date: Optional[date] = None,
                            admin: bool = Depends(is_admin), shop: ShopSession = Depends(get_shop)):
    shop.require_admin(admin, "workshop billing")
    return finance_service.workshop_daily_bill(shop.store, workshop_id, target_date or _today(), settings.TIMEZONE)


@router.get("/finance/history", response_model=list[HistoryItemOut], summary="Latest completed vehicles")
async def get_history(limit: int = Query(settings.HISTORY_LIMIT, ge=1, le=500), admin: bool = Depends(is_admin),
                      shop: ShopSession = Depends(get_shop)):
    shop.require_admin(admin, "history")
    return finance_service.recent_history(shop.store, limit)
