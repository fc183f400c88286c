# motowash/services/finance_service.py
"""
Financial Engine: pure functions over the entity store.

Money is integer minor units (pesos), summed exactly. Only ready and
delivered vehicles are billed; waiting/washing ones have produced nothing
yet. A vehicle whose service was deleted contributes zero, never an error.
Commission larger than price is computed as-is.

Time filtering takes any predicate over a timestamp; TimeWindow covers the
usual calendar day / calendar month cases in the shop's timezone.
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Callable, Iterable, Optional

from motowash.schemas.entities import CollectionName, Expense, Service, Vehicle, VehicleStatus
from motowash.schemas.finance import (
    FinancialTotals, HistoryItemOut, PeriodSummary, VehicleEconomics, WorkerSalaryOut, WorkshopBillOut,
)
from motowash.services.entity_store import EntityStore

TimePredicate = Callable[[datetime], bool]

COMPLETED_STATUSES = {VehicleStatus.READY, VehicleStatus.DELIVERED}


@dataclass(frozen=True)
class TimeWindow:
    """Closed interval [start, end]; callable as a TimePredicate."""
    start: datetime
    end: datetime

    def __call__(self, ts: datetime) -> bool:
        return self.start <= ts <= self.end


def day_window(day: date, tz: tzinfo) -> TimeWindow:
    """Start to end of a calendar day in tz."""
    return TimeWindow(datetime.combine(day, time.min, tzinfo=tz), datetime.combine(day, time.max, tzinfo=tz))


def month_window(day: date, tz: tzinfo) -> TimeWindow:
    """Calendar month containing `day`, in tz."""
    first = day.replace(day=1)
    next_first = (first + timedelta(days=32)).replace(day=1)
    last = next_first - timedelta(days=1)
    return TimeWindow(datetime.combine(first, time.min, tzinfo=tz), datetime.combine(last, time.max, tzinfo=tz))


def is_completed(vehicle: Vehicle) -> bool:
    return vehicle.status in COMPLETED_STATUSES


# ── Per vehicle ───────────────────────────────────────────────────────────────

def service_commission(service: Service, for_workshop: bool) -> int:
    if for_workshop and service.workshop_worker_commission is not None:
        return service.workshop_worker_commission
    return service.worker_commission


def vehicle_economics(vehicle: Vehicle, services: dict[str, Service]) -> VehicleEconomics:
    service = services.get(vehicle.service_id)
    if service is None:
        return VehicleEconomics()
    revenue = service.workshop_price if vehicle.is_workshop else service.price
    return VehicleEconomics(revenue=revenue, commission=service_commission(service, vehicle.is_workshop))


def quote_price(service: Service, workshop_id: Optional[str]) -> int:
    """What the customer pays at intake."""
    return service.workshop_price if workshop_id else service.price


# ── Aggregates ────────────────────────────────────────────────────────────────

def _in_window(ts: datetime, window: Optional[TimePredicate]) -> bool:
    return window is None or window(ts)


def aggregate(vehicles: Iterable[Vehicle], expenses: Iterable[Expense], services: dict[str, Service],
              window: Optional[TimePredicate] = None) -> FinancialTotals:
    """
    Net = Σ revenue − Σ commission (completed vehicles) − Σ expenses.
    Vehicles are windowed on entry time, expenses on their date.
    """
    totals = FinancialTotals()
    for v in vehicles:
        if not _in_window(v.entry_time, window):
            continue
        totals.vehicle_count += 1
        if not is_completed(v):
            continue
        econ = vehicle_economics(v, services)
        totals.completed_count += 1
        totals.revenue += econ.revenue
        totals.commissions += econ.commission
    totals.expenses = sum(e.amount for e in expenses if _in_window(e.date, window))
    totals.net = totals.revenue - totals.commissions - totals.expenses
    return totals


def totals_for(store: EntityStore, window: Optional[TimePredicate] = None) -> FinancialTotals:
    return aggregate(store.vehicles, store.expenses, store.services_by_id(), window)


def period_summary(store: EntityStore, reference: date, tz: tzinfo) -> PeriodSummary:
    """Same-day and same-month figures for the statistics tab."""
    return PeriodSummary(
        reference_date=reference,
        daily=totals_for(store, day_window(reference, tz)),
        monthly=totals_for(store, month_window(reference, tz)),
    )


def worker_salary(store: EntityStore, worker_id: str, window: Optional[TimePredicate] = None) -> WorkerSalaryOut:
    """Lifetime commission of a worker's completed vehicles unless a window is given."""
    worker = store.get_worker(worker_id)
    services = store.services_by_id()
    done = [
        v for v in store.vehicles
        if v.worker_id == worker_id and is_completed(v) and _in_window(v.entry_time, window)
    ]
    return WorkerSalaryOut(
        worker_id=worker.id,
        name=worker.name,
        active=worker.active,
        completed_count=len(done),
        salary=sum(vehicle_economics(v, services).commission for v in done),
    )


def worker_salaries(store: EntityStore, window: Optional[TimePredicate] = None) -> list[WorkerSalaryOut]:
    """Every worker, inactive ones included: their history still earns."""
    return [worker_salary(store, w.id, window) for w in store.workers]


def workshop_daily_bill(store: EntityStore, workshop_id: str, day: date, tz: tzinfo) -> WorkshopBillOut:
    """Workshop price of each completed vehicle the workshop brought in on `day`."""
    workshop = store.find(CollectionName.WORKSHOPS, workshop_id)
    window = day_window(day, tz)
    services = store.services_by_id()
    vehicles = [
        v for v in store.vehicles
        if v.workshop_id == workshop_id and is_completed(v) and window(v.entry_time)
    ]
    total = sum(services[v.service_id].workshop_price for v in vehicles if v.service_id in services)
    return WorkshopBillOut(
        workshop_id=workshop_id,
        name=workshop.name if workshop else None,
        day=day,
        total=total,
        vehicles=vehicles,
    )


def recent_history(store: EntityStore, limit: int = 50) -> list[HistoryItemOut]:
    """Completed vehicles, newest entry first. A limit below 1 returns nothing."""
    if limit < 1:
        return []
    services = store.services_by_id()
    done = sorted((v for v in store.vehicles if is_completed(v)), key=lambda v: v.entry_time, reverse=True)
    return [
        HistoryItemOut(
            vehicle=v,
            service_name=services[v.service_id].name if v.service_id in services else None,
            revenue=vehicle_economics(v, services).revenue,
        )
        for v in done[:limit]
    ]
