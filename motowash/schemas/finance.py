# motowash/schemas/finance.py
from datetime import date
from typing import Optional

from motowash.schemas.entities import CamelModel, Vehicle


class VehicleEconomics(CamelModel):
    revenue: int = 0
    commission: int = 0

    @property
    def net(self) -> int:
        return self.revenue - self.commission


class FinancialTotals(CamelModel):
    vehicle_count: int = 0       # all intake in the window
    completed_count: int = 0     # ready + delivered, the only ones billed
    revenue: int = 0
    commissions: int = 0
    expenses: int = 0
    net: int = 0


class PeriodSummary(CamelModel):
    reference_date: date
    daily: FinancialTotals
    monthly: FinancialTotals


class WorkerSalaryOut(CamelModel):
    worker_id: str
    name: str
    active: bool
    completed_count: int
    salary: int


class WorkshopBillOut(CamelModel):
    workshop_id: str
    name: Optional[str]
    day: date
    total: int
    vehicles: list[Vehicle]


class HistoryItemOut(CamelModel):
    vehicle: Vehicle
    service_name: Optional[str]   # None when the service was deleted
    revenue: int
