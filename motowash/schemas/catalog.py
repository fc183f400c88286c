# motowash/schemas/catalog.py
from pydantic import Field
from typing import Optional

from motowash.schemas.entities import CamelModel


class WorkerCreate(CamelModel):
    name: str


class WorkerUpdate(CamelModel):
    name: Optional[str] = None
    active: Optional[bool] = None


class WorkshopCreate(CamelModel):
    name: str


class WorkshopUpdate(CamelModel):
    name: Optional[str] = None
    active: Optional[bool] = None


class ServiceCreate(CamelModel):
    name: str
    price: int = Field(ge=0)
    workshop_price: int = Field(ge=0)
    worker_commission: int = Field(ge=0)
    workshop_worker_commission: Optional[int] = Field(default=None, ge=0)   # falls back to worker_commission


class ServiceUpdate(CamelModel):
    name: Optional[str] = None
    price: Optional[int] = Field(default=None, ge=0)
    workshop_price: Optional[int] = Field(default=None, ge=0)
    worker_commission: Optional[int] = Field(default=None, ge=0)
    workshop_worker_commission: Optional[int] = Field(default=None, ge=0)


class ExpenseCreate(CamelModel):
    description: str
    amount: int = Field(ge=0)
