# motowash/routers/vehicles.py
"""
Front-desk board: intake, status transitions, lane assignment, deletion.
Handlers are async so the outbox can schedule sync deliveries on the loop.
"""

from fastapi import APIRouter, Depends
from typing import Optional
from motowash.deps import get_shop, is_admin
from motowash.schemas.entities import CollectionName, Vehicle, VehicleStatus
from motowash.schemas.notification import CustomerLinkOut
from motowash.schemas.vehicle import (
    AssignmentRequest, BoardOut, PendingAssignmentOut, QuoteOut, TransitionRequest, VehicleCreate, WorkerLaneOut,
)
from motowash.services.finance_service import quote_price
from motowash.services.notification_service import customer_ready_link
from motowash.services.shop_session import ShopSession
from motowash.services.workflow_service import PendingAssignment

router = APIRouter()


def _pending_out(pending) -> PendingAssignmentOut:
    if isinstance(pending, PendingAssignment):
        return PendingAssignmentOut(pending=True, vehicle_id=pending.vehicle_id, worker_id=pending.worker_id)
    return PendingAssignmentOut(pending=False)


@router.get("/board", response_model=BoardOut, summary="Waiting pool + one lane per active worker")
async def get_board(shop: ShopSession = Depends(get_shop)):
    lanes = []
    for worker in shop.store.active_workers():
        lane = shop.workflow.worker_lane(worker.id)
        lanes.append(WorkerLaneOut(worker_id=worker.id, worker_name=worker.name,
                                   washing=lane["washing"], ready=lane["ready"]))
    return BoardOut(loading=shop.loading, waiting=shop.workflow.waiting_pool(), lanes=lanes)


@router.get("/vehicles", response_model=list[Vehicle], summary="List vehicles, optionally by status")
async def list_vehicles(status: Optional[VehicleStatus] = None, shop: ShopSession = Depends(get_shop)):
    if status is None:
        return shop.store.vehicles
    return [v for v in shop.store.vehicles if v.status == status]


@router.get("/vehicles/quote", response_model=QuoteOut, summary="Price for a service at intake")
async def quote(service_id: str, workshop_id: Optional[str] = None, shop: ShopSession = Depends(get_shop)):
    service = shop.store.require(CollectionName.SERVICES, service_id)
    return QuoteOut(service_id=service_id, workshop_id=workshop_id, price=quote_price(service, workshop_id))


@router.post("/vehicles", response_model=Vehicle, status_code=201, summary="Register a motorcycle in the waiting pool")
async def intake_vehicle(body: VehicleCreate, shop: ShopSession = Depends(get_shop)):
    return shop.operator().create_vehicle(
        plate=body.plate, service_id=body.service_id, phone=body.phone or "", workshop_id=body.workshop_id,
    )


@router.get("/vehicles/{vehicle_id}", response_model=Vehicle)
async def get_vehicle(vehicle_id: str, shop: ShopSession = Depends(get_shop)):
    return shop.store.get_vehicle(vehicle_id)


@router.post("/vehicles/{vehicle_id}/transition", response_model=Vehicle, summary="Move a vehicle to another status")
async def transition_vehicle(vehicle_id: str, body: TransitionRequest, shop: ShopSession = Depends(get_shop)):
    return shop.operator().request_transition(vehicle_id, body.status, body.worker_id)


@router.delete("/vehicles/{vehicle_id}", response_model=Vehicle, summary="Delete a vehicle record (admin)")
async def delete_vehicle(vehicle_id: str, admin: bool = Depends(is_admin), shop: ShopSession = Depends(get_shop)):
    return shop.delete_vehicle(vehicle_id, admin)


@router.get("/vehicles/{vehicle_id}/customer-link", response_model=CustomerLinkOut,
            summary="WhatsApp link telling the customer the motorcycle is ready")
async def customer_link(vehicle_id: str, shop: ShopSession = Depends(get_shop)):
    vehicle = shop.store.get_vehicle(vehicle_id)
    return CustomerLinkOut(vehicle_id=vehicle.id, plate=vehicle.plate, phone=vehicle.phone or None,
                           url=customer_ready_link(vehicle))


# ── Two-phase lane assignment ────────────────────────────────────────────────

@router.get("/assignments/pending", response_model=PendingAssignmentOut)
async def get_pending(shop: ShopSession = Depends(get_shop)):
    return _pending_out(shop.workflow.pending)


@router.post("/assignments/propose", response_model=PendingAssignmentOut,
             summary="Vehicle dropped on a worker lane, held until confirmed")
async def propose_assignment(body: AssignmentRequest, shop: ShopSession = Depends(get_shop)):
    return _pending_out(shop.operator().propose_assignment(body.vehicle_id, body.worker_id))


@router.post("/assignments/confirm", response_model=Vehicle, summary="Commit the pending assignment")
async def confirm_assignment(body: Optional[AssignmentRequest] = None, shop: ShopSession = Depends(get_shop)):
    if body is None:
        return shop.operator().confirm_assignment()
    return shop.operator().confirm_assignment(body.vehicle_id, body.worker_id)


@router.delete("/assignments/pending", response_model=PendingAssignmentOut, summary="Cancel the pending assignment")
async def cancel_assignment(shop: ShopSession = Depends(get_shop)):
    shop.workflow.cancel_assignment()
    return _pending_out(shop.workflow.pending)
