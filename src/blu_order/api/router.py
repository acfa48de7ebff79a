"""blu_order REST endpoints.

POST  /orders                         — create (BluFacilita schedule generated here)
GET   /orders                         — list with cursor pagination
GET   /orders/{order_id}              — detail with installments projected for today
PATCH /orders/{order_id}              — edit descriptive fields
POST  /orders/{order_id}/status       — fulfillment transition
POST  /orders/{order_id}/arrival      — register arrival at the office
POST  /orders/{order_id}/imei-lock    — toggle IMEI lock
GET   /orders/{order_id}/timeline     — milestone timeline
"""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.blu_common.database import get_db_session
from src.blu_common.response import ApiResponse, success_response
from src.blu_order.application.schemas import (
    ChangeStatusRequest,
    CreateOrderRequest,
    RegisterArrivalRequest,
    UpdateOrderRequest,
)
from src.blu_order.application.service import OrderApplicationService

router = APIRouter(prefix="/orders", tags=["orders"])

_service = OrderApplicationService()


def _ok(request: Request, data: Any) -> ApiResponse:
    resp = success_response(data)
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.post("", status_code=201)
async def create_order(
    body: CreateOrderRequest,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.create_order(db, body)
    return _ok(request, result.model_dump())


@router.get("")
async def list_orders(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    status: str | None = Query(None, description="Filter by fulfillment status"),
    payment_method: str | None = Query(None),
    contract_status: str | None = Query(None, description="Filter by stored contract status"),
    limit: int = Query(20, ge=1, le=100),
    cursor: str | None = Query(None),
) -> ApiResponse:
    result = await _service.list_orders(db, status, payment_method, contract_status, cursor, limit)
    return _ok(request, result.model_dump())


@router.get("/{order_id}")
async def get_order(
    order_id: str,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.get_order(db, order_id)
    return _ok(request, result.model_dump())


@router.patch("/{order_id}")
async def update_order(
    order_id: str,
    body: UpdateOrderRequest,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.update_order(db, order_id, body)
    return _ok(request, result.model_dump())


@router.post("/{order_id}/status")
async def change_status(
    order_id: str,
    body: ChangeStatusRequest,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.change_status(db, order_id, body)
    return _ok(request, result.model_dump())


@router.post("/{order_id}/arrival")
async def register_arrival(
    order_id: str,
    body: RegisterArrivalRequest,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.register_arrival(db, order_id, body)
    return _ok(request, result.model_dump())


@router.post("/{order_id}/imei-lock")
async def toggle_imei_lock(
    order_id: str,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.toggle_imei_lock(db, order_id)
    return _ok(request, result.model_dump())


@router.get("/{order_id}/timeline")
async def get_timeline(
    order_id: str,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.get_timeline(db, order_id)
    return _ok(request, result.model_dump())
