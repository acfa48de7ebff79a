"""blu_financing REST endpoints.

POST /financing/quote                 — BluFacilita amortization preview
GET  /financing/card-fees             — credit-card fee table for a net value
POST /orders/{order_id}/payments      — register a client payment and reconcile
GET  /orders/{order_id}/payments      — payment history of an order
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.blu_common.database import get_db_session
from src.blu_common.response import ApiResponse, success_response
from src.blu_financing.application.schemas import QuoteRequest, RegisterPaymentRequest
from src.blu_financing.application.service import FinancingApplicationService

router = APIRouter(tags=["financing"])

_service = FinancingApplicationService()


@router.post("/financing/quote")
async def quote(body: QuoteRequest, request: Request) -> ApiResponse:
    result = _service.quote(body)
    resp = success_response(result.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.get("/financing/card-fees")
async def card_fees(
    request: Request,
    net_cents: int = Query(..., gt=0, description="Amount the store wants to receive"),
) -> ApiResponse:
    quotes = _service.card_fee_quote(net_cents)
    resp = success_response({"items": [q.model_dump() for q in quotes]})
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.post("/orders/{order_id}/payments", status_code=201)
async def register_payment(
    order_id: str,
    body: RegisterPaymentRequest,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.register_payment(db, order_id, body)
    resp = success_response(result.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.get("/orders/{order_id}/payments")
async def list_payments(
    order_id: str,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.list_payments(db, order_id)
    resp = success_response(result.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp
