"""HTTP-level tests for the order and financing routers (no database)."""

from datetime import UTC, date, datetime
from unittest.mock import AsyncMock

import pytest
from httpx import AsyncClient

from src.blu_common.clock import FixedClock
from src.blu_common.enums import PaymentMethod
from src.blu_financing.api import router as financing_api
from src.blu_financing.application.service import FinancingApplicationService
from src.blu_financing.domain.schedule import generate_schedule
from src.blu_order.api import router as order_api
from src.blu_order.application.service import OrderApplicationService
from src.blu_order.domain.models import Order

pytestmark = pytest.mark.usefixtures("no_database")


def _make_financed_order() -> Order:
    return Order(
        id="ord-1",
        customer_name="Maria Souza",
        product_name="iPhone 15",
        order_date=date(2026, 1, 10),
        purchase_price_cents=300000,
        payment_method=PaymentMethod.BLU_FACILITA,
        installment_count=3,
        annual_rate_bps=3600,
        financed_amount_cents=300000,
        total_with_interest_cents=327000,
        installment_value_cents=109000,
        installments=generate_schedule("ord-1", 3, 109000, date(2026, 1, 10)),
        created_at=datetime(2026, 1, 10, 12, 0, tzinfo=UTC),
    )


@pytest.fixture
def order_repo(monkeypatch: pytest.MonkeyPatch, fixed_clock: FixedClock) -> AsyncMock:
    repo = AsyncMock()
    repo.get_by_id.return_value = None
    monkeypatch.setattr(
        order_api, "_service", OrderApplicationService(repo=repo, clock=fixed_clock)
    )
    return repo


@pytest.fixture
def financing_repos(
    monkeypatch: pytest.MonkeyPatch, fixed_clock: FixedClock
) -> tuple[AsyncMock, AsyncMock]:
    order_repo = AsyncMock()
    order_repo.get_by_id.return_value = _make_financed_order()
    payment_repo = AsyncMock()
    payment_repo.save.side_effect = lambda payment, db: payment
    monkeypatch.setattr(
        financing_api,
        "_service",
        FinancingApplicationService(
            order_repo=order_repo, payment_repo=payment_repo, clock=fixed_clock
        ),
    )
    return order_repo, payment_repo


class TestHealth:
    async def test_health(self, client: AsyncClient) -> None:
        resp = await client.get("/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "ok"


class TestFinancingRoutes:
    async def test_quote(self, client: AsyncClient) -> None:
        resp = await client.post(
            "/api/v1/financing/quote",
            json={
                "product_value_cents": 300000,
                "installment_count": 3,
                "uses_special_rate": True,
                "special_annual_rate_bps": 3600,
            },
        )
        assert resp.status_code == 200
        body = resp.json()
        assert body["code"] == 0
        assert body["data"]["installment_value_cents"] == 109000
        assert body["request_id"] == resp.headers["X-Request-ID"]

    async def test_quote_validation_error(self, client: AsyncClient) -> None:
        resp = await client.post(
            "/api/v1/financing/quote",
            json={"product_value_cents": 300000, "installment_count": 0},
        )
        assert resp.status_code == 422

    async def test_card_fees(self, client: AsyncClient) -> None:
        resp = await client.get("/api/v1/financing/card-fees", params={"net_cents": 100000})
        assert resp.status_code == 200
        items = resp.json()["data"]["items"]
        assert [i["installments"] for i in items] == list(range(3, 13))

    async def test_card_fees_requires_positive_net(self, client: AsyncClient) -> None:
        resp = await client.get("/api/v1/financing/card-fees", params={"net_cents": 0})
        assert resp.status_code == 422

    async def test_register_payment(
        self, client: AsyncClient, financing_repos: tuple[AsyncMock, AsyncMock]
    ) -> None:
        resp = await client.post(
            "/api/v1/orders/ord-1/payments",
            json={"amount_cents": 150000, "method": "PIX", "paid_on": "2026-02-05"},
        )
        assert resp.status_code == 201
        data = resp.json()["data"]
        assert data["touched_installments"] == [1, 2]
        assert data["installments"][1]["status"] == "PARTIALLY_PAID"
        assert data["installments"][0]["due_date"] == "2026-02-10"
        assert data["payment"]["amount_display"] == "R$ 1.500,00"

    async def test_register_payment_unknown_order(
        self, client: AsyncClient, financing_repos: tuple[AsyncMock, AsyncMock]
    ) -> None:
        financing_repos[0].get_by_id.return_value = None
        resp = await client.post(
            "/api/v1/orders/missing/payments", json={"amount_cents": 1000}
        )
        assert resp.status_code == 404
        body = resp.json()
        assert body["code"] == 2001
        assert body["data"] is None
        assert body["request_id"] == resp.headers["X-Request-ID"]


class TestOrderRoutes:
    async def test_create_financed_order(self, client: AsyncClient, order_repo: AsyncMock) -> None:
        resp = await client.post(
            "/api/v1/orders",
            json={
                "customer_name": "Maria Souza",
                "product_name": "iPhone 15",
                "purchase_price_cents": 300000,
                "payment_method": "BLU_FACILITA",
                "installment_count": 3,
                "uses_special_rate": True,
                "special_annual_rate_bps": 3600,
                "order_date": "2026-01-10",
            },
        )
        assert resp.status_code == 201
        data = resp.json()["data"]
        assert data["fulfillment_status"] == "CREATED"
        assert data["financing"]["installment_value_cents"] == 109000
        assert len(data["financing"]["installments"]) == 3
        order_repo.save.assert_awaited_once()

    async def test_create_requires_installments_for_financing(
        self, client: AsyncClient, order_repo: AsyncMock
    ) -> None:
        resp = await client.post(
            "/api/v1/orders",
            json={
                "customer_name": "Maria Souza",
                "product_name": "iPhone 15",
                "purchase_price_cents": 300000,
                "payment_method": "BLU_FACILITA",
            },
        )
        assert resp.status_code == 422
        order_repo.save.assert_not_awaited()

    async def test_get_unknown_order(self, client: AsyncClient, order_repo: AsyncMock) -> None:
        resp = await client.get("/api/v1/orders/missing")
        assert resp.status_code == 404
        assert resp.json()["code"] == 2001

    async def test_timeline(self, client: AsyncClient, order_repo: AsyncMock) -> None:
        order_repo.get_by_id.return_value = _make_financed_order()
        resp = await client.get("/api/v1/orders/ord-1/timeline")
        assert resp.status_code == 200
        milestones = resp.json()["data"]["milestones"]
        assert milestones[0]["status"] == "CREATED"
        assert milestones[-1]["status"] == "DELIVERED"

    async def test_imei_lock_refused_for_current_contract(
        self, client: AsyncClient, order_repo: AsyncMock
    ) -> None:
        order = _make_financed_order()
        order.imei = "356789012345678"
        order_repo.get_by_id.return_value = order
        resp = await client.post("/api/v1/orders/ord-1/imei-lock")
        assert resp.status_code == 422
        assert resp.json()["code"] == 2004

    async def test_list_orders(self, client: AsyncClient, order_repo: AsyncMock) -> None:
        order_repo.list_orders.return_value = [_make_financed_order()]
        resp = await client.get("/api/v1/orders", params={"limit": 5, "payment_method": "BLU_FACILITA"})
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["has_more"] is False
        assert data["items"][0]["id"] == "ord-1"
        assert order_repo.list_orders.call_args[0][1] == "BLU_FACILITA"
