"""Integration tests for Credit API endpoints"""

import pytest
from decimal import Decimal
from httpx import AsyncClient

BASE = "/api/credit"


async def create_sale(client: AsyncClient, customer_id: str, total: str) -> dict:
    response = await client.post(f"{BASE}/sales", json={"customer_id": customer_id, "total": total})
    assert response.status_code == 201, response.text
    return response.json()


def payment_payload(customer_id: str, amount: str, key: str) -> dict:
    return {
        "customer_id": customer_id,
        "amount": amount,
        "method": "cash",
        "registered_by": "cashier_03",
        "idempotency_key": key,
    }


class TestCreditAPIIntegration:
    """Integration test suite for Credit API endpoints"""

    @pytest.mark.asyncio
    async def test_create_sale_and_pay(self, client: AsyncClient):
        """POST /sales then POST /sales/{id}/payments twice"""
        created = await create_sale(client, "cust_api_1", "100000.00")
        sale_id = created["sale"]["id"]
        assert created["sale"]["payment_status"] == "pending"
        assert created["account"]["available_credit"] == "unlimited"

        response = await client.post(
            f"{BASE}/sales/{sale_id}/payments",
            json=payment_payload("cust_api_1", "40000.00", "api-1"),
        )
        assert response.status_code == 200
        data = response.json()
        assert data["sale"]["payment_status"] == "partial"
        assert Decimal(data["sale"]["amount_pending"]) == Decimal("60000.00")
        assert Decimal(data["customer_debt"]) == Decimal("60000.00")
        assert data["replayed"] is False

        response = await client.post(
            f"{BASE}/sales/{sale_id}/payments",
            json=payment_payload("cust_api_1", "60000.00", "api-2"),
        )
        assert response.json()["sale"]["payment_status"] == "paid"

        history = await client.get(f"{BASE}/sales/{sale_id}/payments")
        assert history.status_code == 200
        assert [p["idempotency_key"] for p in history.json()["payments"]] == ["api-1", "api-2"]

    @pytest.mark.asyncio
    async def test_replayed_payment(self, client: AsyncClient):
        sale_id = (await create_sale(client, "cust_api_2", "100.00"))["sale"]["id"]
        payload = payment_payload("cust_api_2", "10.00", "api-replay")

        first = await client.post(f"{BASE}/sales/{sale_id}/payments", json=payload)
        second = await client.post(f"{BASE}/sales/{sale_id}/payments", json=payload)

        assert first.status_code == 200
        assert second.status_code == 200
        assert second.json()["replayed"] is True
        assert second.json()["payment"]["id"] == first.json()["payment"]["id"]

    @pytest.mark.asyncio
    async def test_overpayment_returns_422(self, client: AsyncClient):
        sale_id = (await create_sale(client, "cust_api_3", "100.00"))["sale"]["id"]

        response = await client.post(
            f"{BASE}/sales/{sale_id}/payments",
            json=payment_payload("cust_api_3", "150.00", "api-over"),
        )

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "AMOUNT_EXCEEDS_PENDING"

    @pytest.mark.asyncio
    async def test_settled_sale_returns_409(self, client: AsyncClient):
        sale_id = (await create_sale(client, "cust_api_4", "100.00"))["sale"]["id"]
        await client.post(
            f"{BASE}/sales/{sale_id}/payments", json=payment_payload("cust_api_4", "100.00", "s-1")
        )

        response = await client.post(
            f"{BASE}/sales/{sale_id}/payments", json=payment_payload("cust_api_4", "1.00", "s-2")
        )

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "SALE_ALREADY_SETTLED"

    @pytest.mark.asyncio
    async def test_credit_limit_exceeded_returns_402(self, client: AsyncClient):
        response = await client.put(
            f"{BASE}/accounts/cust_api_5/limit", json={"credit_limit": "200000.00"}
        )
        assert response.status_code == 200
        assert Decimal(response.json()["previous_limit"]) == Decimal("0")
        await create_sale(client, "cust_api_5", "180000.00")

        response = await client.post(
            f"{BASE}/sales", json={"customer_id": "cust_api_5", "total": "50000.00"}
        )

        assert response.status_code == 402
        assert response.json()["error"]["code"] == "CREDIT_LIMIT_EXCEEDED"

        account = await client.get(f"{BASE}/accounts/cust_api_5")
        assert Decimal(account.json()["current_debt"]) == Decimal("180000.00")
        assert account.json()["risk_tier"] == "critical"

    @pytest.mark.asyncio
    async def test_check_credit(self, client: AsyncClient):
        await client.put(f"{BASE}/accounts/cust_api_6/limit", json={"credit_limit": "100.00"})

        response = await client.post(f"{BASE}/accounts/cust_api_6/check", json={"amount": "150.00"})

        assert response.status_code == 200
        assert response.json()["approved"] is False
        assert Decimal(response.json()["available_credit"]) == Decimal("100.00")

    @pytest.mark.asyncio
    async def test_debtors_and_customer_listings(self, client: AsyncClient):
        await create_sale(client, "cust_api_small", "10.00")
        big = await create_sale(client, "cust_api_big", "500.00")
        await client.post(
            f"{BASE}/sales/{big['sale']['id']}/payments",
            json=payment_payload("cust_api_big", "100.00", "big-1"),
        )

        debtors = await client.get(f"{BASE}/debtors")
        assert debtors.status_code == 200
        assert [d["customer_id"] for d in debtors.json()["debtors"]] == ["cust_api_big", "cust_api_small"]
        assert Decimal(debtors.json()["total_debt"]) == Decimal("410.00")

        sales = await client.get(f"{BASE}/accounts/cust_api_big/sales")
        assert sales.json()["total"] == 1
        assert sales.json()["sales"][0]["payment_status"] == "partial"

        payments = await client.get(f"{BASE}/accounts/cust_api_big/payments")
        assert payments.json()["total"] == 1

    @pytest.mark.asyncio
    async def test_not_found(self, client: AsyncClient):
        sale = await client.get(f"{BASE}/sales/9999")
        account = await client.get(f"{BASE}/accounts/nobody")

        assert sale.status_code == 404
        assert sale.json()["error"]["code"] == "SALE_NOT_FOUND"
        assert account.status_code == 404
        assert account.json()["error"]["code"] == "CUSTOMER_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_validation_error(self, client: AsyncClient):
        """Non-positive amounts are rejected before reaching the use case"""
        response = await client.post(f"{BASE}/sales", json={"customer_id": "c", "total": "-5"})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

        response = await client.post(
            f"{BASE}/sales/1/payments",
            json={**payment_payload("c", "10.00", "k"), "method": "crypto"},
        )
        assert response.status_code == 400
