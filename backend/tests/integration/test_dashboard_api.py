"""
Integration tests for GET /api/v1/dashboard
"""

import pytest
from datetime import date
from decimal import Decimal
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from tests.factories import ClientFactory, ProductFactory


@pytest.mark.asyncio
class TestDashboard:

    async def test_empty_dashboard(self, client: AsyncClient, auth_headers):
        response = await client.get("/api/v1/dashboard/", headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["total_orders"] == 0
        assert Decimal(data["total_revenue"]) == Decimal("0")
        assert data["month_over_month_growth"] == "0.00%"
        assert data["top_product"] == "None"
        assert data["recent_orders"] == []

    async def test_dashboard_summary(self, client: AsyncClient, db_session: AsyncSession, auth_headers):
        customer = await ClientFactory.create_async(db_session, name="Carla Dias")
        inactive = await ClientFactory.create_async(db_session, active=False)
        arroz = await ProductFactory.create_async(db_session, name="Arroz", unit_price=Decimal("5.00"))
        feijao = await ProductFactory.create_async(db_session, name="Feijão", unit_price=Decimal("3.50"))
        await db_session.commit()

        for items in (
            [{"product_id": arroz.id, "quantity": 2}, {"product_id": feijao.id, "quantity": 1}],
            [{"product_id": feijao.id, "quantity": 3}],
        ):
            response = await client.post(
                "/api/v1/orders/",
                json={"client_id": customer.id, "items": items},
                headers=auth_headers
            )
            assert response.status_code == 201

        response = await client.get("/api/v1/dashboard/", headers=auth_headers)

        data = response.json()
        assert data["total_products"] == 2
        assert data["total_clients"] == 2
        assert data["total_orders"] == 2
        assert Decimal(data["total_revenue"]) == Decimal("24.00")
        assert data["month_over_month_growth"] == "new"
        assert data["top_product"] == "Feijão"
        assert [o["client_name"] for o in data["recent_orders"]] == ["Carla Dias", "Carla Dias"]
        assert data["recent_orders"][0]["created_at"] == date.today().isoformat()
        assert inactive.active is False
