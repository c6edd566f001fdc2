import pytest
from datetime import datetime, timezone
from httpx import AsyncClient

from src.dashboard.service import get_month_windows
from src.database.repository import Repository
from src.exceptions.database import DataSourceError


def _new_user_payload(uid: str, email: str):
    return {
        "id": uid,
        "name": "Maria Souza",
        "email": email,
        "image": "/uploads/maria.png",
        "dob": "1995-04-12",
        "gender": "female",
    }


def _new_order_payload(user_id: str, product_id: str, total: float):
    return {
        "userId": user_id,
        "address": "Av. Paulista, 1000",
        "city": "São Paulo",
        "state": "SP",
        "country": "Brasil",
        "pinCode": "01310-100",
        "orderItems": [
            {"productId": product_id, "name": "Item", "price": total, "quantity": 1}
        ],
        "subtotal": total,
        "total": total,
    }


@pytest.mark.asyncio
async def test_dashboard_stats_requires_admin(client: AsyncClient, test_user):
    response = await client.get("/api/v1/dashboard/stats", params={"id": test_user.id})
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_dashboard_stats_shape_and_cache(client: AsyncClient, admin_params, cache):
    response = await client.get("/api/v1/dashboard/stats", params=admin_params)
    assert response.status_code == 200
    data = response.json()

    assert set(data["count"]) == {"revenue", "product", "user", "order"}
    assert set(data["percentage"]) == {"revenue", "product", "user", "order"}
    assert data["count"]["user"] == 1
    # Valores monetários e percentuais saem como números, não strings
    assert isinstance(data["count"]["revenue"], (int, float))
    for value in data["percentage"].values():
        assert isinstance(value, (int, float))
    assert cache.has("admin-stats")

    again = await client.get("/api/v1/dashboard/stats", params=admin_params)
    assert again.json() == data


@pytest.mark.asyncio
async def test_revenue_percentage_month_over_month(
    client: AsyncClient, admin_params, test_admin, make_order
):
    this_month, last_month = get_month_windows(datetime.now(timezone.utc))
    await make_order(test_admin.id, total="300.00", created_at=this_month.start)
    await make_order(test_admin.id, total="200.00", created_at=last_month.start)

    response = await client.get("/api/v1/dashboard/stats", params=admin_params)
    data = response.json()

    assert data["percentage"]["revenue"] == 50
    assert data["count"]["revenue"] == 500
    assert data["count"]["order"] == 2


@pytest.mark.asyncio
async def test_zero_revenue_in_both_months(client: AsyncClient, admin_params):
    response = await client.get("/api/v1/dashboard/stats", params=admin_params)
    data = response.json()

    assert data["percentage"]["revenue"] == 0
    assert data["count"]["revenue"] == 0


@pytest.mark.asyncio
async def test_user_write_refreshes_dashboard(client: AsyncClient, admin_params, cache):
    before = await client.get("/api/v1/dashboard/stats", params=admin_params)
    assert before.json()["count"]["user"] == 1
    assert cache.has("admin-stats")

    response = await client.post(
        "/api/v1/user/new", json=_new_user_payload("maria-uid", "maria@example.com")
    )
    assert response.status_code == 201
    assert not cache.has("admin-stats")

    after = await client.get("/api/v1/dashboard/stats", params=admin_params)
    assert after.json()["count"]["user"] == 2

    # Deleting the user refreshes it again
    response = await client.delete("/api/v1/user/maria-uid", params=admin_params)
    assert response.status_code == 204
    assert not cache.has("admin-stats")

    final = await client.get("/api/v1/dashboard/stats", params=admin_params)
    assert final.json()["count"]["user"] == 1


@pytest.mark.asyncio
async def test_order_write_refreshes_dashboard(
    client: AsyncClient, admin_params, test_user, make_product, cache
):
    product = await make_product(price="40.00", stock=5)

    before = await client.get("/api/v1/dashboard/stats", params=admin_params)
    assert before.json()["count"]["order"] == 0

    response = await client.post(
        "/api/v1/order/new", json=_new_order_payload(test_user.id, str(product.id), 40.0)
    )
    assert response.status_code == 201
    order_id = response.json()["id"]
    assert not cache.has("admin-stats")

    after = await client.get("/api/v1/dashboard/stats", params=admin_params)
    data = after.json()
    assert data["count"]["order"] == 1
    assert data["count"]["revenue"] == 40
    # Orders this month against none last month
    assert data["percentage"]["order"] == 100

    # Processing the order is a write too
    response = await client.put(f"/api/v1/order/{order_id}", params=admin_params)
    assert response.status_code == 200
    assert not cache.has("admin-stats")

    await client.get("/api/v1/dashboard/stats", params=admin_params)
    response = await client.delete(f"/api/v1/order/{order_id}", params=admin_params)
    assert response.status_code == 204

    final = await client.get("/api/v1/dashboard/stats", params=admin_params)
    assert final.json()["count"]["order"] == 0


@pytest.mark.asyncio
async def test_dashboard_data_source_failure(
    client: AsyncClient, admin_params, cache, monkeypatch
):
    async def broken_values(self, column):
        raise DataSourceError()

    monkeypatch.setattr(Repository, "values", broken_values)

    response = await client.get("/api/v1/dashboard/stats", params=admin_params)
    assert response.status_code == 503
    assert response.json()["detail"] == "Dados indisponíveis no momento"
    assert not cache.has("admin-stats")
