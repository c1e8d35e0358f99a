"""
API Tests for budgets
"""
import pytest
from datetime import datetime
from httpx import AsyncClient

from kharcha.services.outflow_type_service import outflow_type_service


@pytest.fixture
async def food_type(db_session, test_user):
    return await outflow_type_service.get_by_name(db_session, test_user.id, "Food")


@pytest.mark.asyncio
async def test_create_budget(client: AsyncClient, auth_headers: dict, food_type):
    response = await client.post(
        "/api/v1/budgets",
        json={"outflow_type_id": food_type.id, "amount": 5000, "month": "2024-06"},
        headers=auth_headers,
    )

    assert response.status_code == 201
    assert response.json()["month"] == "2024-06"
    assert response.json()["amount"] == 5000


@pytest.mark.asyncio
async def test_one_budget_per_type_and_month(client: AsyncClient, auth_headers: dict, food_type):
    payload = {"outflow_type_id": food_type.id, "amount": 5000, "month": "2024-06"}
    await client.post("/api/v1/budgets", json=payload, headers=auth_headers)

    duplicate = await client.post("/api/v1/budgets", json=payload, headers=auth_headers)
    next_month = await client.post("/api/v1/budgets", json={**payload, "month": "2024-07"}, headers=auth_headers)

    assert duplicate.status_code == 409
    assert next_month.status_code == 201


@pytest.mark.asyncio
async def test_invalid_month(client: AsyncClient, auth_headers: dict, food_type):
    response = await client.post(
        "/api/v1/budgets",
        json={"outflow_type_id": food_type.id, "amount": 5000, "month": "June"},
        headers=auth_headers,
    )

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_progress(client: AsyncClient, auth_headers: dict, food_type, add_transaction):
    await client.post(
        "/api/v1/budgets",
        json={"outflow_type_id": food_type.id, "amount": 4000, "month": "2024-06"},
        headers=auth_headers,
    )
    await add_transaction("Food", 1000, datetime(2024, 6, 3))
    await add_transaction("Food", 2000, datetime(2024, 6, 20))
    await add_transaction("Food", 700, datetime(2024, 7, 1))

    response = await client.get("/api/v1/budgets/progress", params={"month": "2024-06"}, headers=auth_headers)

    assert response.status_code == 200
    [item] = response.json()
    assert item["outflow_type_name"] == "Food"
    assert item["budgeted"] == 4000
    assert item["spent"] == 3000
    assert item["remaining"] == 1000
    assert item["progress"] == 0.75


@pytest.mark.asyncio
async def test_update_and_delete_budget(client: AsyncClient, auth_headers: dict, food_type):
    created = await client.post(
        "/api/v1/budgets",
        json={"outflow_type_id": food_type.id, "amount": 4000, "month": "2024-06"},
        headers=auth_headers,
    )
    budget_id = created.json()["id"]

    update = await client.patch(f"/api/v1/budgets/{budget_id}", json={"amount": 4500}, headers=auth_headers)
    assert update.json()["amount"] == 4500

    delete = await client.delete(f"/api/v1/budgets/{budget_id}", headers=auth_headers)
    assert delete.status_code == 204

    listed = await client.get("/api/v1/budgets", params={"month": "2024-06"}, headers=auth_headers)
    assert listed.json() == []
