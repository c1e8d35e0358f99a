"""
API Tests for accounts
"""
import pytest
from datetime import datetime
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_create_account(client: AsyncClient, auth_headers: dict):
    """Test creating an account"""
    response = await client.post(
        "/api/v1/accounts",
        json={"name": "  ICICI Credit ", "type": "Credit Card", "budget": 20000},
        headers=auth_headers,
    )

    assert response.status_code == 201
    data = response.json()
    assert data["name"] == "ICICI Credit"
    assert data["type"] == "Credit Card"
    assert data["budget"] == 20000
    assert data["is_archived"] is False


@pytest.mark.asyncio
async def test_create_account_invalid_type(client: AsyncClient, auth_headers: dict):
    response = await client.post(
        "/api/v1/accounts", json={"name": "Piggy bank", "type": "Jar"}, headers=auth_headers
    )

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_get_account_with_total_spent(client: AsyncClient, auth_headers: dict, test_account, add_transaction):
    await add_transaction("Food", 120, datetime(2024, 6, 1))
    await add_transaction("Food", 80.5, datetime(2024, 6, 2))

    response = await client.get(f"/api/v1/accounts/{test_account.id}", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["total_spent"] == 200.5


@pytest.mark.asyncio
async def test_update_account(client: AsyncClient, auth_headers: dict, test_account):
    response = await client.patch(
        f"/api/v1/accounts/{test_account.id}",
        json={"name": "HDFC Salary", "color_hex": "#112233"},
        headers=auth_headers,
    )

    assert response.status_code == 200
    assert response.json()["name"] == "HDFC Salary"
    assert response.json()["color_hex"] == "#112233"
    assert response.json()["type"] == "Bank"


@pytest.mark.asyncio
async def test_archive_hides_account(client: AsyncClient, auth_headers: dict, test_account):
    """Test that deleting archives the account instead of removing it"""
    response = await client.delete(f"/api/v1/accounts/{test_account.id}", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["is_archived"] is True

    listed = await client.get("/api/v1/accounts", headers=auth_headers)
    assert listed.json() == []

    with_archived = await client.get("/api/v1/accounts", params={"include_archived": True}, headers=auth_headers)
    assert [a["id"] for a in with_archived.json()] == [test_account.id]


@pytest.mark.asyncio
async def test_other_users_account_is_not_found(client: AsyncClient, other_auth_headers: dict, test_account):
    """Test that accounts are scoped to their owner"""
    response = await client.get(f"/api/v1/accounts/{test_account.id}", headers=other_auth_headers)

    assert response.status_code == 404
    assert response.json()["code"] == "ACCOUNT_NOT_FOUND"
