"""
API Tests for the current user, preferences and data deletion
"""
import pytest
from datetime import datetime
from httpx import AsyncClient
from sqlalchemy import func, select

from kharcha.models import Account, OutflowType, Transaction


@pytest.mark.asyncio
async def test_me_with_default_preferences(client: AsyncClient, auth_headers: dict, test_user):
    response = await client.get("/api/v1/users/me", headers=auth_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["user"]["email"] == test_user.email
    assert data["preferences"] == {
        "currency": "INR",
        "language": "en",
        "dark_mode": False,
        "onboarding_completed": False,
        "global_notifications": True,
        "subscription_reminders": True,
        "due_date_reminders": True,
        "email_notifications": False,
    }


@pytest.mark.asyncio
async def test_update_preferences(client: AsyncClient, auth_headers: dict):
    response = await client.patch(
        "/api/v1/users/me/preferences",
        json={"currency": "usd", "dark_mode": True, "subscription_reminders": False},
        headers=auth_headers,
    )

    assert response.status_code == 200
    assert response.json()["currency"] == "USD"
    assert response.json()["dark_mode"] is True

    me = await client.get("/api/v1/users/me", headers=auth_headers)
    preferences = me.json()["preferences"]
    assert preferences["subscription_reminders"] is False
    assert preferences["due_date_reminders"] is True


@pytest.mark.asyncio
async def test_update_preferences_rejects_bad_currency(client: AsyncClient, auth_headers: dict):
    response = await client.patch("/api/v1/users/me/preferences", json={"currency": "RUPEE"}, headers=auth_headers)

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_delete_all_data(client: AsyncClient, auth_headers: dict, db_session, test_user, add_transaction):
    user_id = test_user.id
    await client.post("/api/v1/outflow-types", json={"name": "Pets"}, headers=auth_headers)
    await add_transaction("Food", 100, datetime(2024, 6, 1))

    response = await client.delete("/api/v1/users/me/data", headers=auth_headers)

    assert response.status_code == 200

    async def count(model, *criteria):
        return await db_session.scalar(select(func.count()).select_from(model).where(model.user_id == user_id, *criteria))

    assert await count(Transaction) == 0
    assert await count(Account) == 0
    assert await count(OutflowType, OutflowType.is_custom.is_(True)) == 0
    assert await count(OutflowType) > 0
