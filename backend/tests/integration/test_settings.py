"""Integration tests for application settings."""
import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from creditdesk.services.settings_service import DEFAULT_SETTINGS, SettingsService


@pytest.mark.asyncio
async def test_seed_defaults_never_overwrites(db_session: AsyncSession) -> None:
    """Test that seeding fills in missing defaults and keeps existing values."""
    service = SettingsService(db_session)
    await service.update({"company_name": "Fox IT"})

    inserted = await service.seed_defaults()
    await db_session.commit()

    assert inserted == len(DEFAULT_SETTINGS) - 1
    values = await service.get_all()
    assert values["company_name"] == "Fox IT"
    assert values["currency_symbol"] == "$"

    assert await service.seed_defaults() == 0


@pytest.mark.asyncio
async def test_get_and_update_settings(async_client: AsyncClient, db_session: AsyncSession) -> None:
    """Test reading settings and upserting new values through the API."""
    await SettingsService(db_session).seed_defaults()
    await db_session.commit()

    response = await async_client.get("/api/settings")
    assert response.status_code == 200
    assert response.json()["company_name"] == DEFAULT_SETTINGS["company_name"]

    response = await async_client.post("/api/settings", json={"company_name": "Fox IT", "footer": "Thanks!"})

    assert response.status_code == 200
    data = response.json()
    assert data["company_name"] == "Fox IT"
    assert data["footer"] == "Thanks!"
    assert data["currency_symbol"] == "$"

    assert (await async_client.get("/api/settings")).json() == data


@pytest.mark.asyncio
async def test_update_settings_rejects_non_string_values(async_client: AsyncClient) -> None:
    """Test that setting values must be strings."""
    response = await async_client.post("/api/settings", json={"company_name": ["not", "a", "string"]})

    assert response.status_code == 422
