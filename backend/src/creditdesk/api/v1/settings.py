"""Application settings API endpoints."""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from creditdesk.api.deps import get_app_state, get_db
from creditdesk.schemas.setting import SettingsUpdate
from creditdesk.services.settings_service import SettingsService
from creditdesk.state import SETTINGS, AppState

router = APIRouter(prefix="/settings", tags=["Settings"])


@router.get("", response_model=dict[str, str])
async def get_settings(
    db: AsyncSession = Depends(get_db),
    state: AppState = Depends(get_app_state),
) -> dict[str, str]:
    """All settings as a key/value object."""

    async def load() -> dict[str, str]:
        return await SettingsService(db).get_all()

    return await state.get(SETTINGS, load)


@router.post("", response_model=dict[str, str])
async def update_settings(
    values: SettingsUpdate,
    db: AsyncSession = Depends(get_db),
    state: AppState = Depends(get_app_state),
) -> dict[str, str]:
    """Insert or replace the settings sent; returns every setting afterwards."""
    settings = await SettingsService(db).update(values.root)
    await db.commit()

    state.mutated("settings_changed")
    return settings
