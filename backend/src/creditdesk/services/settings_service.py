"""Key/value application settings."""
import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from creditdesk.models.setting import Setting

logger = structlog.get_logger(__name__)

DEFAULT_SETTINGS = {
    "company_name": "IT Services Management",
    "receipt_instructions": "No refunds on activated digital services. Hardware warranty valid for 6 months.",
    "company_logo": "",
    "currency_symbol": "$",
}


class SettingsService:
    """Service layer for application settings."""

    def __init__(self, db: AsyncSession):
        """Initialize settings service with database session."""
        self.db = db

    async def get_all(self) -> dict[str, str]:
        """Return every setting as a key/value mapping."""
        result = await self.db.execute(select(Setting).order_by(Setting.key))
        return {setting.key: setting.value for setting in result.scalars().all()}

    async def update(self, values: dict[str, str]) -> dict[str, str]:
        """
        Insert or replace settings.

        Args:
            values: Settings to write, keyed by name

        Returns:
            All settings after the update
        """
        for key, value in values.items():
            await self.db.merge(Setting(key=key, value=value))
        await self.db.flush()

        logger.info("settings_updated", keys=sorted(values))
        return await self.get_all()

    async def seed_defaults(self) -> int:
        """
        Insert default settings that are not present yet.

        Existing values are never overwritten.

        Returns:
            Number of settings inserted
        """
        existing = await self.get_all()
        missing = {key: value for key, value in DEFAULT_SETTINGS.items() if key not in existing}
        for key, value in missing.items():
            self.db.add(Setting(key=key, value=value))
        await self.db.flush()

        if missing:
            logger.info("default_settings_seeded", keys=sorted(missing))
        return len(missing)
