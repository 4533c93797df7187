"""Pydantic schemas for application settings."""
from pydantic import RootModel


class SettingsUpdate(RootModel[dict[str, str]]):
    """Settings to upsert, keyed by setting name."""
