"""Key/value application settings."""
from sqlalchemy import Column, String, Text

from creditdesk.database import Base


class Setting(Base):
    """One application setting (company name, currency symbol, ...)."""

    __tablename__ = "settings"

    key = Column(String, primary_key=True)
    value = Column(Text, nullable=False, default="")

    def __repr__(self) -> str:
        """String representation."""
        return f"<Setting(key={self.key})>"
