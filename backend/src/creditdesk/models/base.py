"""Base model with common fields for all entities."""
from datetime import datetime
from uuid import uuid4

from sqlalchemy import Column, DateTime, String

from creditdesk.database import Base as DeclarativeBase


def generate_id() -> str:
    """Generate an opaque unique identifier for a new row."""
    return str(uuid4())


class Base(DeclarativeBase):
    """Base model class with common fields."""

    __abstract__ = True

    id = Column(String(36), primary_key=True, default=generate_id, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
