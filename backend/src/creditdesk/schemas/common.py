"""Shared response schemas."""
from pydantic import BaseModel


class OperationResult(BaseModel):
    """Generic success flag with optional message."""

    success: bool = True
    message: str | None = None
