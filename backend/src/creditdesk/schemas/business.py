"""Pydantic schemas for business cash transactions."""
from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from creditdesk.models.business_transaction import BusinessTransactionType


class BusinessMovement(BaseModel):
    """Schema for adding or withdrawing money."""

    amount: float = Field(..., gt=0, description="Amount moved")
    transaction_date: date = Field(default_factory=date.today, alias="date", description="Transaction date")
    description: str = Field(default="", max_length=500, description="Description")

    model_config = ConfigDict(populate_by_name=True)


class BusinessTransaction(BaseModel):
    """Schema for returning a business transaction."""

    id: str
    type: BusinessTransactionType
    amount: float
    description: str
    transaction_date: date
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class BusinessLedger(BaseModel):
    """All business transactions with the resulting balance."""

    transactions: list[BusinessTransaction]
    balance: float
