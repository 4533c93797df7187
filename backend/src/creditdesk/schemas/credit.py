"""Pydantic schemas for credit balances and vendor credit purchases."""
from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field


class CreditBalance(BaseModel):
    """Schema for returning a (vendor, service) credit balance."""

    id: str
    vendor_id: str
    service_name: str
    remaining_credits: int
    total_purchased: int
    total_used: int
    last_updated: datetime
    vendor_name: str | None = None

    model_config = ConfigDict(from_attributes=True)


class VendorTransactionCreate(BaseModel):
    """Schema for recording a credit purchase from a vendor.

    Example:
        ```json
        {
            "vendor_id": "a3b2...",
            "service_name": "svcX",
            "credits": 100,
            "price_usd": 250.0,
            "purchase_date": "2026-03-01"
        }
        ```
    """

    vendor_id: str = Field(..., min_length=1, description="Vendor the credits were bought from")
    service_name: str = Field(..., min_length=1, description="Vendor service the credits apply to")
    credits: int = Field(..., gt=0, description="Number of credits bought")
    price_usd: float = Field(..., ge=0, description="Total price paid")
    purchase_date: date = Field(default_factory=date.today, description="Purchase date")
    notes: str = Field(default="", max_length=1000, description="Notes")


class VendorTransaction(VendorTransactionCreate):
    """Schema for returning a credit purchase."""

    id: str
    created_at: datetime
    vendor_name: str | None = None

    model_config = ConfigDict(from_attributes=True)


class CreditPurchaseResult(BaseModel):
    """Result of recording a credit purchase."""

    success: bool = True
    message: str = "Credits purchased successfully"
    transaction: VendorTransaction
    balance: CreditBalance
