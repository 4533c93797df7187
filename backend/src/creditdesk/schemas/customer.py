"""Pydantic schemas for Customer model."""
from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from creditdesk.schemas.subscription import Subscription
from creditdesk.utils.validators import is_valid_phone, normalize_email, normalize_phone


class CustomerBase(BaseModel):
    """Base customer schema with common fields."""

    name: str = Field(..., min_length=2, max_length=100, description="Customer or company name")
    email: EmailStr = Field(..., description="Customer email address")
    phone: str = Field(default="", description="Phone number")
    address: str = Field(default="", max_length=500, description="Postal address")

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        """Trim surrounding whitespace."""
        return value.strip()

    @field_validator("email")
    @classmethod
    def lower_email(cls, value: str) -> str:
        """Store emails lower-cased."""
        return normalize_email(value)

    @field_validator("phone")
    @classmethod
    def check_phone(cls, value: str) -> str:
        """Validate and normalize the phone number."""
        if not is_valid_phone(value):
            raise ValueError("Phone number format is invalid")
        return normalize_phone(value)


class CustomerCreate(CustomerBase):
    """Schema for creating a new customer."""


class CustomerUpdate(BaseModel):
    """Schema for updating a customer. All fields are optional."""

    name: str | None = Field(default=None, min_length=2, max_length=100)
    phone: str | None = None
    address: str | None = Field(default=None, max_length=500)
    internal_notes: str | None = None
    status: str | None = None

    @field_validator("phone")
    @classmethod
    def check_phone(cls, value: str | None) -> str | None:
        """Validate and normalize the phone number."""
        if value is None:
            return None
        if not is_valid_phone(value):
            raise ValueError("Phone number format is invalid")
        return normalize_phone(value)


class Customer(CustomerBase):
    """Schema for returning customer data."""

    id: str
    internal_notes: str
    status: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CustomerCreated(BaseModel):
    """Result of creating a customer."""

    success: bool = True
    message: str = "Customer added successfully"
    customer: Customer


class CustomerSummary(BaseModel):
    """Totals over a customer's subscriptions."""

    total_paid: float
    total_credits: int
    total_transactions: int


class CustomerTransactions(BaseModel):
    """A customer's subscriptions, grouped by classification."""

    customer: Customer
    subscriptions: list[Subscription]
    grouped_subscriptions: dict[str, list[Subscription]]
    summary: CustomerSummary


class CustomerSalesGroup(BaseModel):
    """One customer's active subscriptions, grouped by classification."""

    classifications: dict[str, list[Subscription]]
