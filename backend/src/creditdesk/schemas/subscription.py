"""Pydantic schemas for Subscription model and bundle operations."""
from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from creditdesk.utils.validators import normalize_mac_address


class SubscriptionBase(BaseModel):
    """Fields supplied when selling a subscription or item."""

    customer_id: str = Field(..., min_length=1, description="Customer this subscription belongs to")
    service_name: str = Field(..., min_length=1, description="Service or item name shown to the customer")
    start_date: date = Field(..., description="Service start date")
    expiration_date: date | None = Field(
        default=None, description="Service end date (open-ended sentinel date when omitted)"
    )
    amount_paid: float = Field(..., gt=0, description="Amount charged to the customer")
    credits_used: int = Field(default=0, ge=0, description="Credits taken from the vendor balance")
    vendor_id: str | None = Field(default=None, description="Vendor whose credits are consumed")
    vendor_service_name: str | None = Field(
        default=None, description="Vendor service whose balance is consumed (required with vendor_id)"
    )
    classification: str = Field(default="", max_length=100, description="Free-form grouping label")
    notes: str = Field(default="", max_length=1000, description="Notes")
    mac_address: str = Field(default="", description="Device MAC address")
    status: str = Field(default="active", description="Subscription status")
    item_type: str = Field(default="subscription", description="subscription, hardware or service")
    order_status: str = Field(default="Closed", description="Order status")
    payment_type: str = Field(default="Cash", description="Payment type")
    payment_status: str = Field(default="Paid", description="Payment status")
    transaction_ref: str | None = Field(default=None, description="External payment reference")
    discount_amount: float = Field(default=0, ge=0, description="Discount granted")

    @field_validator("vendor_id", "vendor_service_name")
    @classmethod
    def blank_to_none(cls, value: str | None) -> str | None:
        """Treat blank vendor fields as absent."""
        if value is not None and not value.strip():
            return None
        return value

    @field_validator("mac_address")
    @classmethod
    def check_mac_address(cls, value: str) -> str:
        """Validate and normalize the MAC address."""
        return normalize_mac_address(value)

    @model_validator(mode="after")
    def check_vendor_service(self) -> "SubscriptionBase":
        """A vendor reference needs the vendor service whose balance it draws on."""
        if self.vendor_id and not self.vendor_service_name:
            raise ValueError("vendor_service_name is required when vendor_id is set")
        return self


class SubscriptionCreate(SubscriptionBase):
    """Schema for creating a single subscription.

    Example:
        ```json
        {
            "customer_id": "6f1c...",
            "service_name": "IPTV 12 months",
            "start_date": "2026-01-01",
            "amount_paid": 60.0,
            "credits_used": 12,
            "vendor_id": "a3b2...",
            "vendor_service_name": "svcX"
        }
        ```
    """

    bundle_id: str | None = Field(default=None, description="Bundle this subscription belongs to")


class BundleCreate(BaseModel):
    """Schema for creating several subscriptions as one bundle."""

    bundle_id: str | None = Field(default=None, description="Bundle identifier (generated when omitted)")
    items: list[SubscriptionBase] = Field(..., min_length=1, description="Bundle members")


class SubscriptionMetadataUpdate(BaseModel):
    """Order and payment fields that can change without touching credits."""

    order_status: str | None = None
    payment_type: str | None = None
    payment_status: str | None = None
    transaction_ref: str | None = None
    notes: str | None = Field(default=None, max_length=1000)


class Subscription(SubscriptionBase):
    """Schema for returning subscription data."""

    id: str
    expiration_date: date
    bundle_id: str | None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class SubscriptionWithCustomer(Subscription):
    """Subscription with the customer's name for list views."""

    customer_name: str | None = None


class SubscriptionCreated(BaseModel):
    """Result of CreateSubscription."""

    success: bool = True
    id: str
    subscription: Subscription


class BundleCreated(BaseModel):
    """Result of CreateBundle."""

    success: bool = True
    bundle_id: str
    ids: list[str]


class BundleUpdated(BaseModel):
    """Result of UpdateBundleMetadata."""

    success: bool = True
    updated: int


class BundleDeleted(BaseModel):
    """Result of DeleteBundle."""

    success: bool = True
    deleted: int
