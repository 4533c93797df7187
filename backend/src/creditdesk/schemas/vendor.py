"""Pydantic schemas for Vendor and VendorService models."""
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class VendorBase(BaseModel):
    """Base vendor schema with common fields."""

    name: str = Field(..., min_length=1, max_length=255, description="Vendor name")
    contact_email: str = Field(default="", description="Contact email")
    contact_phone: str = Field(default="", description="Contact phone")
    description: str = Field(default="", description="Description")


class VendorCreate(VendorBase):
    """Schema for creating a new vendor."""


class VendorStatusUpdate(BaseModel):
    """Schema for activating or deactivating a vendor."""

    is_active: bool


class Vendor(VendorBase):
    """Schema for returning vendor data."""

    id: str
    is_active: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class VendorServiceBase(BaseModel):
    """Base vendor service schema with common fields."""

    vendor_id: str = Field(..., min_length=1, description="Vendor offering the service")
    service_name: str = Field(..., min_length=1, description="Service name")
    description: str = Field(default="", description="Description")
    item_type: str = Field(default="subscription", description="subscription, hardware or service")
    default_price: float = Field(default=0, ge=0, description="Default selling price")
    cost_price: float = Field(default=0, ge=0, description="Cost price")


class VendorServiceCreate(VendorServiceBase):
    """Schema for creating a vendor service."""


class VendorService(VendorServiceBase):
    """Schema for returning vendor service data."""

    id: str
    is_available: bool
    created_at: datetime
    vendor_name: str | None = None

    model_config = ConfigDict(from_attributes=True)
