"""Vendor and vendor service models."""
from sqlalchemy import Boolean, Column, Float, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from creditdesk.models.base import Base


class Vendor(Base):
    """
    Supplier that sells service credits.

    Inactive vendors are hidden from listings but keep their history.
    """

    __tablename__ = "vendors"

    name = Column(String, nullable=False)
    contact_email = Column(String, nullable=False, default="")
    contact_phone = Column(String, nullable=False, default="")
    description = Column(Text, nullable=False, default="")
    is_active = Column(Boolean, nullable=False, default=True)

    # Relationships
    services = relationship("VendorService", back_populates="vendor", cascade="all, delete-orphan")
    credit_balances = relationship("CreditBalance", back_populates="vendor")

    def __repr__(self) -> str:
        """String representation."""
        return f"<Vendor(id={self.id}, name={self.name}, active={self.is_active})>"


class VendorService(Base):
    """A service (or item) offered by a vendor."""

    __tablename__ = "vendor_services"

    vendor_id = Column(String(36), ForeignKey("vendors.id", ondelete="CASCADE"), nullable=False, index=True)
    service_name = Column(String, nullable=False)
    description = Column(Text, nullable=False, default="")
    item_type = Column(String, nullable=False, default="subscription")  # subscription, hardware, service
    default_price = Column(Float, nullable=False, default=0)
    cost_price = Column(Float, nullable=False, default=0)
    is_available = Column(Boolean, nullable=False, default=True)

    # Relationships
    vendor = relationship("Vendor", back_populates="services")

    def __repr__(self) -> str:
        """String representation."""
        return f"<VendorService(id={self.id}, vendor_id={self.vendor_id}, service_name={self.service_name})>"
