"""Vendor transaction model for credit purchases."""
from datetime import date

from sqlalchemy import Column, Date, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from creditdesk.models.base import Base


class VendorTransaction(Base):
    """Purchase of service credits from a vendor."""

    __tablename__ = "vendor_transactions"

    vendor_id = Column(String(36), ForeignKey("vendors.id"), nullable=False, index=True)
    service_name = Column(String, nullable=False)
    credits = Column(Integer, nullable=False)
    price_usd = Column(Float, nullable=False)
    purchase_date = Column(Date, nullable=False, default=date.today, index=True)
    notes = Column(Text, nullable=False, default="")

    # Relationships
    vendor = relationship("Vendor")

    def __repr__(self) -> str:
        """String representation."""
        return f"<VendorTransaction(id={self.id}, vendor_id={self.vendor_id}, credits={self.credits})>"
