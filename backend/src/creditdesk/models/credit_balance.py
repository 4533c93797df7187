"""Credit balance model: one ledger row per (vendor, service)."""
from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from creditdesk.models.base import Base


class CreditBalance(Base):
    """
    Remaining, purchased and used credits for one vendor service.

    total_purchased - total_used == remaining_credits is maintained by the
    ledger operations; remaining_credits may go negative.
    """

    __tablename__ = "credit_balances"
    __table_args__ = (
        UniqueConstraint("vendor_id", "service_name", name="uq_credit_balances_vendor_service"),
    )

    vendor_id = Column(String(36), ForeignKey("vendors.id"), nullable=False, index=True)
    service_name = Column(String, nullable=False)
    remaining_credits = Column(Integer, nullable=False, default=0)
    total_purchased = Column(Integer, nullable=False, default=0)
    total_used = Column(Integer, nullable=False, default=0)
    last_updated = Column(DateTime, nullable=False, default=datetime.utcnow)

    # Relationships
    vendor = relationship("Vendor", back_populates="credit_balances")

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<CreditBalance(vendor_id={self.vendor_id}, service_name={self.service_name}, "
            f"remaining={self.remaining_credits})>"
        )
