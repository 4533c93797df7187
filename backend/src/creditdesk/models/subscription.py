"""Subscription model for services sold to customers."""
from sqlalchemy import Column, Date, Float, ForeignKey, Integer, String, Text, Index
from sqlalchemy.orm import relationship

from creditdesk.models.base import Base


class Subscription(Base):
    """
    A service (or item) sold to a customer.

    When vendor_id is set, credits_used credits were taken from the
    (vendor_id, vendor_service_name) balance at creation and go back on
    deletion. Rows sharing a bundle_id form a bundle.
    """

    __tablename__ = "subscriptions"
    __table_args__ = (
        Index("ix_subscriptions_vendor_service", "vendor_id", "vendor_service_name"),
    )

    customer_id = Column(String(36), ForeignKey("customers.id"), nullable=False, index=True)
    service_name = Column(String, nullable=False)
    start_date = Column(Date, nullable=False)
    expiration_date = Column(Date, nullable=False, index=True)
    amount_paid = Column(Float, nullable=False)
    credits_used = Column(Integer, nullable=False, default=0)
    vendor_id = Column(String(36), ForeignKey("vendors.id"), nullable=True)
    vendor_service_name = Column(String, nullable=True)
    bundle_id = Column(String, nullable=True, index=True)
    classification = Column(String, nullable=False, default="")
    notes = Column(Text, nullable=False, default="")
    mac_address = Column(String, nullable=False, default="")
    status = Column(String, nullable=False, default="active", index=True)
    item_type = Column(String, nullable=False, default="subscription")

    # Order and payment metadata; editable without touching the ledger
    order_status = Column(String, nullable=False, default="Closed")
    payment_type = Column(String, nullable=False, default="Cash")
    payment_status = Column(String, nullable=False, default="Paid")
    transaction_ref = Column(String, nullable=True)
    discount_amount = Column(Float, nullable=False, default=0)

    # Relationships
    customer = relationship("Customer", back_populates="subscriptions")
    vendor = relationship("Vendor")

    @property
    def consumes_credits(self) -> bool:
        """Whether this row holds credits taken from a vendor balance."""
        return bool(self.vendor_id) and (self.credits_used or 0) > 0

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<Subscription(id={self.id}, customer_id={self.customer_id}, "
            f"credits_used={self.credits_used}, bundle_id={self.bundle_id})>"
        )
