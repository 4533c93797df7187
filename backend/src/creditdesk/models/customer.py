"""Customer model for people and businesses that buy services."""
from sqlalchemy import Column, String, Text
from sqlalchemy.orm import relationship

from creditdesk.models.base import Base


class Customer(Base):
    """
    Customer who purchases subscriptions and hardware items.

    Email is unique across customers.
    """

    __tablename__ = "customers"

    name = Column(String, nullable=False)
    email = Column(String, nullable=False, unique=True, index=True)
    phone = Column(String, nullable=False, default="")
    address = Column(String, nullable=False, default="")
    internal_notes = Column(Text, nullable=False, default="")
    status = Column(String, nullable=False, default="active")

    # Relationships
    subscriptions = relationship("Subscription", back_populates="customer")

    def __repr__(self) -> str:
        """String representation."""
        return f"<Customer(id={self.id}, email={self.email})>"
