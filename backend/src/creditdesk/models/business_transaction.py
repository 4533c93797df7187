"""Business cash transaction model."""
from datetime import date
import enum

from sqlalchemy import Column, Date, Enum as SQLEnum, Float, Text

from creditdesk.models.base import Base


class BusinessTransactionType(enum.Enum):
    """Direction of a cash movement."""

    ADD = "add"
    WITHDRAW = "withdraw"


class BusinessTransaction(Base):
    """Money added to or withdrawn from the business account."""

    __tablename__ = "business_transactions"

    type = Column(SQLEnum(BusinessTransactionType), nullable=False)
    amount = Column(Float, nullable=False)
    description = Column(Text, nullable=False, default="")
    transaction_date = Column(Date, nullable=False, default=date.today, index=True)

    def __repr__(self) -> str:
        """String representation."""
        return f"<BusinessTransaction(id={self.id}, type={self.type.value}, amount={self.amount})>"
