"""SQLAlchemy ORM models for the credit management store."""
# Import all models here so they are registered on Base.metadata

from creditdesk.models.base import Base
from creditdesk.models.customer import Customer
from creditdesk.models.vendor import Vendor, VendorService
from creditdesk.models.credit_balance import CreditBalance
from creditdesk.models.subscription import Subscription
from creditdesk.models.vendor_transaction import VendorTransaction
from creditdesk.models.business_transaction import BusinessTransaction, BusinessTransactionType
from creditdesk.models.setting import Setting

__all__ = [
    "Base",
    "Customer",
    "Vendor",
    "VendorService",
    "CreditBalance",
    "Subscription",
    "VendorTransaction",
    "BusinessTransaction",
    "BusinessTransactionType",
    "Setting",
]
