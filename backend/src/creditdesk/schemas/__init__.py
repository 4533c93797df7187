"""Pydantic schemas for API request/response validation."""

from creditdesk.schemas.business import (
    BusinessLedger,
    BusinessMovement,
    BusinessTransaction,
)
from creditdesk.schemas.common import OperationResult
from creditdesk.schemas.credit import (
    CreditBalance,
    CreditPurchaseResult,
    VendorTransaction,
    VendorTransactionCreate,
)
from creditdesk.schemas.customer import (
    Customer,
    CustomerCreate,
    CustomerCreated,
    CustomerSalesGroup,
    CustomerSummary,
    CustomerTransactions,
    CustomerUpdate,
)
from creditdesk.schemas.error import ErrorCode, ErrorDetail, ErrorResponse
from creditdesk.schemas.report import DashboardStats, ProfitAndLoss
from creditdesk.schemas.setting import SettingsUpdate
from creditdesk.schemas.subscription import (
    BundleCreate,
    BundleCreated,
    BundleDeleted,
    BundleUpdated,
    Subscription,
    SubscriptionBase,
    SubscriptionCreate,
    SubscriptionCreated,
    SubscriptionMetadataUpdate,
    SubscriptionWithCustomer,
)
from creditdesk.schemas.vendor import (
    Vendor,
    VendorCreate,
    VendorService,
    VendorServiceCreate,
    VendorStatusUpdate,
)

__all__ = [
    # Business
    "BusinessLedger",
    "BusinessMovement",
    "BusinessTransaction",
    # Common
    "OperationResult",
    # Credit
    "CreditBalance",
    "CreditPurchaseResult",
    "VendorTransaction",
    "VendorTransactionCreate",
    # Customer
    "Customer",
    "CustomerCreate",
    "CustomerCreated",
    "CustomerSalesGroup",
    "CustomerSummary",
    "CustomerTransactions",
    "CustomerUpdate",
    # Error
    "ErrorCode",
    "ErrorDetail",
    "ErrorResponse",
    # Report
    "DashboardStats",
    "ProfitAndLoss",
    # Setting
    "SettingsUpdate",
    # Subscription
    "BundleCreate",
    "BundleCreated",
    "BundleDeleted",
    "BundleUpdated",
    "Subscription",
    "SubscriptionBase",
    "SubscriptionCreate",
    "SubscriptionCreated",
    "SubscriptionMetadataUpdate",
    "SubscriptionWithCustomer",
    # Vendor
    "Vendor",
    "VendorCreate",
    "VendorService",
    "VendorServiceCreate",
    "VendorStatusUpdate",
]
