"""Business metrics for Prometheus monitoring."""
from prometheus_client import Counter, Gauge

# Subscription metrics
subscriptions_created_total = Counter(
    "subscriptions_created_total",
    "Total subscriptions created",
    labelnames=["item_type"],
)

subscriptions_deleted_total = Counter(
    "subscriptions_deleted_total",
    "Total subscriptions deleted",
    labelnames=["scope"],  # single, bundle
)

# Ledger metrics
credits_consumed_total = Counter(
    "credits_consumed_total",
    "Credits consumed from vendor balances by subscriptions",
    labelnames=["vendor_id", "service_name"],
)

credits_reversed_total = Counter(
    "credits_reversed_total",
    "Credits returned to vendor balances by subscription deletion",
    labelnames=["vendor_id", "service_name"],
)

credits_purchased_total = Counter(
    "credits_purchased_total",
    "Credits bought from vendors",
    labelnames=["vendor_id", "service_name"],
)

credits_returned_total = Counter(
    "credits_returned_total",
    "Credits removed from vendor balances by purchase returns",
    labelnames=["vendor_id", "service_name"],
)

low_credit_balances_gauge = Gauge(
    "low_credit_balances",
    "Number of balances below the low-credit threshold at last check",
)

# Transaction metrics
units_of_work_failed_total = Counter(
    "units_of_work_failed_total",
    "Units of work rolled back",
    labelnames=["error_type"],
)
