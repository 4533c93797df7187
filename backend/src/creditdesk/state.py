"""In-process cache of list data served to the front end.

The cache is an explicit object created at startup and handed to the
routers (see api.deps.get_app_state). Reads load a section on first use;
every mutating operation names the sections it makes stale, which are
dropped and re-queried on the next read.
"""
from typing import Any, Awaitable, Callable

import structlog

logger = structlog.get_logger(__name__)

Loader = Callable[[], Awaitable[Any]]

CUSTOMERS = "customers"
VENDORS = "vendors"
VENDOR_SERVICES = "vendor_services"
SUBSCRIPTIONS = "subscriptions"
CREDIT_BALANCES = "credit_balances"
VENDOR_TRANSACTIONS = "vendor_transactions"
BUSINESS = "business"
SETTINGS = "settings"

# Sections made stale by each mutating operation
STALE_AFTER: dict[str, tuple[str, ...]] = {
    "subscription_created": (SUBSCRIPTIONS, CREDIT_BALANCES),
    "subscription_updated": (SUBSCRIPTIONS,),
    "subscription_deleted": (SUBSCRIPTIONS, CREDIT_BALANCES),
    "credits_purchased": (VENDOR_TRANSACTIONS, CREDIT_BALANCES),
    "purchase_returned": (VENDOR_TRANSACTIONS, CREDIT_BALANCES),
    "customer_changed": (CUSTOMERS, SUBSCRIPTIONS),
    "vendor_changed": (VENDORS, VENDOR_SERVICES, CREDIT_BALANCES),
    "vendor_service_changed": (VENDOR_SERVICES,),
    "business_changed": (BUSINESS,),
    "settings_changed": (SETTINGS,),
}


class AppState:
    """Named sections of cached list data with explicit invalidation."""

    def __init__(self) -> None:
        """Start with every section unloaded."""
        self._sections: dict[str, Any] = {}

    def __contains__(self, section: str) -> bool:
        return section in self._sections

    async def get(self, section: str, loader: Loader) -> Any:
        """
        Return a section, loading it on first use.

        Args:
            section: Section name
            loader: Coroutine factory that re-queries the section's data

        Returns:
            The cached value
        """
        if section not in self._sections:
            return await self.refresh(section, loader)
        logger.debug("app_state_hit", section=section)
        return self._sections[section]

    async def refresh(self, section: str, loader: Loader) -> Any:
        """Re-query a section and replace its cached value."""
        value = await loader()
        self._sections[section] = value
        logger.debug("app_state_refreshed", section=section)
        return value

    def invalidate(self, *sections: str) -> None:
        """Drop sections (all of them when none are named)."""
        if not sections:
            self._sections.clear()
            return
        for section in sections:
            self._sections.pop(section, None)

    def mutated(self, operation: str) -> None:
        """
        Drop the sections a mutating operation made stale.

        Raises:
            KeyError: If the operation is unknown
        """
        stale = STALE_AFTER[operation]
        self.invalidate(*stale)
        logger.debug("app_state_invalidated", operation=operation, sections=list(stale))
