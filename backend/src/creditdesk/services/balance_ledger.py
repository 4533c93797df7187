"""Balance ledger: per-(vendor, service) credit balances and their adjustments."""
from datetime import datetime

import structlog
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from creditdesk.metrics import low_credit_balances_gauge
from creditdesk.models.credit_balance import CreditBalance
from creditdesk.models.vendor import Vendor

logger = structlog.get_logger(__name__)


class BalanceLedger:
    """
    Storage and point adjustment of CreditBalance rows.

    Four adjustments exist and must stay distinguishable, since
    total_purchased and total_used feed different reports:

    - record_purchase:     remaining += n, total_purchased += n
    - reverse_purchase:    remaining -= n, total_purchased -= n
    - consume:             remaining -= n, total_used += n
    - reverse_consumption: remaining += n, total_used -= n

    Each adjustment is a single relative UPDATE against an exact
    (vendor_id, service_name) match. A missing row is created at zero first.
    No floor is enforced on remaining_credits.

    The ledger never commits; callers own the transaction.
    """

    def __init__(self, db: AsyncSession):
        """Initialize ledger with database session."""
        self.db = db

    async def get_balance(self, vendor_id: str, service_name: str) -> CreditBalance | None:
        """
        Get the balance row for a ledger key.

        Args:
            vendor_id: Vendor ID
            service_name: Vendor service name (exact match)

        Returns:
            CreditBalance or None if no row exists
        """
        result = await self.db.execute(
            select(CreditBalance)
            .where(
                CreditBalance.vendor_id == vendor_id,
                CreditBalance.service_name == service_name,
            )
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def ensure_balance(self, vendor_id: str, service_name: str) -> CreditBalance:
        """
        Get the balance row for a ledger key, creating it at zero if absent.

        Args:
            vendor_id: Vendor ID
            service_name: Vendor service name

        Returns:
            Existing or newly created CreditBalance
        """
        balance = await self.get_balance(vendor_id, service_name)
        if balance is not None:
            return balance

        balance = CreditBalance(
            vendor_id=vendor_id,
            service_name=service_name,
            remaining_credits=0,
            total_purchased=0,
            total_used=0,
            last_updated=datetime.utcnow(),
        )
        self.db.add(balance)
        await self.db.flush()

        logger.info("credit_balance_created", vendor_id=vendor_id, service_name=service_name)
        return balance

    async def consume(self, vendor_id: str, service_name: str, amount: int) -> CreditBalance:
        """Take credits for a new subscription: remaining -= amount, total_used += amount."""
        return await self._adjust(vendor_id, service_name, "consume", remaining=-amount, used=amount)

    async def reverse_consumption(self, vendor_id: str, service_name: str, amount: int) -> CreditBalance:
        """Give back credits of a deleted subscription: remaining += amount, total_used -= amount."""
        return await self._adjust(
            vendor_id, service_name, "reverse_consumption", remaining=amount, used=-amount
        )

    async def record_purchase(self, vendor_id: str, service_name: str, amount: int) -> CreditBalance:
        """Add bought credits: remaining += amount, total_purchased += amount."""
        return await self._adjust(
            vendor_id, service_name, "record_purchase", remaining=amount, purchased=amount
        )

    async def reverse_purchase(self, vendor_id: str, service_name: str, amount: int) -> CreditBalance:
        """Remove returned credits: remaining -= amount, total_purchased -= amount."""
        return await self._adjust(
            vendor_id, service_name, "reverse_purchase", remaining=-amount, purchased=-amount
        )

    async def _adjust(
        self,
        vendor_id: str,
        service_name: str,
        operation: str,
        remaining: int,
        purchased: int = 0,
        used: int = 0,
    ) -> CreditBalance:
        """
        Apply relative deltas to one balance row.

        Args:
            vendor_id: Vendor ID
            service_name: Vendor service name
            operation: Adjustment name for logging
            remaining: Delta for remaining_credits
            purchased: Delta for total_purchased
            used: Delta for total_used

        Returns:
            The balance row after the adjustment
        """
        balance = await self.ensure_balance(vendor_id, service_name)

        await self.db.execute(
            update(CreditBalance)
            .where(CreditBalance.id == balance.id)
            .values(
                remaining_credits=CreditBalance.remaining_credits + remaining,
                total_purchased=CreditBalance.total_purchased + purchased,
                total_used=CreditBalance.total_used + used,
                last_updated=datetime.utcnow(),
            )
        )
        await self.db.refresh(balance)

        logger.info(
            "ledger_adjusted",
            operation=operation,
            vendor_id=vendor_id,
            service_name=service_name,
            remaining_delta=remaining,
            remaining_credits=balance.remaining_credits,
        )
        return balance

    async def list_balances(self, active_vendors_only: bool = True) -> list[tuple[CreditBalance, str]]:
        """
        List balances with their vendor names, ordered by vendor then service.

        Args:
            active_vendors_only: Skip balances of deactivated vendors

        Returns:
            List of (balance, vendor_name) tuples
        """
        query = select(CreditBalance, Vendor.name).join(Vendor, CreditBalance.vendor_id == Vendor.id)
        if active_vendors_only:
            query = query.where(Vendor.is_active.is_(True))
        query = query.order_by(Vendor.name, CreditBalance.service_name)

        result = await self.db.execute(query)
        return [(balance, vendor_name) for balance, vendor_name in result.all()]

    async def list_low_balances(self, threshold: int) -> list[tuple[CreditBalance, str]]:
        """
        List balances whose remaining credits are below a threshold.

        Args:
            threshold: Balances with remaining_credits < threshold are returned

        Returns:
            List of (balance, vendor_name) tuples, lowest remaining first
        """
        balances = await self.list_balances()
        low = [(b, name) for b, name in balances if b.remaining_credits < threshold]
        low_credit_balances_gauge.set(len(low))
        return sorted(low, key=lambda item: item[0].remaining_credits)
