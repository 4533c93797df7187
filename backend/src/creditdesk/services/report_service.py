"""Profit/loss and dashboard reporting."""
from datetime import date

from sqlalchemy import case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from creditdesk.config import settings
from creditdesk.models.credit_balance import CreditBalance
from creditdesk.models.subscription import Subscription
from creditdesk.models.vendor_transaction import VendorTransaction
from creditdesk.schemas.report import DashboardStats, ProfitAndLoss
from creditdesk.services.business_service import BusinessService
from creditdesk.services.customer_service import CustomerService


def period_bounds(year: int, month: int | None = None) -> tuple[date, date]:
    """
    Half-open date range covering a calendar month or year.

    Raises:
        ValueError: If month is outside 1-12
    """
    if month is None:
        return date(year, 1, 1), date(year + 1, 1, 1)
    if not 1 <= month <= 12:
        raise ValueError("Month must be between 1 and 12")
    start = date(year, month, 1)
    end = date(year + 1, 1, 1) if month == 12 else date(year, month + 1, 1)
    return start, end


class ReportService:
    """Read-only reports over subscriptions, purchases and balances."""

    def __init__(self, db: AsyncSession):
        """Initialize report service with database session."""
        self.db = db

    async def average_cost_per_credit(self) -> float:
        """Average of price/credits over all credit purchases (0 when there are none)."""
        result = await self.db.execute(
            select(func.avg(VendorTransaction.price_usd / VendorTransaction.credits)).where(
                VendorTransaction.credits > 0
            )
        )
        return float(result.scalar_one() or 0)

    async def profit_and_loss(self, year: int, month: int | None = None) -> ProfitAndLoss:
        """
        Revenue against estimated credit cost for a month or a whole year.

        Only active subscriptions whose start date falls in the period count.
        Costs are estimated as credits used times the average purchase price
        per credit.

        Args:
            year: Calendar year
            month: Calendar month (1-12), or None for the whole year

        Returns:
            ProfitAndLoss for the period

        Raises:
            ValueError: If month is outside 1-12
        """
        start, end = period_bounds(year, month)
        result = await self.db.execute(
            select(
                func.coalesce(func.sum(Subscription.amount_paid), 0.0),
                func.coalesce(func.sum(Subscription.credits_used), 0),
                func.count(Subscription.id),
            ).where(
                Subscription.status == "active",
                Subscription.start_date >= start,
                Subscription.start_date < end,
            )
        )
        total_revenue, total_credits_used, subscription_count = result.one()

        avg_cost = await self.average_cost_per_credit()
        estimated_costs = total_credits_used * avg_cost

        return ProfitAndLoss(
            total_revenue=float(total_revenue),
            total_credits_used=int(total_credits_used),
            avg_cost_per_credit=avg_cost,
            estimated_costs=estimated_costs,
            estimated_profit=float(total_revenue) - estimated_costs,
            subscription_count=subscription_count,
        )

    async def dashboard_stats(self) -> DashboardStats:
        """
        Headline numbers across the whole store.

        The dashboard's cost per credit is total spend over total credits
        bought, unlike the per-purchase average used by profit_and_loss.
        """
        total_customers = await CustomerService(self.db).count_customers()

        total_revenue, total_credits_used = (
            await self.db.execute(
                select(
                    func.coalesce(func.sum(Subscription.amount_paid), 0.0),
                    func.coalesce(func.sum(Subscription.credits_used), 0),
                ).where(Subscription.status == "active")
            )
        ).one()

        total_vendor_costs, total_vendor_credits = (
            await self.db.execute(
                select(
                    func.coalesce(func.sum(VendorTransaction.price_usd), 0.0),
                    func.coalesce(func.sum(VendorTransaction.credits), 0),
                )
            )
        ).one()

        total_credits_remaining, low_credit_alerts = (
            await self.db.execute(
                select(
                    func.coalesce(func.sum(CreditBalance.remaining_credits), 0),
                    func.coalesce(
                        func.sum(case((CreditBalance.remaining_credits < settings.low_credit_threshold, 1), else_=0)),
                        0,
                    ),
                )
            )
        ).one()

        avg_cost = float(total_vendor_costs) / total_vendor_credits if total_vendor_credits > 0 else 0.0
        business_balance = await BusinessService(self.db).get_balance()

        return DashboardStats(
            total_customers=total_customers,
            total_credits_used=int(total_credits_used),
            total_revenue=float(total_revenue),
            total_vendor_costs=float(total_vendor_costs),
            avg_cost_per_credit=avg_cost,
            net_profit_from_credit_sales=float(total_revenue) - total_credits_used * avg_cost,
            final_net_profit=float(total_revenue) - float(total_vendor_costs),
            total_credits_remaining=int(total_credits_remaining),
            low_credit_alerts=low_credit_alerts,
            business_balance=business_balance,
        )
