"""Subscription record store: persistence of subscription and bundle rows."""
from datetime import date, datetime, timedelta
from typing import Any

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from creditdesk.config import settings
from creditdesk.models.customer import Customer
from creditdesk.models.subscription import Subscription
from creditdesk.schemas.subscription import SubscriptionBase, SubscriptionMetadataUpdate


def open_ended_expiration() -> date:
    """Expiration date stored for subscriptions sold without one."""
    return date.fromisoformat(settings.open_ended_expiration)


class SubscriptionStore:
    """
    Storage for Subscription rows.

    The store never touches credit balances and never commits; pairing a
    row change with a ledger change is the coordinator's job.
    """

    def __init__(self, db: AsyncSession):
        """Initialize store with database session."""
        self.db = db

    async def insert(self, record: SubscriptionBase, bundle_id: str | None = None) -> Subscription:
        """
        Persist a new subscription row.

        Args:
            record: Validated subscription fields
            bundle_id: Bundle the row belongs to, if any

        Returns:
            Subscription with its generated id
        """
        values = record.model_dump(exclude={"bundle_id"})
        if values.get("expiration_date") is None:
            values["expiration_date"] = open_ended_expiration()

        subscription = Subscription(**values, bundle_id=bundle_id)
        self.db.add(subscription)
        await self.db.flush()
        await self.db.refresh(subscription)
        return subscription

    async def get_by_id(self, subscription_id: str) -> Subscription | None:
        """Get a subscription by ID."""
        result = await self.db.execute(
            select(Subscription)
            .where(Subscription.id == subscription_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def list_by_bundle(self, bundle_id: str) -> list[Subscription]:
        """
        List the members of a bundle in creation order.

        Args:
            bundle_id: Bundle identifier

        Returns:
            Member rows, oldest first (empty when the bundle does not exist)
        """
        result = await self.db.execute(
            select(Subscription)
            .where(Subscription.bundle_id == bundle_id)
            .order_by(Subscription.created_at.asc(), Subscription.id.asc())
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def list_all(self, customer_id: str | None = None) -> list[tuple[Subscription, str]]:
        """
        List subscriptions with customer names, newest first.

        Args:
            customer_id: Restrict to one customer

        Returns:
            List of (subscription, customer_name) tuples
        """
        query = select(Subscription, Customer.name).join(Customer, Subscription.customer_id == Customer.id)
        if customer_id:
            query = query.where(Subscription.customer_id == customer_id)
        query = query.order_by(Subscription.created_at.desc())

        result = await self.db.execute(query)
        return [(subscription, name) for subscription, name in result.all()]

    async def list_expiring(self, within_days: int, today: date | None = None) -> list[tuple[Subscription, str]]:
        """
        List active subscriptions expiring after today and within a window.

        Args:
            within_days: Window length in days
            today: Reference date (defaults to the current date)

        Returns:
            List of (subscription, customer_name) tuples, soonest first
        """
        today = today or date.today()
        result = await self.db.execute(
            select(Subscription, Customer.name)
            .join(Customer, Subscription.customer_id == Customer.id)
            .where(
                Subscription.status == "active",
                Subscription.expiration_date > today,
                Subscription.expiration_date <= today + timedelta(days=within_days),
            )
            .order_by(Subscription.expiration_date.asc())
        )
        return [(subscription, name) for subscription, name in result.all()]

    async def delete_by_id(self, subscription_id: str) -> int:
        """Delete one row; returns the number of rows removed."""
        result = await self.db.execute(delete(Subscription).where(Subscription.id == subscription_id))
        return result.rowcount

    async def delete_by_bundle(self, bundle_id: str) -> int:
        """Delete every member of a bundle; returns the number of rows removed."""
        result = await self.db.execute(delete(Subscription).where(Subscription.bundle_id == bundle_id))
        return result.rowcount

    async def update_metadata(self, subscription_id: str, changes: SubscriptionMetadataUpdate) -> int:
        """
        Update order and payment fields of one subscription.

        Only fields present in the request change. Credits, vendor and
        ledger state are never touched.

        Returns:
            Number of rows updated (0 when the id does not exist)
        """
        values = self._metadata_values(changes)
        if not values:
            return 1 if await self.get_by_id(subscription_id) else 0

        result = await self.db.execute(
            update(Subscription).where(Subscription.id == subscription_id).values(**values)
        )
        return result.rowcount

    async def update_bundle_metadata(self, bundle_id: str, changes: SubscriptionMetadataUpdate) -> int:
        """
        Update order and payment fields of every member of a bundle.

        Returns:
            Number of rows updated (0 when the bundle has no members)
        """
        values = self._metadata_values(changes)
        if not values:
            return len(await self.list_by_bundle(bundle_id))

        result = await self.db.execute(
            update(Subscription).where(Subscription.bundle_id == bundle_id).values(**values)
        )
        return result.rowcount

    @staticmethod
    def _metadata_values(changes: SubscriptionMetadataUpdate) -> dict[str, Any]:
        # transaction_ref is the only nullable metadata column
        values = {
            key: value
            for key, value in changes.model_dump(exclude_unset=True).items()
            if value is not None or key == "transaction_ref"
        }
        if values:
            values["updated_at"] = datetime.utcnow()
        return values
