"""Ledger coordinator: subscription mutations paired with credit balance adjustments."""
import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from creditdesk.database import unit_of_work
from creditdesk.metrics import (
    credits_consumed_total,
    credits_reversed_total,
    subscriptions_created_total,
    subscriptions_deleted_total,
)
from creditdesk.models.base import generate_id
from creditdesk.models.customer import Customer
from creditdesk.models.subscription import Subscription
from creditdesk.models.vendor import Vendor
from creditdesk.schemas.subscription import BundleCreate, SubscriptionBase, SubscriptionCreate
from creditdesk.services.balance_ledger import BalanceLedger
from creditdesk.services.subscription_store import SubscriptionStore

logger = structlog.get_logger(__name__)


class LedgerCoordinator:
    """
    The only place a Subscription change is paired with a CreditBalance change.

    Every public operation runs as one unit of work: the subscription rows
    and the balance adjustments either all commit or all roll back.
    """

    def __init__(self, db: AsyncSession):
        """Initialize coordinator with database session."""
        self.db = db
        self.store = SubscriptionStore(db)
        self.ledger = BalanceLedger(db)

    async def create_subscription(self, subscription_data: SubscriptionCreate) -> Subscription:
        """
        Sell a single subscription, consuming vendor credits when it uses any.

        Args:
            subscription_data: Subscription creation data

        Returns:
            Created subscription

        Raises:
            ValueError: If the customer or the vendor does not exist
        """
        await self._require_parties([subscription_data])

        async with unit_of_work(self.db):
            subscription = await self._insert_and_consume(subscription_data, subscription_data.bundle_id)

        self._record_created([subscription])
        logger.info(
            "subscription_created",
            subscription_id=subscription.id,
            customer_id=subscription.customer_id,
            vendor_id=subscription.vendor_id,
            credits_used=subscription.credits_used,
        )
        return subscription

    async def create_bundle(self, bundle_data: BundleCreate) -> tuple[str, list[Subscription]]:
        """
        Sell several items as one bundle.

        Every item is inserted under the same bundle_id and consumes its own
        credits. A failure on any item leaves no member and no adjustment behind.

        Args:
            bundle_data: Bundle id (optional) and its items

        Returns:
            Tuple of (bundle_id, created subscriptions in item order)

        Raises:
            ValueError: If any item's customer or vendor does not exist
        """
        bundle_id = bundle_data.bundle_id or generate_id()
        await self._require_parties(bundle_data.items)

        async with unit_of_work(self.db):
            subscriptions = [
                await self._insert_and_consume(item, bundle_id) for item in bundle_data.items
            ]

        self._record_created(subscriptions)
        logger.info("bundle_created", bundle_id=bundle_id, items=len(subscriptions))
        return bundle_id, subscriptions

    async def delete_subscription(self, subscription_id: str) -> bool:
        """
        Delete a subscription and give back the credits it consumed.

        The reversal uses the stored vendor, service name and credit count,
        read inside the same unit of work as the delete.

        Args:
            subscription_id: Subscription ID

        Returns:
            True if deleted, False if no such subscription exists
        """
        async with unit_of_work(self.db):
            subscription = await self.store.get_by_id(subscription_id)
            if subscription is None:
                return False

            await self._reverse(subscription)
            await self.store.delete_by_id(subscription_id)

        subscriptions_deleted_total.labels(scope="single").inc()
        self._record_reversed([subscription])
        logger.info(
            "subscription_deleted",
            subscription_id=subscription_id,
            credits_returned=subscription.credits_used if subscription.consumes_credits else 0,
        )
        return True

    async def delete_bundle(self, bundle_id: str) -> int:
        """
        Delete every member of a bundle, reversing each member's consumption.

        Args:
            bundle_id: Bundle identifier

        Returns:
            Number of subscriptions removed (0 when the bundle has no members)
        """
        async with unit_of_work(self.db):
            members = await self.store.list_by_bundle(bundle_id)
            if not members:
                return 0

            for member in members:
                await self._reverse(member)
            deleted = await self.store.delete_by_bundle(bundle_id)

        subscriptions_deleted_total.labels(scope="bundle").inc(deleted)
        self._record_reversed(members)
        logger.info("bundle_deleted", bundle_id=bundle_id, deleted=deleted)
        return deleted

    async def _require_parties(self, records: list[SubscriptionBase]) -> None:
        """Reject records whose customer or vendor is unknown, before anything is written."""
        for customer_id in sorted({record.customer_id for record in records}):
            if not await self._exists(Customer, customer_id):
                raise ValueError(f"Customer {customer_id} not found")
        for vendor_id in sorted({record.vendor_id for record in records if record.vendor_id}):
            if not await self._exists(Vendor, vendor_id):
                raise ValueError(f"Vendor {vendor_id} not found")

    async def _exists(self, model, entity_id: str) -> bool:
        result = await self.db.execute(select(model.id).where(model.id == entity_id))
        return result.scalar_one_or_none() is not None

    async def _insert_and_consume(self, record: SubscriptionBase, bundle_id: str | None) -> Subscription:
        subscription = await self.store.insert(record, bundle_id=bundle_id)
        if subscription.consumes_credits:
            await self.ledger.consume(
                subscription.vendor_id, subscription.vendor_service_name, subscription.credits_used
            )
        return subscription

    async def _reverse(self, subscription: Subscription) -> None:
        if subscription.consumes_credits:
            await self.ledger.reverse_consumption(
                subscription.vendor_id, subscription.vendor_service_name, subscription.credits_used
            )

    @staticmethod
    def _record_created(subscriptions: list[Subscription]) -> None:
        for subscription in subscriptions:
            subscriptions_created_total.labels(item_type=subscription.item_type).inc()
            if subscription.consumes_credits:
                credits_consumed_total.labels(
                    vendor_id=subscription.vendor_id, service_name=subscription.vendor_service_name
                ).inc(subscription.credits_used)

    @staticmethod
    def _record_reversed(subscriptions: list[Subscription]) -> None:
        for subscription in subscriptions:
            if subscription.consumes_credits:
                credits_reversed_total.labels(
                    vendor_id=subscription.vendor_id, service_name=subscription.vendor_service_name
                ).inc(subscription.credits_used)
