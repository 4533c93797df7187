"""Integration tests for subscription/credit balance consistency."""
from unittest.mock import patch

import pytest
from prometheus_client import REGISTRY
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from creditdesk.models.credit_balance import CreditBalance
from creditdesk.models.customer import Customer
from creditdesk.models.subscription import Subscription
from creditdesk.models.vendor import Vendor
from creditdesk.schemas.subscription import BundleCreate, SubscriptionBase, SubscriptionCreate
from tests.utils.factories import SubscriptionFactory, VendorFactory


async def _seed_balance(
    db: AsyncSession, vendor_id: str, service_name: str, remaining: int, used: int, purchased: int
) -> None:
    db.add(
        CreditBalance(
            vendor_id=vendor_id,
            service_name=service_name,
            remaining_credits=remaining,
            total_used=used,
            total_purchased=purchased,
        )
    )
    await db.commit()


async def _totals(db: AsyncSession, vendor_id: str, service_name: str) -> tuple[int, int, int]:
    from creditdesk.services.balance_ledger import BalanceLedger

    balance = await BalanceLedger(db).get_balance(vendor_id, service_name)
    return balance.remaining_credits, balance.total_used, balance.total_purchased


async def _subscription_count(db: AsyncSession) -> int:
    result = await db.execute(select(func.count()).select_from(Subscription))
    return result.scalar_one()


@pytest.mark.asyncio
async def test_create_then_delete_restores_balance(
    db_session: AsyncSession, sample_subscription_data: dict, test_vendor: Vendor
) -> None:
    """Selling 12 credits takes them from the balance; deleting the sale gives them back."""
    from creditdesk.services.ledger_coordinator import LedgerCoordinator

    vendor_id = test_vendor.id
    await _seed_balance(db_session, vendor_id, "svcX", remaining=100, used=50, purchased=150)

    coordinator = LedgerCoordinator(db_session)
    subscription = await coordinator.create_subscription(SubscriptionCreate(**sample_subscription_data))

    assert subscription.id is not None
    assert await _totals(db_session, vendor_id, "svcX") == (88, 62, 150)

    deleted = await coordinator.delete_subscription(subscription.id)

    assert deleted is True
    assert await _totals(db_session, vendor_id, "svcX") == (100, 50, 150)
    assert await coordinator.store.get_by_id(subscription.id) is None


@pytest.mark.asyncio
async def test_ledger_conservation_over_sequence(
    db_session: AsyncSession, sample_subscription_data: dict, test_vendor: Vendor
) -> None:
    """purchased - used == remaining after every create and delete."""
    from creditdesk.services.ledger_coordinator import LedgerCoordinator

    vendor_id = test_vendor.id
    await _seed_balance(db_session, vendor_id, "svcX", remaining=100, used=50, purchased=150)
    coordinator = LedgerCoordinator(db_session)

    created = []
    for credits in (1, 7, 30, 12):
        data = {**sample_subscription_data, "credits_used": credits}
        created.append(await coordinator.create_subscription(SubscriptionCreate(**data)))
        remaining, used, purchased = await _totals(db_session, vendor_id, "svcX")
        assert purchased - used == remaining

    assert await _totals(db_session, vendor_id, "svcX") == (50, 100, 150)

    for subscription in (created[2], created[0], created[3], created[1]):
        await coordinator.delete_subscription(subscription.id)
        remaining, used, purchased = await _totals(db_session, vendor_id, "svcX")
        assert purchased - used == remaining

    assert await _totals(db_session, vendor_id, "svcX") == (100, 50, 150)


@pytest.mark.asyncio
async def test_delete_bundle_returns_credits_per_key(
    db_session: AsyncSession, test_customer: Customer, test_vendor: Vendor
) -> None:
    """Each member's credits go back to its own balance; untouched keys stay as they were."""
    from creditdesk.services.ledger_coordinator import LedgerCoordinator

    customer_id = test_customer.id
    vendor_a = test_vendor.id
    other = Vendor(**VendorFactory.create(), is_active=True)
    db_session.add(other)
    await db_session.commit()
    vendor_b = other.id

    await _seed_balance(db_session, vendor_a, "svcX", remaining=40, used=10, purchased=50)
    await _seed_balance(db_session, vendor_b, "svcY", remaining=20, used=0, purchased=20)
    await _seed_balance(db_session, vendor_b, "svcZ", remaining=9, used=1, purchased=10)

    coordinator = LedgerCoordinator(db_session)
    bundle_id, members = await coordinator.create_bundle(
        BundleCreate(
            items=[
                SubscriptionBase(
                    **SubscriptionFactory.create(
                        {"customer_id": customer_id, "vendor_id": vendor_a, "vendor_service_name": "svcX", "credits_used": 5}
                    )
                ),
                SubscriptionBase(
                    **SubscriptionFactory.create(
                        {"customer_id": customer_id, "vendor_id": vendor_b, "vendor_service_name": "svcY", "credits_used": 3}
                    )
                ),
            ]
        )
    )

    assert len(members) == 2
    assert all(member.bundle_id == bundle_id for member in members)
    assert await _totals(db_session, vendor_a, "svcX") == (35, 15, 50)
    assert await _totals(db_session, vendor_b, "svcY") == (17, 3, 20)

    deleted = await coordinator.delete_bundle(bundle_id)

    assert deleted == 2
    assert await _totals(db_session, vendor_a, "svcX") == (40, 10, 50)
    assert await _totals(db_session, vendor_b, "svcY") == (20, 0, 20)
    assert await _totals(db_session, vendor_b, "svcZ") == (9, 1, 10)
    assert await coordinator.store.list_by_bundle(bundle_id) == []


@pytest.mark.asyncio
async def test_bundle_members_on_same_key_are_summed(
    db_session: AsyncSession, sample_subscription_data: dict, test_vendor: Vendor
) -> None:
    """Two members against one key move its balance by the sum of their credits."""
    from creditdesk.services.ledger_coordinator import LedgerCoordinator

    vendor_id = test_vendor.id
    await _seed_balance(db_session, vendor_id, "svcX", remaining=30, used=0, purchased=30)

    coordinator = LedgerCoordinator(db_session)
    items = [
        SubscriptionBase(**{**sample_subscription_data, "credits_used": 4}),
        SubscriptionBase(**{**sample_subscription_data, "credits_used": 6}),
    ]
    bundle_id, _ = await coordinator.create_bundle(BundleCreate(bundle_id="bundle-1", items=items))

    assert bundle_id == "bundle-1"
    assert await _totals(db_session, vendor_id, "svcX") == (20, 10, 30)

    assert await coordinator.delete_bundle("bundle-1") == 2
    assert await _totals(db_session, vendor_id, "svcX") == (30, 0, 30)


@pytest.mark.asyncio
async def test_subscription_without_vendor_leaves_ledger_alone(
    db_session: AsyncSession, test_customer: Customer, test_vendor: Vendor
) -> None:
    """No vendor reference, or zero credits, means no balance change at all."""
    from creditdesk.services.ledger_coordinator import LedgerCoordinator

    customer_id = test_customer.id
    vendor_id = test_vendor.id
    await _seed_balance(db_session, vendor_id, "svcX", remaining=10, used=5, purchased=15)
    coordinator = LedgerCoordinator(db_session)

    no_vendor = await coordinator.create_subscription(
        SubscriptionCreate(**SubscriptionFactory.create({"customer_id": customer_id, "credits_used": 3}))
    )
    zero_credits = await coordinator.create_subscription(
        SubscriptionCreate(
            **SubscriptionFactory.create(
                {"customer_id": customer_id, "vendor_id": vendor_id, "vendor_service_name": "svcX", "credits_used": 0}
            )
        )
    )
    assert await _totals(db_session, vendor_id, "svcX") == (10, 5, 15)

    await coordinator.delete_subscription(no_vendor.id)
    await coordinator.delete_subscription(zero_credits.id)

    assert await _totals(db_session, vendor_id, "svcX") == (10, 5, 15)
    count = await db_session.execute(select(func.count()).select_from(CreditBalance))
    assert count.scalar_one() == 1


@pytest.mark.asyncio
async def test_balance_failure_rolls_back_subscription(
    db_session: AsyncSession, sample_subscription_data: dict, test_vendor: Vendor
) -> None:
    """If the balance write fails, the staged subscription row is gone too."""
    from creditdesk.services.balance_ledger import BalanceLedger
    from creditdesk.services.ledger_coordinator import LedgerCoordinator

    vendor_id = test_vendor.id
    await _seed_balance(db_session, vendor_id, "svcX", remaining=100, used=50, purchased=150)

    with patch.object(BalanceLedger, "consume", side_effect=SQLAlchemyError("simulated write failure")):
        with pytest.raises(SQLAlchemyError):
            await LedgerCoordinator(db_session).create_subscription(SubscriptionCreate(**sample_subscription_data))

    assert await _subscription_count(db_session) == 0
    assert await _totals(db_session, vendor_id, "svcX") == (100, 50, 150)


@pytest.mark.asyncio
async def test_delete_failure_keeps_subscription_and_balance(
    db_session: AsyncSession, sample_subscription_data: dict, test_vendor: Vendor
) -> None:
    """A failed delete changes neither the row nor the balance."""
    from creditdesk.services.ledger_coordinator import LedgerCoordinator
    from creditdesk.services.subscription_store import SubscriptionStore

    vendor_id = test_vendor.id
    await _seed_balance(db_session, vendor_id, "svcX", remaining=100, used=50, purchased=150)
    coordinator = LedgerCoordinator(db_session)
    subscription = await coordinator.create_subscription(SubscriptionCreate(**sample_subscription_data))
    subscription_id = subscription.id

    with patch.object(SubscriptionStore, "delete_by_id", side_effect=SQLAlchemyError("simulated delete failure")):
        with pytest.raises(SQLAlchemyError):
            await LedgerCoordinator(db_session).delete_subscription(subscription_id)

    assert await coordinator.store.get_by_id(subscription_id) is not None
    assert await _totals(db_session, vendor_id, "svcX") == (88, 62, 150)


@pytest.mark.asyncio
async def test_missing_balance_row_is_created_at_zero(
    db_session: AsyncSession, sample_subscription_data: dict, test_vendor: Vendor
) -> None:
    """Consuming from a key with no row creates it first, so the sale is never lost."""
    from creditdesk.services.ledger_coordinator import LedgerCoordinator

    vendor_id = test_vendor.id
    await LedgerCoordinator(db_session).create_subscription(SubscriptionCreate(**sample_subscription_data))

    remaining, used, purchased = await _totals(db_session, vendor_id, "svcX")
    assert (remaining, used, purchased) == (-12, 12, 0)
    assert purchased - used == remaining


@pytest.mark.asyncio
async def test_delete_missing_subscription_reports_not_found(
    db_session: AsyncSession, test_vendor: Vendor
) -> None:
    """Deleting an unknown id or bundle returns False/0 and changes nothing."""
    from creditdesk.services.ledger_coordinator import LedgerCoordinator

    vendor_id = test_vendor.id
    await _seed_balance(db_session, vendor_id, "svcX", remaining=5, used=5, purchased=10)
    coordinator = LedgerCoordinator(db_session)

    assert await coordinator.delete_subscription("does-not-exist") is False
    assert await coordinator.delete_bundle("no-such-bundle") == 0
    assert await _totals(db_session, vendor_id, "svcX") == (5, 5, 10)


@pytest.mark.asyncio
async def test_unknown_customer_is_rejected(db_session: AsyncSession, sample_subscription_data: dict) -> None:
    """A sale for a customer that does not exist is refused before anything is written."""
    from creditdesk.services.ledger_coordinator import LedgerCoordinator

    data = {**sample_subscription_data, "customer_id": "missing-customer"}

    with pytest.raises(ValueError, match="not found"):
        await LedgerCoordinator(db_session).create_subscription(SubscriptionCreate(**data))

    assert await _subscription_count(db_session) == 0
    count = await db_session.execute(select(func.count()).select_from(CreditBalance))
    assert count.scalar_one() == 0


@pytest.mark.asyncio
async def test_bundle_item_failure_rolls_back_earlier_members(
    db_session: AsyncSession, sample_subscription_data: dict, test_vendor: Vendor
) -> None:
    """When the second member's balance write fails, the first member and its consumption are undone."""
    from creditdesk.services.balance_ledger import BalanceLedger
    from creditdesk.services.ledger_coordinator import LedgerCoordinator

    vendor_id = test_vendor.id
    await _seed_balance(db_session, vendor_id, "svcX", remaining=30, used=0, purchased=30)

    consume = BalanceLedger.consume
    calls = []

    async def consume_then_fail(self, *args):
        calls.append(args)
        if len(calls) == 2:
            raise SQLAlchemyError("simulated write failure")
        return await consume(self, *args)

    items = [
        SubscriptionBase(**{**sample_subscription_data, "credits_used": 4}),
        SubscriptionBase(**{**sample_subscription_data, "credits_used": 6}),
    ]
    with patch.object(BalanceLedger, "consume", consume_then_fail):
        with pytest.raises(SQLAlchemyError):
            await LedgerCoordinator(db_session).create_bundle(BundleCreate(bundle_id="bundle-1", items=items))

    assert len(calls) == 2
    assert await _subscription_count(db_session) == 0
    assert await _totals(db_session, vendor_id, "svcX") == (30, 0, 30)


@pytest.mark.asyncio
async def test_bundle_delete_failure_keeps_members_and_balances(
    db_session: AsyncSession, sample_subscription_data: dict, test_vendor: Vendor
) -> None:
    """A failed bundle delete leaves every member and every balance as it was."""
    from creditdesk.services.ledger_coordinator import LedgerCoordinator
    from creditdesk.services.subscription_store import SubscriptionStore

    vendor_id = test_vendor.id
    await _seed_balance(db_session, vendor_id, "svcX", remaining=30, used=0, purchased=30)
    coordinator = LedgerCoordinator(db_session)
    items = [
        SubscriptionBase(**{**sample_subscription_data, "credits_used": 4}),
        SubscriptionBase(**{**sample_subscription_data, "credits_used": 6}),
    ]
    bundle_id, _ = await coordinator.create_bundle(BundleCreate(items=items))
    assert await _totals(db_session, vendor_id, "svcX") == (20, 10, 30)

    with patch.object(SubscriptionStore, "delete_by_bundle", side_effect=SQLAlchemyError("simulated delete failure")):
        with pytest.raises(SQLAlchemyError):
            await LedgerCoordinator(db_session).delete_bundle(bundle_id)

    assert len(await coordinator.store.list_by_bundle(bundle_id)) == 2
    assert await _totals(db_session, vendor_id, "svcX") == (20, 10, 30)


@pytest.mark.asyncio
async def test_unknown_vendor_is_rejected(
    db_session: AsyncSession, sample_subscription_data: dict, test_vendor: Vendor
) -> None:
    """A sale or bundle item against a vendor that does not exist is refused before anything is written."""
    from creditdesk.services.ledger_coordinator import LedgerCoordinator

    vendor_id = test_vendor.id
    await _seed_balance(db_session, vendor_id, "svcX", remaining=30, used=0, purchased=30)
    coordinator = LedgerCoordinator(db_session)
    data = {**sample_subscription_data, "vendor_id": "no-such-vendor"}

    with pytest.raises(ValueError, match="Vendor no-such-vendor not found"):
        await coordinator.create_subscription(SubscriptionCreate(**data))

    items = [SubscriptionBase(**sample_subscription_data), SubscriptionBase(**data)]
    with pytest.raises(ValueError, match="Vendor no-such-vendor not found"):
        await coordinator.create_bundle(BundleCreate(items=items))

    assert await _subscription_count(db_session) == 0
    assert await _totals(db_session, vendor_id, "svcX") == (30, 0, 30)
    count = await db_session.execute(select(func.count()).select_from(CreditBalance))
    assert count.scalar_one() == 1


@pytest.mark.asyncio
async def test_rejected_sale_is_not_counted_as_failed_unit_of_work(
    db_session: AsyncSession, sample_subscription_data: dict
) -> None:
    """Unknown customers and vendors are refused without opening a unit of work."""
    from creditdesk.services.ledger_coordinator import LedgerCoordinator

    def failed_units() -> float:
        return REGISTRY.get_sample_value("units_of_work_failed_total", {"error_type": "ValueError"}) or 0

    before = failed_units()
    coordinator = LedgerCoordinator(db_session)

    for override in ({"customer_id": "missing-customer"}, {"vendor_id": "no-such-vendor"}):
        with pytest.raises(ValueError, match="not found"):
            await coordinator.create_subscription(SubscriptionCreate(**{**sample_subscription_data, **override}))

    assert failed_units() == before
