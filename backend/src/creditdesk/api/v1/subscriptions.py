"""Subscription API endpoints."""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from creditdesk.api.deps import get_app_state, get_db
from creditdesk.models.subscription import Subscription as SubscriptionRow
from creditdesk.schemas.common import OperationResult
from creditdesk.schemas.subscription import (
    BundleDeleted,
    Subscription,
    SubscriptionCreate,
    SubscriptionCreated,
    SubscriptionMetadataUpdate,
    SubscriptionWithCustomer,
)
from creditdesk.services.ledger_coordinator import LedgerCoordinator
from creditdesk.services.subscription_store import SubscriptionStore
from creditdesk.state import SUBSCRIPTIONS, AppState

router = APIRouter(prefix="/subscriptions", tags=["Subscriptions"])

WEEK_DAYS = 7
MONTH_DAYS = 30


def with_customer(rows: list[tuple[SubscriptionRow, str]]) -> list[SubscriptionWithCustomer]:
    """Build list responses from (subscription, customer_name) rows."""
    return [
        SubscriptionWithCustomer.model_validate(subscription).model_copy(update={"customer_name": name})
        for subscription, name in rows
    ]


@router.post("", response_model=SubscriptionCreated, status_code=status.HTTP_201_CREATED)
async def create_subscription(
    subscription_data: SubscriptionCreate,
    db: AsyncSession = Depends(get_db),
    state: AppState = Depends(get_app_state),
) -> SubscriptionCreated:
    """
    Sell a subscription or item to a customer.

    - **customer_id**: Customer ID (required, must exist)
    - **service_name**, **start_date**, **amount_paid**: required
    - **vendor_id** + **vendor_service_name**: balance the credits come from (optional)
    - **credits_used**: credits taken from that balance (default: 0)
    - **expiration_date**: defaults to the open-ended date 9999-12-31

    The subscription row and the balance decrement commit together or not at all.
    """
    coordinator = LedgerCoordinator(db)

    try:
        subscription = await coordinator.create_subscription(subscription_data)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e

    state.mutated("subscription_created")
    return SubscriptionCreated(id=subscription.id, subscription=Subscription.model_validate(subscription))


@router.get("", response_model=list[SubscriptionWithCustomer])
async def list_subscriptions(
    customer_id: str | None = Query(None, description="Filter by customer ID"),
    db: AsyncSession = Depends(get_db),
    state: AppState = Depends(get_app_state),
) -> list[SubscriptionWithCustomer]:
    """List subscriptions with customer names, newest first."""
    store = SubscriptionStore(db)

    if customer_id:
        return with_customer(await store.list_all(customer_id))

    async def load() -> list[SubscriptionWithCustomer]:
        return with_customer(await store.list_all())

    return await state.get(SUBSCRIPTIONS, load)


@router.get("/weekly-expiring", response_model=list[SubscriptionWithCustomer])
async def weekly_expiring(db: AsyncSession = Depends(get_db)) -> list[SubscriptionWithCustomer]:
    """Active subscriptions expiring within the next 7 days, soonest first."""
    return with_customer(await SubscriptionStore(db).list_expiring(WEEK_DAYS))


@router.get("/monthly-expiring", response_model=list[SubscriptionWithCustomer])
async def monthly_expiring(db: AsyncSession = Depends(get_db)) -> list[SubscriptionWithCustomer]:
    """Active subscriptions expiring within the next 30 days, soonest first."""
    return with_customer(await SubscriptionStore(db).list_expiring(MONTH_DAYS))


@router.get("/{subscription_id}", response_model=Subscription)
async def get_subscription(
    subscription_id: str,
    db: AsyncSession = Depends(get_db),
) -> Subscription:
    """Get subscription by ID."""
    subscription = await SubscriptionStore(db).get_by_id(subscription_id)

    if not subscription:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Subscription {subscription_id} not found",
        )

    return subscription


@router.put("/{subscription_id}/metadata", response_model=OperationResult)
async def update_subscription_metadata(
    subscription_id: str,
    changes: SubscriptionMetadataUpdate,
    db: AsyncSession = Depends(get_db),
    state: AppState = Depends(get_app_state),
) -> OperationResult:
    """
    Update order and payment details of a subscription.

    Only the fields sent are changed. Credits and balances are never touched.
    """
    updated = await SubscriptionStore(db).update_metadata(subscription_id, changes)
    if not updated:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Subscription {subscription_id} not found",
        )

    await db.commit()
    state.mutated("subscription_updated")
    return OperationResult(message="Subscription updated successfully")


@router.delete("/{subscription_id}", response_model=OperationResult)
async def delete_subscription(
    subscription_id: str,
    db: AsyncSession = Depends(get_db),
    state: AppState = Depends(get_app_state),
) -> OperationResult:
    """
    Delete a subscription and return its credits to the vendor balance.

    Returns 404 when the subscription does not exist; nothing changes in that case.
    """
    deleted = await LedgerCoordinator(db).delete_subscription(subscription_id)
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Subscription {subscription_id} not found",
        )

    state.mutated("subscription_deleted")
    return OperationResult(message="Subscription deleted successfully")


@router.delete("/bundle/{bundle_id}", response_model=BundleDeleted)
async def delete_bundle(
    bundle_id: str,
    db: AsyncSession = Depends(get_db),
    state: AppState = Depends(get_app_state),
) -> BundleDeleted:
    """
    Delete every subscription of a bundle, returning each member's credits.

    Returns 404 when the bundle has no members.
    """
    deleted = await LedgerCoordinator(db).delete_bundle(bundle_id)
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Bundle {bundle_id} not found",
        )

    state.mutated("subscription_deleted")
    return BundleDeleted(deleted=deleted)
