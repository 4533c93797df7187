"""Bundle API endpoints: several subscriptions sold together."""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from creditdesk.api.deps import get_app_state, get_db
from creditdesk.schemas.subscription import (
    BundleCreate,
    BundleCreated,
    BundleUpdated,
    Subscription,
    SubscriptionMetadataUpdate,
)
from creditdesk.services.ledger_coordinator import LedgerCoordinator
from creditdesk.services.subscription_store import SubscriptionStore
from creditdesk.state import AppState

router = APIRouter(prefix="/bundles", tags=["Bundles"])


@router.post("", response_model=BundleCreated, status_code=status.HTTP_201_CREATED)
async def create_bundle(
    bundle_data: BundleCreate,
    db: AsyncSession = Depends(get_db),
    state: AppState = Depends(get_app_state),
) -> BundleCreated:
    """
    Sell several items as one bundle.

    - **bundle_id**: Bundle identifier (generated when omitted)
    - **items**: At least one subscription/item; each consumes its own credits

    All members and all balance decrements commit together or not at all.
    """
    coordinator = LedgerCoordinator(db)

    try:
        bundle_id, subscriptions = await coordinator.create_bundle(bundle_data)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e

    state.mutated("subscription_created")
    return BundleCreated(bundle_id=bundle_id, ids=[subscription.id for subscription in subscriptions])


@router.get("/{bundle_id}", response_model=list[Subscription])
async def list_bundle_members(
    bundle_id: str,
    db: AsyncSession = Depends(get_db),
) -> list[Subscription]:
    """List the members of a bundle in creation order (empty when unknown)."""
    return await SubscriptionStore(db).list_by_bundle(bundle_id)


@router.put("/{bundle_id}", response_model=BundleUpdated)
async def update_bundle_metadata(
    bundle_id: str,
    changes: SubscriptionMetadataUpdate,
    db: AsyncSession = Depends(get_db),
    state: AppState = Depends(get_app_state),
) -> BundleUpdated:
    """
    Update order and payment details of every member of a bundle.

    Returns 404 when the bundle has no members.
    """
    updated = await SubscriptionStore(db).update_bundle_metadata(bundle_id, changes)
    if not updated:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Bundle {bundle_id} not found",
        )

    await db.commit()
    state.mutated("subscription_updated")
    return BundleUpdated(updated=updated)
