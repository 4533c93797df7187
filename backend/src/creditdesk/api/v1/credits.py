"""Credit balance and vendor credit purchase API endpoints."""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from creditdesk.api.deps import get_app_state, get_db
from creditdesk.config import settings
from creditdesk.models.credit_balance import CreditBalance as CreditBalanceRow
from creditdesk.schemas.common import OperationResult
from creditdesk.schemas.credit import (
    CreditBalance,
    CreditPurchaseResult,
    VendorTransaction,
    VendorTransactionCreate,
)
from creditdesk.services.balance_ledger import BalanceLedger
from creditdesk.services.purchase_service import CreditPurchaseService
from creditdesk.state import CREDIT_BALANCES, VENDOR_TRANSACTIONS, AppState

router = APIRouter(tags=["Credits"])

DEFAULT_PURCHASE_LIMIT = 100


def with_vendor(rows: list[tuple[CreditBalanceRow, str]]) -> list[CreditBalance]:
    """Build balance responses from (balance, vendor_name) rows."""
    return [
        CreditBalance.model_validate(balance).model_copy(update={"vendor_name": name})
        for balance, name in rows
    ]


@router.get("/credit-balances", response_model=list[CreditBalance])
async def list_credit_balances(
    db: AsyncSession = Depends(get_db),
    state: AppState = Depends(get_app_state),
) -> list[CreditBalance]:
    """Credit balances of active vendors, ordered by vendor then service."""

    async def load() -> list[CreditBalance]:
        return with_vendor(await BalanceLedger(db).list_balances())

    return await state.get(CREDIT_BALANCES, load)


@router.get("/credit-balances/alerts", response_model=list[CreditBalance])
async def low_credit_alerts(
    threshold: int | None = Query(None, ge=0, description="Alert below this many credits"),
    db: AsyncSession = Depends(get_db),
) -> list[CreditBalance]:
    """
    Balances running low, lowest first.

    - **threshold**: defaults to the configured low-credit threshold (10)
    """
    limit = settings.low_credit_threshold if threshold is None else threshold
    return with_vendor(await BalanceLedger(db).list_low_balances(limit))


@router.get("/vendor-transactions", response_model=list[VendorTransaction])
async def list_vendor_transactions(
    limit: int = Query(DEFAULT_PURCHASE_LIMIT, ge=1, le=1000, description="Maximum number of purchases"),
    db: AsyncSession = Depends(get_db),
    state: AppState = Depends(get_app_state),
) -> list[VendorTransaction]:
    """Credit purchases with vendor names, newest purchase first."""

    async def load() -> list[VendorTransaction]:
        rows = await CreditPurchaseService(db).list_transactions(limit)
        return [
            VendorTransaction.model_validate(transaction).model_copy(update={"vendor_name": name})
            for transaction, name in rows
        ]

    if limit != DEFAULT_PURCHASE_LIMIT:
        return await load()
    return await state.get(VENDOR_TRANSACTIONS, load)


@router.post("/vendor-transactions", response_model=CreditPurchaseResult, status_code=status.HTTP_201_CREATED)
async def purchase_credits(
    purchase_data: VendorTransactionCreate,
    db: AsyncSession = Depends(get_db),
    state: AppState = Depends(get_app_state),
) -> CreditPurchaseResult:
    """
    Record credits bought from a vendor.

    - **vendor_id**, **service_name**: balance receiving the credits
    - **credits**: number of credits (> 0)
    - **price_usd**: total price paid

    The balance row is created on the first purchase for a vendor service.
    """
    service = CreditPurchaseService(db)

    try:
        transaction, balance = await service.record_purchase(purchase_data)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e

    state.mutated("credits_purchased")
    return CreditPurchaseResult(
        transaction=VendorTransaction.model_validate(transaction),
        balance=CreditBalance.model_validate(balance),
    )


@router.delete("/vendor-transactions/{transaction_id}", response_model=OperationResult)
async def return_purchase(
    transaction_id: str,
    db: AsyncSession = Depends(get_db),
    state: AppState = Depends(get_app_state),
) -> OperationResult:
    """
    Undo a credit purchase, removing its credits from the vendor balance.

    Returns 404 when the purchase does not exist.
    """
    returned = await CreditPurchaseService(db).return_purchase(transaction_id)
    if not returned:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Vendor transaction {transaction_id} not found",
        )

    state.mutated("purchase_returned")
    return OperationResult(message="Purchase returned successfully")
