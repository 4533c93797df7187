"""Business cash account API endpoints."""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from creditdesk.api.deps import get_app_state, get_db
from creditdesk.schemas.business import BusinessLedger, BusinessMovement, BusinessTransaction
from creditdesk.schemas.common import OperationResult
from creditdesk.services.business_service import BusinessService
from creditdesk.state import BUSINESS, AppState

router = APIRouter(prefix="/business", tags=["Business"])


@router.get("/transactions", response_model=BusinessLedger)
async def list_business_transactions(
    db: AsyncSession = Depends(get_db),
    state: AppState = Depends(get_app_state),
) -> BusinessLedger:
    """All cash movements, most recent first, with the resulting balance."""
    service = BusinessService(db)

    async def load() -> BusinessLedger:
        transactions = await service.list_transactions()
        return BusinessLedger(
            transactions=[BusinessTransaction.model_validate(t) for t in transactions],
            balance=await service.get_balance(),
        )

    return await state.get(BUSINESS, load)


@router.post("/add-money", response_model=OperationResult, status_code=status.HTTP_201_CREATED)
async def add_money(
    movement: BusinessMovement,
    db: AsyncSession = Depends(get_db),
    state: AppState = Depends(get_app_state),
) -> OperationResult:
    """
    Put money into the business.

    - **amount**: Amount (> 0)
    - **date**: Transaction date (default: today)
    - **description**: optional
    """
    await BusinessService(db).add_money(movement)
    await db.commit()

    state.mutated("business_changed")
    return OperationResult(message="Money added successfully")


@router.post("/withdraw-money", response_model=OperationResult, status_code=status.HTTP_201_CREATED)
async def withdraw_money(
    movement: BusinessMovement,
    db: AsyncSession = Depends(get_db),
    state: AppState = Depends(get_app_state),
) -> OperationResult:
    """Take money out of the business. Same fields as add-money."""
    await BusinessService(db).withdraw_money(movement)
    await db.commit()

    state.mutated("business_changed")
    return OperationResult(message="Money withdrawn successfully")


@router.delete("/transactions/{transaction_id}", response_model=OperationResult)
async def delete_business_transaction(
    transaction_id: str,
    db: AsyncSession = Depends(get_db),
    state: AppState = Depends(get_app_state),
) -> OperationResult:
    """Delete a cash movement."""
    deleted = await BusinessService(db).delete_transaction(transaction_id)
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Business transaction {transaction_id} not found",
        )

    await db.commit()
    state.mutated("business_changed")
    return OperationResult(message="Transaction deleted successfully")
