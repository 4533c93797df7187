"""Business cash account: money added and withdrawn."""
import structlog
from sqlalchemy import case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from creditdesk.models.business_transaction import BusinessTransaction, BusinessTransactionType
from creditdesk.schemas.business import BusinessMovement

logger = structlog.get_logger(__name__)


class BusinessService:
    """Service layer for business cash transactions."""

    def __init__(self, db: AsyncSession):
        """Initialize business service with database session."""
        self.db = db

    async def list_transactions(self) -> list[BusinessTransaction]:
        """List transactions, most recent transaction date first."""
        result = await self.db.execute(
            select(BusinessTransaction).order_by(
                BusinessTransaction.transaction_date.desc(),
                BusinessTransaction.created_at.desc(),
            )
        )
        return list(result.scalars().all())

    async def get_balance(self) -> float:
        """
        Current business balance.

        Returns:
            Sum of money added minus sum of money withdrawn
        """
        signed = case(
            (BusinessTransaction.type == BusinessTransactionType.ADD, BusinessTransaction.amount),
            else_=-BusinessTransaction.amount,
        )
        result = await self.db.execute(select(func.coalesce(func.sum(signed), 0.0)))
        return float(result.scalar_one())

    async def add_money(self, movement: BusinessMovement) -> BusinessTransaction:
        """Record money put into the business."""
        return await self._record(BusinessTransactionType.ADD, movement)

    async def withdraw_money(self, movement: BusinessMovement) -> BusinessTransaction:
        """Record money taken out of the business."""
        return await self._record(BusinessTransactionType.WITHDRAW, movement)

    async def delete_transaction(self, transaction_id: str) -> bool:
        """
        Delete a business transaction.

        Args:
            transaction_id: Business transaction ID

        Returns:
            True if deleted, False if not found
        """
        transaction = await self.db.get(BusinessTransaction, transaction_id)
        if transaction is None:
            return False

        await self.db.delete(transaction)
        await self.db.flush()

        logger.info("business_transaction_deleted", transaction_id=transaction_id)
        return True

    async def _record(
        self, transaction_type: BusinessTransactionType, movement: BusinessMovement
    ) -> BusinessTransaction:
        transaction = BusinessTransaction(
            type=transaction_type,
            amount=movement.amount,
            description=movement.description,
            transaction_date=movement.transaction_date,
        )

        self.db.add(transaction)
        await self.db.flush()
        await self.db.refresh(transaction)

        logger.info(
            "business_transaction_recorded",
            transaction_id=transaction.id,
            type=transaction_type.value,
            amount=movement.amount,
        )
        return transaction
