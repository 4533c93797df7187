"""Service for credit purchases from vendors and their returns."""
import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from creditdesk.database import unit_of_work
from creditdesk.metrics import credits_purchased_total, credits_returned_total
from creditdesk.models.credit_balance import CreditBalance
from creditdesk.models.vendor import Vendor
from creditdesk.models.vendor_transaction import VendorTransaction
from creditdesk.schemas.credit import VendorTransactionCreate
from creditdesk.services.balance_ledger import BalanceLedger

logger = structlog.get_logger(__name__)


class CreditPurchaseService:
    """
    Records credits bought from vendors.

    A purchase row and its ledger adjustment are written in one unit of
    work, the same way the coordinator pairs subscriptions with consumption.
    """

    def __init__(self, db: AsyncSession):
        """Initialize purchase service with database session."""
        self.db = db
        self.ledger = BalanceLedger(db)

    async def record_purchase(
        self, purchase_data: VendorTransactionCreate
    ) -> tuple[VendorTransaction, CreditBalance]:
        """
        Record a credit purchase and add the credits to the vendor balance.

        The balance row is created on the first purchase for a
        (vendor, service) pair.

        Args:
            purchase_data: Purchase details

        Returns:
            Tuple of (purchase row, balance after the purchase)

        Raises:
            ValueError: If the vendor does not exist
        """
        vendor = await self.db.get(Vendor, purchase_data.vendor_id)
        if vendor is None:
            raise ValueError(f"Vendor {purchase_data.vendor_id} not found")

        async with unit_of_work(self.db):
            transaction = VendorTransaction(**purchase_data.model_dump())
            self.db.add(transaction)
            await self.db.flush()
            await self.db.refresh(transaction)

            balance = await self.ledger.record_purchase(
                purchase_data.vendor_id, purchase_data.service_name, purchase_data.credits
            )

        credits_purchased_total.labels(
            vendor_id=transaction.vendor_id, service_name=transaction.service_name
        ).inc(transaction.credits)
        logger.info(
            "credits_purchased",
            transaction_id=transaction.id,
            vendor_id=transaction.vendor_id,
            service_name=transaction.service_name,
            credits=transaction.credits,
            price_usd=transaction.price_usd,
        )
        return transaction, balance

    async def return_purchase(self, transaction_id: str) -> bool:
        """
        Undo a credit purchase: remove its credits from the balance and delete it.

        Args:
            transaction_id: Vendor transaction ID

        Returns:
            True if returned, False if no such purchase exists
        """
        async with unit_of_work(self.db):
            transaction = await self.db.get(VendorTransaction, transaction_id)
            if transaction is None:
                return False

            await self.ledger.reverse_purchase(
                transaction.vendor_id, transaction.service_name, transaction.credits
            )
            await self.db.delete(transaction)

        credits_returned_total.labels(
            vendor_id=transaction.vendor_id, service_name=transaction.service_name
        ).inc(transaction.credits)
        logger.info(
            "credits_returned",
            transaction_id=transaction_id,
            vendor_id=transaction.vendor_id,
            service_name=transaction.service_name,
            credits=transaction.credits,
        )
        return True

    async def list_transactions(self, limit: int = 100) -> list[tuple[VendorTransaction, str]]:
        """
        List credit purchases with vendor names, newest purchase first.

        Args:
            limit: Maximum number of rows

        Returns:
            List of (purchase, vendor_name) tuples
        """
        result = await self.db.execute(
            select(VendorTransaction, Vendor.name)
            .join(Vendor, VendorTransaction.vendor_id == Vendor.id)
            .order_by(VendorTransaction.purchase_date.desc(), VendorTransaction.created_at.desc())
            .limit(limit)
        )
        return [(transaction, name) for transaction, name in result.all()]
