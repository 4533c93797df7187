"""Customer service for business logic."""
from collections import defaultdict

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from creditdesk.models.customer import Customer
from creditdesk.models.subscription import Subscription
from creditdesk.schemas.customer import CustomerCreate, CustomerUpdate
from creditdesk.utils.validators import normalize_email

DEFAULT_CLASSIFICATION = "General"


class CustomerService:
    """Service layer for customer operations."""

    def __init__(self, db: AsyncSession):
        """Initialize customer service with database session."""
        self.db = db

    async def create_customer(self, customer_data: CustomerCreate) -> Customer:
        """
        Create a new customer.

        Args:
            customer_data: Customer creation data

        Returns:
            Created customer

        Raises:
            ValueError: If a customer with the same email already exists
        """
        existing = await self.get_customer_by_email(customer_data.email)
        if existing:
            raise ValueError("Customer with this email already exists")

        customer = Customer(
            name=customer_data.name,
            email=customer_data.email,
            phone=customer_data.phone,
            address=customer_data.address,
        )

        self.db.add(customer)
        await self.db.flush()
        await self.db.refresh(customer)

        return customer

    async def get_customer(self, customer_id: str) -> Customer | None:
        """
        Get customer by ID.

        Args:
            customer_id: Customer ID

        Returns:
            Customer or None if not found
        """
        result = await self.db.execute(select(Customer).where(Customer.id == customer_id))
        return result.scalar_one_or_none()

    async def get_customer_by_email(self, email: str) -> Customer | None:
        """Get customer by email (case-insensitive)."""
        result = await self.db.execute(
            select(Customer).where(Customer.email == normalize_email(email))
        )
        return result.scalar_one_or_none()

    async def list_customers(self, search: str | None = None, limit: int = 100) -> list[Customer]:
        """
        List customers, newest first.

        Args:
            search: Substring matched against name, email and phone
            limit: Maximum number of customers returned

        Returns:
            List of customers
        """
        query = select(Customer)
        if search:
            pattern = f"%{search.strip()}%"
            query = query.where(
                or_(
                    Customer.name.ilike(pattern),
                    Customer.email.ilike(pattern),
                    Customer.phone.ilike(pattern),
                )
            )
        query = query.order_by(Customer.created_at.desc()).limit(limit)

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def count_customers(self) -> int:
        """Count all customers."""
        result = await self.db.execute(select(func.count()).select_from(Customer))
        return result.scalar_one()

    async def update_customer(self, customer_id: str, update_data: CustomerUpdate) -> Customer:
        """
        Update customer.

        Args:
            customer_id: Customer ID
            update_data: Fields to change (unset fields are left alone)

        Returns:
            Updated customer

        Raises:
            ValueError: If customer not found
        """
        customer = await self.get_customer(customer_id)
        if not customer:
            raise ValueError(f"Customer {customer_id} not found")

        for field, value in update_data.model_dump(exclude_unset=True, exclude_none=True).items():
            setattr(customer, field, value)

        await self.db.flush()
        await self.db.refresh(customer)
        return customer

    async def get_customer_transactions(
        self, customer_id: str
    ) -> tuple[Customer, list[Subscription], dict[str, list[Subscription]]] | None:
        """
        Get a customer's subscriptions, newest first, and the same rows grouped by classification.

        Rows without a classification fall under "General".

        Args:
            customer_id: Customer ID

        Returns:
            Tuple of (customer, subscriptions, grouped subscriptions) or None if not found
        """
        customer = await self.get_customer(customer_id)
        if not customer:
            return None

        result = await self.db.execute(
            select(Subscription)
            .where(Subscription.customer_id == customer_id)
            .order_by(Subscription.created_at.desc())
        )
        subscriptions = list(result.scalars().all())

        grouped: dict[str, list[Subscription]] = defaultdict(list)
        for subscription in subscriptions:
            grouped[subscription.classification or DEFAULT_CLASSIFICATION].append(subscription)

        return customer, subscriptions, dict(grouped)

    async def get_customer_sales(self) -> dict[str, dict[str, list[Subscription]]]:
        """
        Active subscriptions grouped by customer name, then by classification.

        Returns:
            {customer_name: {classification: [subscription, ...]}}, customers in
            name order and each group newest start date first
        """
        result = await self.db.execute(
            select(Subscription, Customer.name)
            .join(Customer, Subscription.customer_id == Customer.id)
            .where(Subscription.status == "active")
            .order_by(Customer.name, Subscription.start_date.desc())
        )

        sales: dict[str, dict[str, list[Subscription]]] = {}
        for subscription, customer_name in result.all():
            classification = subscription.classification or DEFAULT_CLASSIFICATION
            sales.setdefault(customer_name, {}).setdefault(classification, []).append(subscription)
        return sales
