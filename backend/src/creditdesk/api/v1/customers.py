"""Customer API endpoints."""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from creditdesk.api.deps import get_app_state, get_db
from creditdesk.schemas.customer import (
    Customer,
    CustomerCreate,
    CustomerCreated,
    CustomerSalesGroup,
    CustomerSummary,
    CustomerTransactions,
    CustomerUpdate,
)
from creditdesk.schemas.subscription import Subscription
from creditdesk.services.customer_service import CustomerService
from creditdesk.state import CUSTOMERS, AppState

router = APIRouter(tags=["Customers"])

DEFAULT_CUSTOMER_LIMIT = 100


@router.post("/customers", response_model=CustomerCreated, status_code=status.HTTP_201_CREATED)
async def create_customer(
    customer_data: CustomerCreate,
    db: AsyncSession = Depends(get_db),
    state: AppState = Depends(get_app_state),
) -> CustomerCreated:
    """
    Create a new customer.

    - **name**: Customer or company name (required)
    - **email**: Email address (required, unique)
    - **phone**, **address**: optional
    """
    service = CustomerService(db)

    try:
        customer = await service.create_customer(customer_data)
        await db.commit()
    except ValueError as e:
        await db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e

    state.mutated("customer_changed")
    return CustomerCreated(customer=Customer.model_validate(customer))


@router.get("/customers", response_model=list[Customer])
async def list_customers(
    search: str | None = Query(None, description="Match name, email or phone"),
    limit: int = Query(DEFAULT_CUSTOMER_LIMIT, ge=1, le=1000, description="Maximum number of customers"),
    db: AsyncSession = Depends(get_db),
    state: AppState = Depends(get_app_state),
) -> list[Customer]:
    """List customers, newest first."""
    service = CustomerService(db)

    async def load() -> list[Customer]:
        return [Customer.model_validate(c) for c in await service.list_customers(search, limit)]

    if search or limit != DEFAULT_CUSTOMER_LIMIT:
        return await load()
    return await state.get(CUSTOMERS, load)


@router.get("/customers/{customer_id}", response_model=Customer)
async def get_customer(
    customer_id: str,
    db: AsyncSession = Depends(get_db),
) -> Customer:
    """Get customer by ID."""
    customer = await CustomerService(db).get_customer(customer_id)

    if not customer:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Customer {customer_id} not found",
        )

    return customer


@router.put("/customers/{customer_id}", response_model=Customer)
async def update_customer(
    customer_id: str,
    update_data: CustomerUpdate,
    db: AsyncSession = Depends(get_db),
    state: AppState = Depends(get_app_state),
) -> Customer:
    """Update customer details. Only the fields sent are changed."""
    service = CustomerService(db)

    try:
        customer = await service.update_customer(customer_id, update_data)
        await db.commit()
    except ValueError as e:
        await db.rollback()
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e

    state.mutated("customer_changed")
    return customer


@router.get("/customers/{customer_id}/transactions", response_model=CustomerTransactions)
async def get_customer_transactions(
    customer_id: str,
    db: AsyncSession = Depends(get_db),
) -> CustomerTransactions:
    """
    A customer's purchase history.

    Subscriptions are returned newest first and grouped by classification
    ("General" when unset), with totals paid and credits used.
    """
    found = await CustomerService(db).get_customer_transactions(customer_id)
    if found is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Customer not found",
        )

    customer, subscriptions, grouped = found
    items = [Subscription.model_validate(s) for s in subscriptions]
    by_id = {item.id: item for item in items}

    return CustomerTransactions(
        customer=Customer.model_validate(customer),
        subscriptions=items,
        grouped_subscriptions={
            classification: [by_id[s.id] for s in members] for classification, members in grouped.items()
        },
        summary=CustomerSummary(
            total_paid=sum(item.amount_paid for item in items),
            total_credits=sum(item.credits_used for item in items),
            total_transactions=len(items),
        ),
    )


@router.get("/customer-sales", response_model=dict[str, CustomerSalesGroup])
async def get_customer_sales(db: AsyncSession = Depends(get_db)) -> dict[str, CustomerSalesGroup]:
    """Active subscriptions grouped by customer name, then by classification."""
    sales = await CustomerService(db).get_customer_sales()
    return {
        customer_name: CustomerSalesGroup(
            classifications={
                classification: [Subscription.model_validate(s) for s in members]
                for classification, members in groups.items()
            }
        )
        for customer_name, groups in sales.items()
    }
