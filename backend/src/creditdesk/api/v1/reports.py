"""Profit/loss and dashboard API endpoints."""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from creditdesk.api.deps import get_db
from creditdesk.schemas.report import DashboardStats, ProfitAndLoss
from creditdesk.services.report_service import ReportService

router = APIRouter(tags=["Reports"])


@router.get("/pl/monthly", response_model=ProfitAndLoss)
async def monthly_profit_and_loss(
    month: int = Query(..., description="Calendar month (1-12)"),
    year: int = Query(..., ge=1, le=9998, description="Calendar year"),
    db: AsyncSession = Depends(get_db),
) -> ProfitAndLoss:
    """
    Revenue and estimated credit cost of active subscriptions started in a month.

    Estimated cost is credits used times the average purchase price per credit.
    """
    try:
        return await ReportService(db).profit_and_loss(year, month)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e


@router.get("/pl/yearly", response_model=ProfitAndLoss)
async def yearly_profit_and_loss(
    year: int = Query(..., ge=1, le=9998, description="Calendar year"),
    db: AsyncSession = Depends(get_db),
) -> ProfitAndLoss:
    """Revenue and estimated credit cost of active subscriptions started in a year."""
    return await ReportService(db).profit_and_loss(year)


@router.get("/dashboard/stats", response_model=DashboardStats)
async def dashboard_stats(db: AsyncSession = Depends(get_db)) -> DashboardStats:
    """
    Headline numbers: customers, revenue, vendor spend, profit, credits left,
    low-credit alert count and business balance.
    """
    return await ReportService(db).dashboard_stats()
