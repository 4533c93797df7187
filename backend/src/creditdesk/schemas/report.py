"""Pydantic schemas for profit/loss and dashboard reports."""
from pydantic import BaseModel, Field


class ProfitAndLoss(BaseModel):
    """Revenue against estimated credit cost for a period."""

    total_revenue: float = Field(..., description="Sum of amount paid")
    total_credits_used: int = Field(..., description="Sum of credits consumed")
    avg_cost_per_credit: float = Field(..., description="Average purchase price per credit")
    estimated_costs: float = Field(..., description="Credits used times average cost")
    estimated_profit: float = Field(..., description="Revenue minus estimated costs")
    subscription_count: int = Field(..., description="Subscriptions counted")


class DashboardStats(BaseModel):
    """Headline numbers for the dashboard."""

    total_customers: int
    total_credits_used: int
    total_revenue: float
    total_vendor_costs: float
    avg_cost_per_credit: float
    net_profit_from_credit_sales: float
    final_net_profit: float
    total_credits_remaining: int
    low_credit_alerts: int
    business_balance: float
