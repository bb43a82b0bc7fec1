from pydantic import BaseModel
from datetime import datetime
from decimal import Decimal
from typing import Optional


class DashboardStats(BaseModel):
    total_customers: int
    active_customers: int
    total_bills: int
    monthly_bills: int
    unpaid_bills: int
    total_payments: int
    today_payments: int
    today_payments_amount: Decimal
    monthly_payments_amount: Decimal


class Activity(BaseModel):
    id: int
    type: str  # payment / customer / bill
    action: str
    customer: str
    amount: str  # already formatted for display
    time: str
    date: Optional[datetime] = None
