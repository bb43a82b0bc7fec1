from pydantic import BaseModel, Field
from datetime import date, datetime
from decimal import Decimal
from typing import List, Literal, Optional
from schemas.customers import CustomerBrief

PERIOD_PATTERN = r"^\d{4}-(0[1-9]|1[0-2])$"

BillStatus = Literal["unpaid", "paid"]


class BillCreate(BaseModel):
    customer_id: int
    period: str = Field(..., pattern=PERIOD_PATTERN)
    meter_start: int = Field(..., ge=0)
    meter_end: int = Field(..., ge=0)
    tariff_per_unit: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    due_date: date


class BillUpdate(BillCreate):
    status: BillStatus


class GenerateBillsRequest(BaseModel):
    period: str = Field(..., pattern=PERIOD_PATTERN)
    due_date: date


class GenerateBillsResponse(BaseModel):
    message: str
    bills_created: int


class BillPaymentBrief(BaseModel):
    id: int
    amount: Decimal
    method: str
    note: Optional[str] = None
    paid_at: datetime
    user_id: int

    class Config:
        from_attributes = True


class BillOut(BaseModel):
    id: int
    customer_id: int
    period: str
    meter_start: int
    meter_end: int
    usage: int
    tariff_per_unit: Decimal
    amount: Decimal
    status: str
    due_date: date
    awaiting_reading: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    customer: Optional[CustomerBrief] = None

    class Config:
        from_attributes = True


class BillDetail(BillOut):
    payments: List[BillPaymentBrief] = []
