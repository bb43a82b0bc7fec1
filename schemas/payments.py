from pydantic import BaseModel, Field
from datetime import datetime
from decimal import Decimal
from typing import Literal, Optional
from schemas.customers import CustomerBrief

PaymentMethod = Literal["cash", "transfer", "card"]


class PaymentCreate(BaseModel):
    bill_id: int
    amount: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)
    method: PaymentMethod = "cash"
    note: Optional[str] = Field(None, max_length=255)


class PaymentUpdate(BaseModel):
    amount: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)
    method: PaymentMethod
    note: Optional[str] = Field(None, max_length=255)


class PaymentBill(BaseModel):
    id: int
    period: str
    status: str
    customer: Optional[CustomerBrief] = None

    class Config:
        from_attributes = True


class PaymentUser(BaseModel):
    id: int
    name: str
    role: str

    class Config:
        from_attributes = True


class PaymentOut(BaseModel):
    id: int
    bill_id: int
    user_id: int
    amount: Decimal
    method: str
    note: Optional[str] = None
    paid_at: datetime
    created_at: Optional[datetime] = None
    bill: Optional[PaymentBill] = None
    user: Optional[PaymentUser] = None

    class Config:
        from_attributes = True


class PaymentStats(BaseModel):
    total_payments: int
    today_payments: int
    total_amount: Decimal
    today_amount: Decimal
    this_month_amount: Decimal
