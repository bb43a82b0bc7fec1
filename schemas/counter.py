from pydantic import BaseModel, Field
from datetime import date, datetime
from decimal import Decimal
from typing import Optional
from schemas.bills import BillOut
from schemas.customers import CustomerOut
from schemas.payments import PaymentMethod


# --- CASHIER (kasir) ---
class CheckBillRequest(BaseModel):
    customer_number: str = Field(..., min_length=1)

    class Config:
        str_strip_whitespace = True


class OutstandingBill(BaseModel):
    name: str
    customer_number: str
    bill_id: int
    period: str
    usage: int
    amount: Decimal
    due_date: date


class PayRequest(BaseModel):
    customer_number: str = Field(..., min_length=1)
    method: PaymentMethod = "cash"

    class Config:
        str_strip_whitespace = True


class PayResponse(BaseModel):
    message: str
    payment_id: int
    bill_id: int
    amount: Decimal
    paid_at: datetime


# --- OPERATOR ---
class MeterReadingRequest(BaseModel):
    customer_number: str = Field(..., min_length=1)
    new_reading: int = Field(..., ge=0)

    class Config:
        str_strip_whitespace = True


class MeterReadingResult(BaseModel):
    customer: str
    customer_number: str
    previous_reading: int
    new_reading: int
    usage: int
    tariff_per_unit: Decimal
    amount: Decimal
    bill_id: int
    period: str


class MeterReadingResponse(BaseModel):
    message: str
    data: MeterReadingResult


class CustomerInfoRequest(BaseModel):
    customer_number: str = Field(..., min_length=1)

    class Config:
        str_strip_whitespace = True


class CustomerInfoResponse(BaseModel):
    customer: CustomerOut
    latest_bill: Optional[BillOut] = None
