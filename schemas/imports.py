from pydantic import BaseModel, Field
from datetime import date
from decimal import Decimal
from typing import List, Optional
from schemas.bills import PERIOD_PATTERN
from schemas.customers import CustomerStatus


# 1. Ek row = ek customer (Excel ya JSON)
class CustomerImportRow(BaseModel):
    customer_number: str = Field(..., min_length=1, max_length=50)
    name: str = Field(..., min_length=1, max_length=255)
    address: str = Field(..., min_length=1)
    phone: Optional[str] = None
    status: CustomerStatus = "active"
    tariff_per_unit: Decimal = Field(Decimal("5000"), gt=0, max_digits=10, decimal_places=2)
    last_meter_reading: int = Field(0, ge=0)

    class Config:
        str_strip_whitespace = True


# 2. Ek row = ek bill
class BillImportRow(BaseModel):
    customer_number: str = Field(..., min_length=1)
    period: str = Field(..., pattern=PERIOD_PATTERN)
    meter_start: int = Field(..., ge=0)
    meter_end: int = Field(..., ge=0)
    due_date: date

    class Config:
        str_strip_whitespace = True


class CustomerImportRequest(BaseModel):
    customers: List[CustomerImportRow] = Field(..., min_length=1)


class BillImportRequest(BaseModel):
    bills: List[BillImportRow] = Field(..., min_length=1)


class ImportResult(BaseModel):
    message: str
    imported_count: int
