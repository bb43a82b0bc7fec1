from pydantic import BaseModel, Field
from datetime import date, datetime
from decimal import Decimal
from typing import Literal, Optional

CustomerStatus = Literal["active", "inactive"]


# 1. Admin / operator se naya customer
class CustomerCreate(BaseModel):
    customer_number: str = Field(..., min_length=1, max_length=50)
    name: str = Field(..., min_length=1, max_length=255)
    address: str = Field(..., min_length=1)
    phone: Optional[str] = None
    status: CustomerStatus = "active"
    tariff_per_unit: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    tariff_id: Optional[int] = None  # copy price from the rate card
    last_meter_reading: int = Field(0, ge=0)

    class Config:
        str_strip_whitespace = True


# 2. Partial update - sirf bheje gaye fields badlenge
class CustomerUpdate(BaseModel):
    customer_number: Optional[str] = Field(None, min_length=1, max_length=50)
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    address: Optional[str] = Field(None, min_length=1)
    phone: Optional[str] = None
    status: Optional[CustomerStatus] = None
    tariff_per_unit: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    tariff_id: Optional[int] = None

    class Config:
        str_strip_whitespace = True


class CustomerBrief(BaseModel):
    id: int
    customer_number: str
    name: str
    address: Optional[str] = None

    class Config:
        from_attributes = True


class CustomerOut(BaseModel):
    id: int
    customer_number: str
    name: str
    address: str
    phone: Optional[str] = None
    status: str
    tariff_per_unit: Decimal
    last_meter_reading: int
    last_reading_date: Optional[date] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
