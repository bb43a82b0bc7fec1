from pydantic import BaseModel, Field
from datetime import datetime
from decimal import Decimal
from typing import Optional


class TariffCreate(BaseModel):
    tariff_class: str = Field(..., min_length=1, max_length=255)
    category: Optional[str] = Field(None, max_length=255)
    price_per_unit: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    is_active: bool = True


class TariffUpdate(BaseModel):
    tariff_class: Optional[str] = Field(None, min_length=1, max_length=255)
    category: Optional[str] = Field(None, max_length=255)
    price_per_unit: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    is_active: Optional[bool] = None


class TariffOut(BaseModel):
    id: int
    tariff_class: str
    category: Optional[str] = None
    price_per_unit: Decimal
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
