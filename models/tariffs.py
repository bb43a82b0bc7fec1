from sqlalchemy import Column, Integer, String, Boolean, DateTime, Numeric
from database import Base
import datetime


# Rate card. Prices are copied into customers and bills, never joined.
class Tariff(Base):
    __tablename__ = "tariffs"

    id = Column(Integer, primary_key=True, index=True)
    tariff_class = Column(String(255), nullable=False)  # e.g. "Rumah Tangga A1"
    category = Column(String(255), nullable=True)
    price_per_unit = Column(Numeric(10, 2), nullable=False)
    is_active = Column(Boolean, default=True)

    created_at = Column(DateTime, default=datetime.datetime.now)
    updated_at = Column(DateTime, default=datetime.datetime.now, onupdate=datetime.datetime.now)
