from sqlalchemy import Column, Integer, String, Text, Date, DateTime, Numeric
from sqlalchemy.orm import relationship
from database import Base
import datetime


class Customer(Base):
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, index=True)
    customer_number = Column(String(50), unique=True, index=True, nullable=False)  # PLG001, PLG002 ...
    name = Column(String(255), nullable=False)
    address = Column(Text, nullable=False)
    phone = Column(String(30), nullable=True)
    status = Column(String(20), default="active", nullable=False)  # active / inactive

    # --- BILLING INFO ---
    tariff_per_unit = Column(Numeric(10, 2), default=5000, nullable=False)
    last_meter_reading = Column(Integer, default=0, nullable=False)
    last_reading_date = Column(Date, nullable=True)

    created_at = Column(DateTime, default=datetime.datetime.now)
    updated_at = Column(DateTime, default=datetime.datetime.now, onupdate=datetime.datetime.now)

    # --- RELATIONSHIPS ---
    bills = relationship(
        "Bill",
        back_populates="customer",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
