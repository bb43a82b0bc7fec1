from sqlalchemy import Boolean, Column, Integer, String, Date, DateTime, Numeric, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from database import Base
import datetime

BILL_UNPAID = "unpaid"
BILL_PAID = "paid"


class Bill(Base):
    __tablename__ = "bills"

    id = Column(Integer, primary_key=True, index=True)
    customer_id = Column(Integer, ForeignKey("customers.id", ondelete="CASCADE"), nullable=False, index=True)
    period = Column(String(7), nullable=False)  # YYYY-MM

    # Meter values are cumulative counters
    meter_start = Column(Integer, nullable=False)
    meter_end = Column(Integer, nullable=False)
    usage = Column(Integer, nullable=False)  # meter_end - meter_start

    # Snapshot of the customer's tariff when the bill was made
    tariff_per_unit = Column(Numeric(10, 2), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)

    status = Column(String(20), default=BILL_UNPAID, nullable=False)
    due_date = Column(Date, nullable=False)

    # Set by period generation, cleared once a meter reading fills the bill in
    awaiting_reading = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime, default=datetime.datetime.now)
    updated_at = Column(DateTime, default=datetime.datetime.now, onupdate=datetime.datetime.now)

    # One bill per customer per period
    __table_args__ = (
        UniqueConstraint("customer_id", "period", name="uq_bill_customer_period"),
    )

    customer = relationship("Customer", back_populates="bills")
    payments = relationship(
        "Payment",
        back_populates="bill",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def is_paid(self):
        return self.status == BILL_PAID

    @property
    def is_placeholder(self):
        """Generated for a period but not yet filled in by a meter reading."""
        return bool(self.awaiting_reading) and self.status == BILL_UNPAID
