from sqlalchemy import Column, Integer, String, DateTime, Numeric, ForeignKey
from sqlalchemy.orm import relationship
from database import Base
import datetime

PAYMENT_METHODS = ("cash", "transfer", "card")


class Payment(Base):
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True)
    bill_id = Column(Integer, ForeignKey("bills.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)  # Cashier who took it

    amount = Column(Numeric(12, 2), nullable=False)
    method = Column(String(20), default="cash", nullable=False)  # cash, transfer, card
    note = Column(String(255), nullable=True)
    paid_at = Column(DateTime, default=datetime.datetime.now, nullable=False)

    created_at = Column(DateTime, default=datetime.datetime.now)
    updated_at = Column(DateTime, default=datetime.datetime.now, onupdate=datetime.datetime.now)

    bill = relationship("Bill", back_populates="payments")
    user = relationship("User")
