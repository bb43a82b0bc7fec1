from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from database import get_db
from models.users import User
from routers.deps import require_roles
from schemas.counter import CheckBillRequest, OutstandingBill, PayRequest, PayResponse
from services import billing

router = APIRouter(prefix="/kasir", tags=["Cashier"])

cashier = require_roles("cashier", "admin")


# --- API 1: CHECK BILL (Kitna paisa baaki hai?) ---
@router.post("/cek-tagihan", response_model=OutstandingBill, dependencies=[Depends(cashier)])
def check_bill(data: CheckBillRequest, db: Session = Depends(get_db)):
    customer, bill = billing.lookup_outstanding(db, data.customer_number)
    return {
        "name": customer.name,
        "customer_number": customer.customer_number,
        "bill_id": bill.id,
        "period": bill.period,
        "usage": bill.usage,
        "amount": bill.amount,
        "due_date": bill.due_date,
    }


# --- API 2: PAY (Paisa Jama Karo) ---
@router.post("/bayar", response_model=PayResponse)
def pay_bill(data: PayRequest, user: User = Depends(cashier), db: Session = Depends(get_db)):
    payment = billing.pay_outstanding_bill(db, data.customer_number, data.method, user)
    return {
        "message": "Payment processed successfully",
        "payment_id": payment.id,
        "bill_id": payment.bill_id,
        "amount": payment.amount,
        "paid_at": payment.paid_at,
    }
