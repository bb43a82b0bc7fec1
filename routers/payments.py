from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session, joinedload
from database import get_db
from models.bills import Bill
from models.payments import Payment
from models.users import User
from routers.deps import require_roles, get_current_user, get_or_404
from schemas.common import Page, MessageResponse
from schemas.payments import PaymentCreate, PaymentUpdate, PaymentOut, PaymentStats
from services import billing
from services.dashboard import payment_stats
from utils import paginate
from typing import List
import config

router = APIRouter(
    prefix="/admin/payments",
    tags=["Payments"],
    dependencies=[Depends(require_roles("admin"))],
)


def _with_relations(query):
    return query.options(
        joinedload(Payment.bill).joinedload(Bill.customer),
        joinedload(Payment.user),
    )


@router.get("", response_model=Page[PaymentOut])
def list_payments(
    page: int = Query(1, ge=1),
    per_page: int = Query(config.DEFAULT_PER_PAGE, ge=1, le=config.MAX_PER_PAGE),
    db: Session = Depends(get_db),
):
    query = _with_relations(db.query(Payment)).order_by(Payment.id.desc())
    return paginate(query, page, per_page)


# --- Specific routes before /{payment_id} ---
@router.get("/stats", response_model=PaymentStats)
def get_payment_stats(db: Session = Depends(get_db)):
    return payment_stats(db)


@router.get("/recent", response_model=List[PaymentOut])
def recent_payments(db: Session = Depends(get_db)):
    return _with_relations(db.query(Payment)).order_by(Payment.id.desc()).limit(10).all()


@router.post("", response_model=PaymentOut, status_code=201)
def create_payment(data: PaymentCreate, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return billing.record_payment(db, data, user)


@router.get("/{payment_id}", response_model=PaymentOut)
def get_payment(payment_id: int, db: Session = Depends(get_db)):
    return get_or_404(db, Payment, payment_id, "Payment")


@router.put("/{payment_id}", response_model=PaymentOut)
def update_payment(payment_id: int, data: PaymentUpdate, db: Session = Depends(get_db)):
    payment = get_or_404(db, Payment, payment_id, "Payment")
    return billing.update_payment(db, payment, data)


@router.delete("/{payment_id}", response_model=MessageResponse)
def delete_payment(payment_id: int, db: Session = Depends(get_db)):
    payment = get_or_404(db, Payment, payment_id, "Payment")
    billing.delete_payment(db, payment)
    return {"message": "Payment deleted successfully"}
