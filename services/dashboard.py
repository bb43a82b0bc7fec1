from sqlalchemy.orm import Session, joinedload
from sqlalchemy import func
from models.customers import Customer
from models.bills import Bill, BILL_UNPAID
from models.payments import Payment
from utils import day_range, month_range, format_rupiah, time_ago
from decimal import Decimal
import datetime

ZERO = Decimal("0.00")


def _sum_payments(db: Session, start=None, end=None) -> Decimal:
    query = db.query(func.sum(Payment.amount))
    if start is not None:
        query = query.filter(Payment.paid_at >= start, Payment.paid_at < end)
    total = query.scalar()
    return Decimal(total).quantize(ZERO) if total is not None else ZERO


def payment_stats(db: Session, today: datetime.date = None):
    today = today or datetime.date.today()
    day_start, day_end = day_range(today)
    month_start, month_end = month_range(today)

    return {
        "total_payments": db.query(Payment).count(),
        "today_payments": db.query(Payment).filter(
            Payment.paid_at >= day_start, Payment.paid_at < day_end
        ).count(),
        "total_amount": _sum_payments(db),
        "today_amount": _sum_payments(db, day_start, day_end),
        "this_month_amount": _sum_payments(db, month_start, month_end),
    }


def dashboard_stats(db: Session, today: datetime.date = None):
    today = today or datetime.date.today()
    day_start, day_end = day_range(today)
    month_start, month_end = month_range(today)

    return {
        "total_customers": db.query(Customer).count(),
        "active_customers": db.query(Customer).filter(Customer.status == "active").count(),
        "total_bills": db.query(Bill).count(),
        "monthly_bills": db.query(Bill).filter(
            Bill.created_at >= month_start, Bill.created_at < month_end
        ).count(),
        "unpaid_bills": db.query(Bill).filter(Bill.status == BILL_UNPAID).count(),
        "total_payments": db.query(Payment).count(),
        "today_payments": db.query(Payment).filter(
            Payment.paid_at >= day_start, Payment.paid_at < day_end
        ).count(),
        "today_payments_amount": _sum_payments(db, day_start, day_end),
        "monthly_payments_amount": _sum_payments(db, month_start, month_end),
    }


def recent_activities(db: Session, limit: int = 15):
    """Latest payments, new customers and issued bills merged into one feed."""
    now = datetime.datetime.now()
    activities = []

    payments = db.query(Payment).options(
        joinedload(Payment.bill).joinedload(Bill.customer)
    ).order_by(Payment.id.desc()).limit(10).all()
    for p in payments:
        activities.append({
            "id": p.id,
            "type": "payment",
            "action": "Payment received",
            "customer": p.bill.customer.name,
            "amount": format_rupiah(p.amount),
            "time": time_ago(p.created_at, now),
            "date": p.created_at,
        })

    for c in db.query(Customer).order_by(Customer.id.desc()).limit(5).all():
        activities.append({
            "id": c.id,
            "type": "customer",
            "action": "New customer added",
            "customer": c.name,
            "amount": f"ID: {c.customer_number}",
            "time": time_ago(c.created_at, now),
            "date": c.created_at,
        })

    bills = db.query(Bill).options(joinedload(Bill.customer)).order_by(Bill.id.desc()).limit(5).all()
    for b in bills:
        activities.append({
            "id": b.id,
            "type": "bill",
            "action": "Bill issued",
            "customer": b.customer.name,
            "amount": format_rupiah(b.amount),
            "time": time_ago(b.created_at, now),
            "date": b.created_at,
        })

    activities.sort(key=lambda a: a["date"] or datetime.datetime.min, reverse=True)
    return activities[:limit]
