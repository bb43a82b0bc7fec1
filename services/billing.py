"""
Billing Service - bill calculation, bill creation paths and the payment workflow.

Every path that writes a bill goes through calculate_bill(), so a bill's
amount always equals usage x tariff (Decimal, 2 places) at the time it is
written. Payment creation/deletion flips the bill status in the same
transaction as the payment row.
"""
from decimal import Decimal, ROUND_HALF_UP
from sqlalchemy.orm import Session
from models.bills import Bill, BILL_PAID, BILL_UNPAID
from models.customers import Customer
from models.payments import Payment
from services.exceptions import BillingError, PaymentError, RecordNotFound, ValidationFailed
import config
import datetime
import logging

logger = logging.getLogger(__name__)

TWO_PLACES = Decimal("0.01")
CASHIER_NOTE = "Payment at cashier"


# =====================
# CALCULATION
# =====================

def to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # str() first so floats like 0.1 don't drag binary noise along
    return Decimal(str(value))


def calculate_bill(meter_start: int, meter_end: int, tariff):
    """Return (usage, amount) for a pair of meter readings."""
    usage = int(meter_end) - int(meter_start)
    if usage < 0:
        raise BillingError.single(
            "meter_end",
            f"Meter end ({meter_end}) cannot be lower than meter start ({meter_start})",
        )
    amount = (Decimal(usage) * to_decimal(tariff)).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
    return usage, amount


def current_period(today: datetime.date = None) -> str:
    today = today or datetime.date.today()
    return today.strftime("%Y-%m")


def bill_exists(db: Session, customer_id: int, period: str, exclude_id: int = None) -> bool:
    query = db.query(Bill.id).filter(Bill.customer_id == customer_id, Bill.period == period)
    if exclude_id is not None:
        query = query.filter(Bill.id != exclude_id)
    return query.first() is not None


# =====================
# ADMIN CRUD
# =====================

def create_bill(db: Session, data) -> Bill:
    customer = db.get(Customer, data.customer_id)
    if not customer:
        raise ValidationFailed.single("customer_id", "The selected customer does not exist")

    if bill_exists(db, customer.id, data.period):
        raise BillingError.single(
            "period", f"Customer {customer.customer_number} already has a bill for {data.period}"
        )

    usage, amount = calculate_bill(data.meter_start, data.meter_end, data.tariff_per_unit)

    bill = Bill(
        customer_id=customer.id,
        period=data.period,
        meter_start=data.meter_start,
        meter_end=data.meter_end,
        usage=usage,
        tariff_per_unit=to_decimal(data.tariff_per_unit),
        amount=amount,
        status=BILL_UNPAID,
        due_date=data.due_date,
    )
    db.add(bill)
    db.commit()
    db.refresh(bill)
    logger.info("Bill %s created for %s period %s amount %s", bill.id, customer.customer_number, bill.period, amount)
    return bill


def update_bill(db: Session, bill: Bill, data) -> Bill:
    if not db.get(Customer, data.customer_id):
        raise ValidationFailed.single("customer_id", "The selected customer does not exist")

    if bill_exists(db, data.customer_id, data.period, exclude_id=bill.id):
        raise BillingError.single("period", f"A bill for {data.period} already exists for this customer")

    usage, amount = calculate_bill(data.meter_start, data.meter_end, data.tariff_per_unit)

    bill.customer_id = data.customer_id
    bill.period = data.period
    bill.meter_start = data.meter_start
    bill.meter_end = data.meter_end
    bill.usage = usage
    bill.tariff_per_unit = to_decimal(data.tariff_per_unit)
    bill.amount = amount
    bill.due_date = data.due_date
    bill.status = data.status
    bill.awaiting_reading = False
    db.commit()
    db.refresh(bill)
    return bill


def delete_bill(db: Session, bill: Bill):
    bill_id = bill.id
    db.delete(bill)
    db.commit()
    logger.info("Bill %s deleted", bill_id)


# =====================
# PERIOD GENERATION
# =====================

def generate_bills(db: Session, period: str, due_date: datetime.date) -> int:
    """
    Create a zero-usage placeholder bill for every active customer that has
    no bill for `period` yet. The operator's meter reading fills it in later.
    """
    already_billed = {
        customer_id
        for (customer_id,) in db.query(Bill.customer_id).filter(Bill.period == period).all()
    }

    created = 0
    customers = db.query(Customer).filter(Customer.status == "active").order_by(Customer.id).all()
    for customer in customers:
        if customer.id in already_billed:
            continue

        usage, amount = calculate_bill(
            customer.last_meter_reading, customer.last_meter_reading, customer.tariff_per_unit
        )
        db.add(Bill(
            customer_id=customer.id,
            period=period,
            meter_start=customer.last_meter_reading,
            meter_end=customer.last_meter_reading,
            usage=usage,
            tariff_per_unit=customer.tariff_per_unit,
            amount=amount,
            status=BILL_UNPAID,
            due_date=due_date,
            awaiting_reading=True,
        ))
        created += 1

    db.commit()
    logger.info("Generated %s placeholder bills for period %s", created, period)
    return created


# =====================
# OPERATOR METER READING
# =====================

def find_customer(db: Session, customer_number: str, active_only: bool = False) -> Customer:
    query = db.query(Customer).filter(Customer.customer_number == customer_number.strip())
    if active_only:
        query = query.filter(Customer.status == "active")
    customer = query.first()
    if not customer:
        if active_only:
            raise RecordNotFound("Customer not found or inactive")
        raise RecordNotFound("Customer not found")
    return customer


def record_meter_reading(db: Session, customer_number: str, new_reading: int,
                         today: datetime.date = None):
    """
    Store a new cumulative meter reading and bill the usage since the last one.

    Fills in the period's placeholder bill when there is one, otherwise
    creates a new bill due BILL_DUE_DAYS from today.
    """
    today = today or datetime.date.today()
    customer = find_customer(db, customer_number)

    previous_reading = customer.last_meter_reading or 0
    if new_reading < previous_reading:
        raise BillingError.single(
            "new_reading",
            f"New reading cannot be lower than the last reading ({previous_reading} m3)",
        )

    period = current_period(today)
    bill = db.query(Bill).filter(Bill.customer_id == customer.id, Bill.period == period).first()

    try:
        if bill is not None:
            if not bill.is_placeholder:
                raise BillingError.single(
                    "customer_number", f"Meter reading for period {period} was already recorded"
                )
            usage, amount = calculate_bill(bill.meter_start, new_reading, bill.tariff_per_unit)
            bill.meter_end = new_reading
            bill.usage = usage
            bill.amount = amount
            bill.awaiting_reading = False
        else:
            usage, amount = calculate_bill(previous_reading, new_reading, customer.tariff_per_unit)
            bill = Bill(
                customer_id=customer.id,
                period=period,
                meter_start=previous_reading,
                meter_end=new_reading,
                usage=usage,
                tariff_per_unit=customer.tariff_per_unit,
                amount=amount,
                status=BILL_UNPAID,
                due_date=today + datetime.timedelta(days=config.BILL_DUE_DAYS),
            )
            db.add(bill)

        customer.last_meter_reading = new_reading
        customer.last_reading_date = today
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(bill)
    logger.info("Meter reading %s recorded for %s (usage %s)", new_reading, customer.customer_number, bill.usage)
    return {
        "customer": customer.name,
        "customer_number": customer.customer_number,
        "previous_reading": bill.meter_start,
        "new_reading": new_reading,
        "usage": bill.usage,
        "tariff_per_unit": bill.tariff_per_unit,
        "amount": bill.amount,
        "bill_id": bill.id,
        "period": bill.period,
    }


# =====================
# PAYMENT WORKFLOW
# =====================

def find_outstanding_bill(db: Session, customer: Customer, lock: bool = False):
    """Most recent unpaid bill with something to pay. Placeholders are skipped."""
    query = db.query(Bill).filter(
        Bill.customer_id == customer.id,
        Bill.status == BILL_UNPAID,
        Bill.amount > 0,
    ).order_by(Bill.period.desc())
    if lock:
        query = query.with_for_update()
    return query.first()


def lookup_outstanding(db: Session, customer_number: str, lock: bool = False):
    customer = find_customer(db, customer_number, active_only=True)
    bill = find_outstanding_bill(db, customer, lock=lock)
    if not bill:
        raise RecordNotFound("No unpaid bill for this customer")
    return customer, bill


def _settle(db: Session, bill: Bill, user, amount, method: str, note: str = None) -> Payment:
    payment = Payment(
        bill_id=bill.id,
        user_id=user.id,
        amount=to_decimal(amount),
        method=method,
        note=note,
        paid_at=datetime.datetime.now(),
    )
    db.add(payment)
    bill.status = BILL_PAID
    db.flush()
    return payment


def pay_outstanding_bill(db: Session, customer_number: str, method: str, user) -> Payment:
    """Cashier flow: pay the customer's latest unpaid bill in full."""
    try:
        customer, bill = lookup_outstanding(db, customer_number, lock=True)
        payment = _settle(db, bill, user, bill.amount, method, CASHIER_NOTE)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(payment)
    logger.info("Payment %s: %s paid bill %s (%s) by %s via %s",
                payment.id, customer.customer_number, bill.id, payment.amount, user.email, method)
    return payment


def record_payment(db: Session, data, user) -> Payment:
    """Admin flow: record a payment against a specific bill."""
    try:
        bill = db.query(Bill).filter(Bill.id == data.bill_id).with_for_update().first()
        if not bill:
            raise ValidationFailed.single("bill_id", "The selected bill does not exist")
        if bill.is_paid:
            raise PaymentError.single("bill_id", f"Bill {bill.id} is already paid")
        if bill.is_placeholder:
            raise PaymentError.single(
                "bill_id", f"Bill {bill.id} is waiting for a meter reading and cannot be paid yet"
            )
        payment = _settle(db, bill, user, data.amount, data.method, data.note)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(payment)
    logger.info("Payment %s recorded for bill %s by %s", payment.id, bill.id, user.email)
    return payment


def update_payment(db: Session, payment: Payment, data) -> Payment:
    payment.amount = to_decimal(data.amount)
    payment.method = data.method
    payment.note = data.note
    db.commit()
    db.refresh(payment)
    return payment


def delete_payment(db: Session, payment: Payment):
    """Remove a payment and put its bill back to unpaid."""
    payment_id, bill_id = payment.id, payment.bill_id
    try:
        payment.bill.status = BILL_UNPAID
        db.delete(payment)
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info("Payment %s deleted, bill %s reverted to unpaid", payment_id, bill_id)
