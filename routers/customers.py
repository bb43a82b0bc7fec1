from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session
from sqlalchemy import or_
from database import get_db
from models.customers import Customer
from models.tariffs import Tariff
from routers.deps import require_roles, get_or_404
from schemas.common import Page
from schemas.customers import CustomerCreate, CustomerUpdate, CustomerOut
from services.exceptions import ValidationFailed
from services.billing import to_decimal
from utils import paginate
from typing import Optional
import config
import logging

logger = logging.getLogger(__name__)

# Operators onboard customers too
router = APIRouter(
    prefix="/admin/customers",
    tags=["Customers"],
    dependencies=[Depends(require_roles("admin", "operator"))],
)


def _tariff_price(db: Session, tariff_id: int):
    tariff = db.get(Tariff, tariff_id)
    if not tariff:
        raise ValidationFailed.single("tariff_id", "The selected tariff does not exist")
    return tariff.price_per_unit


def _ensure_number_free(db: Session, number: str, exclude_id: int = None):
    query = db.query(Customer.id).filter(Customer.customer_number == number)
    if exclude_id is not None:
        query = query.filter(Customer.id != exclude_id)
    if query.first():
        raise ValidationFailed.single("customer_number", "The customer number has already been taken")


@router.get("", response_model=Page[CustomerOut])
def list_customers(
    page: int = Query(1, ge=1),
    per_page: int = Query(10, ge=1, le=config.MAX_PER_PAGE),
    search: str = "",
    status: Optional[str] = None,
    db: Session = Depends(get_db),
):
    query = db.query(Customer)
    if status:
        query = query.filter(Customer.status == status)
    if search:
        search_fmt = f"%{search}%"
        query = query.filter(
            or_(
                Customer.customer_number.ilike(search_fmt),
                Customer.name.ilike(search_fmt),
                Customer.address.ilike(search_fmt),
            )
        )
    return paginate(query.order_by(Customer.id.desc()), page, per_page)


@router.post("", response_model=CustomerOut, status_code=201)
def create_customer(item: CustomerCreate, db: Session = Depends(get_db)):
    number = item.customer_number.strip()
    _ensure_number_free(db, number)

    if item.tariff_id is not None:
        tariff = _tariff_price(db, item.tariff_id)
    elif item.tariff_per_unit is not None:
        tariff = item.tariff_per_unit
    else:
        tariff = to_decimal(config.DEFAULT_TARIFF_PER_UNIT)

    customer = Customer(
        customer_number=number,
        name=item.name.strip(),
        address=item.address.strip(),
        phone=item.phone,
        status=item.status,
        tariff_per_unit=tariff,
        last_meter_reading=item.last_meter_reading,
    )
    db.add(customer)
    db.commit()
    db.refresh(customer)
    logger.info("Customer %s created", customer.customer_number)
    return customer


@router.get("/{customer_id}", response_model=CustomerOut)
def get_customer(customer_id: int, db: Session = Depends(get_db)):
    return get_or_404(db, Customer, customer_id, "Customer")


@router.put("/{customer_id}", response_model=CustomerOut)
def update_customer(customer_id: int, item: CustomerUpdate, db: Session = Depends(get_db)):
    customer = get_or_404(db, Customer, customer_id, "Customer")
    data = item.model_dump(exclude_unset=True)

    if data.get("customer_number") is not None:
        data["customer_number"] = data["customer_number"].strip()
        _ensure_number_free(db, data["customer_number"], exclude_id=customer.id)

    tariff_id = data.pop("tariff_id", None)
    if tariff_id is not None:
        data["tariff_per_unit"] = _tariff_price(db, tariff_id)

    for field, value in data.items():
        # Required columns can't be blanked through a partial update
        if value is None and field != "phone":
            continue
        setattr(customer, field, value)

    db.commit()
    db.refresh(customer)
    return customer


@router.delete("/{customer_id}", status_code=204)
def delete_customer(customer_id: int, db: Session = Depends(get_db)):
    customer = get_or_404(db, Customer, customer_id, "Customer")
    number = customer.customer_number
    # Bills and their payments go with the customer
    db.delete(customer)
    db.commit()
    logger.info("Customer %s deleted", number)
    return Response(status_code=204)
