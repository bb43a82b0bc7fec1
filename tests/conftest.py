import os

# Must be set before database.py is imported
os.environ["DATABASE_URL"] = "sqlite://"

import datetime
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from database import Base, SessionLocal, engine
from main import app
from models.bills import Bill
from models.customers import Customer
from models.users import User
from services.auth import issue_token


@pytest.fixture(autouse=True)
def fresh_schema():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


def make_user(db, role, email=None, password="password"):
    user = User(name=f"{role.title()} User", email=email or f"{role}@water.com", role=role)
    user.set_password(password)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def auth_header(db, user):
    token = issue_token(db, user)
    return {"Authorization": f"Bearer {token.token}"}


@pytest.fixture
def admin(db):
    return make_user(db, "admin")


@pytest.fixture
def admin_headers(db, admin):
    return auth_header(db, admin)


@pytest.fixture
def operator_headers(db):
    return auth_header(db, make_user(db, "operator"))


@pytest.fixture
def cashier_headers(db):
    return auth_header(db, make_user(db, "cashier", email="kasir@water.com"))


def make_customer(db, number="PLG001", tariff="5000", last_reading=0, status="active", name="Budi Santoso"):
    customer = Customer(
        customer_number=number,
        name=name,
        address="Jl. Merdeka No. 10",
        phone="081234567890",
        status=status,
        tariff_per_unit=Decimal(tariff),
        last_meter_reading=last_reading,
    )
    db.add(customer)
    db.commit()
    db.refresh(customer)
    return customer


def make_bill(db, customer, period="2025-08", meter_start=0, meter_end=35, status="unpaid", due_date=None):
    usage = meter_end - meter_start
    bill = Bill(
        customer_id=customer.id,
        period=period,
        meter_start=meter_start,
        meter_end=meter_end,
        usage=usage,
        tariff_per_unit=customer.tariff_per_unit,
        amount=Decimal(usage) * customer.tariff_per_unit,
        status=status,
        due_date=due_date or datetime.date(2025, 9, 3),
    )
    db.add(bill)
    db.commit()
    db.refresh(bill)
    return bill
