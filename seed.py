from database import SessionLocal, engine, Base
import models  # noqa: F401
from models.users import User
from models.tariffs import Tariff
from models.customers import Customer
from models.bills import Bill
from services.billing import calculate_bill
import datetime
import random

USERS = [
    {"name": "Admin User", "email": "admin@water.com", "role": "admin"},
    {"name": "Operator User", "email": "operator@water.com", "role": "operator"},
    {"name": "Cashier User", "email": "kasir@water.com", "role": "cashier"},
]

TARIFFS = [
    {"tariff_class": "Sosial Umum", "category": "Social", "price": 1500},
    {"tariff_class": "Rumah Tangga A1", "category": "Household", "price": 2500},
    {"tariff_class": "Rumah Tangga A2", "category": "Household", "price": 3500},
    {"tariff_class": "Niaga Kecil", "category": "Commercial", "price": 5000},
]

CUSTOMERS = [
    ("Budi Santoso", "Jl. Merdeka No. 10, Jakarta"),
    ("Siti Aminah", "Jl. Pahlawan No. 25, Surabaya"),
    ("Ahmad Dahlan", "Jl. Gajah Mada No. 5, Bandung"),
    ("Dewi Lestari", "Jl. Sudirman No. 12, Medan"),
    ("Eko Prasetyo", "Jl. Diponegoro No. 88, Semarang"),
    ("Fitriani", "Jl. Kartini No. 21, Yogyakarta"),
    ("Gunawan", "Jl. Imam Bonjol No. 45, Makassar"),
    ("Herlina", "Jl. Teuku Umar No. 3, Denpasar"),
    ("Irfan Hakim", "Jl. Patimura No. 7, Palembang"),
    ("Joko Susilo", "Jl. Gatot Subroto No. 1, Bekasi"),
]


def seed_data(db, password="password", rng=None):
    """Idempotent demo data: users, tariffs, customers and last month's bills."""
    rng = rng or random.Random()

    # 1. USERS
    for u in USERS:
        if not db.query(User).filter_by(email=u["email"]).first():
            user = User(name=u["name"], email=u["email"], role=u["role"])
            user.set_password(password)
            db.add(user)
            print(f"✅ Added user: {u['email']} ({u['role']})")
    db.commit()

    # 2. TARIFFS
    tariffs = []
    for t in TARIFFS:
        tariff = db.query(Tariff).filter_by(tariff_class=t["tariff_class"]).first()
        if not tariff:
            tariff = Tariff(tariff_class=t["tariff_class"], category=t["category"], price_per_unit=t["price"])
            db.add(tariff)
            print(f"✅ Added tariff: {t['tariff_class']}")
        tariffs.append(tariff)
    db.commit()

    # 3. CUSTOMERS (PLG001 ... PLG010)
    for index, (name, address) in enumerate(CUSTOMERS, start=1):
        number = f"PLG{index:03d}"
        if not db.query(Customer).filter_by(customer_number=number).first():
            db.add(Customer(
                customer_number=number,
                name=name,
                address=address,
                status="active",
                tariff_per_unit=rng.choice(tariffs).price_per_unit,
            ))
            print(f"✅ Added customer: {number}")
    db.commit()

    # 4. BILLS for last month
    today = datetime.date.today()
    last_month = (today.replace(day=1) - datetime.timedelta(days=1)).strftime("%Y-%m")
    for customer in db.query(Customer).order_by(Customer.id).all():
        if db.query(Bill).filter_by(customer_id=customer.id, period=last_month).first():
            continue
        meter_start = rng.randint(100, 500)
        meter_end = meter_start + rng.randint(20, 100)
        usage, amount = calculate_bill(meter_start, meter_end, customer.tariff_per_unit)
        db.add(Bill(
            customer_id=customer.id,
            period=last_month,
            meter_start=meter_start,
            meter_end=meter_end,
            usage=usage,
            tariff_per_unit=customer.tariff_per_unit,
            amount=amount,
            due_date=today.replace(day=20),
        ))
        customer.last_meter_reading = meter_end
    db.commit()
    print("🚀 All data seeded")


if __name__ == "__main__":
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        seed_data(session)
    finally:
        session.close()
