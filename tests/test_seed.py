import random

from models.bills import Bill
from models.customers import Customer
from models.tariffs import Tariff
from models.users import User
from seed import seed_data


def test_seed_is_idempotent(db):
    seed_data(db, rng=random.Random(1))
    seed_data(db, rng=random.Random(2))

    assert db.query(User).count() == 3
    assert db.query(Tariff).count() == 4
    assert db.query(Customer).count() == 10
    assert db.query(Bill).count() == 10

    kasir = db.query(User).filter_by(email="kasir@water.com").one()
    assert kasir.role == "cashier"
    assert kasir.check_password("password")


def test_seeded_bills_match_customer_tariff(db):
    seed_data(db, rng=random.Random(3))
    for bill in db.query(Bill).all():
        assert bill.amount == bill.usage * bill.customer.tariff_per_unit
        assert bill.customer.last_meter_reading == bill.meter_end
