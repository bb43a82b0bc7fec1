from decimal import Decimal

from conftest import make_bill, make_customer
from models.bills import Bill
from models.payments import Payment


def test_check_then_pay_outstanding_bill(client, db, cashier_headers):
    customer = make_customer(db, "PLG001", tariff="5000")
    bill = make_bill(db, customer, period="2025-08", meter_start=0, meter_end=35)

    resp = client.post("/kasir/cek-tagihan", headers=cashier_headers, json={"customer_number": "PLG001"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["bill_id"] == bill.id
    assert body["usage"] == 35
    assert Decimal(body["amount"]) == Decimal("175000")
    assert body["name"] == "Budi Santoso"

    resp = client.post("/kasir/bayar", headers=cashier_headers, json={"customer_number": "PLG001"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["bill_id"] == bill.id
    assert Decimal(body["amount"]) == Decimal("175000")

    db.expire_all()
    assert db.get(Bill, bill.id).status == "paid"
    payment = db.get(Payment, body["payment_id"])
    assert payment.method == "cash"
    assert payment.user.role == "cashier"

    resp = client.post("/kasir/cek-tagihan", headers=cashier_headers, json={"customer_number": "PLG001"})
    assert resp.status_code == 404
    assert resp.json()["message"] == "No unpaid bill for this customer"


def test_unknown_customer(client, cashier_headers):
    resp = client.post("/kasir/cek-tagihan", headers=cashier_headers, json={"customer_number": "PLG404"})
    assert resp.status_code == 404
    assert resp.json()["message"] == "Customer not found or inactive"


def test_pay_with_nothing_outstanding_creates_no_payment(client, db, cashier_headers):
    make_customer(db)
    resp = client.post("/kasir/bayar", headers=cashier_headers,
                       json={"customer_number": "PLG001", "method": "transfer"})
    assert resp.status_code == 404
    assert db.query(Payment).count() == 0


def test_latest_unpaid_period_is_paid_first(client, db, cashier_headers):
    customer = make_customer(db)
    make_bill(db, customer, period="2025-07", meter_start=0, meter_end=10)
    latest = make_bill(db, customer, period="2025-08", meter_start=10, meter_end=20)

    resp = client.post("/kasir/bayar", headers=cashier_headers, json={"customer_number": "PLG001"})
    assert resp.json()["bill_id"] == latest.id


def test_pay_for_unknown_customer_is_not_found(client, cashier_headers):
    resp = client.post("/kasir/bayar", headers=cashier_headers, json={"customer_number": "PLG404"})
    assert resp.status_code == 404
    assert resp.json() == {"message": "Customer not found or inactive"}


def test_pay_with_nothing_outstanding_is_not_found(client, db, cashier_headers):
    make_customer(db)
    resp = client.post("/kasir/bayar", headers=cashier_headers, json={"customer_number": "PLG001"})
    assert resp.status_code == 404
    assert resp.json() == {"message": "No unpaid bill for this customer"}


def test_customer_number_is_trimmed(client, db, cashier_headers):
    customer = make_customer(db)
    bill = make_bill(db, customer)
    resp = client.post("/kasir/cek-tagihan", headers=cashier_headers, json={"customer_number": "  PLG001 "})
    assert resp.json()["bill_id"] == bill.id
