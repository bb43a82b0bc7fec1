import datetime
from decimal import Decimal

from conftest import make_bill, make_customer
from models.bills import Bill
from models.payments import Payment


def pay(client, headers, bill, **overrides):
    payload = {"bill_id": bill.id, "amount": str(bill.amount), "method": "cash"}
    payload.update(overrides)
    return client.post("/admin/payments", headers=headers, json=payload)


def test_payment_marks_bill_paid(client, db, admin, admin_headers):
    bill = make_bill(db, make_customer(db))

    resp = pay(client, admin_headers, bill, note="Front desk")

    assert resp.status_code == 201
    body = resp.json()
    assert body["user_id"] == admin.id
    assert body["bill"]["status"] == "paid"
    assert body["bill"]["customer"]["customer_number"] == "PLG001"
    db.expire_all()
    assert db.get(Bill, bill.id).status == "paid"


def test_paying_a_paid_bill_is_rejected(client, db, admin_headers):
    bill = make_bill(db, make_customer(db))
    assert pay(client, admin_headers, bill).status_code == 201

    resp = pay(client, admin_headers, bill)
    assert resp.status_code == 422
    assert "bill_id" in resp.json()["errors"]


def test_payment_for_unknown_bill(client, admin_headers):
    resp = client.post("/admin/payments", headers=admin_headers,
                       json={"bill_id": 42, "amount": "1000", "method": "cash"})
    assert resp.status_code == 422
    assert "bill_id" in resp.json()["errors"]


def test_unknown_method_is_rejected(client, db, admin_headers):
    bill = make_bill(db, make_customer(db))
    resp = pay(client, admin_headers, bill, method="cheque")
    assert resp.status_code == 422
    assert "method" in resp.json()["errors"]


def test_deleting_payment_reverts_bill(client, db, admin_headers):
    bill = make_bill(db, make_customer(db))
    payment_id = pay(client, admin_headers, bill).json()["id"]

    resp = client.delete(f"/admin/payments/{payment_id}", headers=admin_headers)
    assert resp.status_code == 200

    db.expire_all()
    assert db.get(Bill, bill.id).status == "unpaid"
    assert client.get(f"/admin/payments/{payment_id}", headers=admin_headers).status_code == 404


def test_update_payment(client, db, admin_headers):
    bill = make_bill(db, make_customer(db))
    payment_id = pay(client, admin_headers, bill).json()["id"]

    resp = client.put(f"/admin/payments/{payment_id}", headers=admin_headers,
                      json={"amount": "170000", "method": "transfer", "note": "Corrected"})
    assert resp.status_code == 200
    assert resp.json()["method"] == "transfer"
    assert Decimal(resp.json()["amount"]) == Decimal("170000")


def test_stats_and_recent(client, db, admin_headers):
    customer = make_customer(db)
    first = make_bill(db, customer, period="2025-07", meter_start=0, meter_end=10)
    second = make_bill(db, customer, period="2025-08", meter_start=10, meter_end=35)
    pay(client, admin_headers, first)
    pay(client, admin_headers, second)

    stats = client.get("/admin/payments/stats", headers=admin_headers).json()
    assert stats["total_payments"] == 2
    assert stats["today_payments"] == 2
    assert Decimal(stats["total_amount"]) == Decimal("175000")
    assert Decimal(stats["today_amount"]) == Decimal("175000")
    assert Decimal(stats["this_month_amount"]) == Decimal("175000")

    recent = client.get("/admin/payments/recent", headers=admin_headers).json()
    assert [p["bill_id"] for p in recent] == [second.id, first.id]

    listing = client.get("/admin/payments", headers=admin_headers).json()
    assert listing["total"] == 2


def test_placeholder_bill_cannot_be_paid(client, db, admin_headers, operator_headers):
    make_customer(db, last_reading=100)
    period = datetime.date.today().strftime("%Y-%m")
    client.post("/admin/bills/generate", headers=admin_headers,
                json={"period": period, "due_date": "2030-01-01"})
    bill = db.query(Bill).one()

    resp = client.post("/admin/payments", headers=admin_headers,
                       json={"bill_id": bill.id, "amount": "0", "method": "cash"})
    assert resp.status_code == 422
    assert "bill_id" in resp.json()["errors"]
    assert db.query(Payment).count() == 0

    # The period is still open for the operator's reading
    resp = client.post("/operator/catat-meteran", headers=operator_headers,
                       json={"customer_number": "PLG001", "new_reading": 135})
    assert resp.status_code == 200
    assert resp.json()["data"]["bill_id"] == bill.id
    assert Decimal(resp.json()["data"]["amount"]) == Decimal("175000")

    resp = pay(client, admin_headers, bill, amount="175000")
    assert resp.status_code == 201
