from decimal import Decimal

from conftest import make_bill, make_customer
from models.bills import Bill
from models.customers import Customer
from models.payments import Payment
from models.tariffs import Tariff


def test_create_customer_with_default_tariff(client, admin_headers):
    resp = client.post("/admin/customers", headers=admin_headers, json={
        "customer_number": "PLG001",
        "name": "Budi Santoso",
        "address": "Jl. Merdeka No. 10",
    })
    assert resp.status_code == 201
    body = resp.json()
    assert body["status"] == "active"
    assert body["last_meter_reading"] == 0
    assert Decimal(body["tariff_per_unit"]) == Decimal("5000")


def test_create_customer_copies_tariff_price(client, db, admin_headers):
    tariff = Tariff(tariff_class="Rumah Tangga A1", price_per_unit=Decimal("2500"))
    db.add(tariff)
    db.commit()

    resp = client.post("/admin/customers", headers=admin_headers, json={
        "customer_number": "PLG002",
        "name": "Siti Aminah",
        "address": "Jl. Pahlawan No. 25",
        "tariff_id": tariff.id,
    })
    assert resp.status_code == 201
    assert Decimal(resp.json()["tariff_per_unit"]) == Decimal("2500")


def test_duplicate_customer_number_is_rejected(client, db, admin_headers):
    make_customer(db, "PLG001")
    resp = client.post("/admin/customers", headers=admin_headers, json={
        "customer_number": "PLG001",
        "name": "Someone Else",
        "address": "Jl. Lain",
    })
    assert resp.status_code == 422
    assert "customer_number" in resp.json()["errors"]


def test_invalid_status_is_rejected(client, admin_headers):
    resp = client.post("/admin/customers", headers=admin_headers, json={
        "customer_number": "PLG009",
        "name": "X",
        "address": "Y",
        "status": "suspended",
    })
    assert resp.status_code == 422
    assert "status" in resp.json()["errors"]


def test_list_customers_search_and_pagination(client, db, operator_headers):
    make_customer(db, "PLG001", name="Budi Santoso")
    make_customer(db, "PLG002", name="Siti Aminah")
    make_customer(db, "PLG003", name="Budiman", status="inactive")

    resp = client.get("/admin/customers", headers=operator_headers, params={"search": "budi"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["total"] == 2
    # newest first
    assert [c["customer_number"] for c in body["data"]] == ["PLG003", "PLG001"]

    resp = client.get("/admin/customers", headers=operator_headers, params={"status": "active", "per_page": 1})
    body = resp.json()
    assert body["total"] == 2
    assert body["last_page"] == 2
    assert len(body["data"]) == 1


def test_update_customer_is_partial(client, db, admin_headers):
    customer = make_customer(db)
    resp = client.put(f"/admin/customers/{customer.id}", headers=admin_headers, json={"phone": "0899"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["phone"] == "0899"
    assert body["name"] == "Budi Santoso"


def test_get_missing_customer(client, admin_headers):
    resp = client.get("/admin/customers/999", headers=admin_headers)
    assert resp.status_code == 404
    assert resp.json()["message"] == "Customer not found"


def test_delete_customer_cascades_bills_and_payments(client, db, admin, admin_headers):
    customer = make_customer(db)
    bill = make_bill(db, customer, status="paid")
    db.add(Payment(bill_id=bill.id, user_id=admin.id, amount=bill.amount, method="cash"))
    db.commit()

    resp = client.delete(f"/admin/customers/{customer.id}", headers=admin_headers)
    assert resp.status_code == 204

    db.expire_all()
    assert db.query(Bill).count() == 0
    assert db.query(Payment).count() == 0


def test_blank_customer_number_is_rejected(client, db, admin_headers):
    resp = client.post("/admin/customers", headers=admin_headers, json={
        "customer_number": "   ",
        "name": "Budi",
        "address": "Jl. Merdeka",
    })
    assert resp.status_code == 422
    assert "customer_number" in resp.json()["errors"]
    assert db.query(Customer).count() == 0


def test_customer_fields_are_trimmed(client, admin_headers):
    resp = client.post("/admin/customers", headers=admin_headers, json={
        "customer_number": " PLG007 ",
        "name": " Budi ",
        "address": "Jl. Merdeka",
    })
    assert resp.status_code == 201
    assert resp.json()["customer_number"] == "PLG007"
    assert resp.json()["name"] == "Budi"
