"""
Bulk Import Service
Turns Excel uploads or JSON batches into customer / bill rows.

A batch is all-or-nothing: every row is checked (structure first, then
business rules against the database and the rest of the batch) before
anything is written, and the insert is a single commit.
"""
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from pydantic import ValidationError
from models.customers import Customer
from models.bills import Bill, BILL_UNPAID
from services.billing import calculate_bill
from services.exceptions import ImportRejected
from typing import Dict, List, Optional, Tuple
import datetime
import logging
import io

import pandas as pd

logger = logging.getLogger(__name__)

# Columns that must arrive as text even when Excel stores them as numbers
TEXT_COLUMNS = {"customer_number", "name", "address", "phone", "status", "period"}


# ==========================================
#   EXCEL PARSING
# ==========================================

def normalize_column(name) -> str:
    return str(name).strip().lower().replace(" ", "_")


def clean_cell(column: str, value):
    """NaN -> None, Timestamp -> date, whole floats -> int, text columns -> str"""
    if value is None:
        return None
    if not isinstance(value, (list, dict)) and pd.isna(value):
        return None
    # pd.Timestamp is a datetime subclass
    if isinstance(value, datetime.datetime):
        value = value.date()
    if isinstance(value, datetime.date):
        # Excel likes to turn "2025-08" into a date
        return value.strftime("%Y-%m") if column == "period" else value
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if column in TEXT_COLUMNS:
        text = str(value).strip()
        return text or None
    if isinstance(value, str):
        return value.strip() or None
    return value


def read_excel_rows(contents: bytes, filename: str) -> Tuple[List[int], List[Dict]]:
    """
    Data rows of the first sheet plus their positions (Excel row = position + 2).
    Blank rows are skipped but keep their place in the numbering.
    """
    # openpyxl = .xlsx (new format), let pandas pick for .xls
    engine = "openpyxl" if filename.lower().endswith(".xlsx") else None
    try:
        df = pd.read_excel(io.BytesIO(contents), engine=engine, dtype=object)
    except Exception as e:
        logger.warning("Could not read Excel upload %s: %s", filename, e)
        raise ImportRejected({"file": ["Could not read the Excel file"]})

    df.columns = [normalize_column(c) for c in df.columns]
    # Skip completely empty rows
    df = df.dropna(how="all")

    positions, rows = [], []
    for index, row in df.iterrows():
        positions.append(int(index))
        rows.append({column: clean_cell(column, row[column]) for column in df.columns})
    return positions, rows


def validate_rows(schema, rows: List[Dict], prefix: str, positions: Optional[List[int]] = None):
    """Structural check of raw rows. Raises ImportRejected listing every bad field."""
    if not rows:
        raise ImportRejected({prefix: ["At least one row is required"]})

    valid = []
    errors: Dict[str, List[str]] = {}
    for index, raw in zip(positions or range(len(rows)), rows):
        try:
            valid.append(schema.model_validate(raw))
        except ValidationError as exc:
            for err in exc.errors():
                key = ".".join([prefix, str(index)] + [str(part) for part in err["loc"]])
                errors.setdefault(key, []).append(err["msg"])

    if errors:
        raise ImportRejected(errors, message="Validation failed")
    return valid


# ==========================================
#   CUSTOMERS
# ==========================================

def import_customers(db: Session, rows, positions: Optional[List[int]] = None) -> int:
    positions = positions or list(range(len(rows)))
    numbers = [row.customer_number.strip() for row in rows]
    existing = {
        number
        for (number,) in db.query(Customer.customer_number).filter(Customer.customer_number.in_(numbers)).all()
    }

    errors: Dict[str, List[str]] = {}
    seen = set()
    for index, number in zip(positions, numbers):
        key = f"customers.{index}.customer_number"
        if number in existing:
            errors.setdefault(key, []).append(f"Customer number {number} already exists")
        elif number in seen:
            errors.setdefault(key, []).append(f"Customer number {number} appears more than once in the batch")
        seen.add(number)

    if errors:
        logger.warning("Customer import rejected: %s row errors", len(errors))
        raise ImportRejected(errors)

    customers = [
        Customer(
            customer_number=number,
            name=row.name.strip(),
            address=row.address.strip(),
            phone=row.phone,
            status=row.status,
            tariff_per_unit=row.tariff_per_unit,
            last_meter_reading=row.last_meter_reading,
        )
        for number, row in zip(numbers, rows)
    ]
    _commit_batch(db, customers, "customers")
    logger.info("Imported %s customers", len(customers))
    return len(customers)


# ==========================================
#   BILLS
# ==========================================

def import_bills(db: Session, rows, positions: Optional[List[int]] = None) -> int:
    positions = positions or list(range(len(rows)))
    numbers = {row.customer_number.strip() for row in rows}
    customers = {
        c.customer_number: c
        for c in db.query(Customer).filter(Customer.customer_number.in_(numbers)).all()
    }
    billed = {
        (customer_id, period)
        for customer_id, period in db.query(Bill.customer_id, Bill.period)
        .filter(Bill.customer_id.in_([c.id for c in customers.values()]))
        .all()
    }

    errors: Dict[str, List[str]] = {}
    bills = []
    for index, row in zip(positions, rows):
        number = row.customer_number.strip()
        customer: Optional[Customer] = customers.get(number)
        if customer is None:
            errors.setdefault(f"bills.{index}.customer_number", []).append(
                f"Customer number {number} was not found"
            )
            continue

        if row.meter_end <= row.meter_start:
            errors.setdefault(f"bills.{index}.meter_end", []).append(
                f"Meter end ({row.meter_end}) must be greater than meter start ({row.meter_start})"
            )
            continue

        pair = (customer.id, row.period)
        if pair in billed:
            errors.setdefault(f"bills.{index}.period", []).append(
                f"Bill already exists for customer {number} in period {row.period}"
            )
            continue
        billed.add(pair)

        usage, amount = calculate_bill(row.meter_start, row.meter_end, customer.tariff_per_unit)
        bills.append(Bill(
            customer_id=customer.id,
            period=row.period,
            meter_start=row.meter_start,
            meter_end=row.meter_end,
            usage=usage,
            tariff_per_unit=customer.tariff_per_unit,
            amount=amount,
            status=BILL_UNPAID,
            due_date=row.due_date,
        ))

    if errors:
        logger.warning("Bill import rejected: %s row errors", len(errors))
        raise ImportRejected(errors)

    _commit_batch(db, bills, "bills")
    logger.info("Imported %s bills", len(bills))
    return len(bills)


def _commit_batch(db: Session, objects, label: str):
    try:
        db.add_all(objects)
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.exception("Integrity error while importing %s", label)
        raise ImportRejected({label: ["Database integrity error. Nothing was imported."]})


# ==========================================
#   TEMPLATES
# ==========================================

def customer_template() -> Dict:
    return {
        "headers": {
            "customer_number": "Customer Number",
            "name": "Name",
            "address": "Address",
            "phone": "Phone",
            "status": "Status (active/inactive)",
            "tariff_per_unit": "Tariff per m3",
            "last_meter_reading": "Last Meter Reading",
        },
        "sample_data": [
            {
                "customer_number": "PLG001",
                "name": "Sample Customer",
                "address": "Jl. Contoh Alamat No. 123",
                "phone": "081234567890",
                "status": "active",
                "tariff_per_unit": 5000,
                "last_meter_reading": 0,
            }
        ],
        "instructions": [
            "1. Keep the header row unchanged",
            "2. Customer numbers must be unique and not yet registered",
            "3. Status is either active or inactive",
            "4. Tariff per m3 must be a positive number",
            "5. Last meter reading must be zero or more",
        ],
    }


def bill_template(db: Session) -> Dict:
    customer = db.query(Customer).filter(Customer.status == "active").order_by(Customer.id).first()
    if customer is None:
        sample = {
            "customer_number": "PLG001",
            "period": "2025-08",
            "meter_start": 0,
            "meter_end": 35,
            "due_date": "2025-09-03",
        }
    else:
        sample = {
            "customer_number": customer.customer_number,
            "period": "2025-08",
            "meter_start": customer.last_meter_reading,
            "meter_end": customer.last_meter_reading + 35,
            "due_date": "2025-09-03",
        }

    return {
        "headers": {
            "customer_number": "Customer Number",
            "period": "Period (YYYY-MM)",
            "meter_start": "Meter Start",
            "meter_end": "Meter End",
            "due_date": "Due Date (YYYY-MM-DD)",
        },
        "sample_data": [sample],
        "instructions": [
            "1. Remove the sample row before importing",
            "2. Customer numbers must already be registered",
            "3. Period format: YYYY-MM (e.g. 2025-08)",
            "4. Meter end must be greater than meter start",
            "5. Due date format: YYYY-MM-DD (e.g. 2025-09-03)",
            "6. Do not rename the header columns",
        ],
        "validation_rules": {
            "customer_number": "Required, must be registered",
            "period": "YYYY-MM, e.g. 2024-01",
            "meter_start": "Whole number, zero or more",
            "meter_end": "Whole number, greater than meter_start",
            "due_date": "YYYY-MM-DD, e.g. 2024-02-15",
        },
    }


def template_workbook(template: Dict, sheet_name: str) -> bytes:
    """Excel version of a template: header row + sample rows."""
    columns = list(template["headers"].keys())
    df = pd.DataFrame(template["sample_data"], columns=columns)
    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name=sheet_name)
    return buffer.getvalue()
