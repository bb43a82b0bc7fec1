"""
Bulk Import Router
Customer and bill imports (JSON batch or Excel upload) plus the import templates.

Registered before the customers/bills routers so that /import and /template
are not swallowed by the /{id} routes.
"""

from fastapi import APIRouter, Depends, HTTPException, File, UploadFile
from fastapi.responses import Response
from sqlalchemy.orm import Session
from database import get_db
from routers.deps import require_roles
from schemas.imports import (
    BillImportRequest, BillImportRow, CustomerImportRequest, CustomerImportRow, ImportResult,
)
from services import imports

router = APIRouter(prefix="/admin", tags=["Bulk Import"])

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

customer_editors = require_roles("admin", "operator")
admin_only = require_roles("admin")


async def _read_upload(file: UploadFile) -> bytes:
    if not file.filename or not file.filename.lower().endswith((".xlsx", ".xls")):
        raise HTTPException(
            status_code=400,
            detail="Invalid file format. Please upload an Excel file (.xlsx or .xls)",
        )
    return await file.read()


def _excel_response(content: bytes, filename: str) -> Response:
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


# ==========================================
#   CUSTOMERS
# ==========================================

@router.post("/customers/import", response_model=ImportResult, status_code=201,
             dependencies=[Depends(customer_editors)])
def import_customers(data: CustomerImportRequest, db: Session = Depends(get_db)):
    count = imports.import_customers(db, data.customers)
    return {"message": "Customers imported successfully", "imported_count": count}


@router.post("/customers/import/excel", response_model=ImportResult, status_code=201,
             dependencies=[Depends(customer_editors)])
async def import_customers_excel(file: UploadFile = File(...), db: Session = Depends(get_db)):
    contents = await _read_upload(file)
    positions, rows = imports.read_excel_rows(contents, file.filename)
    valid = imports.validate_rows(CustomerImportRow, rows, "customers", positions)
    count = imports.import_customers(db, valid, positions)
    return {"message": "Customers imported successfully", "imported_count": count}


@router.get("/customers/template", dependencies=[Depends(customer_editors)])
def customer_template(format: str = "json"):
    template = imports.customer_template()
    if format == "xlsx":
        return _excel_response(
            imports.template_workbook(template, "Customers"), "customer_import_template.xlsx"
        )
    return {"message": "Template generated successfully", "template": template}


# ==========================================
#   BILLS
# ==========================================

@router.post("/bills/import", response_model=ImportResult, status_code=201,
             dependencies=[Depends(admin_only)])
def import_bills(data: BillImportRequest, db: Session = Depends(get_db)):
    count = imports.import_bills(db, data.bills)
    return {"message": "Bills imported successfully", "imported_count": count}


@router.post("/bills/import/excel", response_model=ImportResult, status_code=201,
             dependencies=[Depends(admin_only)])
async def import_bills_excel(file: UploadFile = File(...), db: Session = Depends(get_db)):
    contents = await _read_upload(file)
    positions, rows = imports.read_excel_rows(contents, file.filename)
    valid = imports.validate_rows(BillImportRow, rows, "bills", positions)
    count = imports.import_bills(db, valid, positions)
    return {"message": "Bills imported successfully", "imported_count": count}


@router.get("/bills/template", dependencies=[Depends(admin_only)])
def bill_template(format: str = "json", db: Session = Depends(get_db)):
    template = imports.bill_template(db)
    if format == "xlsx":
        return _excel_response(
            imports.template_workbook(template, "Bills"), "bill_import_template.xlsx"
        )
    return {"message": "Template generated successfully", "template": template}
