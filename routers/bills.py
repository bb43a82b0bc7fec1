from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session, joinedload
from database import get_db
from models.bills import Bill
from routers.deps import require_roles, get_or_404
from schemas.bills import (
    BillCreate, BillUpdate, BillOut, BillDetail, GenerateBillsRequest, GenerateBillsResponse,
)
from schemas.common import Page, MessageResponse
from services import billing
from utils import paginate
from typing import Optional
import config

router = APIRouter(
    prefix="/admin/bills",
    tags=["Bills"],
    dependencies=[Depends(require_roles("admin"))],
)


@router.get("", response_model=Page[BillOut])
def list_bills(
    page: int = Query(1, ge=1),
    per_page: int = Query(config.DEFAULT_PER_PAGE, ge=1, le=config.MAX_PER_PAGE),
    status: Optional[str] = None,
    period: Optional[str] = None,
    customer_id: Optional[int] = None,
    db: Session = Depends(get_db),
):
    query = db.query(Bill).options(joinedload(Bill.customer))
    if status:
        query = query.filter(Bill.status == status)
    if period:
        query = query.filter(Bill.period == period)
    if customer_id:
        query = query.filter(Bill.customer_id == customer_id)
    return paginate(query.order_by(Bill.id.desc()), page, per_page)


# Must be before /{bill_id} routes
@router.post("/generate", response_model=GenerateBillsResponse)
def generate_bills(data: GenerateBillsRequest, db: Session = Depends(get_db)):
    created = billing.generate_bills(db, data.period, data.due_date)
    return {
        "message": f"Successfully generated {created} bills for period {data.period}",
        "bills_created": created,
    }


@router.post("", response_model=BillOut, status_code=201)
def create_bill(data: BillCreate, db: Session = Depends(get_db)):
    return billing.create_bill(db, data)


@router.get("/{bill_id}", response_model=BillDetail)
def get_bill(bill_id: int, db: Session = Depends(get_db)):
    return get_or_404(db, Bill, bill_id, "Bill")


@router.put("/{bill_id}", response_model=BillOut)
def update_bill(bill_id: int, data: BillUpdate, db: Session = Depends(get_db)):
    bill = get_or_404(db, Bill, bill_id, "Bill")
    return billing.update_bill(db, bill, data)


@router.delete("/{bill_id}", response_model=MessageResponse)
def delete_bill(bill_id: int, db: Session = Depends(get_db)):
    bill = get_or_404(db, Bill, bill_id, "Bill")
    billing.delete_bill(db, bill)
    return {"message": "Bill deleted successfully"}
