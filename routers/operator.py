from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from database import get_db
from models.bills import Bill
from routers.deps import require_roles
from schemas.counter import (
    MeterReadingRequest, MeterReadingResponse, CustomerInfoRequest, CustomerInfoResponse,
)
from services import billing

router = APIRouter(
    prefix="/operator",
    tags=["Operator"],
    dependencies=[Depends(require_roles("operator", "admin"))],
)


@router.post("/catat-meteran", response_model=MeterReadingResponse)
def record_meter_reading(data: MeterReadingRequest, db: Session = Depends(get_db)):
    result = billing.record_meter_reading(db, data.customer_number, data.new_reading)
    return {"message": "Meter reading recorded", "data": result}


@router.post("/customer-info", response_model=CustomerInfoResponse)
def customer_info(data: CustomerInfoRequest, db: Session = Depends(get_db)):
    customer = billing.find_customer(db, data.customer_number)
    latest_bill = db.query(Bill).filter(Bill.customer_id == customer.id)\
        .order_by(Bill.period.desc(), Bill.id.desc()).first()
    return {"customer": customer, "latest_bill": latest_bill}
