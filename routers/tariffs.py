from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session
from database import get_db
from models.tariffs import Tariff
from routers.deps import require_roles, get_or_404
from schemas.tariffs import TariffCreate, TariffUpdate, TariffOut
from typing import List

router = APIRouter(
    prefix="/admin/tariffs",
    tags=["Tariffs"],
    dependencies=[Depends(require_roles("admin"))],
)


@router.get("", response_model=List[TariffOut])
def list_tariffs(db: Session = Depends(get_db)):
    return db.query(Tariff).order_by(Tariff.id).all()


@router.post("", response_model=TariffOut, status_code=201)
def create_tariff(item: TariffCreate, db: Session = Depends(get_db)):
    tariff = Tariff(**item.model_dump())
    db.add(tariff)
    db.commit()
    db.refresh(tariff)
    return tariff


@router.get("/{tariff_id}", response_model=TariffOut)
def get_tariff(tariff_id: int, db: Session = Depends(get_db)):
    return get_or_404(db, Tariff, tariff_id, "Tariff")


# Existing customers/bills keep their copied price
@router.put("/{tariff_id}", response_model=TariffOut)
def update_tariff(tariff_id: int, item: TariffUpdate, db: Session = Depends(get_db)):
    tariff = get_or_404(db, Tariff, tariff_id, "Tariff")
    for field, value in item.model_dump(exclude_unset=True).items():
        if value is None and field != "category":
            continue
        setattr(tariff, field, value)
    db.commit()
    db.refresh(tariff)
    return tariff


@router.delete("/{tariff_id}", status_code=204)
def delete_tariff(tariff_id: int, db: Session = Depends(get_db)):
    tariff = get_or_404(db, Tariff, tariff_id, "Tariff")
    db.delete(tariff)
    db.commit()
    return Response(status_code=204)
