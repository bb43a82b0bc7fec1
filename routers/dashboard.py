from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from database import get_db
from routers.deps import get_current_user
from schemas.dashboard import DashboardStats, Activity
from services.dashboard import dashboard_stats, recent_activities
from typing import List

# Every signed-in role lands on the dashboard
router = APIRouter(
    prefix="/admin/dashboard",
    tags=["Dashboard"],
    dependencies=[Depends(get_current_user)],
)


@router.get("/stats", response_model=DashboardStats)
def stats(db: Session = Depends(get_db)):
    return dashboard_stats(db)


@router.get("/activities", response_model=List[Activity])
def activities(db: Session = Depends(get_db)):
    return recent_activities(db)
