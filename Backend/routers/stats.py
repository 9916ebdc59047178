from typing import Literal

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from database import get_db
from schemas.stats import MedicineStatsOut, PeriodStatsOut
from services.adherence import medicine_statistics, period_statistics

router = APIRouter(prefix="/api/stats", tags=["Statistics"])


@router.get("/", response_model=list[MedicineStatsOut])
def get_statistics(db: Session = Depends(get_db)):
    return medicine_statistics(db)


@router.get("/period", response_model=list[PeriodStatsOut])
def get_period_statistics(
    period: Literal["week", "month"] = Query("week"),
    db: Session = Depends(get_db),
):
    return period_statistics(db, period)
