from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database import get_db
from schemas.stats import CalendarDayOut
from services.adherence import calendar_for_month

router = APIRouter(prefix="/api/calendar", tags=["Calendar"])


@router.get("/{year}/{month}", response_model=dict[str, CalendarDayOut])
def get_calendar_month(year: int, month: int, db: Session = Depends(get_db)):
    """Per-day taken/total rollup for one month. Days without doses are omitted."""
    return calendar_for_month(db, year, month)
