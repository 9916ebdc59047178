"""
Adherence statistics and the calendar rollup.

Everything here is read-only and computed on demand from the doses table.
Percentages round half up; 0 expected (or 0 total) doses is 0%.
"""

from datetime import date, timedelta

from sqlalchemy import case, func
from sqlalchemy.orm import Session

from models.dose import Dose
from models.medicine import Medicine
from services import clock
from services.errors import ValidationError, unit_of_work

CALENDAR_MIN_YEAR = 2020
CALENDAR_MAX_YEAR = 2030
PERIODS = ("week", "month")


def percentage(part: int, whole: int) -> int:
    if not whole:
        return 0
    # Integer half-up rounding, avoids float artifacts and banker's rounding.
    return (200 * part + whole) // (2 * whole)


def _taken_count():
    return func.count(case((Dose.taken.is_(True), Dose.id)))


def medicine_statistics(db: Session) -> list[dict]:
    today = clock.today()
    with unit_of_work(db, "Database error", commit=False):
        rows = (
            db.query(
                Medicine,
                func.count(Dose.id).label("total_doses"),
                _taken_count().label("taken_doses"),
                func.min(Dose.date).label("first_dose_date"),
            )
            .outerjoin(Dose, Dose.medicine_id == Medicine.id)
            .group_by(Medicine.id)
            .order_by(Medicine.archived.asc(), Medicine.created_at.desc(), Medicine.id.desc())
            .all()
        )

        stats = []
        for med, _total, taken, first_dose_date in rows:
            start = clock.parse_date(first_dose_date) or clock.local_date(med.created_at)
            if med.archived and med.archived_at is not None:
                end = clock.local_date(med.archived_at)
            else:
                end = today
            total_days = max((end - start).days + 1, 0)
            expected = total_days * med.frequency
            taken = taken or 0
            stats.append(
                {
                    "id": med.id,
                    "name": med.name,
                    "frequency": med.frequency,
                    "status": "archived" if med.archived else "active",
                    "start_date": start.isoformat(),
                    "end_date": end.isoformat(),
                    "total_days": total_days,
                    "expected_doses": expected,
                    "taken_doses": taken,
                    "missed_doses": max(0, expected - taken),
                    "adherence_percentage": percentage(taken, expected),
                }
            )
    return stats


def month_bounds(year: int, month: int) -> tuple[str, str]:
    if not CALENDAR_MIN_YEAR <= year <= CALENDAR_MAX_YEAR:
        raise ValidationError(f"Year must be between {CALENDAR_MIN_YEAR} and {CALENDAR_MAX_YEAR}")
    if not 1 <= month <= 12:
        raise ValidationError("Month must be between 1 and 12")
    start = date(year, month, 1)
    end = date(year + 1, 1, 1) if month == 12 else date(year, month + 1, 1)
    return start.isoformat(), end.isoformat()


def calendar_for_month(db: Session, year: int, month: int) -> dict[str, dict]:
    start, end = month_bounds(year, month)
    with unit_of_work(db, "Database error", commit=False):
        rows = (
            db.query(
                Dose.date,
                func.count(Dose.id).label("total"),
                _taken_count().label("taken"),
            )
            .join(Medicine, Medicine.id == Dose.medicine_id)
            .filter(Dose.date >= start, Dose.date < end)
            .group_by(Dose.date)
            .order_by(Dose.date)
            .all()
        )
    return {
        day: {"total": total, "taken": taken or 0, "percentage": percentage(taken or 0, total)}
        for day, total, taken in rows
    }


def period_start(period: str, today: date) -> date:
    if period == "week":
        # Most recent Sunday on or before today.
        return today - timedelta(days=(today.weekday() + 1) % 7)
    if period == "month":
        return today.replace(day=1)
    raise ValidationError("Period must be either week or month")


def period_statistics(db: Session, period: str = "week") -> list[dict]:
    today = clock.today()
    start = period_start(period, today).isoformat()
    end = today.isoformat()
    with unit_of_work(db, "Database error", commit=False):
        rows = (
            db.query(
                Medicine.id,
                Medicine.name,
                Medicine.frequency,
                func.count(Dose.id).label("total"),
                _taken_count().label("taken"),
            )
            .outerjoin(
                Dose,
                (Dose.medicine_id == Medicine.id) & (Dose.date >= start) & (Dose.date <= end),
            )
            .group_by(Medicine.id, Medicine.name, Medicine.frequency)
            .order_by(Medicine.name, Medicine.id)
            .all()
        )
    return [
        {
            "id": med_id,
            "name": name,
            "frequency": frequency,
            "taken": taken or 0,
            "total": total or 0,
            "percentage": percentage(taken or 0, total or 0),
        }
        for med_id, name, frequency, total, taken in rows
    ]
