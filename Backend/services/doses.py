from datetime import date as date_type

from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from models.dose import Dose
from models.medicine import Medicine
from services import clock
from services.errors import ForbiddenError, NotFoundError, unit_of_work

_DOSE_KEY = ["medicine_id", "date", "time_label"]
_UPSERT_INSERTS = {"sqlite": sqlite_insert, "postgresql": pg_insert}


def _as_date_string(value: date_type | str) -> str:
    return value.isoformat() if isinstance(value, date_type) else value


def _insert_missing(db: Session, rows: list[dict]) -> None:
    if not rows:
        return
    dialect_insert = _UPSERT_INSERTS.get(db.get_bind().dialect.name)
    if dialect_insert is not None:
        stmt = dialect_insert(Dose).values(rows).on_conflict_do_nothing(index_elements=_DOSE_KEY)
        db.execute(stmt)
        return
    # Engines without ON CONFLICT: the unique key is the backstop, a
    # duplicate just means another request materialized the slot first.
    for row in rows:
        try:
            with db.begin_nested():
                db.add(Dose(**row))
        except IntegrityError:
            continue


def ensure_doses_for_date(db: Session, medicine: Medicine, on_date: date_type | str) -> None:
    """
    Make sure `medicine` has one dose row per expected time label on `on_date`.

    Existing rows are left untouched (their taken state survives). Archived
    medicines never get new rows. Does not commit; the caller owns the unit
    of work.
    """
    if medicine.archived:
        return
    day = _as_date_string(on_date)
    rows = [
        {"medicine_id": medicine.id, "date": day, "time_label": label, "taken": False, "created_at": clock.now()}
        for label in dict.fromkeys(medicine.expected_labels())
    ]
    _insert_missing(db, rows)


def ensure_doses_for_all_active_medicines(db: Session, on_date: date_type | str) -> int:
    medicines = db.query(Medicine).filter(Medicine.archived.is_(False)).all()
    for medicine in medicines:
        ensure_doses_for_date(db, medicine, on_date)
    return len(medicines)


def set_dose_taken(db: Session, dose_id: int, taken: bool) -> dict:
    """Mark a dose taken/untaken. Only doses dated today can change."""
    with unit_of_work(db, "Failed to update dose"):
        row = (
            db.query(Dose, Medicine.name)
            .join(Medicine, Medicine.id == Dose.medicine_id)
            .filter(Dose.id == dose_id)
            .first()
        )
        if not row:
            raise NotFoundError("Dose not found")
        dose, medicine_name = row

        today = clock.today_string()
        if dose.date < today:
            raise ForbiddenError("Cannot modify doses from past dates", dose.date)
        if dose.date > today:
            raise ForbiddenError("Cannot modify doses for future dates", dose.date)

        dose.taken = bool(taken)
        dose.taken_at = clock.now() if taken else None
    db.refresh(dose)
    return {
        "id": dose.id,
        "medicine_id": dose.medicine_id,
        "medicine_name": medicine_name,
        "date": dose.date,
        "time_label": dose.time_label,
        "taken": dose.taken,
        "taken_at": dose.taken_at,
    }
