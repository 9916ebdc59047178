"""
Medicine lifecycle: create, archive, reactivate, delete and the day view.

Each public function is one unit of work and commits (or rolls back) on its
own, so a medicine is never left half-created or half-deleted.
"""

from sqlalchemy.orm import Session

from models.dose import Dose
from models.medicine import Medicine
from services import clock
from services.doses import ensure_doses_for_all_active_medicines, ensure_doses_for_date
from services.errors import NotFoundError, NotFoundOrConflictError, ValidationError, unit_of_work
from services.schedule import CustomSchedule, build_schedule, is_valid_time, time_labels

NAME_MAX_LENGTH = 100
MIN_FREQUENCY = 1
MAX_FREQUENCY = 4


def sanitize_medicine_name(name) -> str:
    if not isinstance(name, str):
        return ""
    return name.strip()[:NAME_MAX_LENGTH].strip()


def create_medicine(
    db: Session,
    name: str,
    frequency: int,
    schedule_type: str,
    custom_times: list[str] | None = None,
    preset_times: str | None = None,
) -> Medicine:
    clean_name = sanitize_medicine_name(name)
    if not clean_name:
        raise ValidationError("Invalid medicine name")
    if not isinstance(frequency, int) or not MIN_FREQUENCY <= frequency <= MAX_FREQUENCY:
        raise ValidationError(f"Frequency must be between {MIN_FREQUENCY} and {MAX_FREQUENCY}")
    try:
        schedule = build_schedule(schedule_type, custom_times, preset_times)
    except ValueError as exc:
        raise ValidationError("Schedule type must be preset, custom, or interval") from exc

    if isinstance(schedule, CustomSchedule):
        bad = [t for t in schedule.times if not is_valid_time(t)]
        if bad:
            raise ValidationError(f"Invalid custom time(s): {', '.join(bad)} (expected HH:MM)")
        if len(set(schedule.times)) != len(schedule.times):
            raise ValidationError("Custom times must not repeat")

    labels = time_labels(schedule, frequency)
    if len(labels) != frequency:
        raise ValidationError("Time labels count does not match frequency")

    medicine = Medicine(
        name=clean_name,
        frequency=frequency,
        created_at=clock.now(),
        archived=False,
        archived_at=None,
    )
    medicine.schedule = schedule
    with unit_of_work(db, "Failed to add medicine"):
        db.add(medicine)
        db.flush()
        ensure_doses_for_date(db, medicine, clock.today())
    db.refresh(medicine)
    return medicine


def archive_medicine(db: Session, medicine_id: int) -> None:
    with unit_of_work(db, "Failed to archive medicine"):
        changed = (
            db.query(Medicine)
            .filter(Medicine.id == medicine_id, Medicine.archived.is_(False))
            .update({Medicine.archived: True, Medicine.archived_at: clock.now()}, synchronize_session=False)
        )
        if not changed:
            raise NotFoundOrConflictError("Medicine not found or already archived")


def reactivate_medicine(db: Session, medicine_id: int) -> None:
    with unit_of_work(db, "Failed to reactivate medicine"):
        changed = (
            db.query(Medicine)
            .filter(Medicine.id == medicine_id, Medicine.archived.is_(True))
            .update({Medicine.archived: False, Medicine.archived_at: None}, synchronize_session=False)
        )
        if not changed:
            raise NotFoundOrConflictError("Medicine not found or not archived")

        # Same transaction: a reactivated medicine is immediately actionable today.
        medicine = db.query(Medicine).filter(Medicine.id == medicine_id).populate_existing().one()
        ensure_doses_for_date(db, medicine, clock.today())


def delete_medicine(db: Session, medicine_id: int) -> str:
    """Permanently remove a medicine and its whole dose history. Returns its name."""
    with unit_of_work(db, "Failed to delete medicine"):
        medicine = db.query(Medicine).filter(Medicine.id == medicine_id).first()
        if not medicine:
            raise NotFoundError("Medicine not found")
        name = medicine.name
        db.delete(medicine)
    return name


def list_all_medicines(db: Session) -> list[Medicine]:
    with unit_of_work(db, "Database error", commit=False):
        return (
            db.query(Medicine)
            .order_by(Medicine.archived.asc(), Medicine.created_at.desc(), Medicine.id.desc())
            .all()
        )


def list_medicines_for_date(db: Session, on_date: str | None = None) -> list[tuple[Medicine, list[Dose]]]:
    """
    Active medicines (newest first) with their doses for `on_date`.

    Viewing today materializes any missing slots first; other dates are read
    back as stored.
    """
    today = clock.today_string()
    if on_date is None:
        on_date = today
    day = clock.parse_date(on_date)
    if day is None:
        raise ValidationError("Date must be in YYYY-MM-DD format")
    on_date = day.isoformat()

    if on_date == today:
        with unit_of_work(db, "Error ensuring today doses"):
            ensure_doses_for_all_active_medicines(db, on_date)

    with unit_of_work(db, "Database error", commit=False):
        medicines = (
            db.query(Medicine)
            .filter(Medicine.archived.is_(False))
            .order_by(Medicine.created_at.desc(), Medicine.id.desc())
            .all()
        )
        if not medicines:
            return []

        doses = (
            db.query(Dose)
            .filter(Dose.date == on_date, Dose.medicine_id.in_([m.id for m in medicines]))
            .order_by(Dose.id.asc())
            .all()
        )
    by_medicine: dict[int, list[Dose]] = {m.id: [] for m in medicines}
    for dose in doses:
        by_medicine[dose.medicine_id].append(dose)
    return [(m, by_medicine[m.id]) for m in medicines]
