from datetime import date

import pytest
from sqlalchemy import text

from models.dose import Dose
from models.medicine import Medicine
from services import clock
from services.doses import (
    ensure_doses_for_all_active_medicines,
    ensure_doses_for_date,
    set_dose_taken,
)
from services import doses as doses_service
from services.errors import ForbiddenError, NotFoundError, StorageError
from services.schedule import CustomSchedule, PresetSchedule


def _add_medicine(db, name="Aspirin", frequency=2, schedule=None, archived=False) -> Medicine:
    med = Medicine(name=name, frequency=frequency, created_at=clock.now(), archived=archived)
    med.schedule = schedule or PresetSchedule(selector="morning-night")
    if archived:
        med.archived_at = clock.now()
    db.add(med)
    db.commit()
    db.refresh(med)
    return med


def _count(db, medicine_id: int, day: str) -> int:
    return db.query(Dose).filter(Dose.medicine_id == medicine_id, Dose.date == day).count()


def test_ensure_doses_is_idempotent(db) -> None:
    med = _add_medicine(db)

    ensure_doses_for_date(db, med, "2025-03-12")
    db.commit()
    ensure_doses_for_date(db, med, date(2025, 3, 12))
    db.commit()

    assert _count(db, med.id, "2025-03-12") == 2


def test_ensure_doses_keeps_existing_taken_state(db) -> None:
    med = _add_medicine(db)
    ensure_doses_for_date(db, med, "2025-03-12")
    db.commit()
    morning = db.query(Dose).filter(Dose.time_label == "Morning").one()
    set_dose_taken(db, morning.id, True)

    ensure_doses_for_date(db, med, "2025-03-12")
    db.commit()

    db.refresh(morning)
    assert morning.taken is True
    assert morning.taken_at is not None


def test_ensure_doses_skips_archived_medicines(db) -> None:
    med = _add_medicine(db, archived=True)
    ensure_doses_for_date(db, med, "2025-03-12")
    db.commit()
    assert _count(db, med.id, "2025-03-12") == 0


def test_ensure_doses_for_all_active_medicines(db) -> None:
    active = _add_medicine(db, "Active", 2, CustomSchedule(times=("08:00", "20:00")))
    archived = _add_medicine(db, "Archived", 1, archived=True)

    assert ensure_doses_for_all_active_medicines(db, "2025-03-12") == 1
    db.commit()

    assert _count(db, active.id, "2025-03-12") == 2
    assert _count(db, archived.id, "2025-03-12") == 0


def test_ensure_doses_fills_only_missing_labels(db) -> None:
    med = _add_medicine(db)
    db.add(Dose(medicine_id=med.id, date="2025-03-12", time_label="Night", taken=True, taken_at=clock.now()))
    db.commit()

    ensure_doses_for_date(db, med, "2025-03-12")
    db.commit()

    rows = {d.time_label: d for d in db.query(Dose).filter(Dose.medicine_id == med.id)}
    assert set(rows) == {"Morning", "Night"}
    assert rows["Night"].taken is True
    assert rows["Morning"].taken is False


def test_set_dose_taken_marks_and_unmarks(db) -> None:
    med = _add_medicine(db)
    ensure_doses_for_date(db, med, "2025-03-12")
    db.commit()
    dose = db.query(Dose).filter(Dose.time_label == "Morning").one()

    result = set_dose_taken(db, dose.id, True)
    assert result["taken"] is True
    assert result["medicine_name"] == "Aspirin"
    assert clock.as_utc(result["taken_at"]) == clock.now()

    result = set_dose_taken(db, dose.id, False)
    assert result["taken"] is False
    assert result["taken_at"] is None


@pytest.mark.parametrize("taken", [True, False])
def test_set_dose_taken_rejects_past_doses(db, taken: bool) -> None:
    med = _add_medicine(db)
    ensure_doses_for_date(db, med, "2025-03-11")
    db.commit()
    dose = db.query(Dose).first()

    with pytest.raises(ForbiddenError, match="past") as excinfo:
        set_dose_taken(db, dose.id, taken)
    assert excinfo.value.date == "2025-03-11"


def test_set_dose_taken_rejects_future_doses(db) -> None:
    med = _add_medicine(db)
    ensure_doses_for_date(db, med, "2025-03-13")
    db.commit()
    dose = db.query(Dose).first()

    with pytest.raises(ForbiddenError, match="future"):
        set_dose_taken(db, dose.id, True)
    db.refresh(dose)
    assert dose.taken is False


def test_edit_window_follows_the_clock(db, frozen_clock) -> None:
    med = _add_medicine(db)
    ensure_doses_for_date(db, med, "2025-03-12")
    db.commit()
    dose = db.query(Dose).first()

    frozen_clock.advance(days=1)
    with pytest.raises(ForbiddenError):
        set_dose_taken(db, dose.id, True)


def test_set_dose_taken_unknown_dose(db) -> None:
    with pytest.raises(NotFoundError):
        set_dose_taken(db, 12345, True)


def test_savepoint_fallback_treats_duplicates_as_materialized(db, monkeypatch) -> None:
    monkeypatch.setattr(doses_service, "_UPSERT_INSERTS", {})
    med = _add_medicine(db)
    db.add(Dose(medicine_id=med.id, date="2025-03-12", time_label="Morning", taken=True, taken_at=clock.now()))
    db.commit()

    ensure_doses_for_date(db, med, "2025-03-12")
    db.commit()
    ensure_doses_for_date(db, med, "2025-03-12")
    db.commit()

    rows = {d.time_label: d for d in db.query(Dose).filter(Dose.medicine_id == med.id)}
    assert set(rows) == {"Morning", "Night"}
    assert rows["Morning"].taken is True
    assert _count(db, med.id, "2025-03-12") == 2


def test_storage_failure_on_lookup_surfaces_as_storage_error(db) -> None:
    db.execute(text("DROP TABLE doses"))
    db.commit()

    with pytest.raises(StorageError, match="Failed to update dose"):
        set_dose_taken(db, 1, True)
