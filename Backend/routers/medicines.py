from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from database import get_db
from models.dose import Dose
from models.medicine import Medicine
from schemas.medicine import (
    DoseOut,
    MedicineCreate,
    MedicineCreatedOut,
    MedicineDayOut,
    MedicineDeletedOut,
    MedicineOut,
)
from services import medicines as medicine_service

router = APIRouter(prefix="/api/medicines", tags=["Medicines"])


def _to_out(med: Medicine) -> MedicineOut:
    return MedicineOut(
        id=med.id,
        name=med.name,
        frequency=med.frequency,
        schedule_type=med.schedule_type,
        custom_times=med.custom_time_list,
        preset_times=med.preset_times,
        created_at=med.created_at,
        archived=bool(med.archived),
        archived_at=med.archived_at,
    )


def _to_day_out(med: Medicine, doses: list[Dose]) -> MedicineDayOut:
    return MedicineDayOut(
        **_to_out(med).model_dump(),
        doses=[DoseOut.model_validate(d) for d in doses],
    )


@router.get("/", response_model=list[MedicineDayOut])
def list_medicines_for_date(
    date: str | None = Query(None, pattern=r"^\d{4}-\d{2}-\d{2}$", description="Day to show, defaults to today"),
    db: Session = Depends(get_db),
):
    """Active medicines with their doses for one day."""
    rows = medicine_service.list_medicines_for_date(db, date)
    return [_to_day_out(med, doses) for med, doses in rows]


@router.get("/all", response_model=list[MedicineOut])
def list_all_medicines(db: Session = Depends(get_db)):
    """All medicines, active first."""
    return [_to_out(med) for med in medicine_service.list_all_medicines(db)]


@router.post("/", response_model=MedicineCreatedOut, status_code=201)
def create_medicine(data: MedicineCreate, db: Session = Depends(get_db)):
    med = medicine_service.create_medicine(
        db,
        name=data.name,
        frequency=data.frequency,
        schedule_type=data.schedule_type.value,
        custom_times=data.custom_times,
        preset_times=data.preset_times,
    )
    return MedicineCreatedOut(message="Medicine added successfully", id=med.id)


@router.put("/{medicine_id}/archive")
def archive_medicine(medicine_id: int, db: Session = Depends(get_db)):
    medicine_service.archive_medicine(db, medicine_id)
    return {"message": "Medicine archived successfully"}


@router.put("/{medicine_id}/reactivate")
def reactivate_medicine(medicine_id: int, db: Session = Depends(get_db)):
    medicine_service.reactivate_medicine(db, medicine_id)
    return {"message": "Medicine reactivated successfully"}


@router.delete("/{medicine_id}", response_model=MedicineDeletedOut)
def delete_medicine(medicine_id: int, db: Session = Depends(get_db)):
    """Permanently delete a medicine and all of its dose history."""
    name = medicine_service.delete_medicine(db, medicine_id)
    return MedicineDeletedOut(
        message="Medicine and all associated dose records deleted successfully",
        deleted_medicine=name,
    )
