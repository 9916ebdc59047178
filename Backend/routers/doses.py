from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database import get_db
from schemas.dose import DoseUpdate, DoseUpdateResult
from services.doses import set_dose_taken

router = APIRouter(prefix="/api/doses", tags=["Doses"])


@router.put("/{dose_id}", response_model=DoseUpdateResult)
def update_dose(dose_id: int, data: DoseUpdate, db: Session = Depends(get_db)):
    """Mark a dose taken or not taken. Only today's doses are editable."""
    dose = set_dose_taken(db, dose_id, data.taken)
    return {"message": "Dose updated successfully", "dose": dose}
