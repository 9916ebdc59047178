from datetime import datetime

from pydantic import BaseModel


class DoseUpdate(BaseModel):
    taken: bool


class DoseUpdatedOut(BaseModel):
    id: int
    medicine_id: int
    medicine_name: str
    date: str
    time_label: str
    taken: bool
    taken_at: datetime | None


class DoseUpdateResult(BaseModel):
    message: str
    dose: DoseUpdatedOut
