from pydantic import BaseModel


class MedicineStatsOut(BaseModel):
    id: int
    name: str
    frequency: int
    status: str
    start_date: str
    end_date: str
    total_days: int
    expected_doses: int
    taken_doses: int
    missed_doses: int
    adherence_percentage: int


class PeriodStatsOut(BaseModel):
    id: int
    name: str
    frequency: int
    taken: int
    total: int
    percentage: int


class CalendarDayOut(BaseModel):
    total: int
    taken: int
    percentage: int
