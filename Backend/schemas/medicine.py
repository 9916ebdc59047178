from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from services.schedule import ScheduleType, is_valid_time


class MedicineCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(min_length=1, max_length=100)
    frequency: int = Field(ge=1, le=4)
    schedule_type: ScheduleType = Field(alias="scheduleType")
    custom_times: list[str] | None = Field(default=None, alias="customTimes")
    preset_times: str | None = Field(default=None, alias="presetTimes")

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, value):
        return value.strip() if isinstance(value, str) else value

    @model_validator(mode="after")
    def validate_schedule(self):
        if self.schedule_type is ScheduleType.custom:
            times = [t.strip() for t in (self.custom_times or []) if t.strip()]
            if not times:
                raise ValueError("customTimes is required for a custom schedule")
            bad = [t for t in times if not is_valid_time(t)]
            if bad:
                raise ValueError(f"Custom times must be HH:MM: {', '.join(bad)}")
        return self


class DoseOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    time_label: str
    taken: bool
    taken_at: datetime | None


class MedicineOut(BaseModel):
    id: int
    name: str
    frequency: int
    schedule_type: str
    custom_times: list[str] | None
    preset_times: str | None
    created_at: datetime | None
    archived: bool
    archived_at: datetime | None


class MedicineDayOut(MedicineOut):
    doses: list[DoseOut] = []


class MedicineCreatedOut(BaseModel):
    message: str
    id: int


class MedicineDeletedOut(BaseModel):
    message: str
    deleted_medicine: str
