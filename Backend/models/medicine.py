from sqlalchemy import Column, Integer, String, Boolean, DateTime, Text
from sqlalchemy.orm import relationship

from database import Base
from services import clock
from services.schedule import (
    CustomSchedule,
    ScheduleConfig,
    ScheduleType,
    build_schedule,
    dump_custom_times,
    load_custom_times,
    time_labels,
)


class Medicine(Base):
    __tablename__ = "medicines"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    frequency = Column(Integer, nullable=False)
    schedule_type = Column(String(20), nullable=False, default=ScheduleType.preset.value)
    custom_times = Column(Text, nullable=True)
    preset_times = Column(String(60), nullable=True)
    created_at = Column(DateTime(timezone=True), default=clock.now, nullable=False)
    archived = Column(Boolean, default=False, nullable=False)
    archived_at = Column(DateTime(timezone=True), nullable=True)

    doses = relationship(
        "Dose",
        back_populates="medicine",
        cascade="all, delete-orphan",
        order_by="Dose.id",
    )

    @property
    def schedule(self) -> ScheduleConfig:
        return build_schedule(
            self.schedule_type,
            load_custom_times(self.custom_times),
            self.preset_times,
        )

    @schedule.setter
    def schedule(self, config: ScheduleConfig) -> None:
        self.schedule_type = config.type.value
        self.custom_times = dump_custom_times(config)
        self.preset_times = None if isinstance(config, CustomSchedule) else getattr(config, "selector", None)

    @property
    def custom_time_list(self) -> list[str] | None:
        if self.schedule_type != ScheduleType.custom.value:
            return None
        return load_custom_times(self.custom_times)

    def expected_labels(self) -> list[str]:
        return time_labels(self.schedule, self.frequency)
