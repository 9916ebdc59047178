from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from database import Base
from services import clock


class Dose(Base):
    __tablename__ = "doses"
    __table_args__ = (
        UniqueConstraint("medicine_id", "date", "time_label", name="uq_dose_medicine_date_label"),
    )

    id = Column(Integer, primary_key=True, index=True)
    medicine_id = Column(Integer, ForeignKey("medicines.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(String(10), nullable=False, index=True)
    time_label = Column(String(20), nullable=False)
    taken = Column(Boolean, default=False, nullable=False)
    taken_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=clock.now)

    medicine = relationship("Medicine", back_populates="doses")
