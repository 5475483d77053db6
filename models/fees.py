import enum
from datetime import datetime
from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from database import Base

class FeeStatus(str, enum.Enum):
    PAID = "PAID"
    UNPAID = "UNPAID"

class FeeRecord(Base):
    __tablename__ = "fee_records"

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("students.id"), index=True, nullable=False)

    # Billing period. One record per (student, month, year) is checked by the
    # API before insert, there is no table constraint for it.
    month = Column(Integer, nullable=False)
    year = Column(Integer, nullable=False)

    amount = Column(Float, nullable=False, default=0.0)
    status = Column(String(10), nullable=False, default=FeeStatus.UNPAID.value)
    payment_date = Column(DateTime, nullable=True)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    student = relationship("Student", back_populates="fee_records")

    def __repr__(self):
        return f"<FeeRecord {self.student_id} {self.month}/{self.year} {self.status}>"
