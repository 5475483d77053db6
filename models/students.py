import enum
from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship
from database import Base

class ClassLevel(str, enum.Enum):
    PLAY_GROUP = "Play Group"
    NURSERY = "Nursery"
    PREP = "Prep"
    ONE = "One"
    TWO = "Two"
    THREE = "Three"
    FOUR = "Four"
    FIVE = "Five"
    SIX = "Six"
    SEVEN = "Seven"
    EIGHT = "Eight"
    NINE = "Nine"
    TEN = "Ten"

# Display / report order, youngest class first
CLASS_ORDER = list(ClassLevel)

class Student(Base):
    __tablename__ = "students"

    id = Column(Integer, primary_key=True, index=True)
    roll_number = Column(String(20), unique=True, index=True, nullable=False)
    name = Column(String(100), nullable=False)
    class_name = Column(String(20), index=True, nullable=False)
    phone_number = Column(String(15), nullable=False)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    # --- RELATIONSHIPS ---
    fee_records = relationship("FeeRecord", back_populates="student", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Student {self.roll_number} - {self.name}>"
