"""
Data access for students and fee records.

Everything goes through a SQLAlchemy session so the routers never build
queries themselves. The default engine is an in-memory SQLite database.
"""
import enum
import logging
from datetime import datetime
from typing import Dict, Any, Iterable, List, Optional

from sqlalchemy import func, or_, String
from sqlalchemy.orm import Session

from models.students import Student, ClassLevel
from models.fees import FeeRecord, FeeStatus

logger = logging.getLogger(__name__)

# Student list sort keys as they arrive from the API
SORT_FIELDS = ("name", "rollNumber", "className", "createdAt")


def _plain(data: Dict[str, Any]) -> Dict[str, Any]:
    """Enum members -> their stored string value."""
    return {k: (v.value if isinstance(v, enum.Enum) else v) for k, v in data.items()}


def _sort_column(sort_by: str):
    if sort_by == "name":
        return Student.name
    if sort_by == "rollNumber":
        return Student.roll_number
    if sort_by == "createdAt":
        return Student.created_at
    if sort_by == "className":
        return Student.class_name
    raise ValueError(f"Unsupported sort field: {sort_by}")


class StudentStore:

    @staticmethod
    def find_all(
        db: Session,
        search: Optional[str] = None,
        class_name: Optional[ClassLevel] = None,
        fee_status: Optional[str] = None,
        sort_by: Optional[str] = None,
        sort_order: str = "asc",
        page: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> List[Student]:
        """
        Filter and sort students.

        - search: case-insensitive substring of name OR roll number
        - class_name: exact class match
        - fee_status: PAID (has records, none unpaid), UNPAID (any unpaid record), ALL
        - sort_by / sort_order: one key, ties keep insertion order
        """
        query = db.query(Student)

        if search:
            term = search.lower()
            query = query.filter(
                or_(
                    func.lower(Student.name, type_=String).contains(term, autoescape=True),
                    func.lower(Student.roll_number, type_=String).contains(term, autoescape=True),
                )
            )

        if class_name:
            query = query.filter(Student.class_name == ClassLevel(class_name).value)

        if fee_status == FeeStatus.UNPAID.value:
            query = query.filter(Student.fee_records.any(FeeRecord.status == FeeStatus.UNPAID.value))
        elif fee_status == FeeStatus.PAID.value:
            query = query.filter(
                Student.fee_records.any(),
                ~Student.fee_records.any(FeeRecord.status == FeeStatus.UNPAID.value),
            )

        if sort_by:
            column = _sort_column(sort_by)
            query = query.order_by(column.desc() if sort_order == "desc" else column.asc(), Student.id.asc())
        else:
            query = query.order_by(Student.id.asc())

        if limit:
            if page:
                query = query.offset((page - 1) * limit)
            query = query.limit(limit)

        return query.all()

    @staticmethod
    def find_by_id(db: Session, student_id: int) -> Optional[Student]:
        return db.query(Student).filter(Student.id == student_id).first()

    @staticmethod
    def find_by_roll_number(db: Session, roll_number: str) -> Optional[Student]:
        return db.query(Student).filter(Student.roll_number == roll_number).first()

    @staticmethod
    def count(db: Session) -> int:
        return db.query(Student).count()

    @staticmethod
    def create(db: Session, data: Dict[str, Any]) -> Student:
        now = datetime.utcnow()
        student = Student(**_plain(data), created_at=now, updated_at=now)
        db.add(student)
        db.commit()
        db.refresh(student)
        logger.info("Student created: id=%s roll=%s", student.id, student.roll_number)
        return student

    @staticmethod
    def update(db: Session, student_id: int, data: Dict[str, Any]) -> Optional[Student]:
        student = StudentStore.find_by_id(db, student_id)
        if not student:
            return None

        for key, value in _plain(data).items():
            setattr(student, key, value)
        student.updated_at = datetime.utcnow()

        db.commit()
        db.refresh(student)
        return student

    @staticmethod
    def delete(db: Session, student_id: int) -> bool:
        """Delete a student together with all of their fee records."""
        student = StudentStore.find_by_id(db, student_id)
        if not student:
            return False

        db.delete(student)
        db.commit()
        logger.info("Student deleted: id=%s", student_id)
        return True


class FeeStore:

    @staticmethod
    def find_by_student_id(
        db: Session,
        student_id: int,
        year: Optional[int] = None,
        status: Optional[str] = None,
    ) -> List[FeeRecord]:
        """Fee history of one student, most recent period first."""
        query = db.query(FeeRecord).filter(FeeRecord.student_id == student_id)
        if year is not None:
            query = query.filter(FeeRecord.year == year)
        if status:
            query = query.filter(FeeRecord.status == status)
        return query.order_by(FeeRecord.year.desc(), FeeRecord.month.desc(), FeeRecord.id.desc()).all()

    @staticmethod
    def find_by_id(db: Session, fee_id: int) -> Optional[FeeRecord]:
        return db.query(FeeRecord).filter(FeeRecord.id == fee_id).first()

    @staticmethod
    def find_by_period(db: Session, student_id: int, month: int, year: int) -> Optional[FeeRecord]:
        return db.query(FeeRecord).filter(
            FeeRecord.student_id == student_id,
            FeeRecord.month == month,
            FeeRecord.year == year,
        ).first()

    @staticmethod
    def find_by_class_and_month(db: Session, class_name: ClassLevel, month: int, year: int) -> List[FeeRecord]:
        return (
            db.query(FeeRecord)
            .join(Student, FeeRecord.student_id == Student.id)
            .filter(
                Student.class_name == ClassLevel(class_name).value,
                FeeRecord.month == month,
                FeeRecord.year == year,
            )
            .order_by(FeeRecord.id.asc())
            .all()
        )

    @staticmethod
    def create(db: Session, student_id: int, data: Dict[str, Any]) -> FeeRecord:
        now = datetime.utcnow()
        record = FeeRecord(student_id=student_id, **_plain(data), created_at=now, updated_at=now)
        db.add(record)
        db.commit()
        db.refresh(record)
        logger.info(
            "Fee record created: id=%s student=%s period=%s/%s status=%s",
            record.id, student_id, record.month, record.year, record.status,
        )
        return record

    @staticmethod
    def update(db: Session, fee_id: int, data: Dict[str, Any]) -> Optional[FeeRecord]:
        record = FeeStore.find_by_id(db, fee_id)
        if not record:
            return None

        for key, value in _plain(data).items():
            setattr(record, key, value)
        record.updated_at = datetime.utcnow()

        db.commit()
        db.refresh(record)
        return record

    @staticmethod
    def delete(db: Session, fee_id: int) -> bool:
        record = FeeStore.find_by_id(db, fee_id)
        if not record:
            return False

        db.delete(record)
        db.commit()
        logger.info("Fee record deleted: id=%s", fee_id)
        return True

    @staticmethod
    def sum_paid_between(db: Session, start: datetime, end: datetime) -> float:
        """Total of PAID records with a payment date in [start, end)."""
        total = db.query(func.sum(FeeRecord.amount)).filter(
            FeeRecord.status == FeeStatus.PAID.value,
            FeeRecord.payment_date >= start,
            FeeRecord.payment_date < end,
        ).scalar()
        return float(total or 0.0)

    @staticmethod
    def sum_by_statuses(db: Session, statuses: Iterable[str]) -> float:
        total = db.query(func.sum(FeeRecord.amount)).filter(
            FeeRecord.status.in_(list(statuses))
        ).scalar()
        return float(total or 0.0)
