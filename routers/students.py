from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database import get_db
from errors import APIError, NotFoundError
from models.fees import FeeStatus
from schemas.common import dump, success
from schemas.students import StudentCreate, StudentUpdate, StudentOut, StudentQuery
from schemas.fees import FeeRecordCreate, FeeRecordOut
from services.data_store import StudentStore, FeeStore

router = APIRouter(prefix="/api/students", tags=["Students"])

# ===============================
#   1. STUDENT CRUD
# ===============================

@router.get("")
def list_students(query: StudentQuery = Depends(), db: Session = Depends(get_db)):
    students = StudentStore.find_all(db, **query.as_filters())
    return success([dump(StudentOut, s) for s in students])


@router.post("", status_code=201)
def create_student(payload: StudentCreate, db: Session = Depends(get_db)):
    if StudentStore.find_by_roll_number(db, payload.roll_number):
        raise APIError(400, "DUPLICATE_ROLL_NUMBER", "A student with this roll number already exists")

    student = StudentStore.create(db, payload.model_dump())
    return success(dump(StudentOut, student))


@router.get("/{student_id}")
def get_student(student_id: int, db: Session = Depends(get_db)):
    student = StudentStore.find_by_id(db, student_id)
    if not student:
        raise NotFoundError("Student not found")
    return success(dump(StudentOut, student))


@router.put("/{student_id}")
def update_student(student_id: int, payload: StudentUpdate, db: Session = Depends(get_db)):
    if not StudentStore.find_by_id(db, student_id):
        raise NotFoundError("Student not found")

    data = payload.model_dump(exclude_unset=True, exclude_none=True)

    if "roll_number" in data:
        existing = StudentStore.find_by_roll_number(db, data["roll_number"])
        if existing and existing.id != student_id:
            raise APIError(400, "DUPLICATE_ROLL_NUMBER", "A student with this roll number already exists")

    student = StudentStore.update(db, student_id, data)
    return success(dump(StudentOut, student))


@router.delete("/{student_id}")
def delete_student(student_id: int, db: Session = Depends(get_db)):
    if not StudentStore.delete(db, student_id):
        raise NotFoundError("Student not found")
    return success({"message": "Student deleted successfully"})

# ===============================
#   2. FEE HISTORY / PAYMENTS
# ===============================

@router.get("/{student_id}/fees")
def get_student_fees(
    student_id: int,
    year: Optional[int] = None,
    status: Optional[FeeStatus] = None,
    db: Session = Depends(get_db),
):
    if not StudentStore.find_by_id(db, student_id):
        raise NotFoundError("Student not found")

    records = FeeStore.find_by_student_id(db, student_id, year=year, status=status.value if status else None)
    return success([dump(FeeRecordOut, r) for r in records])


@router.post("/{student_id}/fees", status_code=201)
def create_student_fee(student_id: int, payload: FeeRecordCreate, db: Session = Depends(get_db)):
    if not StudentStore.find_by_id(db, student_id):
        raise NotFoundError("Student not found")

    if FeeStore.find_by_period(db, student_id, payload.month, payload.year):
        raise APIError(400, "DUPLICATE_RECORD", "Fee record already exists for this month and year")

    record = FeeStore.create(db, student_id, payload.model_dump())
    return success(dump(FeeRecordOut, record))
