"""
Aggregations over fee records: dashboard numbers, class reports and
per-class / per-month summaries.
"""
import logging
from datetime import datetime
from typing import Optional, List, Dict, Any

from sqlalchemy.orm import Session

from config import settings
from models.students import ClassLevel, CLASS_ORDER
from models.fees import FeeStatus
from schemas.common import dump
from schemas.students import StudentOut
from schemas.fees import FeeRecordOut
from services.data_store import StudentStore, FeeStore

logger = logging.getLogger(__name__)

PAID = FeeStatus.PAID.value
UNPAID = FeeStatus.UNPAID.value


def month_bounds(now: datetime):
    """First instant of the month of `now` and of the following month."""
    first_day = datetime(now.year, now.month, 1)
    if now.month == 12:
        next_month = datetime(now.year + 1, 1, 1)
    else:
        next_month = datetime(now.year, now.month + 1, 1)
    return first_day, next_month


def dashboard_stats(db: Session, now: Optional[datetime] = None) -> Dict[str, Any]:
    now = now or datetime.utcnow()
    first_day, next_month = month_bounds(now)

    return {
        "totalStudents": StudentStore.count(db),
        "currentMonthPayments": FeeStore.sum_paid_between(db, first_day, next_month),
        "pendingPayments": FeeStore.sum_by_statuses(db, settings.PENDING_FEE_STATUSES),
    }


def _generated_at() -> str:
    return datetime.utcnow().isoformat() + "Z"


def class_report(db: Session, class_name: ClassLevel, month: Optional[int] = None, year: Optional[int] = None) -> Dict[str, Any]:
    """
    Paid/unpaid counts and collected/pending totals for one class.

    With both month and year the report covers that single period and each
    entry carries the student's record for it (or None). Otherwise every
    record of every student is counted and a student is "paid" as soon as
    one of their records is PAID.
    """
    has_period = bool(month and year)
    period = {"month": month, "year": year} if has_period else None
    students = StudentStore.find_all(db, class_name=class_name)

    if not students:
        return {
            "className": class_name.value,
            "totalStudents": 0,
            "paidStudents": 0,
            "unpaidStudents": 0,
            "students": [],
            "summary": {"totalAmount": 0.0, "collectedAmount": 0.0, "pendingAmount": 0.0},
            "generatedAt": _generated_at(),
            "period": period,
        }

    entries: List[Dict[str, Any]] = []
    paid_students = 0
    total_amount = 0.0
    collected_amount = 0.0

    for student in students:
        if has_period:
            record = FeeStore.find_by_period(db, student.id, month, year)
            if record:
                total_amount += record.amount
                if record.status == PAID:
                    paid_students += 1
                    collected_amount += record.amount
            entries.append({
                "student": dump(StudentOut, student),
                "feeRecord": dump(FeeRecordOut, record) if record else None,
            })
        else:
            records = FeeStore.find_by_student_id(db, student.id)
            if any(r.status == PAID for r in records):
                paid_students += 1
            for r in records:
                total_amount += r.amount
                if r.status == PAID:
                    collected_amount += r.amount
            entries.append({
                "student": dump(StudentOut, student),
                "feeRecords": [dump(FeeRecordOut, r) for r in records],
            })

    return {
        "className": class_name.value,
        "totalStudents": len(students),
        "paidStudents": paid_students,
        "unpaidStudents": len(students) - paid_students,
        "students": entries,
        "summary": {
            "totalAmount": total_amount,
            "collectedAmount": collected_amount,
            "pendingAmount": total_amount - collected_amount,
        },
        "generatedAt": _generated_at(),
        "period": period,
    }


def class_summaries(db: Session) -> Dict[str, Any]:
    """One ClassSummary per class that has students, in class order, plus overall totals."""
    summaries = []
    for level in CLASS_ORDER:
        students = StudentStore.find_all(db, class_name=level)
        if not students:
            continue

        paid_students = 0
        total_amount = 0.0
        collected_amount = 0.0
        for student in students:
            records = FeeStore.find_by_student_id(db, student.id)
            if any(r.status == PAID for r in records):
                paid_students += 1
            total_amount += sum(r.amount for r in records)
            collected_amount += sum(r.amount for r in records if r.status == PAID)

        summaries.append({
            "className": level.value,
            "totalStudents": len(students),
            "paidStudents": paid_students,
            "unpaidStudents": len(students) - paid_students,
            "totalAmount": total_amount,
            "collectedAmount": collected_amount,
        })

    total_students = sum(c["totalStudents"] for c in summaries)
    total_paid = sum(c["paidStudents"] for c in summaries)
    total_amount = sum(c["totalAmount"] for c in summaries)
    total_collected = sum(c["collectedAmount"] for c in summaries)

    return {
        "classes": summaries,
        "overall": {
            "totalStudents": total_students,
            "totalPaid": total_paid,
            "totalUnpaid": total_students - total_paid,
            "totalAmount": total_amount,
            "totalCollected": total_collected,
            "totalPending": total_amount - total_collected,
            "collectionRate": (total_paid / total_students * 100) if total_students > 0 else 0.0,
        },
    }


def monthly_report(db: Session, month: int, year: int) -> Dict[str, Any]:
    """Fee collection for a single month, broken down by class."""
    rows = []
    for level in CLASS_ORDER:
        total_students = len(StudentStore.find_all(db, class_name=level))
        if total_students == 0:
            continue

        records = FeeStore.find_by_class_and_month(db, level, month, year)
        paid = [r for r in records if r.status == PAID]
        rows.append({
            "className": level.value,
            "totalStudents": total_students,
            "feeRecords": len(records),
            "paidStudents": len(paid),
            "unpaidStudents": total_students - len(paid),
            "totalAmount": sum(r.amount for r in records),
            "collectedAmount": sum(r.amount for r in paid),
            "pendingAmount": sum(r.amount for r in records if r.status == UNPAID),
        })

    return {
        "period": {"month": month, "year": year},
        "classes": rows,
        "totals": {
            "totalStudents": sum(r["totalStudents"] for r in rows),
            "paidStudents": sum(r["paidStudents"] for r in rows),
            "collectedAmount": sum(r["collectedAmount"] for r in rows),
            "pendingAmount": sum(r["pendingAmount"] for r in rows),
        },
        "generatedAt": _generated_at(),
    }
