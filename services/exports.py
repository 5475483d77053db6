import csv
import io
from datetime import date, datetime
from typing import Iterable, List, Optional, Sequence

from sqlalchemy.orm import Session

from models.students import Student, ClassLevel
from models.fees import FeeStatus
from services.data_store import FeeStore

STUDENT_HEADERS = ["Roll Number", "Name", "Class", "Phone Number", "Created Date"]
STUDENT_FEE_HEADERS = [
    "Total Fee Records",
    "Paid Records",
    "Unpaid Records",
    "Total Amount",
    "Paid Amount",
    "Pending Amount",
]
CLASS_HEADERS = [
    "Roll Number",
    "Name",
    "Phone Number",
    "Fee Status",
    "Amount",
    "Payment Date",
    "Created Date",
]


def fmt_amount(value: float) -> str:
    return f"{value:.2f}"


def fmt_date(value: Optional[datetime]) -> str:
    return value.strftime("%Y-%m-%d") if value else "N/A"


def to_csv(headers: Sequence[str], rows: Iterable[Sequence]) -> str:
    """Every field quoted, rows joined by newlines with no trailing newline."""
    output = io.StringIO()
    writer = csv.writer(output, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(headers)
    writer.writerows(rows)
    return output.getvalue().rstrip("\n")


def _slug(class_name: ClassLevel) -> str:
    return ClassLevel(class_name).value.replace(" ", "-")


def students_filename(class_name: Optional[ClassLevel] = None, today: Optional[date] = None) -> str:
    today = today or datetime.utcnow().date()
    class_filter = f"-{_slug(class_name)}" if class_name else ""
    return f"students{class_filter}-{today.isoformat()}.csv"


def class_filename(class_name: ClassLevel, month: Optional[int] = None, year: Optional[int] = None,
                   today: Optional[date] = None) -> str:
    today = today or datetime.utcnow().date()
    period = f"-{year}-{month:02d}" if month and year else ""
    return f"class-{_slug(class_name)}{period}-{today.isoformat()}.csv"


def students_csv(db: Session, students: List[Student], include_fees: bool = False) -> str:
    headers = list(STUDENT_HEADERS)
    if include_fees:
        headers += STUDENT_FEE_HEADERS

    rows = []
    for student in students:
        row = [
            student.roll_number,
            student.name,
            student.class_name,
            student.phone_number,
            fmt_date(student.created_at),
        ]
        if include_fees:
            records = FeeStore.find_by_student_id(db, student.id)
            paid = [r for r in records if r.status == FeeStatus.PAID.value]
            total_amount = sum(r.amount for r in records)
            paid_amount = sum(r.amount for r in paid)
            row += [
                str(len(records)),
                str(len(paid)),
                str(len(records) - len(paid)),
                fmt_amount(total_amount),
                fmt_amount(paid_amount),
                fmt_amount(total_amount - paid_amount),
            ]
        rows.append(row)

    return to_csv(headers, rows)


def class_csv(db: Session, students: List[Student], month: Optional[int] = None, year: Optional[int] = None) -> str:
    """
    With a period: one row per student for that month (NO RECORD if missing).
    Without: one row per fee record, students without any get a NO RECORDS row.
    """
    rows = []
    for student in students:
        base = [student.roll_number, student.name, student.phone_number]
        created = fmt_date(student.created_at)

        if month and year:
            record = FeeStore.find_by_period(db, student.id, month, year)
            rows.append(base + [
                record.status if record else "NO RECORD",
                fmt_amount(record.amount) if record else "0.00",
                fmt_date(record.payment_date) if record else "N/A",
                created,
            ])
            continue

        records = FeeStore.find_by_student_id(db, student.id)
        if not records:
            rows.append(base + ["NO RECORDS", "0.00", "N/A", created])
        for record in records:
            rows.append(base + [
                record.status,
                fmt_amount(record.amount),
                fmt_date(record.payment_date),
                created,
            ])

    return to_csv(CLASS_HEADERS, rows)
