import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session

from config import settings
from database import get_db
from errors import APIError
from routers.common import resolve_class_level
from services import exports
from services.data_store import StudentStore

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/export", tags=["Export"])


def csv_response(content: str, filename: str) -> Response:
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/students")
def export_students(
    class_name: Optional[str] = Query(None, alias="className"),
    include_fees: bool = Query(False, alias="includeFees"),
    db: Session = Depends(get_db),
):
    level = resolve_class_level(class_name) if class_name else None
    students = StudentStore.find_all(db, class_name=level)
    if not students:
        raise APIError(404, "NO_DATA", "No students found to export")

    content = exports.students_csv(db, students, include_fees=include_fees)
    filename = exports.students_filename(level)
    logger.info("Exported %s students to %s", len(students), filename)
    return csv_response(content, filename)


@router.get("/class/{class_name}")
def export_class(
    class_name: str,
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None, ge=settings.MIN_FEE_YEAR, le=settings.MAX_FEE_YEAR),
    db: Session = Depends(get_db),
):
    level = resolve_class_level(class_name)
    students = StudentStore.find_all(db, class_name=level)
    if not students:
        raise APIError(404, "NO_DATA", "No students found in this class")

    content = exports.class_csv(db, students, month=month, year=year)
    filename = exports.class_filename(level, month, year)
    logger.info("Exported class %s to %s", level.value, filename)
    return csv_response(content, filename)
