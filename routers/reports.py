from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from config import settings
from database import get_db
from routers.common import resolve_class_level
from schemas.common import success
from services import reports

router = APIRouter(prefix="/api/reports", tags=["Reports"])


@router.get("/class/{class_name}")
def get_class_report(
    class_name: str,
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None, ge=settings.MIN_FEE_YEAR, le=settings.MAX_FEE_YEAR),
    db: Session = Depends(get_db),
):
    level = resolve_class_level(class_name)
    return success(reports.class_report(db, level, month=month, year=year))


@router.get("/classes")
def get_class_summaries(db: Session = Depends(get_db)):
    return success(reports.class_summaries(db))


@router.get("/monthly")
def get_monthly_report(
    month: int = Query(..., ge=1, le=12),
    year: int = Query(..., ge=settings.MIN_FEE_YEAR, le=settings.MAX_FEE_YEAR),
    db: Session = Depends(get_db),
):
    return success(reports.monthly_report(db, month, year))
