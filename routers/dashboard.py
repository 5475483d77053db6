import logging
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from database import get_db
from services.reports import dashboard_stats

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/dashboard", tags=["Dashboard"])


@router.get("/stats")
def get_dashboard_stats(db: Session = Depends(get_db)):
    """Headline numbers for the home page. Never fails, zeros on error."""
    try:
        return dashboard_stats(db)
    except Exception:
        logger.exception("Error fetching dashboard stats")
        return {"totalStudents": 0, "currentMonthPayments": 0, "pendingPayments": 0}
