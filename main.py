import os
import logging
from datetime import date
from fastapi import FastAPI, Request, Depends
from fastapi.exceptions import RequestValidationError
from fastapi.templating import Jinja2Templates
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from sqlalchemy.orm import Session

from config import settings
from database import engine, Base, SessionLocal, get_db
from errors import APIError, error_body

# --- IMPORT ROUTERS (APIs) ---
from routers import students, fees, dashboard, reports, exports

# --- IMPORT MODELS ---
from models.students import CLASS_ORDER
from models.fees import FeeStatus
from routers.common import resolve_class_level
from services import reports as report_service
from services.data_store import StudentStore, FeeStore

BASE_DIR = os.path.dirname(os.path.abspath(__file__))

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

# --- CREATE DATABASE TABLES ---
Base.metadata.create_all(bind=engine)


def seed_demo_data():
    from seed import seed_data
    db = SessionLocal()
    try:
        seed_data(db)
    finally:
        db.close()


if settings.SEED_DEMO_DATA:
    seed_demo_data()

app = FastAPI(title=settings.APP_NAME)

# ==========================================
# CORS MIDDLEWARE
# ==========================================
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ==========================================
# ERROR ENVELOPE
# ==========================================
STATUS_CODES = {400: "BAD_REQUEST", 404: "NOT_FOUND", 405: "METHOD_NOT_ALLOWED"}


@app.exception_handler(APIError)
async def api_error_handler(request: Request, exc: APIError):
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.code, exc.message, exc.details))


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    details = []
    for err in exc.errors():
        loc = [str(part) for part in err["loc"]]
        details.append({"field": ".".join(loc[1:]) or loc[0], "message": err["msg"]})
    return JSONResponse(status_code=400, content=error_body("VALIDATION_ERROR", "Invalid request data", details))


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    code = STATUS_CODES.get(exc.status_code, "HTTP_ERROR")
    return JSONResponse(status_code=exc.status_code, content=error_body(code, str(exc.detail)))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content=error_body("INTERNAL_ERROR", "Internal server error"))

# --- STATIC FILES & TEMPLATES ---
app.mount("/static", StaticFiles(directory=os.path.join(BASE_DIR, "static")), name="static")
templates = Jinja2Templates(directory=os.path.join(BASE_DIR, "templates"))

# --- REGISTER ROUTERS ---
app.include_router(students.router)
app.include_router(fees.router)
app.include_router(dashboard.router)
app.include_router(reports.router)
app.include_router(exports.router)


@app.get("/health")
def health_check():
    return {"status": "ok", "service": settings.APP_NAME}

# ===========================
#   WEB PAGES (Admin Panel)
# ===========================

MONTH_NAMES = ["January", "February", "March", "April", "May", "June", "July",
               "August", "September", "October", "November", "December"]


@app.get("/", response_class=HTMLResponse)
def dashboard_page(request: Request, db: Session = Depends(get_db)):
    recent_students = StudentStore.find_all(db, sort_by="createdAt", sort_order="desc", limit=5)
    return templates.TemplateResponse(request, "dashboard.html", {
        "stats": report_service.dashboard_stats(db),
        "summaries": report_service.class_summaries(db),
        "recent_students": recent_students,
    })


@app.get("/students", response_class=HTMLResponse)
def student_list_page(request: Request, search: str = "", className: str = "", db: Session = Depends(get_db)):
    level = resolve_class_level(className) if className else None
    return templates.TemplateResponse(request, "students.html", {
        "students": StudentStore.find_all(db, search=search or None, class_name=level, sort_by="rollNumber"),
        "class_levels": CLASS_ORDER,
        "search": search,
        "selected_class": className,
    })


@app.get("/students/{student_id}", response_class=HTMLResponse)
def student_detail_page(request: Request, student_id: int, year: int = 0, db: Session = Depends(get_db)):
    student = StudentStore.find_by_id(db, student_id)
    if not student:
        raise APIError(404, "NOT_FOUND", "Student not found")

    year = year or date.today().year
    records = {r.month: r for r in FeeStore.find_by_student_id(db, student_id, year=year)}
    return templates.TemplateResponse(request, "student_detail.html", {
        "student": student,
        "year": year,
        "months": list(enumerate(MONTH_NAMES, start=1)),
        "records": records,
        "paid_total": sum(r.amount for r in records.values() if r.status == FeeStatus.PAID.value),
        "class_levels": CLASS_ORDER,
    })


@app.get("/classes", response_class=HTMLResponse)
def class_overview_page(request: Request, db: Session = Depends(get_db)):
    return templates.TemplateResponse(request, "classes.html", {
        "summaries": report_service.class_summaries(db),
    })


@app.get("/classes/{class_name}", response_class=HTMLResponse)
def class_detail_page(request: Request, class_name: str, month: int = 0, year: int = 0, db: Session = Depends(get_db)):
    level = resolve_class_level(class_name)
    month = month if 1 <= month <= 12 else None
    year = year or None
    return templates.TemplateResponse(request, "class_detail.html", {
        "report": report_service.class_report(db, level, month=month, year=year),
        "month_names": MONTH_NAMES,
    })


@app.get("/reports", response_class=HTMLResponse)
def reports_page(request: Request, month: int = 0, year: int = 0, db: Session = Depends(get_db)):
    today = date.today()
    month = month if 1 <= month <= 12 else today.month
    year = year or today.year
    return templates.TemplateResponse(request, "reports.html", {
        "class_levels": CLASS_ORDER,
        "month": month,
        "year": year,
        "month_names": MONTH_NAMES,
        "years": [today.year - 2 + i for i in range(5)],
        "monthly": report_service.monthly_report(db, month, year),
    })
