import logging
from datetime import datetime
from sqlalchemy.orm import Session
from config import settings
from database import SessionLocal, engine, Base, is_memory_url
from models.students import ClassLevel
from models.fees import FeeStatus
from services.data_store import StudentStore, FeeStore

logger = logging.getLogger(__name__)

DEMO_STUDENTS = [
    {"roll_number": "PG-01", "name": "Ayesha Rahman", "class_name": ClassLevel.PLAY_GROUP, "phone_number": "01711000001"},
    {"roll_number": "NU-01", "name": "Rafi Ahmed", "class_name": ClassLevel.NURSERY, "phone_number": "01711000002"},
    {"roll_number": "C1-01", "name": "Nusrat Jahan", "class_name": ClassLevel.ONE, "phone_number": "01711000003"},
    {"roll_number": "C1-02", "name": "Tanvir Hasan", "class_name": ClassLevel.ONE, "phone_number": "01711000004"},
    {"roll_number": "C5-01", "name": "Sadia Islam", "class_name": ClassLevel.FIVE, "phone_number": "01711000005"},
    {"roll_number": "C10-01", "name": "Imran Chowdhury", "class_name": ClassLevel.TEN, "phone_number": "01711000006"},
]

MONTHLY_FEE = {
    ClassLevel.PLAY_GROUP: 800.0,
    ClassLevel.NURSERY: 800.0,
    ClassLevel.ONE: 1000.0,
    ClassLevel.FIVE: 1200.0,
    ClassLevel.TEN: 1500.0,
}


def seed_data(db: Session, today: datetime = None) -> int:
    """Insert demo students with fee records for this year so far. Skips a non-empty store."""
    if StudentStore.count(db) > 0:
        logger.info("Store already has students, skipping seed")
        return 0

    today = today or datetime.utcnow()
    for idx, data in enumerate(DEMO_STUDENTS):
        student = StudentStore.create(db, data)
        amount = MONTHLY_FEE[data["class_name"]]

        for month in range(1, today.month + 1):
            # Everyone is paid up except the latest month for every other student
            paid = month < today.month or idx % 2 == 0
            FeeStore.create(db, student.id, {
                "month": month,
                "year": today.year,
                "amount": amount,
                "status": FeeStatus.PAID if paid else FeeStatus.UNPAID,
                "payment_date": datetime(today.year, month, min(today.day, 5)) if paid else None,
            })

    logger.info("Seeded %s demo students", len(DEMO_STUDENTS))
    return len(DEMO_STUDENTS)


def main(database_url: str = settings.DATABASE_URL) -> int:
    """Seed the configured database from the command line."""
    if is_memory_url(database_url):
        logger.error("DATABASE_URL is in-memory, seeded data would vanish on exit. Point it at a file, e.g. sqlite:///./school.db")
        return 1

    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        seed_data(db)
    finally:
        db.close()
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    raise SystemExit(main())
