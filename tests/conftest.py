import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from database import Base, build_engine, get_db
from main import app


@pytest.fixture()
def db_session():
    # Fresh in-memory database for every test
    engine = build_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()
        engine.dispose()


@pytest.fixture()
def client(db_session):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def make_student(client):
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        payload = {
            "rollNumber": f"R-{counter['n']:03d}",
            "name": f"Student {counter['n']}",
            "className": "One",
            "phoneNumber": "0123456789",
        }
        payload.update(overrides)
        res = client.post("/api/students", json=payload)
        assert res.status_code == 201, res.text
        return res.json()["data"]

    return _make


@pytest.fixture()
def make_fee(client):
    def _make(student_id, month, year=2024, amount=1000, status="UNPAID", paymentDate=None):
        payload = {"month": month, "year": year, "amount": amount, "status": status}
        if paymentDate is not None:
            payload["paymentDate"] = paymentDate
        res = client.post(f"/api/students/{student_id}/fees", json=payload)
        assert res.status_code == 201, res.text
        return res.json()["data"]

    return _make
