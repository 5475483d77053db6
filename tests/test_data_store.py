from datetime import datetime

from models.students import Student, ClassLevel
from models.fees import FeeRecord, FeeStatus
from services.data_store import StudentStore, FeeStore


def add_student(db, roll, name, class_name=ClassLevel.ONE):
    return StudentStore.create(db, {
        "roll_number": roll,
        "name": name,
        "class_name": class_name,
        "phone_number": "0123456789",
    })


def test_create_stores_enum_values(db_session):
    student = add_student(db_session, "R1", "Amy", ClassLevel.PLAY_GROUP)
    assert student.class_name == "Play Group"
    assert student.created_at == student.updated_at


def test_update_returns_none_for_missing(db_session):
    assert StudentStore.update(db_session, 123, {"name": "x"}) is None
    assert FeeStore.update(db_session, 123, {"amount": 1}) is None


def test_update_bumps_updated_at(db_session):
    student = add_student(db_session, "R1", "Amy")
    before = student.updated_at
    updated = StudentStore.update(db_session, student.id, {"name": "Amelia"})
    assert updated.name == "Amelia"
    assert updated.updated_at >= before
    assert updated.created_at == student.created_at


def test_delete_removes_fee_records(db_session):
    student = add_student(db_session, "R1", "Amy")
    FeeStore.create(db_session, student.id, {"month": 1, "year": 2024, "amount": 10, "status": FeeStatus.PAID})
    FeeStore.create(db_session, student.id, {"month": 2, "year": 2024, "amount": 10})

    assert StudentStore.delete(db_session, student.id) is True
    assert db_session.query(FeeRecord).count() == 0
    assert StudentStore.delete(db_session, student.id) is False


def test_store_does_not_enforce_period_uniqueness(db_session):
    # Uniqueness of (student, month, year) is an API rule only
    student = add_student(db_session, "R1", "Amy")
    FeeStore.create(db_session, student.id, {"month": 1, "year": 2024, "amount": 10})
    FeeStore.create(db_session, student.id, {"month": 1, "year": 2024, "amount": 20})
    assert len(FeeStore.find_by_student_id(db_session, student.id)) == 2


def test_find_by_class_and_month(db_session):
    one = add_student(db_session, "R1", "Amy", ClassLevel.ONE)
    two = add_student(db_session, "R2", "Ben", ClassLevel.TWO)
    FeeStore.create(db_session, one.id, {"month": 5, "year": 2024, "amount": 10})
    FeeStore.create(db_session, one.id, {"month": 6, "year": 2024, "amount": 10})
    FeeStore.create(db_session, two.id, {"month": 5, "year": 2024, "amount": 10})

    records = FeeStore.find_by_class_and_month(db_session, ClassLevel.ONE, 5, 2024)
    assert [(r.student_id, r.month) for r in records] == [(one.id, 5)]


def test_sum_helpers(db_session):
    student = add_student(db_session, "R1", "Amy")
    FeeStore.create(db_session, student.id, {
        "month": 5, "year": 2024, "amount": 100, "status": FeeStatus.PAID,
        "payment_date": datetime(2024, 5, 31, 23, 59),
    })
    FeeStore.create(db_session, student.id, {
        "month": 6, "year": 2024, "amount": 40, "status": FeeStatus.PAID,
        "payment_date": datetime(2024, 6, 1),
    })
    FeeStore.create(db_session, student.id, {"month": 7, "year": 2024, "amount": 25})

    assert FeeStore.sum_paid_between(db_session, datetime(2024, 5, 1), datetime(2024, 6, 1)) == 100
    assert FeeStore.sum_by_statuses(db_session, ["UNPAID"]) == 25
    assert FeeStore.sum_by_statuses(db_session, ["PENDING", "OVERDUE"]) == 0


def test_sort_by_created_at_ties_keep_insertion_order(db_session):
    for roll, name in [("R1", "C"), ("R2", "A"), ("R3", "B")]:
        add_student(db_session, roll, name)
    db_session.query(Student).update({"created_at": datetime(2024, 1, 1)})
    db_session.commit()

    asc = StudentStore.find_all(db_session, sort_by="createdAt")
    desc = StudentStore.find_all(db_session, sort_by="createdAt", sort_order="desc")
    assert [s.name for s in asc] == ["C", "A", "B"]
    assert [s.name for s in desc] == ["C", "A", "B"]


def test_search_lowercases_unicode_in_sqlite(db_session):
    add_student(db_session, "R1", "ÖZGÜR Çelik")
    add_student(db_session, "R2", "Ozgur Celik")

    found = StudentStore.find_all(db_session, search="özgür")
    assert [s.name for s in found] == ["ÖZGÜR Çelik"]
