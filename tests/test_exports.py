import csv
import io
from datetime import datetime


def parse(res):
    return list(csv.reader(io.StringIO(res.text)))


def test_export_students_basic(client, make_student):
    make_student(rollNumber="R1", name="Ayesha", className="Play Group", phoneNumber="01711000001")
    make_student(rollNumber="R2", name='Rafi "RJ" Ahmed', className="Ten", phoneNumber="01711000002")

    res = client.get("/api/export/students")
    assert res.status_code == 200
    assert res.headers["content-type"].startswith("text/csv")
    today = datetime.utcnow().date().isoformat()
    assert res.headers["content-disposition"] == f'attachment; filename="students-{today}.csv"'

    rows = parse(res)
    assert rows[0] == ["Roll Number", "Name", "Class", "Phone Number", "Created Date"]
    assert rows[1][:4] == ["R1", "Ayesha", "Play Group", "01711000001"]
    assert rows[2][1] == 'Rafi "RJ" Ahmed'
    assert rows[1][4] == datetime.utcnow().date().isoformat()

    # every field is quoted, embedded quotes doubled
    lines = res.text.splitlines()
    assert lines[0].startswith('"Roll Number","Name"')
    assert '"Rafi ""RJ"" Ahmed"' in lines[2]


def test_export_students_with_fees(client, make_student, make_fee):
    student = make_student(className="One")
    make_fee(student["id"], month=1, amount=1000, status="PAID")
    make_fee(student["id"], month=2, amount=1000.5, status="UNPAID")

    rows = parse(client.get("/api/export/students", params={"includeFees": "true"}))
    assert rows[0][-6:] == [
        "Total Fee Records", "Paid Records", "Unpaid Records",
        "Total Amount", "Paid Amount", "Pending Amount",
    ]
    assert rows[1][-6:] == ["2", "1", "1", "2000.50", "1000.00", "1000.50"]


def test_export_students_class_filter_and_filename(client, make_student):
    make_student(className="Play Group", name="Small")
    make_student(className="Six", name="Mid")

    res = client.get("/api/export/students", params={"className": "Play Group"})
    rows = parse(res)
    assert [r[1] for r in rows[1:]] == ["Small"]
    assert 'filename="students-Play-Group-' in res.headers["content-disposition"]


def test_export_students_no_data(client):
    res = client.get("/api/export/students")
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "NO_DATA"


def test_export_students_invalid_class(client):
    res = client.get("/api/export/students", params={"className": "Eleven"})
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "INVALID_CLASS"


def test_export_class_whole_history(client, make_student, make_fee):
    with_fees = make_student(className="Three", rollNumber="T1")
    without_fees = make_student(className="Three", rollNumber="T2")
    make_fee(with_fees["id"], month=1, amount=600, status="PAID", paymentDate="2024-01-03T09:00:00")
    make_fee(with_fees["id"], month=2, amount=600)

    res = client.get("/api/export/class/Three")
    assert res.status_code == 200
    rows = parse(res)
    assert rows[0] == ["Roll Number", "Name", "Phone Number", "Fee Status", "Amount", "Payment Date", "Created Date"]
    body = [r[:6] for r in rows[1:]]
    assert body == [
        ["T1", with_fees["name"], with_fees["phoneNumber"], "UNPAID", "600.00", "N/A"],
        ["T1", with_fees["name"], with_fees["phoneNumber"], "PAID", "600.00", "2024-01-03"],
        ["T2", without_fees["name"], without_fees["phoneNumber"], "NO RECORDS", "0.00", "N/A"],
    ]
    today = datetime.utcnow().date().isoformat()
    assert res.headers["content-disposition"] == f'attachment; filename="class-Three-{today}.csv"'


def test_export_class_for_period(client, make_student, make_fee):
    paid = make_student(className="Play Group", rollNumber="P1")
    make_student(className="Play Group", rollNumber="P2")
    make_fee(paid["id"], month=3, year=2024, amount=800, status="PAID", paymentDate="2024-03-02T00:00:00")

    res = client.get("/api/export/class/Play%20Group", params={"month": 3, "year": 2024})
    rows = parse(res)
    assert [r[3:6] for r in rows[1:]] == [["PAID", "800.00", "2024-03-02"], ["NO RECORD", "0.00", "N/A"]]
    assert '-2024-03-' in res.headers["content-disposition"]
    assert 'filename="class-Play-Group-2024-03-' in res.headers["content-disposition"]


def test_export_class_errors(client):
    assert client.get("/api/export/class/Eleven").json()["error"]["code"] == "INVALID_CLASS"
    res = client.get("/api/export/class/Four")
    assert res.status_code == 404
    assert res.json()["error"]["message"] == "No students found in this class"


def test_csv_has_no_trailing_newline(client, make_student):
    make_student(rollNumber="R1")
    make_student(rollNumber="R2")

    res = client.get("/api/export/students")
    assert res.text.endswith('"')
    assert len(res.text.split("\n")) == 3


def test_export_filename_uses_utc_date(monkeypatch):
    from services import exports

    class FrozenDateTime(datetime):
        @classmethod
        def utcnow(cls):
            return datetime(2024, 6, 30, 23, 30)

    monkeypatch.setattr(exports, "datetime", FrozenDateTime)
    assert exports.students_filename() == "students-2024-06-30.csv"
    assert exports.class_filename("Play Group", 3, 2024) == "class-Play-Group-2024-03-2024-06-30.csv"
