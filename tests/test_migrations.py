from datetime import datetime

from models.attendance import AttendanceSnapshot
from utils.migrations import migrate_legacy_snapshots, migrate_legacy_students
from utils.reporting import find_student_history


def test_migrate_legacy_students(db):
    db.firstyearstudents.insert_many([
        {"sNo": 2, "rollNumber": "F2", "registerNo": "G2", "studentName": "Ben"},
        {"sNo": 1, "rollNumber": "F1", "registerNo": "G1", "studentName": "Asha"},
    ])
    db.secondyearstudents.insert_one({"sNo": 1, "rollNo": "S1", "name": "Chitra", "regNo": "G3"})

    migrated = migrate_legacy_students(db)

    assert migrated == {"first-year": 2, "second-year": 1}
    first = list(db.students.find({"year": "first-year", "section": "E"}).sort("s_no", 1))
    assert [s["name"] for s in first] == ["Asha", "Ben"]
    assert first[0]["roll_no"] == "F1"
    assert first[0]["reg_no"] == "G1"
    assert db.sections.count_documents({"year": "second-year", "name": "C"}) == 1

    # second run finds everything already in place
    assert migrate_legacy_students(db) == {}
    assert db.students.count_documents({}) == 3


def test_migrate_legacy_snapshots(db):
    db.attendancecounts.insert_one({
        "date": datetime(2025, 3, 4, 9, 30),
        "presentCount": 1,
        "absentCount": 1,
        "leaveCount": 0,
        "odCount": 0,
        "lateCount": 0,
        "totalStudents": 2,
        "studentRecords": [
            {"studentId": "1", "rollNo": "R1", "name": "Asha", "status": "Present"},
            {"studentId": "2", "rollNo": "R2", "name": "Ben", "status": "Absent"},
        ],
        "attendanceData": "DATE : 04/03/2025",
    })

    assert migrate_legacy_snapshots(db) == 1
    assert migrate_legacy_snapshots(db) == 0

    [saved] = AttendanceSnapshot.find_for_day(datetime(2025, 3, 4))
    assert saved["absent_count"] == 1
    assert saved["summary_text"] == "DATE : 04/03/2025"

    history = find_student_history([saved], roll_no="R2")
    assert history["statistics"]["absent_percentage"] == "100.0"
