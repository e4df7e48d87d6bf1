import re
from utils.db import mongo
from datetime import datetime, timedelta

PRESENT = "Present"
ABSENT = "Absent"
LEAVE = "Leave"
ON_DUTY = "On Duty"
LATE = "Late"

STATUSES = (PRESENT, ABSENT, LEAVE, ON_DUTY, LATE)


class AttendanceSnapshot:
    """
    One saved day of attendance for a roster.

    student_records example:
    [
        {"student_id": "1", "roll_no": "R1", "name": "Asha", "status": "Present"},
        {"student_id": "2", "roll_no": "R2", "name": "Ben", "status": "Absent"}
    ]
    summary_text is the ready-to-share report built when the day was saved.
    """

    @staticmethod
    def collection():
        return mongo.db.attendance

    def __init__(self, date, present_count=0, absent_count=0, leave_count=0, od_count=0,
                 late_count=0, total_students=0, student_records=None, summary_text="",
                 year=None, section=None, created_at=None):
        self.date = date
        self.year = year
        self.section = section
        self.present_count = present_count
        self.absent_count = absent_count
        self.leave_count = leave_count
        self.od_count = od_count
        self.late_count = late_count
        self.total_students = total_students
        self.student_records = student_records or []
        self.summary_text = summary_text
        self.created_at = created_at or datetime.utcnow()

    @classmethod
    def from_summary(cls, summary, year=None, section=None):
        return cls(
            date=summary["date"],
            year=year,
            section=section,
            present_count=summary["present_count"],
            absent_count=summary["absent_count"],
            leave_count=summary["leave_count"],
            od_count=summary["od_count"],
            late_count=summary["late_count"],
            total_students=summary["total_students"],
            student_records=summary["student_records"],
            summary_text=summary["summary_text"],
        )

    def to_dict(self):
        return {
            "date": self.date,
            "year": self.year,
            "section": self.section,
            "present_count": self.present_count,
            "absent_count": self.absent_count,
            "leave_count": self.leave_count,
            "od_count": self.od_count,
            "late_count": self.late_count,
            "total_students": self.total_students,
            "student_records": self.student_records,
            "summary_text": self.summary_text,
            "created_at": self.created_at,
        }

    # Raises DuplicateKeyError when the day is already saved for this section
    def save(self):
        return AttendanceSnapshot.collection().insert_one(self.to_dict())

    @staticmethod
    def find_in_range(start=None, end=None, limit=30):
        query = {}
        if start and end:
            query["date"] = {"$gte": start, "$lt": end + timedelta(days=1)}
        return list(AttendanceSnapshot.collection().find(query).sort("date", -1).limit(limit))

    @staticmethod
    def find_for_day(day, year=None, section=None):
        query = {"date": {"$gte": day, "$lt": day + timedelta(days=1)}}
        if year:
            query["year"] = year
        if section:
            query["section"] = section
        return list(AttendanceSnapshot.collection().find(query).sort("section", 1))

    # Candidate snapshots for a student, newest first. Either filter may match.
    @staticmethod
    def find_for_student(name=None, roll_no=None):
        clauses = []
        if name:
            clauses.append({"student_records.name": {"$regex": re.escape(name), "$options": "i"}})
        if roll_no:
            clauses.append({"student_records.roll_no": roll_no})
        if not clauses:
            return []
        return list(AttendanceSnapshot.collection().find({"$or": clauses}).sort("date", -1))

    @staticmethod
    def find_all_counts():
        projection = {
            "present_count": 1, "absent_count": 1, "leave_count": 1,
            "od_count": 1, "late_count": 1,
        }
        return list(AttendanceSnapshot.collection().find({}, projection))

    @staticmethod
    def delete(record_id):
        result = AttendanceSnapshot.collection().delete_one({"_id": record_id})
        return result.deleted_count
