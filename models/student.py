from utils.db import mongo
from datetime import datetime
from models.section import normalize_section_name


class Student:
    """A roster entry. One record type for every cohort, tagged by ``year``."""

    @staticmethod
    def collection():
        return mongo.db.students

    def __init__(self, s_no, year, section, name="", roll_no="", reg_no="",
                 department="CSE", created_at=None):
        self.s_no = s_no
        self.year = year
        self.section = normalize_section_name(section)
        self.name = name
        self.roll_no = roll_no
        self.reg_no = reg_no
        self.department = department or "CSE"
        self.created_at = created_at or datetime.utcnow()

    def to_dict(self):
        return {
            "s_no": self.s_no,
            "year": self.year,
            "section": self.section,
            "name": self.name,
            "roll_no": self.roll_no,
            "reg_no": self.reg_no,
            "department": self.department,
            "created_at": self.created_at
        }

    @staticmethod
    def find_roster(year, section):
        return list(Student.collection().find({
            "year": year,
            "section": normalize_section_name(section)
        }).sort("s_no", 1))

    @staticmethod
    def delete_section(year, section):
        result = Student.collection().delete_many({
            "year": year,
            "section": normalize_section_name(section)
        })
        return result.deleted_count

    # Full replace: every prior row for (year, section) goes before the new rows land.
    # Not transactional, a failed insert leaves the section empty.
    @staticmethod
    def replace_section(year, section, students):
        removed = Student.delete_section(year, section)
        if students:
            Student.collection().insert_many([s.to_dict() for s in students])
        return removed, len(students)
