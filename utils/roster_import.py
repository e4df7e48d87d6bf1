"""
utils/roster_import.py
-----------------
Turns parsed spreadsheet rows into roster entries for one
(year, section) and replaces whatever that section held before.
"""

import logging

from models.section import Section, COHORT_YEARS, normalize_section_name
from models.student import Student
from utils.errors import ValidationFailure

logger = logging.getLogger(__name__)

# logical field -> accepted header names, tried in order
FIRST_YEAR_COLUMNS = (
    ("s_no", ("S. No", "SNo")),
    ("name", ("Student Name", "studentName", "Name")),
    ("roll_no", ("Roll Number", "rollNumber", "RollNo")),
    ("reg_no", ("Register No", "registerNo", "RegNo")),
)

SENIOR_YEAR_COLUMNS = (
    ("s_no", ("S. No", "SNo")),
    ("name", ("Name", "Student Name", "name")),
    ("roll_no", ("RollNo", "Roll Number", "rollNo")),
    ("reg_no", ("RegNo", "Register No", "regNo")),
)


def columns_for_year(year):
    return FIRST_YEAR_COLUMNS if year == "first-year" else SENIOR_YEAR_COLUMNS


def resolve_field(row, aliases, default=""):
    """First non-empty value among ``aliases`` in ``row``."""
    for alias in aliases:
        value = row.get(alias)
        if value is None or value == "":
            continue
        if isinstance(value, float) and value != value:
            continue
        return value
    return default


def serial_number(value, fallback):
    try:
        number = int(float(value))
    except (TypeError, ValueError):
        return fallback
    return number if number > 0 else fallback


def validate_year(year):
    if year not in COHORT_YEARS:
        raise ValidationFailure(f"Unknown year '{year}'")
    return year


def validate_target(year, section):
    validate_year(year)
    name = normalize_section_name(section)
    if not name:
        raise ValidationFailure("Section name is required")
    return name


def build_roster(rows, year, section):
    columns = columns_for_year(year)
    students = []
    for index, row in enumerate(rows, start=1):
        fields = {field: resolve_field(row, aliases) for field, aliases in columns}
        students.append(Student(
            s_no=serial_number(fields.pop("s_no"), index),
            year=year,
            section=section,
            **{key: str(value) for key, value in fields.items()}
        ))
    return students


def import_roster(year, section, rows):
    """Replace the roster of (year, section) with ``rows``. Returns the inserted count."""
    section = validate_target(year, section)
    Section.ensure(year, section)

    students = build_roster(rows, year, section)
    removed, inserted = Student.replace_section(year, section, students)
    logger.info("Roster import %s/%s: removed %d, inserted %d", year, section, removed, inserted)
    return inserted
