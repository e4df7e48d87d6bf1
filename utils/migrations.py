"""
utils/migrations.py
-----------------
One-time moves of data written by the old schema:
  * the four per-year student collections -> ``students``
  * camelCase ``attendancecounts`` snapshots -> ``attendance``
Both are safe to run again; already migrated data is skipped.
"""

import logging
from datetime import datetime

from utils.roster_import import columns_for_year, resolve_field, serial_number

logger = logging.getLogger(__name__)

# Old per-year collections and the section their rows implicitly belonged to
LEGACY_STUDENT_COLLECTIONS = (
    ("firstyearstudents", "first-year", "E"),
    ("secondyearstudents", "second-year", "C"),
    ("thirdyearstudents", "third-year", "C"),
    ("finalyearstudents", "final-year", "C"),
)

LEGACY_SNAPSHOT_COLLECTION = "attendancecounts"


def migrate_legacy_students(db):
    """Returns {year: migrated_count}. A (year, section) that already has rows is left alone."""
    migrated = {}
    for collection_name, year, section in LEGACY_STUDENT_COLLECTIONS:
        legacy_rows = list(db[collection_name].find().sort("sNo", 1))
        if not legacy_rows:
            continue
        if db.students.count_documents({"year": year, "section": section}):
            logger.info("Skipping %s: %s/%s already migrated", collection_name, year, section)
            continue

        columns = dict(columns_for_year(year))
        documents = []
        for index, row in enumerate(legacy_rows, start=1):
            documents.append({
                "s_no": serial_number(row.get("sNo"), index),
                "year": year,
                "section": section,
                "name": str(resolve_field(row, ("studentName", "name") + columns["name"])),
                "roll_no": str(resolve_field(row, ("rollNumber", "rollNo") + columns["roll_no"])),
                "reg_no": str(resolve_field(row, ("registerNo", "regNo") + columns["reg_no"])),
                "department": row.get("department") or "CSE",
                "created_at": row.get("createdAt") or datetime.utcnow(),
            })

        db.sections.update_one(
            {"year": year, "name": section},
            {"$setOnInsert": {"created_at": datetime.utcnow()}},
            upsert=True,
        )
        db.students.insert_many(documents)
        migrated[year] = len(documents)
        logger.info("Migrated %d students from %s", len(documents), collection_name)
    return migrated


def _snapshot_from_legacy(doc):
    return {
        # Old snapshots kept the save timestamp, not midnight
        "date": doc.get("date"),
        "year": None,
        "section": None,
        "present_count": doc.get("presentCount", 0),
        "absent_count": doc.get("absentCount", 0),
        "leave_count": doc.get("leaveCount", 0),
        "od_count": doc.get("odCount", 0),
        "late_count": doc.get("lateCount", 0),
        "total_students": doc.get("totalStudents", 0),
        "student_records": [
            {
                "student_id": r.get("studentId", ""),
                "roll_no": r.get("rollNo", ""),
                "name": r.get("name", ""),
                "status": r.get("status", ""),
            }
            for r in doc.get("studentRecords", [])
        ],
        "summary_text": doc.get("attendanceData", ""),
        "created_at": doc.get("createdAt") or datetime.utcnow(),
        "legacy_id": doc["_id"],
    }


def migrate_legacy_snapshots(db):
    """Copy old snapshots into ``attendance``. Returns how many were copied."""
    copied = 0
    for doc in db[LEGACY_SNAPSHOT_COLLECTION].find().sort("date", 1):
        if db.attendance.count_documents({"legacy_id": doc["_id"]}):
            continue
        db.attendance.insert_one(_snapshot_from_legacy(doc))
        copied += 1
    if copied:
        logger.info("Migrated %d attendance snapshots from %s", copied, LEGACY_SNAPSHOT_COLLECTION)
    return copied
