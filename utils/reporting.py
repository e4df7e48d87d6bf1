"""
utils/reporting.py
-----------------
Attendance aggregation. Everything here is a pure function over
roster entries and saved snapshots; nothing touches the database.

On-duty is counted twice on purpose:
  * a day's ``present_count`` includes Present, Late and On Duty;
  * a student's history drops on-duty days from the percentage
    denominator.
"""

from datetime import datetime, date

from models.attendance import PRESENT, ABSENT, LEAVE, ON_DUTY, LATE, STATUSES
from models.section import COHORT_LABELS
from utils.errors import NotFound, ValidationFailure

DISPLAY_DATE_FORMAT = "%d/%m/%Y"

# status -> short key used in counters and date lists
STATUS_KEYS = {
    PRESENT: "present",
    ABSENT: "absent",
    LEAVE: "leave",
    ON_DUTY: "od",
    LATE: "late",
}

PERCENTAGE_KEYS = ("present", "absent", "leave", "late")

# Order of the name lists in the shared summary text
SUMMARY_BLOCKS = (
    (LEAVE, "LEAVE"),
    (ON_DUTY, "ON DUTY"),
    (LATE, "LATE"),
    (ABSENT, "ABSENT"),
)

_STATUS_ALIASES = {s.lower(): s for s in STATUSES}
_STATUS_ALIASES.update({"onduty": ON_DUTY, "on-duty": ON_DUTY, "od": ON_DUTY})


def normalize_status(value):
    """Map loose user input onto a known status. Anything unknown is Present."""
    if not isinstance(value, str):
        return PRESENT
    return _STATUS_ALIASES.get(value.strip().lower(), PRESENT)


def parse_day(value):
    """'YYYY-MM-DD' -> datetime at midnight."""
    if isinstance(value, datetime):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if not isinstance(value, str):
        raise ValidationFailure(f"Invalid date '{value}', expected YYYY-MM-DD")
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d")
    except ValueError:
        raise ValidationFailure(f"Invalid date '{value}', expected YYYY-MM-DD")


def format_display_date(value):
    if isinstance(value, (datetime, date)):
        return value.strftime(DISPLAY_DATE_FORMAT)
    return str(value)


def section_label(year, section):
    if not year and not section:
        return None
    label = COHORT_LABELS.get(year, year or "")
    return f"{label} - {section}" if section else label


def _format_percentage(count, denominator):
    if denominator <= 0:
        return "0.0"
    return f"{count / denominator * 100:.1f}"


def _marking_for(entry, markings):
    for key in (str(entry.get("s_no", "")), entry.get("roll_no"), str(entry.get("_id", ""))):
        if key and key in markings:
            return markings[key]
    return None


def build_summary_text(day, counts, names_by_status, label=None):
    lines = [f"DATE : {format_display_date(day)}"]
    if label:
        lines.append(f"SECTION : {label}")
    lines += [
        f"PRESENT: {counts['present_count']}/{counts['total_students']}",
        f"LEAVE: {counts['leave_count']}",
        f"ON DUTY: {counts['od_count']}",
        f"LATE: {counts['late_count']}",
        f"ABSENT: {counts['absent_count']}",
    ]
    for status, heading in SUMMARY_BLOCKS:
        listed = names_by_status.get(status) or ["NIL"]
        lines += ["", heading] + listed
    lines += ["", "Have a Very Nice Day"]
    return "\n".join(lines)


def compute_daily_summary(markings, roster, day=None, year=None, section=None):
    """
    Project a marking session onto snapshot fields.

    ``markings`` maps a student key (serial number or roll number) to a
    status; roster entries without a usable marking are Present.
    """
    day = parse_day(day) if day is not None else parse_day(datetime.utcnow())
    markings = markings or {}

    records = []
    names_by_status = {}
    for entry in roster:
        status = normalize_status(_marking_for(entry, markings))
        record = {
            "student_id": str(entry.get("s_no", "")),
            "roll_no": entry.get("roll_no", ""),
            "name": entry.get("name", ""),
            "status": status,
        }
        records.append(record)
        names_by_status.setdefault(status, []).append(f"({record['roll_no']}) {record['name']}")

    def tally(*statuses):
        return sum(1 for r in records if r["status"] in statuses)

    counts = {
        "present_count": tally(PRESENT, LATE, ON_DUTY),
        "absent_count": tally(ABSENT),
        "leave_count": tally(LEAVE),
        "od_count": tally(ON_DUTY),
        "late_count": tally(LATE),
        "total_students": len(records),
    }

    summary = dict(counts)
    summary["date"] = day
    summary["student_records"] = records
    summary["summary_text"] = build_summary_text(day, counts, names_by_status, section_label(year, section))
    return summary


def _matches(record, name, roll_no):
    if name and name.lower() in (record.get("name") or "").lower():
        return True
    return bool(roll_no) and record.get("roll_no") == roll_no


def find_student_history(snapshots, name=None, roll_no=None):
    """
    Build a student's attendance history from snapshots sorted newest first.

    A status entry matches on a case-insensitive name substring OR an exact
    roll number. On-duty days are subtracted from ``total_days`` before the
    percentages are worked out.
    """
    if not name and not roll_no:
        raise ValidationFailure("Provide a student name or roll number")

    student_info = None
    matched_days = 0
    day_counts = {key: 0 for key in STATUS_KEYS.values()}
    dates = {key: [] for key in STATUS_KEYS.values()}

    for snapshot in snapshots:
        record = next((r for r in snapshot.get("student_records", []) if _matches(r, name, roll_no)), None)
        if record is None:
            continue
        if student_info is None:
            student_info = dict(record)
        matched_days += 1

        key = STATUS_KEYS.get(record.get("status"))
        if key:
            day_counts[key] += 1
            dates[key].append(format_display_date(snapshot.get("date")))

    if student_info is None:
        raise NotFound("No records found for this student")

    total_days = matched_days - day_counts["od"]

    statistics = {"total_days": total_days}
    for key in STATUS_KEYS.values():
        statistics[f"{key}_days"] = day_counts[key]
    for key in PERCENTAGE_KEYS:
        statistics[f"{key}_percentage"] = _format_percentage(day_counts[key], total_days)
    statistics["dates"] = dates

    return {"student_info": student_info, "statistics": statistics}


def compute_global_summary(snapshots):
    snapshots = list(snapshots)
    if not snapshots:
        return {}

    total = len(snapshots)

    def average(field):
        return sum(s.get(field) or 0 for s in snapshots) / total

    return {
        "avg_present": average("present_count"),
        "avg_absent": average("absent_count"),
        "avg_leave": average("leave_count"),
        "avg_od": average("od_count"),
        "avg_late": average("late_count"),
        "total_days": total,
    }


def status_breakdown(snapshot):
    """Per-status share of a single day, on-duty left out of the denominator."""
    counts = {
        "present": snapshot.get("present_count") or 0,
        "absent": snapshot.get("absent_count") or 0,
        "leave": snapshot.get("leave_count") or 0,
        "od": snapshot.get("od_count") or 0,
        "late": snapshot.get("late_count") or 0,
    }
    denominator = counts["present"] + counts["absent"] + counts["leave"] + counts["late"]
    return {
        "denominator": denominator,
        "counts": counts,
        "percentages": {key: _format_percentage(value, denominator) for key, value in counts.items()},
    }


def filter_records_by_status(snapshot, status):
    records = snapshot.get("student_records", [])
    if not status:
        return list(records)
    wanted = _STATUS_ALIASES.get(status.strip().lower())
    if wanted is None:
        raise ValidationFailure(f"Unknown status '{status}'")
    return [r for r in records if r.get("status") == wanted]
