import logging

from flask import Blueprint, current_app, jsonify, request, send_file

from models.attendance import AttendanceSnapshot
from models.student import Student
from utils.auth import token_required
from utils.db import parse_object_id, serialize_doc
from utils.errors import NotFound, ValidationFailure
from utils.exporters import EXPORTERS, EXPORT_FORMATS
from utils.reporting import (
    compute_daily_summary,
    compute_global_summary,
    filter_records_by_status,
    find_student_history,
    parse_day,
    status_breakdown,
)
from utils.roster_import import validate_target

logger = logging.getLogger(__name__)

attendance_bp = Blueprint("attendance", __name__, url_prefix="/api/attendance")


def _summary_from_request():
    payload = request.get_json(silent=True) or {}
    if not isinstance(payload, dict):
        raise ValidationFailure("Request body must be a JSON object")
    year = payload.get("year")
    section = validate_target(year, payload.get("section"))

    markings = payload.get("markings") or {}
    if not isinstance(markings, dict):
        raise ValidationFailure("markings must be an object of student -> status")

    roster = Student.find_roster(year, section)
    if not roster:
        raise ValidationFailure(f"No students found for {year} Section {section}. Upload a roster first.")

    day = payload.get("date")
    summary = compute_daily_summary(
        markings, roster,
        day=parse_day(day) if day else None,
        year=year, section=section
    )
    return summary, year, section


# ==========================================================
# PREVIEW TODAY'S SUMMARY (nothing is saved)
# ==========================================================
@attendance_bp.route("/preview", methods=["POST"])
@token_required
def preview_attendance():
    summary, year, section = _summary_from_request()
    summary["year"] = year
    summary["section"] = section
    return jsonify(serialize_doc(summary))


# ==========================================================
# SAVE A DAY
# ==========================================================
@attendance_bp.route("", methods=["POST"])
@token_required
def save_attendance():
    summary, year, section = _summary_from_request()

    snapshot = AttendanceSnapshot.from_summary(summary, year=year, section=section)
    result = snapshot.save()

    logger.info("Attendance saved for %s %s/%s", summary["date"].date(), year, section)
    saved = snapshot.to_dict()
    saved["_id"] = result.inserted_id
    return jsonify(serialize_doc(saved)), 201


# ==========================================================
# HISTORY (newest first)
# ==========================================================
@attendance_bp.route("", methods=["GET"])
def attendance_history():
    start = request.args.get("startDate")
    end = request.args.get("endDate")

    records = AttendanceSnapshot.find_in_range(
        parse_day(start) if start and end else None,
        parse_day(end) if start and end else None,
        limit=current_app.config["HISTORY_LIMIT"]
    )
    return jsonify([serialize_doc(r) for r in records])


# ==========================================================
# ONE STUDENT ACROSS ALL DAYS
# ==========================================================
@attendance_bp.route("/student")
def student_history():
    name = (request.args.get("name") or "").strip() or None
    roll_no = (request.args.get("rollNo") or "").strip() or None
    if not name and not roll_no:
        raise ValidationFailure("Provide a student name or roll number")

    snapshots = AttendanceSnapshot.find_for_student(name=name, roll_no=roll_no)
    return jsonify(find_student_history(snapshots, name=name, roll_no=roll_no))


# ==========================================================
# AVERAGES OVER EVERY SAVED DAY
# ==========================================================
@attendance_bp.route("/stats/summary")
def stats_summary():
    return jsonify(compute_global_summary(AttendanceSnapshot.find_all_counts()))


# ==========================================================
# ONE DAY
# ==========================================================
@attendance_bp.route("/<day>", methods=["GET"])
def attendance_for_day(day):
    snapshots = AttendanceSnapshot.find_for_day(
        parse_day(day),
        year=request.args.get("year"),
        section=(request.args.get("section") or "").strip().upper() or None
    )
    if not snapshots:
        raise NotFound("No record found for this date")

    status = request.args.get("status")
    records = []
    for snapshot in snapshots:
        data = serialize_doc(snapshot)
        data["breakdown"] = status_breakdown(snapshot)
        data["student_records"] = filter_records_by_status(snapshot, status)
        records.append(data)

    return jsonify({"date": day, "records": records})


# ---------------- Export CSV / Excel / PDF ----------------
@attendance_bp.route("/<day>/export")
@token_required
def export_attendance(day):
    export_type = (request.args.get("format") or "csv").lower()
    if export_type not in EXPORT_FORMATS:
        raise ValidationFailure(f"Unsupported export format '{export_type}'")

    snapshots = AttendanceSnapshot.find_for_day(
        parse_day(day),
        year=request.args.get("year"),
        section=(request.args.get("section") or "").strip().upper() or None
    )
    if not snapshots:
        raise NotFound("No record found for this date")
    if len(snapshots) > 1:
        raise ValidationFailure("Several sections saved this day, pick one with year and section")

    output, mimetype, filename = EXPORTERS[export_type](snapshots[0])
    return send_file(output, mimetype=mimetype, as_attachment=True, download_name=filename)


# ==========================================================
# DELETE A DAY
# ==========================================================
@attendance_bp.route("/<record_id>", methods=["DELETE"])
@token_required
def delete_attendance(record_id):
    if not AttendanceSnapshot.delete(parse_object_id(record_id)):
        raise NotFound("Record not found")

    logger.info("Attendance record %s deleted", record_id)
    return jsonify({"message": "Record deleted successfully"})
