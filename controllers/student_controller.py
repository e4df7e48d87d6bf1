import logging

from flask import Blueprint, current_app, jsonify, request

from models.student import Student
from utils.auth import token_required
from utils.db import serialize_doc
from utils.roster_import import import_roster, validate_target
from utils.spreadsheet import parse_rows, read_upload

logger = logging.getLogger(__name__)

students_bp = Blueprint("students", __name__, url_prefix="/api/students")


# -------------------------------------------------------------
# VIEW ROSTER OF A YEAR + SECTION
# -------------------------------------------------------------
@students_bp.route("/<year>/<section>")
@token_required
def view_students(year, section):
    name = validate_target(year, section)
    students = Student.find_roster(year, name)
    return jsonify([serialize_doc(s) for s in students])


# -------------------------------------------------------------
# UPLOAD SPREADSHEET (replaces the whole section)
# -------------------------------------------------------------
@students_bp.route("/<year>/<section>/upload", methods=["POST"])
@token_required
def upload_students(year, section):
    name = validate_target(year, section)

    data = read_upload(request.files.get("file"), current_app.config["MAX_UPLOAD_BYTES"])
    rows = parse_rows(data)
    count = import_roster(year, name, rows)

    return jsonify({
        "message": f"Students uploaded to {year} Section {name}",
        "count": count
    })


# -------------------------------------------------------------
# DELETE ALL STUDENTS OF A YEAR + SECTION
# -------------------------------------------------------------
@students_bp.route("/<year>/<section>/all", methods=["DELETE"])
@token_required
def delete_students(year, section):
    name = validate_target(year, section)
    deleted = Student.delete_section(year, name)

    logger.info("Deleted %d students from %s/%s", deleted, year, name)
    return jsonify({
        "message": f"Deleted all students from {year} Section {name}",
        "deleted_count": deleted
    })
