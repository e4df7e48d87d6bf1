import logging

from flask import Blueprint, jsonify, request
from pymongo.errors import DuplicateKeyError

from models.section import Section
from models.student import Student
from utils.auth import token_required
from utils.errors import DuplicateKey, ValidationFailure
from utils.roster_import import validate_target, validate_year

logger = logging.getLogger(__name__)

sections_bp = Blueprint("sections", __name__, url_prefix="/api/sections")


# -----------------------------
# LIST SECTIONS OF A YEAR
# -----------------------------
@sections_bp.route("/<year>")
@token_required
def list_sections(year):
    validate_year(year)
    return jsonify({"sections": Section.names_for_year(year)})


# -----------------------------
# ADD SECTION
# -----------------------------
@sections_bp.route("/<year>", methods=["POST"])
@token_required
def add_section(year):
    payload = request.get_json(silent=True) or {}
    if not isinstance(payload, dict):
        raise ValidationFailure("Request body must be a JSON object")
    name = validate_target(year, payload.get("section"))

    # Prevent duplicate sections
    if Section.find(year, name):
        raise DuplicateKey(f'Section "{name}" already exists for {year}')

    try:
        Section(year, name).save()
    except DuplicateKeyError:
        raise DuplicateKey(f'Section "{name}" already exists for {year}')

    logger.info("Section %s created for %s", name, year)
    return jsonify({"success": True, "section": name}), 201


# -----------------------------
# DELETE SECTION (and its students)
# -----------------------------
@sections_bp.route("/<year>/<section>", methods=["DELETE"])
@token_required
def delete_section(year, section):
    name = validate_target(year, section)

    Section.delete(year, name)
    deleted = Student.delete_section(year, name)

    logger.info("Section %s/%s deleted with %d students", year, name, deleted)
    return jsonify({"success": True, "deleted_students": deleted})
