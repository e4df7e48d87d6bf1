"""
utils/db.py
-----------------
This module initializes and manages the MongoDB connection
for the entire Flask application, and holds the one-off
startup routine that prepares indexes and the seed admin.
"""

import logging
from datetime import datetime, date

from bson import ObjectId
from bson.errors import InvalidId
from flask_pymongo import PyMongo
from pymongo import ASCENDING, DESCENDING

from utils.errors import ValidationFailure

logger = logging.getLogger(__name__)

# Create a global MongoDB instance
mongo = PyMongo()


def init_db_connection(app):
    """
    Initialize MongoDB connection with Flask app.
    Reads MONGO_URI from the already loaded app config.
    """
    mongo.init_app(app)
    logger.info("MongoDB connection initialized")
    return mongo


def ensure_indexes(db):
    db.sections.create_index([("year", ASCENDING), ("name", ASCENDING)], unique=True)
    db.students.create_index([("year", ASCENDING), ("section", ASCENDING), ("s_no", ASCENDING)])
    db.admins.create_index("username", unique=True)

    # One snapshot per day per section; legacy snapshots carry no section
    db.attendance.create_index(
        [("date", DESCENDING), ("year", ASCENDING), ("section", ASCENDING)],
        unique=True,
    )
    db.attendance.create_index("student_records.name")
    db.attendance.create_index("student_records.roll_no")


def initialize_database(db, config):
    """
    Idempotent startup routine. Safe to call on every boot:
    indexes are created if missing and the seed admin is only
    inserted while the admins collection is empty.
    """
    ensure_indexes(db)

    if db.admins.count_documents({}) == 0:
        from models.admin import Admin

        username = config.get("SEED_ADMIN_USERNAME", "admin")
        db.admins.insert_one(Admin(username, config.get("SEED_ADMIN_PASSWORD", "admin123")).to_dict())
        logger.info("Initial admin created: username=%s", username)

    logger.info(
        "Database status: sections=%d students=%d snapshots=%d",
        db.sections.count_documents({}),
        db.students.count_documents({}),
        db.attendance.count_documents({}),
    )


def parse_object_id(value):
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        raise ValidationFailure("Invalid ID format")


def serialize_doc(doc):
    """Make a Mongo document JSON safe (ObjectId -> str, dates -> ISO)."""
    if doc is None:
        return None
    result = {}
    for key, value in doc.items():
        if key == "_id":
            result["id"] = str(value)
        elif isinstance(value, ObjectId):
            result[key] = str(value)
        elif isinstance(value, (datetime, date)):
            result[key] = value.isoformat()
        elif isinstance(value, list):
            result[key] = [serialize_doc(v) if isinstance(v, dict) else v for v in value]
        elif isinstance(value, dict):
            result[key] = serialize_doc(value)
        else:
            result[key] = value
    return result
