"""
config.py
-----------------
Application settings, read from environment variables with
development-friendly defaults. Loaded with ``app.config.from_object``.
"""

import os


def _env_bool(name, default):
    return os.environ.get(name, default).strip().lower() in {"1", "true", "yes", "on"}


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY") or "attendance-tracker-secret"

    # MongoDB
    MONGO_URI = os.environ.get("MONGO_URI") or os.environ.get(
        "MONGODB_URI", "mongodb://localhost:27017/AttendanceTracker"
    )

    # Bearer tokens
    JWT_SECRET = os.environ.get("JWT_SECRET") or "your-secret-key"
    JWT_ALGORITHM = "HS256"
    TOKEN_TTL_HOURS = int(os.environ.get("TOKEN_TTL_HOURS", "24"))

    # Uploads (5 MiB per spreadsheet, plus room for the multipart envelope)
    MAX_UPLOAD_BYTES = 5 * 1024 * 1024
    MAX_CONTENT_LENGTH = MAX_UPLOAD_BYTES + 64 * 1024

    # Seed admin, created only when the admins collection is empty
    SEED_ADMIN_USERNAME = os.environ.get("SEED_ADMIN_USERNAME", "admin")
    SEED_ADMIN_PASSWORD = os.environ.get("SEED_ADMIN_PASSWORD", "admin123")
    INIT_DB_ON_STARTUP = _env_bool("INIT_DB_ON_STARTUP", "1")

    # Attendance history page size
    HISTORY_LIMIT = int(os.environ.get("HISTORY_LIMIT", "30"))

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()


class TestingConfig(Config):
    TESTING = True
    MONGO_URI = "mongodb://localhost:27017/AttendanceTrackerTest"
    JWT_SECRET = "test-secret"
    INIT_DB_ON_STARTUP = False
    LOG_LEVEL = "DEBUG"
