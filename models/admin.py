from utils.db import mongo
from datetime import datetime
from werkzeug.security import generate_password_hash, check_password_hash

# Compared against when the username is unknown so both failures cost a hash check
_DUMMY_HASH = generate_password_hash("not-a-real-password")


class Admin:

    @staticmethod
    def collection():
        return mongo.db.admins

    def __init__(self, username, password, role="admin", created_at=None):
        self.username = username
        self.password = generate_password_hash(password)
        self.role = role
        self.created_at = created_at or datetime.utcnow()

    # Convert to dictionary for MongoDB
    def to_dict(self):
        return {
            "username": self.username,
            "password": self.password,
            "role": self.role,
            "created_at": self.created_at
        }

    @staticmethod
    def find_by_username(username):
        return Admin.collection().find_one({"username": username})

    # Verify password
    @staticmethod
    def verify_password(username, password):
        admin = Admin.find_by_username(username)
        hashed = admin["password"] if admin else _DUMMY_HASH
        if check_password_hash(hashed, password or "") and admin:
            return admin
        return None
