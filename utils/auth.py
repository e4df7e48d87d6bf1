import logging
from datetime import datetime, timedelta, timezone
from functools import wraps

import jwt
from flask import current_app, g, request

from models.admin import Admin
from utils.errors import AuthRejected, AuthRequired

logger = logging.getLogger(__name__)


def authenticate(username, password):
    """Return a signed token for valid credentials, AuthRejected otherwise."""
    admin = Admin.verify_password(username, password) if username else None
    if not admin:
        # Same answer for an unknown user and a wrong password
        logger.warning("Failed login attempt for %r", username)
        raise AuthRejected("Invalid credentials")
    return issue_token(admin), admin


def issue_token(admin):
    now = datetime.now(timezone.utc)
    claims = {
        "id": str(admin["_id"]),
        "username": admin["username"],
        "role": admin.get("role", "admin"),
        "iat": now,
        "exp": now + timedelta(hours=current_app.config["TOKEN_TTL_HOURS"]),
    }
    return jwt.encode(claims, current_app.config["JWT_SECRET"], algorithm=current_app.config["JWT_ALGORITHM"])


def decode_token(token):
    try:
        return jwt.decode(
            token,
            current_app.config["JWT_SECRET"],
            algorithms=[current_app.config["JWT_ALGORITHM"]],
        )
    except jwt.ExpiredSignatureError:
        raise AuthRejected("Token has expired")
    except jwt.InvalidTokenError:
        raise AuthRejected("Invalid or expired token")


def _bearer_token():
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


# This decorator makes sure that only requests with a valid bearer token reach the view
def token_required(view_function):
    @wraps(view_function)
    def decorated_function(*args, **kwargs):
        token = _bearer_token()
        if not token:
            raise AuthRequired("Access token required")
        g.current_admin = decode_token(token)
        return view_function(*args, **kwargs)
    return decorated_function
