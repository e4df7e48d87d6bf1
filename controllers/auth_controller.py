from flask import Blueprint, jsonify, request, g
from utils.auth import authenticate, token_required
from utils.errors import ValidationFailure

auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


# Login
@auth_bp.route("/login", methods=["POST"])
def login():
    payload = request.get_json(silent=True) or {}
    if not isinstance(payload, dict):
        raise ValidationFailure("Request body must be a JSON object")
    # Non-text credentials never match, and fail like any other bad login
    username = payload.get("username")
    password = payload.get("password")
    if not isinstance(username, str) or not isinstance(password, str):
        username = password = None

    token, admin = authenticate(username, password)
    return jsonify({
        "token": token,
        "username": admin["username"],
        "role": admin.get("role", "admin")
    })


# Claims of the current token
@auth_bp.route("/me")
@token_required
def me():
    return jsonify({
        "id": g.current_admin.get("id"),
        "username": g.current_admin.get("username"),
        "role": g.current_admin.get("role")
    })
