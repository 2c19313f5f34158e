# api/auth.py

from flask import Blueprint, request, jsonify, current_app
from flask_login import login_user, logout_user, login_required

from api.services.session_service import SessionService
from api.utils.errors import error_response, validation_error_response

auth_bp = Blueprint("auth", __name__, url_prefix="/auth")


def _payload() -> dict:
    return request.get_json(silent=True) or request.form.to_dict()


# ----------------------------------------------
# POST: SIGN UP (email + password + role metadata)
# ----------------------------------------------
@auth_bp.post("/signup")
def signup():
    data = _payload()
    try:
        user = SessionService.sign_up(
            email=data.get("email"),
            password=data.get("password"),
            role=data.get("role"),
            full_name=data.get("full_name"),
        )
    except ValueError as exc:
        return validation_error_response(exc)

    login_user(user)
    current_app.logger.info("New account %s signed up.", user.email)
    return jsonify({"status": "created", "user_id": user.id}), 201


# ----------------------------------------------
# POST: LOGIN
# ----------------------------------------------
@auth_bp.post("/login")
def login():
    data = _payload()
    email = (data.get("email") or "").strip().lower()
    password = (data.get("password") or "").strip()

    if not email or not password:
        return error_response("Email and password are required.", 400, "incomplete_form")

    user = SessionService.authenticate(email, password)
    if not user:
        return error_response("Invalid login credentials.", 401, "invalid_credentials")

    login_user(user)
    return jsonify({"status": "signed_in", "user_id": user.id})


# ----------------------------------------------
# LOGOUT
# ----------------------------------------------
@auth_bp.post("/logout")
@login_required
def logout():
    logout_user()
    return jsonify({"status": "signed_out"})
