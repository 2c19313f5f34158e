# api/session.py

from flask import request, jsonify, current_app, abort
from flask_login import current_user, login_required, logout_user
from sqlalchemy.exc import OperationalError

from extensions import db
from api.services.profile_service import ProfileService
from api.services.session_service import SessionService
from api.utils.academics_helper import serialize_profile
from api.utils.errors import validation_error_response
from . import api_bp


@api_bp.get("/session")
def session_state():
    """
    Bootstrap on page load.
      - database unreachable      -> 503 connection_failed (client offers a reload)
      - no session                -> signed_out
      - session without profile   -> one repair attempt, otherwise forced sign-out
      - otherwise                 -> ready + profile + landing view for the role
    """
    try:
        SessionService.ping()
        authenticated = current_user.is_authenticated
    except OperationalError as exc:
        db.session.rollback()
        current_app.logger.error("Connection to the database failed: %s", exc)
        return jsonify({
            "state": "connection_failed",
            "retry": True,
            "error": "Could not connect to the school database. Please reload to try again.",
        }), 503

    if not authenticated:
        return jsonify({"state": "signed_out"})

    try:
        profile = SessionService.ensure_profile(current_user)
    except Exception as exc:
        db.session.rollback()
        current_app.logger.exception("Critical profile fetch error: %s", exc)
        logout_user()
        return jsonify({"state": "signed_out", "reason": "Could not load your profile. Please sign in again."})

    if not profile:
        logout_user()
        return jsonify({
            "state": "signed_out",
            "reason": "Profile setup incomplete. Please sign in again.",
        })

    return jsonify({
        "state": "ready",
        "profile": serialize_profile(profile),
        "landing_view": SessionService.landing_view_for(profile.role),
    })


@api_bp.get("/profile")
@login_required
def get_profile():
    return jsonify(serialize_profile(_require_profile()))


@api_bp.put("/profile")
@login_required
def update_profile():
    profile = _require_profile()
    try:
        ProfileService.update_own_profile(profile, request.get_json(silent=True) or {})
    except ValueError as exc:
        return validation_error_response(exc)
    return jsonify({"status": "ok", "profile": serialize_profile(profile)})


def _require_profile():
    try:
        return ProfileService.require_profile(current_user.id)
    except ValueError as exc:
        abort(403, description=str(exc))
