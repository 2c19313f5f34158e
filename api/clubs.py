from flask import request, jsonify
from flask_login import login_required

from api.services.club_service import ClubService
from api.utils.errors import validation_error_response
from api.utils.permissions import require_roles
from . import api_bp


@api_bp.get("/clubs")
@login_required
def list_clubs():
    return jsonify(ClubService.list_clubs())


@api_bp.post("/clubs")
@login_required
@require_roles("ADMIN")
def create_club():
    try:
        club, dropped = ClubService.create_club(request.get_json(silent=True) or {})
    except ValueError as exc:
        return validation_error_response(exc)

    response = {"status": "created", "club": club, "dropped_fields": dropped}
    if dropped:
        response["message"] = (
            "Club created, but the database is missing these columns so they were not saved: "
            + ", ".join(dropped)
            + ". Run the pending migrations to keep them."
        )
    return jsonify(response), 201
