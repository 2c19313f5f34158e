from flask import request, jsonify
from flask_login import login_required

from api.services.event_service import EventService
from api.utils.errors import validation_error_response
from api.utils.people_helper import serialize_event
from api.utils.permissions import get_current_profile, require_roles
from . import api_bp


@api_bp.get("/events")
@login_required
def list_events():
    """
    Events ordered by date. `?audience=all,staff` filters; roles with a fixed
    audience (teachers, students, parents) only ever see their own.
    """
    try:
        audiences = EventService.parse_audiences(request.args.get("audience"))
    except ValueError as exc:
        return validation_error_response(exc)

    profile = get_current_profile()
    if not profile:
        return jsonify([])

    allowed = EventService.audiences_for_role(profile.role)
    if allowed is not None:
        audiences = [a for a in audiences if a in allowed] if audiences else list(allowed)
        if not audiences:
            return jsonify([])

    return jsonify([serialize_event(e) for e in EventService.list_events(audiences)])


@api_bp.post("/events")
@login_required
@require_roles("ADMIN", "EDITOR")
def create_event():
    try:
        event = EventService.create_event(request.get_json(silent=True) or {})
    except ValueError as exc:
        return validation_error_response(exc)
    return jsonify({"status": "created", "event": serialize_event(event)}), 201
