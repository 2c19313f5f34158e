from flask import request, jsonify
from flask_login import login_required

from api.services.house_service import HouseService
from api.utils.errors import error_response, validation_error_response
from api.utils.people_helper import serialize_house
from api.utils.permissions import require_roles
from services.assistant_service import AssistantService
from . import api_bp


@api_bp.get("/houses")
@login_required
def list_houses():
    return jsonify([serialize_house(h) for h in HouseService.list_houses()])


@api_bp.post("/houses/<int:house_id>/points")
@login_required
@require_roles("ADMIN")
def award_house_points(house_id):
    data = request.get_json(silent=True) or {}
    try:
        house = HouseService.award_points(house_id, data.get("points"))
    except LookupError as exc:
        return error_response(str(exc), 404, "not_found")
    except ValueError as exc:
        return validation_error_response(exc)
    return jsonify({"status": "ok", "house": serialize_house(house)})


@api_bp.get("/houses/<int:house_id>/suggestions")
@login_required
@require_roles("ADMIN")
def house_point_suggestions(house_id):
    try:
        house = HouseService.get_house(house_id)
    except LookupError as exc:
        return error_response(str(exc), 404, "not_found")
    return jsonify({"house_id": house.id, "reasons": AssistantService.suggest_point_reasons(house.name)})
