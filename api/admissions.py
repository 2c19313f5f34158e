# api/admissions.py

from flask import request, jsonify
from flask_login import login_required

from api.services.admissions_service import AdmissionsService
from api.utils.academics_helper import serialize_class_level, serialize_stream
from api.utils.errors import validation_error_response
from api.utils.people_helper import serialize_student
from api.utils.permissions import require_roles
from . import api_bp


@api_bp.get("/admissions/options")
@login_required
@require_roles("ADMIN")
def admission_options():
    options = AdmissionsService.options()
    return jsonify({
        "class_levels": [serialize_class_level(c) for c in options["class_levels"]],
        "streams": [serialize_stream(s) for s in options["streams"]],
        "clubs": [{"id": club["id"], "name": club["name"]} for club in options["clubs"]],
    })


@api_bp.post("/admissions")
@login_required
@require_roles("ADMIN")
def admit_student():
    """
    Expected JSON:
    {
      "full_name": "Jane Doe",
      "student_id_human": "S2024-001",
      "gender": "F",
      "class_id": 1,
      "stream_id": 3,
      "club_id": 2          # optional
    }
    """
    try:
        student, warnings = AdmissionsService.admit(request.get_json(silent=True) or {})
    except ValueError as exc:
        return validation_error_response(exc)

    return jsonify({
        "status": "created",
        "message": f"Student {student.full_name} successfully admitted!",
        "student": serialize_student(student),
        "warnings": warnings,
    }), 201
