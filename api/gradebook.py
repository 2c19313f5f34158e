# api/gradebook.py

from flask import request, jsonify, abort
from flask_login import login_required, current_user

from api.services.gradebook_service import GradebookService
from api.services.profile_service import ProfileService
from api.utils.academics_helper import serialize_allocation
from api.utils.errors import error_response, permission_error_response, validation_error_response
from api.utils.people_helper import serialize_student
from api.utils.permissions import require_roles
from services.grading_rules import ASSESSMENT_LABELS, normalize_assessment_type
from . import api_bp


# 🔹 MY CLASSES
@api_bp.get("/gradebook/allocations")
@login_required
@require_roles("TEACHER")
def my_allocations():
    profile = _require_profile()
    allocations = GradebookService.allocations_for_teacher(profile.id)
    return jsonify([serialize_allocation(a, with_teacher=False) for a in allocations])


# 🔹 CLASS SHEET (students of the stream + marks of one assessment)
@api_bp.get("/gradebook/allocations/<int:allocation_id>")
@login_required
@require_roles("TEACHER", "ADMIN")
def class_sheet(allocation_id):
    profile = _require_profile()
    try:
        assessment_type = normalize_assessment_type(request.args.get("assessment_type"))
        allocation = GradebookService.get_allocation(profile, allocation_id)
    except LookupError as exc:
        return error_response(str(exc), 404, "not_found")
    except PermissionError as exc:
        return permission_error_response(exc)
    except ValueError as exc:
        return validation_error_response(exc)

    sheet = GradebookService.class_sheet(allocation, assessment_type)
    return jsonify({
        "allocation": serialize_allocation(allocation, with_teacher=False),
        "assessment_type": assessment_type,
        "assessment_types": ASSESSMENT_LABELS,
        "rows": [
            {
                "student": serialize_student(row["student"]),
                "score": row["score"],
                "grade": row["grade"],
            }
            for row in sheet["rows"]
        ],
    })


# 🔹 SAVE MARKS
@api_bp.post("/gradebook/allocations/<int:allocation_id>/marks")
@login_required
@require_roles("TEACHER")
def save_marks(allocation_id):
    """
    Expected JSON:
    {
      "assessment_type": "BOT",
      "marks": {"12": "78", "13": "", "14": 91.5}
    }
    Answers 200 when every row was saved, 207 when some were rejected.
    """
    profile = _require_profile()
    data = request.get_json(silent=True) or {}
    try:
        assessment_type = normalize_assessment_type(data.get("assessment_type"))
        allocation = GradebookService.get_allocation(profile, allocation_id, for_write=True)
        result = GradebookService.save_marks(allocation, assessment_type, data.get("marks"))
    except LookupError as exc:
        return error_response(str(exc), 404, "not_found")
    except PermissionError as exc:
        return permission_error_response(exc)
    except ValueError as exc:
        return validation_error_response(exc)

    status = 207 if result["rejected"] else 200
    return jsonify({"status": "ok" if status == 200 else "partial", **result}), status


def _require_profile():
    try:
        return ProfileService.require_profile(current_user.id)
    except ValueError as exc:
        abort(403, description=str(exc))
