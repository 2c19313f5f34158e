# api/academics.py

from flask import request, jsonify
from flask_login import login_required

from api.services.academic_service import AcademicService
from api.utils.academics_helper import (
    serialize_allocation,
    serialize_class_level,
    serialize_profile,
    serialize_stream,
    serialize_subject,
    serialize_term,
    serialize_year,
)
from api.utils.errors import error_response, validation_error_response
from api.utils.permissions import require_roles
from . import api_bp


@api_bp.get("/academics")
@login_required
@require_roles("ADMIN")
def academics_overview():
    """
    Everything the academics screen needs in one round trip:
    teachers, subjects, class levels, streams, years, the active year
    and the most recent allocations with display names.
    """
    data = AcademicService.reference_data()
    current_year_id = data["current_year_id"]
    active_year = data["active_year"]

    return jsonify({
        "teachers": [serialize_profile(p) for p in data["teachers"]],
        "subjects": [serialize_subject(s) for s in data["subjects"]],
        "class_levels": [serialize_class_level(c) for c in data["class_levels"]],
        "streams": [serialize_stream(s) for s in data["streams"]],
        "years": [serialize_year(y, current_year_id) for y in data["years"]],
        "active_year": serialize_year(active_year, current_year_id) if active_year else None,
        "needs_setup": active_year is None,
        "allocations": [serialize_allocation(a) for a in data["allocations"]],
    })


# ----------------------------------------------
# ACADEMIC YEARS / TERMS
# ----------------------------------------------
@api_bp.post("/academic-years")
@login_required
@require_roles("ADMIN")
def create_academic_year():
    try:
        year = AcademicService.create_year(request.get_json(silent=True) or {})
    except ValueError as exc:
        return validation_error_response(exc)
    return jsonify({
        "status": "created",
        "year": serialize_year(year, AcademicService.current_year_id()),
    }), 201


@api_bp.post("/academic-years/<int:year_id>/activate")
@login_required
@require_roles("ADMIN")
def activate_academic_year(year_id):
    try:
        year = AcademicService.activate_year(year_id)
    except LookupError as exc:
        return error_response(str(exc), 404, "not_found")
    return jsonify({"status": "ok", "year": serialize_year(year, year.id)})


@api_bp.get("/academic-years/<int:year_id>/terms")
@login_required
@require_roles("ADMIN")
def list_terms(year_id):
    try:
        terms = AcademicService.list_terms(year_id)
    except LookupError as exc:
        return error_response(str(exc), 404, "not_found")
    return jsonify([serialize_term(t) for t in terms])


@api_bp.post("/academic-years/<int:year_id>/terms")
@login_required
@require_roles("ADMIN")
def create_term(year_id):
    try:
        term = AcademicService.create_term(year_id, request.get_json(silent=True) or {})
    except LookupError as exc:
        return error_response(str(exc), 404, "not_found")
    except ValueError as exc:
        return validation_error_response(exc)
    return jsonify({"status": "created", "term": serialize_term(term)}), 201


@api_bp.post("/terms/<int:term_id>/activate")
@login_required
@require_roles("ADMIN")
def activate_term(term_id):
    try:
        term = AcademicService.activate_term(term_id)
    except LookupError as exc:
        return error_response(str(exc), 404, "not_found")
    return jsonify({"status": "ok", "term": serialize_term(term)})


# ----------------------------------------------
# STREAMS (cascading select) / ALLOCATIONS
# ----------------------------------------------
@api_bp.get("/class-levels/<int:class_id>/streams")
@login_required
@require_roles("ADMIN")
def list_class_streams(class_id):
    return jsonify([serialize_stream(s) for s in AcademicService.streams_for_class(class_id)])


@api_bp.post("/allocations")
@login_required
@require_roles("ADMIN")
def create_allocation():
    """
    Expected JSON:
    {
      "teacher_id": 3,
      "subject_id": 5,
      "class_id": 1,     # only used to check the stream
      "stream_id": 2
    }
    """
    try:
        allocation = AcademicService.allocate_teacher(request.get_json(silent=True) or {})
    except ValueError as exc:
        return validation_error_response(exc)

    return jsonify({
        "status": "created",
        "message": "Teacher successfully assigned to class.",
        "allocation": serialize_allocation(allocation),
    }), 201


# ----------------------------------------------
# SEEDING
# ----------------------------------------------
@api_bp.post("/subjects/seed")
@login_required
@require_roles("ADMIN")
def seed_subjects():
    created = AcademicService.seed_subjects()
    message = f"Added {created} new subjects." if created else "All subjects already exist."
    return jsonify({"status": "ok", "created": created, "message": message})


@api_bp.post("/streams/seed")
@login_required
@require_roles("ADMIN")
def seed_streams():
    try:
        created = AcademicService.seed_streams()
    except ValueError as exc:
        return validation_error_response(exc)
    message = (
        f"Successfully created {created} new streams."
        if created else "All streams for S1-S4 already exist."
    )
    return jsonify({"status": "ok", "created": created, "message": message})
