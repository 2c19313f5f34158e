from flask import jsonify
from flask_login import login_required

from api.services.dashboard_service import DashboardService
from api.utils.academics_helper import serialize_term, serialize_year
from api.utils.people_helper import serialize_event
from api.utils.permissions import get_current_profile
from . import api_bp


@api_bp.get("/dashboard")
@login_required
def dashboard():
    profile = get_current_profile()
    if not profile:
        return jsonify({"error": "This user has no profile yet.", "code": "permission_denied"}), 403

    summary = DashboardService.summary(profile)
    year = summary["year"]
    term = summary["term"]
    event = summary["upcoming_event"]

    return jsonify({
        "year": serialize_year(year, year.id if year.is_current else None) if year else None,
        "term": serialize_term(term) if term else None,
        "term_week": summary["term_week"],
        "upcoming_event": serialize_event(event) if event else None,
    })
