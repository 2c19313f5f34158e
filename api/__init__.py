from flask import Blueprint

api_bp = Blueprint("api", __name__, url_prefix="/api")

from . import (
    session,
    academics,
    admissions,
    clubs,
    events,
    gradebook,
    assistant,
    houses,
    dashboard,
)
