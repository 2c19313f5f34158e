from datetime import datetime
import enum

from extensions import db


class AudienceEnum(str, enum.Enum):
    ALL = "all"
    STUDENTS = "students"
    STAFF = "staff"
    PARENTS = "parents"


class Club(db.Model):
    """
    Student club or society.

    Only `name` and `description` exist in every deployed schema; the other
    descriptive columns were added later by hand-run scripts and may be absent
    (see services/schema_capabilities.py).
    """

    __tablename__ = "clubs"

    OPTIONAL_COLUMNS = ("category", "meeting_day", "patron_name", "member_count")

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    description = db.Column(db.Text, nullable=True)
    category = db.Column(db.String(50), nullable=True, server_default="General")
    meeting_day = db.Column(db.String(20), nullable=True)
    patron_name = db.Column(db.String(255), nullable=True)
    member_count = db.Column(db.Integer, nullable=True, server_default="0")


class SchoolEvent(db.Model):
    __tablename__ = "school_events"

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=False)
    event_date = db.Column(db.Date, nullable=False, index=True)
    location = db.Column(db.String(255), nullable=True)
    audience = db.Column(db.Enum(AudienceEnum), nullable=False, default=AudienceEnum.ALL)
    description = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)


class House(db.Model):
    __tablename__ = "houses"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(80), nullable=False, unique=True)
    color = db.Column(db.String(7), nullable=True)
    points = db.Column(db.Integer, nullable=False, default=0)
    members = db.Column(db.Integer, nullable=False, default=0)
