# api/services/event_service.py

from __future__ import annotations

from datetime import date
from typing import Iterable, Mapping

from extensions import db
from models import AudienceEnum, RoleEnum, SchoolEvent
from api.utils.errors import IncompleteFormError, ValidationError
from api.utils.forms_helper import clean_str, parse_date


class EventService:

    # What each role gets to see on its own dashboard
    ROLE_AUDIENCES = {
        RoleEnum.TEACHER: (AudienceEnum.ALL, AudienceEnum.STAFF),
        RoleEnum.STUDENT: (AudienceEnum.ALL, AudienceEnum.STUDENTS),
        RoleEnum.PARENT: (AudienceEnum.ALL, AudienceEnum.PARENTS),
    }

    @staticmethod
    def parse_audiences(raw: str | Iterable[str] | None) -> list[AudienceEnum]:
        if not raw:
            return []
        items = raw.split(",") if isinstance(raw, str) else list(raw)
        audiences = []
        for item in items:
            item = (item or "").strip().lower()
            if not item:
                continue
            try:
                audiences.append(AudienceEnum(item))
            except ValueError:
                raise ValidationError(f"Unknown audience '{item}'.")
        return audiences

    @classmethod
    def audiences_for_role(cls, role: RoleEnum | None) -> tuple[AudienceEnum, ...] | None:
        """None means no restriction (admin / editor)."""
        return cls.ROLE_AUDIENCES.get(role)

    @staticmethod
    def list_events(audiences: Iterable[AudienceEnum] | None = None) -> list[SchoolEvent]:
        query = SchoolEvent.query
        audiences = list(audiences or [])
        if audiences:
            query = query.filter(SchoolEvent.audience.in_(audiences))
        return query.order_by(SchoolEvent.event_date.asc(), SchoolEvent.id.asc()).all()

    @staticmethod
    def upcoming_event(today: date | None = None, audiences: Iterable[AudienceEnum] | None = None) -> SchoolEvent | None:
        today = today or date.today()
        query = SchoolEvent.query.filter(SchoolEvent.event_date >= today)
        audiences = list(audiences or [])
        if audiences:
            query = query.filter(SchoolEvent.audience.in_(audiences))
        return query.order_by(SchoolEvent.event_date.asc(), SchoolEvent.id.asc()).first()

    @classmethod
    def create_event(cls, data: Mapping) -> SchoolEvent:
        title = clean_str(data, "title")
        event_date = parse_date(data.get("event_date"), "event_date")
        if not title or not event_date:
            raise IncompleteFormError("Event title and date are required.")

        audiences = cls.parse_audiences(clean_str(data, "audience") or AudienceEnum.ALL.value)
        if len(audiences) != 1:
            raise ValidationError("An event targets exactly one audience.")

        event = SchoolEvent(
            title=title,
            event_date=event_date,
            location=clean_str(data, "location") or None,
            audience=audiences[0],
            description=clean_str(data, "description") or None,
        )
        db.session.add(event)
        db.session.commit()
        return event
