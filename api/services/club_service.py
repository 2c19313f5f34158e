# api/services/club_service.py

from __future__ import annotations

from typing import Mapping

from flask import current_app
from sqlalchemy import insert, select

from extensions import db
from models import Club
from services.schema_capabilities import SchemaCapabilities
from api.utils.errors import IncompleteFormError, ValidationError
from api.utils.forms_helper import clean_str


class ClubService:
    """
    Clubs are read and written through the table, restricted to the columns
    the live database has. Optional columns missing from an older schema are
    left out of the insert and reported back instead of failing the request.
    """

    DEFAULT_CATEGORY = "General"
    MEETING_DAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")

    @staticmethod
    def _available_columns() -> list[str]:
        caps = SchemaCapabilities.for_app()
        available = caps.columns(Club.__tablename__)
        return [name for name in Club.__table__.columns.keys() if not available or name in available]

    @classmethod
    def list_clubs(cls) -> list[dict]:
        table = Club.__table__
        columns = cls._available_columns()
        rows = db.session.execute(
            select(*[table.c[name] for name in columns]).order_by(table.c.name.asc())
        ).mappings().all()
        return [cls._as_dict(row) for row in rows]

    @classmethod
    def get_club(cls, club_id: int) -> dict | None:
        table = Club.__table__
        columns = cls._available_columns()
        row = db.session.execute(
            select(*[table.c[name] for name in columns]).where(table.c.id == club_id)
        ).mappings().first()
        return cls._as_dict(row) if row else None

    @classmethod
    def create_club(cls, data: Mapping) -> tuple[dict, list[str]]:
        """
        Returns (club, dropped_fields).
        """
        name = clean_str(data, "name")
        if not name:
            raise IncompleteFormError("Club name is required.")

        meeting_day = clean_str(data, "meeting_day").title() or None
        if meeting_day and meeting_day not in cls.MEETING_DAYS:
            raise ValidationError("meeting_day must be a day of the week.")

        values = {
            "name": name,
            "description": clean_str(data, "description") or None,
            "category": clean_str(data, "category") or None,
            "meeting_day": meeting_day,
            "patron_name": clean_str(data, "patron_name") or None,
        }

        available = set(cls._available_columns())
        dropped = [
            column for column in Club.OPTIONAL_COLUMNS
            if column not in available and values.get(column) not in (None, "")
        ]
        # Unset optional columns are left to their server defaults
        insert_values = {
            key: value for key, value in values.items()
            if key in available and (value is not None or key not in Club.OPTIONAL_COLUMNS)
        }

        result = db.session.execute(insert(Club.__table__).values(**insert_values))
        db.session.commit()

        if dropped:
            current_app.logger.warning(
                "Club '%s' saved without %s: columns missing from the clubs table.",
                name, ", ".join(dropped),
            )

        club_id = result.inserted_primary_key[0]
        return cls.get_club(club_id) or {"id": club_id, **insert_values}, dropped

    @classmethod
    def _as_dict(cls, row) -> dict:
        data = {name: None for name in Club.__table__.columns.keys()}
        data.update(dict(row))
        if data.get("member_count") is None:
            data["member_count"] = 0
        data["category"] = data.get("category") or cls.DEFAULT_CATEGORY
        return data
