# api/services/admissions_service.py

from __future__ import annotations

from typing import Iterable, Mapping

from flask import current_app
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from extensions import db
from models import Club, ClubMember, Stream, Student
from api.services.academic_service import AcademicService
from api.services.club_service import ClubService
from api.utils.errors import IncompleteFormError, ValidationError
from api.utils.forms_helper import clean_str, parse_id


VALID_GENDERS = ("M", "F")


def filter_streams(streams: Iterable[Stream], class_id: int | None) -> list[Stream]:
    """Cascading dropdown: exactly the streams of the chosen class."""
    if not class_id:
        return []
    return [stream for stream in streams if stream.class_id == class_id]


class AdmissionForm:
    """
    Client-side form state for the admissions screen, for UI code driving the
    API. Choosing another class always clears the stream so a stale stream of
    the previous class cannot be submitted. The server never trusts this
    state: AdmissionsService.admit re-validates every posted field.
    """

    FIELDS = ("full_name", "student_id_human", "gender", "class_id", "stream_id", "club_id")

    def __init__(self, **values):
        self.full_name = values.get("full_name", "")
        self.student_id_human = values.get("student_id_human", "")
        self.gender = values.get("gender") or "M"
        self.class_id = values.get("class_id")
        self.stream_id = values.get("stream_id")
        self.club_id = values.get("club_id")

    def set(self, field: str, value) -> None:
        if field not in self.FIELDS:
            raise KeyError(field)
        setattr(self, field, value)
        if field == "class_id":
            self.stream_id = None

    def available_streams(self, streams: Iterable[Stream]) -> list[Stream]:
        return filter_streams(streams, self.class_id)

    def as_payload(self) -> dict:
        return {field: getattr(self, field) for field in self.FIELDS}


class AdmissionsService:

    @staticmethod
    def options() -> dict:
        return {
            "class_levels": AcademicService.list_class_levels(),
            "streams": AcademicService.list_streams(),
            "clubs": ClubService.list_clubs(),
        }

    @staticmethod
    def admit(data: Mapping) -> tuple[Student, list[str]]:
        """
        Insert the student; then, when a club was chosen, try the membership.
        A failed membership never undoes the admission: it only adds a warning.
        """
        full_name = clean_str(data, "full_name")
        student_id_human = clean_str(data, "student_id_human")
        gender = (clean_str(data, "gender") or "M").upper()
        class_id = parse_id(data.get("class_id"), "class_id")
        stream_id = parse_id(data.get("stream_id"), "stream_id")
        club_id = parse_id(data.get("club_id"), "club_id")

        if not full_name or not student_id_human or not class_id or not stream_id:
            raise IncompleteFormError("Full name, student ID, class and stream are required.")
        if gender not in VALID_GENDERS:
            raise ValidationError("Gender must be M or F.")

        stream = db.session.get(Stream, stream_id)
        if not stream or stream.class_id != class_id:
            raise ValidationError("The selected stream does not belong to the selected class.")

        student = Student(
            full_name=full_name,
            student_id_human=student_id_human,
            gender=gender,
            current_stream_id=stream.id,
        )
        db.session.add(student)
        db.session.commit()

        warnings: list[str] = []
        if club_id:
            warning = AdmissionsService._join_club(student, club_id)
            if warning:
                warnings.append(warning)

        current_app.logger.info("Student %s admitted (id=%s).", student.full_name, student.id)
        return student, warnings

    @staticmethod
    def _join_club(student: Student, club_id: int) -> str | None:
        try:
            if db.session.execute(select(Club.__table__.c.id).where(Club.__table__.c.id == club_id)).first() is None:
                raise LookupError(f"club {club_id} does not exist")
            db.session.add(ClubMember(student_id=student.id, club_id=club_id, role="member"))
            db.session.commit()
        except (SQLAlchemyError, LookupError) as exc:
            db.session.rollback()
            current_app.logger.warning("Could not add student %s to club %s: %s", student.id, club_id, exc)
            return "Student admitted, but the club enrollment could not be saved."
        return None
