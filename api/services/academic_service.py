# api/services/academic_service.py

from __future__ import annotations

from typing import Mapping

from flask import current_app
from sqlalchemy.orm import joinedload

from extensions import db
from models import (
    AcademicYear,
    ClassLevel,
    Profile,
    RoleEnum,
    SchoolSettings,
    Stream,
    Subject,
    TeacherAllocation,
    Term,
)
from api.services.profile_service import ProfileService
from api.utils.errors import IncompleteFormError, NoActiveYearError, ValidationError
from api.utils.forms_helper import clean_str, parse_bool, parse_date, parse_id, validate_date_range


class AcademicService:
    """
    Academic administration: reference data, the current year/term pointer,
    teacher allocations and the seed helpers for subjects and streams.
    """

    DEFAULT_SUBJECTS = (
        "Biology", "Physics", "Chemistry", "ICT", "Mathematics", "English",
        "Geography", "Kiswahili", "Fine Art", "CRE", "Luganda",
        "Entrepreneurship", "Performing Arts", "Moral Training", "History",
        "Agriculture", "Physical Education", "Literature", "Economics",
    )
    DEFAULT_SUBJECT_LEVEL = "O-Level"

    DEFAULT_STREAMS = ("North", "Central", "South", "East", "West")
    # Streams are seeded for S1..S4 only
    STREAM_SEED_LEVELS = (1, 4)

    # -----------------
    # Reference data
    # -----------------

    @staticmethod
    def current_year_id() -> int | None:
        settings = db.session.get(SchoolSettings, SchoolSettings.SINGLETON_ID)
        return settings.current_year_id if settings else None

    @classmethod
    def resolve_active_year(cls) -> AcademicYear | None:
        """
        The year flagged current; otherwise the most recent by start date.
        Never creates one: with no years at all the admin must create it.
        """
        current_id = cls.current_year_id()
        if current_id:
            year = db.session.get(AcademicYear, current_id)
            if year:
                return year

        return (
            AcademicYear.query.order_by(
                AcademicYear.start_date.is_(None),
                AcademicYear.start_date.desc(),
                AcademicYear.id.desc(),
            )
            .first()
        )

    @staticmethod
    def list_years() -> list[AcademicYear]:
        return AcademicYear.query.order_by(AcademicYear.start_date.desc(), AcademicYear.id.desc()).all()

    @staticmethod
    def list_subjects() -> list[Subject]:
        return Subject.query.order_by(Subject.name.asc()).all()

    @staticmethod
    def list_class_levels() -> list[ClassLevel]:
        return ClassLevel.query.order_by(ClassLevel.level.asc()).all()

    @staticmethod
    def list_streams() -> list[Stream]:
        return Stream.query.order_by(Stream.name.asc()).all()

    @staticmethod
    def streams_for_class(class_id: int) -> list[Stream]:
        return Stream.query.filter_by(class_id=class_id).order_by(Stream.name.asc()).all()

    @staticmethod
    def recent_allocations(limit: int | None = None) -> list[TeacherAllocation]:
        limit = limit or current_app.config.get("RECENT_ALLOCATIONS_LIMIT", 20)
        return (
            TeacherAllocation.query.options(
                joinedload(TeacherAllocation.teacher),
                joinedload(TeacherAllocation.subject),
                joinedload(TeacherAllocation.stream).joinedload(Stream.class_level),
            )
            .order_by(TeacherAllocation.created_at.desc(), TeacherAllocation.id.desc())
            .limit(limit)
            .all()
        )

    @classmethod
    def reference_data(cls) -> dict:
        active_year = cls.resolve_active_year()
        return {
            "teachers": ProfileService.list_teachers(),
            "subjects": cls.list_subjects(),
            "class_levels": cls.list_class_levels(),
            "streams": cls.list_streams(),
            "years": cls.list_years(),
            "current_year_id": cls.current_year_id(),
            "active_year": active_year,
            "allocations": cls.recent_allocations(),
        }

    # -----------------
    # Years and terms
    # -----------------

    @staticmethod
    def _year_or_404(year_id: int) -> AcademicYear:
        year = db.session.get(AcademicYear, year_id)
        if not year:
            raise LookupError("Academic year not found.")
        return year

    @classmethod
    def create_year(cls, data: Mapping) -> AcademicYear:
        name = clean_str(data, "name")
        start_date = parse_date(data.get("start_date"), "start_date")
        end_date = parse_date(data.get("end_date"), "end_date")
        make_current = parse_bool(data.get("make_current"), "make_current", default=True)

        if not name or not start_date or not end_date:
            raise IncompleteFormError("Year name, start date and end date are required.")
        validate_date_range(start_date, end_date)

        year = AcademicYear(name=name, start_date=start_date, end_date=end_date)
        db.session.add(year)
        db.session.flush()

        if make_current:
            SchoolSettings.get().current_year_id = year.id

        db.session.commit()
        current_app.logger.info("Academic year %s created (id=%s).", year.name, year.id)
        return year

    @classmethod
    def activate_year(cls, year_id: int) -> AcademicYear:
        year = cls._year_or_404(year_id)
        SchoolSettings.get().current_year_id = year.id
        db.session.commit()
        return year

    @classmethod
    def list_terms(cls, year_id: int) -> list[Term]:
        return list(cls._year_or_404(year_id).terms)

    @classmethod
    def create_term(cls, year_id: int, data: Mapping) -> Term:
        year = cls._year_or_404(year_id)
        name = clean_str(data, "name")
        start_date = parse_date(data.get("start_date"), "start_date")
        end_date = parse_date(data.get("end_date"), "end_date")
        make_current = parse_bool(data.get("make_current"), "make_current")

        if not name or not start_date or not end_date:
            raise IncompleteFormError("Term name, start date and end date are required.")
        validate_date_range(start_date, end_date)
        if (year.start_date and start_date < year.start_date) or (year.end_date and end_date > year.end_date):
            raise ValidationError("Term dates must fall within the academic year.")

        term = Term(academic_year_id=year.id, name=name, start_date=start_date, end_date=end_date)
        db.session.add(term)
        db.session.flush()

        if make_current:
            year.current_term_id = term.id

        db.session.commit()
        return term

    @staticmethod
    def activate_term(term_id: int) -> Term:
        term = db.session.get(Term, term_id)
        if not term:
            raise LookupError("Term not found.")
        term.academic_year.current_term_id = term.id
        db.session.commit()
        return term

    # -----------------
    # Allocations
    # -----------------

    @classmethod
    def allocate_teacher(cls, data: Mapping) -> TeacherAllocation:
        year = cls.resolve_active_year()
        if not year:
            raise NoActiveYearError(
                "No active academic year found. Create an academic year before allocating teachers."
            )

        teacher_id = parse_id(data.get("teacher_id"), "teacher_id")
        subject_id = parse_id(data.get("subject_id"), "subject_id")
        class_id = parse_id(data.get("class_id"), "class_id")
        stream_id = parse_id(data.get("stream_id"), "stream_id")

        if not teacher_id or not subject_id or not stream_id:
            raise IncompleteFormError("Please complete all fields (Teacher, Subject, Class, and Stream).")

        teacher = db.session.get(Profile, teacher_id)
        if not teacher or teacher.role != RoleEnum.TEACHER:
            raise ValidationError("The selected teacher does not exist.")
        if not db.session.get(Subject, subject_id):
            raise ValidationError("The selected subject does not exist.")
        stream = db.session.get(Stream, stream_id)
        if not stream:
            raise ValidationError("The selected stream does not exist.")
        if class_id and stream.class_id != class_id:
            raise ValidationError("The selected stream does not belong to the selected class.")

        allocation = TeacherAllocation(
            teacher_id=teacher.id,
            subject_id=subject_id,
            stream_id=stream.id,
            academic_year_id=year.id,
        )
        db.session.add(allocation)
        db.session.commit()
        current_app.logger.info(
            "Teacher %s allocated to subject %s / stream %s for year %s.",
            teacher.id, subject_id, stream.id, year.id,
        )
        return allocation

    # -----------------
    # Seeding
    # -----------------

    @classmethod
    def seed_subjects(cls) -> int:
        """
        Insert the default subjects that are missing (case-insensitive by name).
        Returns how many rows were inserted.
        """
        existing = {name.lower() for (name,) in db.session.query(Subject.name).all()}
        payload = [
            Subject(name=name, code=name[:3].upper(), level=cls.DEFAULT_SUBJECT_LEVEL)
            for name in cls.DEFAULT_SUBJECTS
            if name.lower() not in existing
        ]
        if payload:
            db.session.add_all(payload)
            db.session.commit()
        return len(payload)

    @classmethod
    def seed_streams(cls) -> int:
        low, high = cls.STREAM_SEED_LEVELS
        levels = (
            ClassLevel.query.filter(ClassLevel.level >= low, ClassLevel.level <= high)
            .order_by(ClassLevel.level.asc())
            .all()
        )
        if not levels:
            raise ValidationError("Class levels S1-S4 not found. Please populate class levels first.")

        existing = set(db.session.query(Stream.class_id, Stream.name).all())
        payload = [
            Stream(class_id=level.id, name=name)
            for level in levels
            for name in cls.DEFAULT_STREAMS
            if (level.id, name) not in existing
        ]
        if payload:
            db.session.add_all(payload)
            db.session.commit()
        return len(payload)
