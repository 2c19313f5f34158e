# seeds/basic_seed.py
"""
Demo seed for the school dashboard.

CREATES (or reuses when they already exist):
    - Users and profiles for every role (admin, teacher, editor, student, parent)
    - Class levels S1-S6 with their streams
    - Default O-Level subjects
    - Current academic year with three terms (the first one current)
    - A teacher allocation, a handful of students and some marks
    - Houses, clubs and upcoming school events

Usage:
    flask shell
    >>> from seeds.basic_seed import run_basic_seed
    >>> run_basic_seed()
"""

import logging
from datetime import date, timedelta

from extensions import db
from models import (
    AcademicYear,
    AudienceEnum,
    ClassLevel,
    Club,
    House,
    Mark,
    Profile,
    RoleEnum,
    SchoolEvent,
    SchoolSettings,
    Stream,
    Student,
    Subject,
    TeacherAllocation,
    Term,
    User,
)
from api.services.academic_service import AcademicService

logger = logging.getLogger(__name__)

DEMO_USERS = {
    "admin@demo.com": ("admin123", "Grace Namutebi", RoleEnum.ADMIN),
    "teacher@demo.com": ("teacher123", "Peter Okello", RoleEnum.TEACHER),
    "editor@demo.com": ("editor123", "Ruth Achieng", RoleEnum.EDITOR),
    "student@demo.com": ("student123", "Brian Mugisha", RoleEnum.STUDENT),
    "parent@demo.com": ("parent123", "Sarah Mugisha", RoleEnum.PARENT),
}

DEMO_HOUSES = (
    ("Kabalega", "#dc2626"),
    ("Mwanga", "#2563eb"),
    ("Nyerere", "#16a34a"),
    ("Kintu", "#ca8a04"),
)

DEMO_CLUBS = (
    ("Writers Club", "Arts", "For aspiring poets and storytellers.", "Thursday", 24),
    ("Wildlife Club", "Environment", "Conservation and nature walks.", "Friday", 45),
    ("Interact Club", "Community", "Service above self.", "Saturday", 120),
    ("STEM Robotics", "Science", "Building the future, one bot at a time.", "Tuesday", 18),
)

DEMO_STUDENTS = (
    ("Alice Nakato", "F"),
    ("Brian Mugisha", "M"),
    ("Catherine Auma", "F"),
    ("David Ssemwogerere", "M"),
    ("Esther Nabirye", "F"),
)


def _get_or_create(model, defaults=None, **kwargs):
    instance = model.query.filter_by(**kwargs).first()
    if instance:
        return instance, False

    params = {**kwargs}
    if defaults:
        params.update(defaults)

    instance = model(**params)
    db.session.add(instance)
    return instance, True


def _ensure_user(email, password, full_name, role):
    user, created = _get_or_create(
        User,
        email=email,
        defaults={"user_metadata": {"role": role.value, "full_name": full_name}},
    )
    if created or not user.password_hash:
        user.set_password(password)
    db.session.flush()

    profile, _ = _get_or_create(
        Profile,
        user_id=user.id,
        defaults={"email": email, "role": role, "full_name": full_name},
    )
    return user, profile


def _ensure_academic_year(today):
    start = date(today.year, 2, 1)
    end = date(today.year, 11, 30)
    year, _ = _get_or_create(
        AcademicYear,
        name=str(today.year),
        defaults={"start_date": start, "end_date": end},
    )
    db.session.flush()

    terms = []
    for index, (term_start, term_end) in enumerate(
        (
            (start, date(today.year, 4, 30)),
            (date(today.year, 5, 27), date(today.year, 8, 20)),
            (date(today.year, 9, 15), end),
        ),
        start=1,
    ):
        term, _ = _get_or_create(
            Term,
            academic_year_id=year.id,
            name=f"Term {index}",
            defaults={"start_date": term_start, "end_date": term_end},
        )
        terms.append(term)
    db.session.flush()

    settings = SchoolSettings.get()
    if settings.current_year_id is None:
        settings.current_year_id = year.id
    if year.current_term_id is None:
        year.current_term_id = terms[0].id
    return year


def run_basic_seed(today=None):
    today = today or date.today()
    logger.info("Running demo seed...")

    profiles = {}
    for email, (password, full_name, role) in DEMO_USERS.items():
        _, profiles[role] = _ensure_user(email, password, full_name, role)

    for level in range(1, 7):
        _get_or_create(ClassLevel, level=level, defaults={"name": f"S{level}"})
    db.session.flush()

    # Subjects and S1-S4 streams through the same path as the admin buttons
    AcademicService.seed_subjects()
    AcademicService.seed_streams()

    year = _ensure_academic_year(today)

    s1 = ClassLevel.query.filter_by(level=1).first()
    stream = Stream.query.filter_by(class_id=s1.id, name="North").first()
    subject = Subject.query.filter_by(name="Mathematics").first()

    allocation, _ = _get_or_create(
        TeacherAllocation,
        teacher_id=profiles[RoleEnum.TEACHER].id,
        subject_id=subject.id,
        stream_id=stream.id,
        academic_year_id=year.id,
    )

    students = []
    for index, (full_name, gender) in enumerate(DEMO_STUDENTS, start=1):
        student, _ = _get_or_create(
            Student,
            full_name=full_name,
            defaults={
                "gender": gender,
                "student_id_human": f"S{index:03d}",
                "current_stream_id": stream.id,
            },
        )
        students.append(student)
    db.session.flush()

    for student, score in zip(students, (88, 74, 65, 52, 41)):
        _get_or_create(
            Mark,
            student_id=student.id,
            teacher_allocation_id=allocation.id,
            assessment_type="BOT",
            defaults={"score": float(score)},
        )

    for name, color in DEMO_HOUSES:
        _get_or_create(House, name=name, defaults={"color": color, "points": 0, "members": 0})

    for name, category, description, meeting_day, member_count in DEMO_CLUBS:
        _get_or_create(
            Club,
            name=name,
            defaults={
                "category": category,
                "description": description,
                "meeting_day": meeting_day,
                "member_count": member_count,
            },
        )

    _get_or_create(
        SchoolEvent,
        title="Staff Meeting",
        defaults={
            "event_date": today + timedelta(days=3),
            "location": "Staff Room",
            "audience": AudienceEnum.STAFF,
        },
    )
    _get_or_create(
        SchoolEvent,
        title="Sports Day",
        defaults={
            "event_date": today + timedelta(days=14),
            "location": "Main Field",
            "audience": AudienceEnum.ALL,
            "description": "Inter-house athletics.",
        },
    )
    _get_or_create(
        SchoolEvent,
        title="Parents' Visiting Day",
        defaults={
            "event_date": today + timedelta(days=21),
            "location": "Assembly Hall",
            "audience": AudienceEnum.PARENTS,
        },
    )

    db.session.commit()

    logger.info("Demo seed loaded. Users:")
    for email, (password, _, role) in DEMO_USERS.items():
        logger.info("  - %s / %s (%s)", email, password, role.value)
