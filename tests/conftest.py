from datetime import date

import pytest
from flask import g

from app import create_app
from extensions import db
from models import (
    AcademicYear,
    ClassLevel,
    Profile,
    RoleEnum,
    SchoolSettings,
    Stream,
    Student,
    Subject,
    TeacherAllocation,
    Term,
    User,
)


@pytest.fixture
def app(monkeypatch):
    # Never reach a real provider from the tests
    for var in ("AI_API_KEY", "OPENAI_API_KEY", "AI_PROVIDER"):
        monkeypatch.delenv(var, raising=False)

    app = create_app({
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": "sqlite://",
        "SECRET_KEY": "test-secret",
    })

    # The test keeps an app context pushed, which requests reuse; drop the
    # user Flask-Login cached on `g` so each request reads the session cookie.
    @app.teardown_request
    def _forget_loaded_user(exc):
        g.pop("_login_user", None)

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(app):
    def _make_user(email, role=RoleEnum.TEACHER, full_name=None, password="secret123", with_profile=True):
        user = User(
            email=email,
            user_metadata={"role": role.value, "full_name": full_name or email.split("@")[0]},
        )
        user.set_password(password)
        db.session.add(user)
        db.session.flush()
        if with_profile:
            db.session.add(Profile(
                user_id=user.id,
                email=email,
                role=role,
                full_name=full_name or email.split("@")[0],
            ))
        db.session.commit()
        return user
    return _make_user


@pytest.fixture
def login_as(client, make_user):
    """Create a user with the given role and sign the test client in."""
    def _login_as(role, email=None, **kwargs):
        email = email or f"{role.value}@school.test"
        user = make_user(email, role=role, **kwargs)
        response = client.post("/auth/login", json={"email": email, "password": "secret123"})
        assert response.status_code == 200
        return user
    return _login_as


@pytest.fixture
def school(app):
    """
    A minimal school: S1/S2 with streams, one subject and a current year
    with its first term current.
    """
    s1 = ClassLevel(name="S1", level=1)
    s2 = ClassLevel(name="S2", level=2)
    db.session.add_all([s1, s2])
    db.session.flush()

    north = Stream(name="North", class_id=s1.id)
    south = Stream(name="South", class_id=s1.id)
    s2_north = Stream(name="North", class_id=s2.id)
    maths = Subject(name="Mathematics", code="MAT", level="O-Level")
    db.session.add_all([north, south, s2_north, maths])

    year = AcademicYear(name="2026", start_date=date(2026, 2, 1), end_date=date(2026, 11, 30))
    db.session.add(year)
    db.session.flush()

    term = Term(academic_year_id=year.id, name="Term 1", start_date=date(2026, 2, 1), end_date=date(2026, 4, 30))
    db.session.add(term)
    db.session.flush()

    year.current_term_id = term.id
    SchoolSettings.get().current_year_id = year.id
    db.session.commit()

    return {
        "s1": s1,
        "s2": s2,
        "north": north,
        "south": south,
        "s2_north": s2_north,
        "maths": maths,
        "year": year,
        "term": term,
    }


@pytest.fixture
def make_allocation(school):
    def _make_allocation(teacher_user, stream=None):
        allocation = TeacherAllocation(
            teacher_id=teacher_user.profile.id,
            subject_id=school["maths"].id,
            stream_id=(stream or school["north"]).id,
            academic_year_id=school["year"].id,
        )
        db.session.add(allocation)
        db.session.commit()
        return allocation
    return _make_allocation


@pytest.fixture
def make_student(school):
    def _make_student(full_name, stream=None, student_id_human=None):
        student = Student(
            full_name=full_name,
            student_id_human=student_id_human,
            gender="F",
            current_stream_id=(stream or school["north"]).id,
        )
        db.session.add(student)
        db.session.commit()
        return student
    return _make_student
