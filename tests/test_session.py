from sqlalchemy.exc import OperationalError

from api.services.session_service import SessionService
from extensions import db
from models import Profile, RoleEnum, User


def test_session_signed_out_without_login(client):
    response = client.get("/api/session")
    assert response.status_code == 200
    assert response.get_json() == {"state": "signed_out"}


def test_home_redirects_to_session_state(client):
    response = client.get("/")
    assert response.status_code == 302
    assert response.headers["Location"].endswith("/api/session")


def test_signup_teacher_lands_on_my_classes(client):
    response = client.post("/auth/signup", json={
        "email": "Teacher@School.test",
        "password": "secret123",
        "role": "teacher",
        "full_name": "Peter Okello",
    })
    assert response.status_code == 201

    profile = Profile.query.filter_by(email="teacher@school.test").one()
    assert profile.role == RoleEnum.TEACHER
    assert profile.full_name == "Peter Okello"

    state = client.get("/api/session").get_json()
    assert state["state"] == "ready"
    assert state["landing_view"] == "my_classes"
    assert state["profile"]["role"] == "teacher"


def test_signup_editor_lands_on_events_and_defaults_name(client):
    client.post("/auth/signup", json={"email": "ruth@school.test", "password": "secret123", "role": "editor"})

    state = client.get("/api/session").get_json()
    assert state["landing_view"] == "events"
    assert state["profile"]["full_name"] == "ruth"


def test_signup_rejects_student_role_and_duplicates(client):
    response = client.post("/auth/signup", json={"email": "kid@school.test", "password": "secret123", "role": "student"})
    assert response.status_code == 400

    client.post("/auth/signup", json={"email": "dup@school.test", "password": "secret123"})
    client.post("/auth/logout")
    response = client.post("/auth/signup", json={"email": "dup@school.test", "password": "secret123"})
    assert response.status_code == 400
    assert response.get_json()["error"] == "User already registered."


def test_signup_rejects_short_password(client):
    response = client.post("/auth/signup", json={"email": "a@school.test", "password": "123"})
    assert response.status_code == 400
    assert response.get_json()["code"] == "validation_error"


def test_login_with_wrong_password(client, make_user):
    make_user("admin@school.test", role=RoleEnum.ADMIN)
    response = client.post("/auth/login", json={"email": "admin@school.test", "password": "nope"})
    assert response.status_code == 401
    assert response.get_json()["code"] == "invalid_credentials"


def test_admin_lands_on_dashboard(client, login_as):
    login_as(RoleEnum.ADMIN)
    assert client.get("/api/session").get_json()["landing_view"] == "dashboard"


def test_missing_profile_is_repaired_from_signup_metadata(client, make_user):
    make_user("late@school.test", role=RoleEnum.EDITOR, full_name="Late Profile", with_profile=False)
    client.post("/auth/login", json={"email": "late@school.test", "password": "secret123"})

    state = client.get("/api/session").get_json()
    assert state["state"] == "ready"
    assert state["landing_view"] == "events"

    profile = Profile.query.filter_by(email="late@school.test").one()
    assert profile.role == RoleEnum.EDITOR
    assert profile.full_name == "Late Profile"


def test_missing_profile_without_metadata_defaults_to_student(client, make_user):
    user = make_user("bare@school.test", with_profile=False)
    user.user_metadata = None
    db.session.commit()
    client.post("/auth/login", json={"email": "bare@school.test", "password": "secret123"})

    state = client.get("/api/session").get_json()
    assert state["profile"]["role"] == "student"
    assert state["profile"]["full_name"] == "bare"


def test_failed_profile_repair_signs_out(client, make_user, monkeypatch):
    make_user("broken@school.test", with_profile=False)
    client.post("/auth/login", json={"email": "broken@school.test", "password": "secret123"})
    monkeypatch.setattr(SessionService, "provision_profile", classmethod(lambda cls, user: None))

    state = client.get("/api/session").get_json()
    assert state["state"] == "signed_out"
    assert "Profile setup incomplete" in state["reason"]

    # the session was cleared
    assert client.get("/api/profile").status_code == 401


def test_database_unreachable_offers_retry(client, monkeypatch):
    def _down():
        raise OperationalError("SELECT 1", {}, Exception("could not connect"))

    monkeypatch.setattr(SessionService, "ping", staticmethod(_down))

    response = client.get("/api/session")
    assert response.status_code == 503
    body = response.get_json()
    assert body["state"] == "connection_failed"
    assert body["retry"] is True


def test_profile_update_cannot_change_role(client, login_as):
    login_as(RoleEnum.TEACHER, full_name="Peter")

    response = client.put("/api/profile", json={"role": "admin"})
    assert response.status_code == 400

    response = client.put("/api/profile", json={"full_name": "Peter Okello", "avatar_url": "https://x.test/a.png"})
    assert response.status_code == 200
    assert response.get_json()["profile"]["full_name"] == "Peter Okello"


def test_login_required_endpoints_answer_json_401(client):
    response = client.get("/api/dashboard")
    assert response.status_code == 401
    assert response.get_json()["code"] == "signed_out"


def test_signup_password_is_hashed(client):
    client.post("/auth/signup", json={"email": "hash@school.test", "password": "secret123"})
    user = User.query.filter_by(email="hash@school.test").one()
    assert user.password_hash != "secret123"
    assert user.check_password("secret123")


def test_profile_routes_explain_a_missing_profile(client, make_user):
    make_user("noprofile@school.test", with_profile=False)
    client.post("/auth/login", json={"email": "noprofile@school.test", "password": "secret123"})

    response = client.get("/api/profile")
    assert response.status_code == 403
    body = response.get_json()
    assert body["code"] == "permission_denied"
    assert body["error"] == "This user has no profile yet."
