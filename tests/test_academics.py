from datetime import date

from sqlalchemy.exc import ProgrammingError

from api.services.academic_service import AcademicService
from api.utils.errors import PERMISSION_DENIED_MESSAGE
from extensions import db
from models import AcademicYear, ClassLevel, RoleEnum, SchoolSettings, Stream, Subject, TeacherAllocation


def test_academics_requires_admin(client, login_as):
    login_as(RoleEnum.TEACHER)
    response = client.get("/api/academics")
    assert response.status_code == 403
    assert response.get_json()["code"] == "permission_denied"


def test_academics_without_year_needs_setup(client, login_as):
    login_as(RoleEnum.ADMIN)
    body = client.get("/api/academics").get_json()
    assert body["active_year"] is None
    assert body["needs_setup"] is True
    # nothing was created behind the admin's back
    assert AcademicYear.query.count() == 0


def test_only_one_year_is_current_after_activations(client, login_as):
    login_as(RoleEnum.ADMIN)
    first = client.post("/api/academic-years", json={
        "name": "2025", "start_date": "2025-02-01", "end_date": "2025-11-30",
    }).get_json()["year"]
    second = client.post("/api/academic-years", json={
        "name": "2026", "start_date": "2026-02-01", "end_date": "2026-11-30",
    }).get_json()["year"]
    assert second["is_current"] is True

    client.post(f"/api/academic-years/{first['id']}/activate")
    years = client.get("/api/academics").get_json()["years"]
    current = [y for y in years if y["is_current"]]
    assert [y["id"] for y in current] == [first["id"]]
    assert SchoolSettings.get().current_year_id == first["id"]


def test_create_year_validates_dates(client, login_as):
    login_as(RoleEnum.ADMIN)
    response = client.post("/api/academic-years", json={
        "name": "2026", "start_date": "2026-12-01", "end_date": "2026-01-01",
    })
    assert response.status_code == 400

    response = client.post("/api/academic-years", json={"name": "2026"})
    assert response.status_code == 400
    assert response.get_json()["code"] == "incomplete_form"


def test_term_activation_moves_the_current_term(client, login_as, school):
    login_as(RoleEnum.ADMIN)
    year_id = school["year"].id

    response = client.post(f"/api/academic-years/{year_id}/terms", json={
        "name": "Term 2", "start_date": "2026-05-27", "end_date": "2026-08-20",
    })
    assert response.status_code == 201
    term2 = response.get_json()["term"]
    assert term2["is_current"] is False

    client.post(f"/api/terms/{term2['id']}/activate")
    terms = client.get(f"/api/academic-years/{year_id}/terms").get_json()
    assert [t["name"] for t in terms if t["is_current"]] == ["Term 2"]


def test_term_outside_year_is_rejected(client, login_as, school):
    login_as(RoleEnum.ADMIN)
    response = client.post(f"/api/academic-years/{school['year'].id}/terms", json={
        "name": "Holiday", "start_date": "2027-01-01", "end_date": "2027-01-31",
    })
    assert response.status_code == 400


def test_resolve_active_year_falls_back_to_latest_start_date(app):
    db.session.add_all([
        AcademicYear(name="2024", start_date=date(2024, 2, 1), end_date=date(2024, 11, 30)),
        AcademicYear(name="2025", start_date=date(2025, 2, 1), end_date=date(2025, 11, 30)),
    ])
    db.session.commit()
    assert AcademicService.resolve_active_year().name == "2025"


def test_allocation_without_active_year_is_rejected_and_nothing_inserted(client, login_as, make_user):
    login_as(RoleEnum.ADMIN)
    teacher = make_user("t@school.test", role=RoleEnum.TEACHER)

    response = client.post("/api/allocations", json={
        "teacher_id": teacher.profile.id, "subject_id": 1, "class_id": 1, "stream_id": 1,
    })
    assert response.status_code == 400
    assert response.get_json()["code"] == "no_active_year"
    assert TeacherAllocation.query.count() == 0


def test_allocation_with_missing_fields_is_incomplete(client, login_as, school):
    login_as(RoleEnum.ADMIN)
    response = client.post("/api/allocations", json={"teacher_id": "", "subject_id": school["maths"].id})
    assert response.status_code == 400
    body = response.get_json()
    assert body["code"] == "incomplete_form"
    assert body["error"] == "Please complete all fields (Teacher, Subject, Class, and Stream)."


def test_allocation_is_stored_against_the_active_year(client, login_as, make_user, school):
    login_as(RoleEnum.ADMIN)
    teacher = make_user("t@school.test", role=RoleEnum.TEACHER, full_name="Peter Okello")

    response = client.post("/api/allocations", json={
        "teacher_id": teacher.profile.id,
        "subject_id": school["maths"].id,
        "class_id": school["s1"].id,
        "stream_id": school["north"].id,
    })
    assert response.status_code == 201
    allocation = response.get_json()["allocation"]
    assert allocation["academic_year_id"] == school["year"].id
    assert allocation["teacher_name"] == "Peter Okello"
    assert allocation["class_name"] == "S1"

    listed = client.get("/api/academics").get_json()["allocations"]
    assert [a["id"] for a in listed] == [allocation["id"]]


def test_allocation_rejects_stream_of_another_class(client, login_as, make_user, school):
    login_as(RoleEnum.ADMIN)
    teacher = make_user("t@school.test", role=RoleEnum.TEACHER)
    response = client.post("/api/allocations", json={
        "teacher_id": teacher.profile.id,
        "subject_id": school["maths"].id,
        "class_id": school["s1"].id,
        "stream_id": school["s2_north"].id,
    })
    assert response.status_code == 400


def test_stream_cascade_lists_only_streams_of_the_class(client, login_as, school):
    login_as(RoleEnum.ADMIN)
    streams = client.get(f"/api/class-levels/{school['s1'].id}/streams").get_json()
    assert sorted(s["name"] for s in streams) == ["North", "South"]
    assert {s["class_id"] for s in streams} == {school["s1"].id}


def test_seed_subjects_is_idempotent(client, login_as):
    login_as(RoleEnum.ADMIN)
    db.session.add(Subject(name="mathematics", code="MAT"))
    db.session.commit()

    first = client.post("/api/subjects/seed").get_json()
    assert first["created"] == len(AcademicService.DEFAULT_SUBJECTS) - 1

    second = client.post("/api/subjects/seed").get_json()
    assert second["created"] == 0
    assert second["message"] == "All subjects already exist."


def test_seed_streams_needs_class_levels(client, login_as):
    login_as(RoleEnum.ADMIN)
    response = client.post("/api/streams/seed")
    assert response.status_code == 400


def test_seed_streams_fills_missing_streams_for_s1_to_s4(client, login_as):
    login_as(RoleEnum.ADMIN)
    for level in range(1, 6):
        db.session.add(ClassLevel(name=f"S{level}", level=level))
    db.session.commit()

    first = client.post("/api/streams/seed").get_json()
    assert first["created"] == 4 * len(AcademicService.DEFAULT_STREAMS)
    assert client.post("/api/streams/seed").get_json()["created"] == 0

    s5 = ClassLevel.query.filter_by(level=5).one()
    assert Stream.query.filter_by(class_id=s5.id).count() == 0


class InsufficientPrivilege(Exception):
    pgcode = "42501"


def test_database_refusal_is_reported_as_permission_denied(client, login_as, make_user, school, monkeypatch):
    login_as(RoleEnum.ADMIN)
    teacher = make_user("t@school.test", role=RoleEnum.TEACHER)

    def _refused(data):
        raise ProgrammingError(
            "INSERT INTO teacher_allocations ...", {}, InsufficientPrivilege("permission denied for table")
        )

    monkeypatch.setattr(AcademicService, "allocate_teacher", staticmethod(_refused))
    response = client.post("/api/allocations", json={
        "teacher_id": teacher.profile.id,
        "subject_id": school["maths"].id,
        "class_id": school["s1"].id,
        "stream_id": school["north"].id,
    })
    assert response.status_code == 403
    body = response.get_json()
    assert body["code"] == "permission_denied"
    assert body["error"] == PERMISSION_DENIED_MESSAGE
    assert TeacherAllocation.query.count() == 0


def test_role_gate_uses_the_permission_denied_message(client, login_as):
    login_as(RoleEnum.EDITOR)
    response = client.post("/api/subjects/seed")
    assert response.status_code == 403
    assert response.get_json()["error"] == PERMISSION_DENIED_MESSAGE


def test_make_current_accepts_form_style_strings(client, login_as, school):
    login_as(RoleEnum.ADMIN)
    response = client.post("/api/academic-years", json={
        "name": "2027", "start_date": "2027-02-01", "end_date": "2027-11-30", "make_current": "false",
    })
    assert response.status_code == 201
    assert response.get_json()["year"]["is_current"] is False
    assert SchoolSettings.get().current_year_id == school["year"].id

    response = client.post(f"/api/academic-years/{school['year'].id}/terms", json={
        "name": "Term 2", "start_date": "2026-05-27", "end_date": "2026-08-20", "make_current": "true",
    })
    assert response.get_json()["term"]["is_current"] is True


def test_make_current_rejects_unknown_values(client, login_as):
    login_as(RoleEnum.ADMIN)
    response = client.post("/api/academic-years", json={
        "name": "2027", "start_date": "2027-02-01", "end_date": "2027-11-30", "make_current": "maybe",
    })
    assert response.status_code == 400
    assert response.get_json()["code"] == "validation_error"
    assert AcademicYear.query.count() == 0
