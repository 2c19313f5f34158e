# api/utils/academics_helper.py
from models import (
    AcademicYear,
    ClassLevel,
    Profile,
    Stream,
    Subject,
    TeacherAllocation,
    Term,
)
from api.utils.forms_helper import iso


def serialize_profile(profile: Profile) -> dict:
    return {
        "id": profile.id,
        "email": profile.email,
        "full_name": profile.full_name,
        "role": profile.role.value if profile.role else None,
        "avatar_url": profile.avatar_url,
    }


def serialize_year(year: AcademicYear, current_year_id: int | None = None) -> dict:
    return {
        "id": year.id,
        "name": year.name,
        "start_date": iso(year.start_date),
        "end_date": iso(year.end_date),
        "is_current": year.id == current_year_id,
        "current_term_id": year.current_term_id,
    }


def serialize_term(term: Term) -> dict:
    return {
        "id": term.id,
        "academic_year_id": term.academic_year_id,
        "name": term.name,
        "start_date": iso(term.start_date),
        "end_date": iso(term.end_date),
        "is_current": term.is_current,
    }


def serialize_subject(subject: Subject) -> dict:
    return {
        "id": subject.id,
        "name": subject.name,
        "code": subject.code,
        "level": subject.level,
    }


def serialize_class_level(class_level: ClassLevel) -> dict:
    return {"id": class_level.id, "name": class_level.name, "level": class_level.level}


def serialize_stream(stream: Stream) -> dict:
    return {"id": stream.id, "name": stream.name, "class_id": stream.class_id}


def serialize_allocation(allocation: TeacherAllocation, *, with_teacher: bool = True) -> dict:
    """
    Display projection of an allocation, with joined names.
    Admin lists fall back to "Unknown"/"", the teacher portal to its own labels.
    """
    subject = allocation.subject
    stream = allocation.stream
    class_level = stream.class_level if stream else None

    data = {
        "id": allocation.id,
        "teacher_id": allocation.teacher_id,
        "subject_id": allocation.subject_id,
        "stream_id": allocation.stream_id,
        "academic_year_id": allocation.academic_year_id,
    }
    if with_teacher:
        data.update({
            "teacher_name": allocation.teacher.full_name if allocation.teacher else "Unknown",
            "subject_name": subject.name if subject else "Unknown",
            "subject_code": (subject.code if subject else None) or "",
            "stream_name": stream.name if stream else "",
            "class_name": class_level.name if class_level else "",
        })
    else:
        data.update({
            "subject_name": subject.name if subject else "Unknown Subject",
            "subject_code": (subject.code if subject else None) or "SUB",
            "stream_name": stream.name if stream else "A",
            "class_name": class_level.name if class_level else "Class",
        })
    return data
