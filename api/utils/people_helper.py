# api/utils/people_helper.py
from models import Student, SchoolEvent, House
from api.utils.forms_helper import iso


def serialize_student(student: Student) -> dict:
    return {
        "id": student.id,
        "full_name": student.full_name,
        "student_id_human": student.student_id_human or "S001",
        "gender": student.gender,
        "current_stream_id": student.current_stream_id,
    }


def serialize_event(event: SchoolEvent) -> dict:
    return {
        "id": event.id,
        "title": event.title,
        "event_date": iso(event.event_date),
        "location": event.location,
        "audience": event.audience.value if event.audience else None,
        "description": event.description,
    }


def serialize_house(house: House) -> dict:
    return {
        "id": house.id,
        "name": house.name,
        "color": house.color,
        "points": house.points,
        "members": house.members,
    }
