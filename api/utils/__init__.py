# api/utils/__init__.py
from api.utils.academics_helper import (
    serialize_allocation,
    serialize_class_level,
    serialize_profile,
    serialize_stream,
    serialize_subject,
    serialize_term,
    serialize_year,
)
from api.utils.people_helper import serialize_event, serialize_house, serialize_student

__all__ = [
    "serialize_allocation",
    "serialize_class_level",
    "serialize_profile",
    "serialize_stream",
    "serialize_subject",
    "serialize_term",
    "serialize_year",
    "serialize_event",
    "serialize_house",
    "serialize_student",
]
