# models/__init__.py
from .roles import RoleEnum, SIGNUP_ROLES
from .user import User, Profile
from .academics import (
    AcademicYear,
    Term,
    SchoolSettings,
    Subject,
    ClassLevel,
    Stream,
    TeacherAllocation,
)
from .student import Student, ClubMember
from .activities import AudienceEnum, Club, SchoolEvent, House
from .mark import Mark, AssessmentTypeEnum

__all__ = [
    "RoleEnum",
    "SIGNUP_ROLES",
    "User",
    "Profile",
    "AcademicYear",
    "Term",
    "SchoolSettings",
    "Subject",
    "ClassLevel",
    "Stream",
    "TeacherAllocation",
    "Student",
    "ClubMember",
    "AudienceEnum",
    "Club",
    "SchoolEvent",
    "House",
    "Mark",
    "AssessmentTypeEnum",
]
