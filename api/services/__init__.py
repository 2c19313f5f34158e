# api/services/__init__.py

from .profile_service import ProfileService
from .session_service import SessionService
from .academic_service import AcademicService
from .admissions_service import AdmissionsService, AdmissionForm
from .club_service import ClubService
from .event_service import EventService
from .gradebook_service import GradebookService
from .house_service import HouseService
from .dashboard_service import DashboardService

__all__ = [
    "ProfileService",
    "SessionService",
    "AcademicService",
    "AdmissionsService",
    "AdmissionForm",
    "ClubService",
    "EventService",
    "GradebookService",
    "HouseService",
    "DashboardService",
]
