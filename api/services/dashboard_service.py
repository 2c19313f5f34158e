# api/services/dashboard_service.py

from __future__ import annotations

from datetime import date

from models import Profile
from api.services.academic_service import AcademicService
from api.services.event_service import EventService


class DashboardService:

    @staticmethod
    def term_week(start_date: date | None, today: date | None = None) -> int | str:
        """
        Week number within the term, counting the start day as week 1.
        "Upcoming" when the term has not started.
        """
        if not start_date:
            return 1
        today = today or date.today()
        if start_date > today:
            return "Upcoming"
        return (today - start_date).days // 7 + 1

    @classmethod
    def summary(cls, profile: Profile, today: date | None = None) -> dict:
        today = today or date.today()
        year = AcademicService.resolve_active_year()
        term = year.current_term if year else None
        audiences = EventService.audiences_for_role(profile.role)

        return {
            "year": year,
            "term": term,
            "term_week": cls.term_week(term.start_date, today) if term else None,
            "upcoming_event": EventService.upcoming_event(today, audiences),
        }
