# api/services/session_service.py

from __future__ import annotations

from flask import current_app
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from extensions import db
from models import Profile, RoleEnum, SIGNUP_ROLES, User
from api.utils.errors import IncompleteFormError, ValidationError


class SessionService:
    """
    Sign-up / sign-in and the bootstrap run on every page load:
    session -> profile (repairing it when missing) -> landing view.
    """

    LANDING_VIEWS = {
        RoleEnum.TEACHER: "my_classes",
        RoleEnum.EDITOR: "events",
    }
    DEFAULT_LANDING_VIEW = "dashboard"
    MIN_PASSWORD_LENGTH = 6

    @staticmethod
    def ping() -> None:
        """Raises OperationalError when the database is unreachable."""
        db.session.execute(text("SELECT 1"))

    @classmethod
    def landing_view_for(cls, role: RoleEnum | None) -> str:
        return cls.LANDING_VIEWS.get(role, cls.DEFAULT_LANDING_VIEW)

    @staticmethod
    def display_name_from_email(email: str | None) -> str:
        local_part = (email or "").split("@")[0].strip()
        return local_part or "User"

    @classmethod
    def sign_up(cls, *, email: str, password: str, role: str | None, full_name: str | None) -> User:
        email = (email or "").strip().lower()
        password = (password or "").strip()
        if not email or not password:
            raise IncompleteFormError("Email and password are required.")
        if len(password) < cls.MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password should be at least {cls.MIN_PASSWORD_LENGTH} characters."
            )

        try:
            chosen_role = RoleEnum((role or RoleEnum.TEACHER.value).strip().lower())
        except ValueError:
            raise ValidationError("Invalid role.")
        if chosen_role not in SIGNUP_ROLES:
            raise ValidationError("This role cannot be chosen at sign-up.")

        if User.query.filter_by(email=email).first():
            raise ValidationError("User already registered.")

        user = User(
            email=email,
            user_metadata={
                "role": chosen_role.value,
                "full_name": (full_name or "").strip() or cls.display_name_from_email(email),
            },
        )
        user.set_password(password)
        db.session.add(user)
        db.session.commit()

        # Profile provisioning; a failure here is repaired on the next bootstrap.
        cls.provision_profile(user)
        return user

    @staticmethod
    def authenticate(email: str, password: str) -> User | None:
        email = (email or "").strip().lower()
        user = User.query.filter_by(email=email).first()
        if not user or not user.active or not user.check_password(password or ""):
            return None
        return user

    @classmethod
    def provision_profile(cls, user: User) -> Profile | None:
        """
        Build the profile from the sign-up metadata and insert it.
        Role defaults to student, name to the e-mail local part.
        Returns None (and rolls back) when the insert fails.
        """
        metadata = user.user_metadata or {}
        try:
            role = RoleEnum(metadata.get("role") or RoleEnum.STUDENT.value)
        except ValueError:
            role = RoleEnum.STUDENT

        profile = Profile(
            user_id=user.id,
            email=user.email,
            full_name=(metadata.get("full_name") or "").strip() or cls.display_name_from_email(user.email),
            role=role,
        )
        try:
            db.session.add(profile)
            db.session.commit()
        except SQLAlchemyError as exc:
            db.session.rollback()
            current_app.logger.error("Failed to create profile for user %s: %s", user.id, exc)
            return None
        return profile

    @classmethod
    def ensure_profile(cls, user: User) -> Profile | None:
        profile = Profile.query.filter_by(user_id=user.id).first()
        if profile:
            return profile

        current_app.logger.warning("Profile not found for user %s. Attempting manual creation...", user.id)
        return cls.provision_profile(user)
