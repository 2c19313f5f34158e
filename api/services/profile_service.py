from __future__ import annotations

from typing import Mapping

from extensions import db
from models import Profile, RoleEnum
from api.utils.errors import ValidationError


class ProfileService:
    """
    Centralised helpers to fetch and edit profiles.
    Keeps the same queries out of every blueprint.
    """

    @staticmethod
    def get_profile_by_user(user_id: int) -> Profile | None:
        return Profile.query.filter_by(user_id=user_id).first()

    @staticmethod
    def require_profile(user_id: int) -> Profile:
        profile = ProfileService.get_profile_by_user(user_id)
        if not profile:
            raise ValueError("This user has no profile yet.")
        return profile

    @staticmethod
    def list_teachers() -> list[Profile]:
        return (
            Profile.query.filter_by(role=RoleEnum.TEACHER)
            .order_by(Profile.full_name.asc())
            .all()
        )

    @staticmethod
    def update_own_profile(profile: Profile, data: Mapping) -> Profile:
        """
        Only full_name and avatar_url are editable; the role is fixed at creation.
        """
        if "role" in data and data.get("role") != profile.role.value:
            raise ValidationError("Role cannot be changed from the profile screen.")

        if "full_name" in data:
            full_name = (data.get("full_name") or "").strip()
            if not full_name:
                raise ValidationError("Name cannot be empty.")
            profile.full_name = full_name

        if "avatar_url" in data:
            profile.avatar_url = (data.get("avatar_url") or "").strip() or None

        db.session.commit()
        return profile
