# api/utils/permissions.py

from functools import wraps

from flask import abort
from flask_login import current_user

from models import Profile


def get_current_profile() -> Profile | None:
    """
    The Profile of the signed-in user, or None when it does not exist.
    """
    if not current_user.is_authenticated:
        return None

    return Profile.query.filter_by(user_id=current_user.id).first()


def require_roles(*role_names: str):
    """
    Decorator restricting a view to some roles.
    Usage:
        @require_roles("ADMIN")
        @require_roles("ADMIN", "EDITOR")
    """
    def decorator(f):
        @wraps(f)
        def wrapper(*args, **kwargs):
            profile = get_current_profile()
            if not profile or not profile.role or profile.role.name not in role_names:
                abort(403)
            return f(*args, **kwargs)
        return wrapper
    return decorator
