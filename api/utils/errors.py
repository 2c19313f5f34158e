# api/utils/errors.py

from flask import jsonify

PERMISSION_DENIED_MESSAGE = (
    "Permission denied: your account is not allowed to perform this action. "
    "Ask an administrator to fix the role and access configuration."
)

# SQLSTATE Postgres returns when a policy or grant rejects the statement
INSUFFICIENT_PRIVILEGE_SQLSTATE = "42501"


class ValidationError(ValueError):
    code = "validation_error"


class IncompleteFormError(ValidationError):
    code = "incomplete_form"


class NoActiveYearError(ValidationError):
    code = "no_active_year"


def error_response(message: str, status: int, code: str):
    return jsonify({"error": message, "code": code}), status


def validation_error_response(exc: ValueError):
    return error_response(str(exc), 400, getattr(exc, "code", ValidationError.code))


def permission_error_response(exc: PermissionError | None = None):
    message = str(exc) if exc and str(exc) else PERMISSION_DENIED_MESSAGE
    return error_response(message, 403, "permission_denied")


def format_error(exc: BaseException) -> str:
    """
    Best-effort human text for an exception coming from the database driver
    or from our own code.
    """
    orig = getattr(exc, "orig", None)
    if orig is not None and str(orig):
        return str(orig).strip().splitlines()[0]
    message = str(exc).strip()
    if message:
        return message.splitlines()[0]
    return exc.__class__.__name__


def is_permission_denied(exc: BaseException) -> bool:
    orig = getattr(exc, "orig", None)
    return getattr(orig, "pgcode", None) == INSUFFICIENT_PRIVILEGE_SQLSTATE
