# api/utils/forms_helper.py
from datetime import date, datetime
from typing import Any, Mapping

from api.utils.errors import ValidationError


def clean_str(data: Mapping, key: str) -> str:
    return str(data.get(key) or "").strip()


def parse_date(raw: Any, field: str) -> date | None:
    if raw in (None, ""):
        return None
    if isinstance(raw, date):
        return raw
    try:
        return datetime.strptime(str(raw).strip()[:10], "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"{field} must be a date in YYYY-MM-DD format.")


def parse_id(raw: Any, field: str) -> int | None:
    """
    Form selects send "" when nothing is chosen.
    """
    if raw in (None, ""):
        return None
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} is not a valid id.")


def parse_bool(raw: Any, field: str, default: bool = False) -> bool:
    """
    JSON clients send real booleans; HTML forms send "true", "on" or "0".
    """
    if raw is None:
        return default
    if isinstance(raw, bool):
        return raw
    text = str(raw).strip().lower()
    if text in ("true", "1", "yes", "on"):
        return True
    if text in ("false", "0", "no", "off", ""):
        return False
    raise ValidationError(f"{field} must be true or false.")


def validate_date_range(start: date | None, end: date | None) -> None:
    if start and end and start > end:
        raise ValidationError("Start date must be on or before the end date.")


def iso(value) -> str | None:
    return value.isoformat() if value else None
