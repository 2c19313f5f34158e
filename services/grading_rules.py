from __future__ import annotations

from typing import Any, Mapping

# Valid score range
MIN_SCORE = 0
MAX_SCORE = 100

# Grade bands (inclusive lower bound), highest first
GRADE_BANDS = (
    (80, "A"),
    (70, "B"),
    (60, "C"),
    (50, "D"),
)
FAIL_GRADE = "F"
NO_GRADE = "-"

ASSESSMENT_TYPES = ("BOT", "MOT", "EOT")
ASSESSMENT_LABELS = {
    "BOT": "Beginning of Term",
    "MOT": "Mid Term",
    "EOT": "End of Term",
}
DEFAULT_ASSESSMENT_TYPE = "BOT"


def grade_band(score: float | None) -> str:
    if score is None:
        return NO_GRADE
    for threshold, letter in GRADE_BANDS:
        if score >= threshold:
            return letter
    return FAIL_GRADE


def parse_score(raw: Any) -> float | None:
    """
    Interpret what the teacher typed into a gradebook cell.

    - "" / None -> None (clears the pending mark)
    - a number within [0, 100] -> float
    - anything else -> ValueError
    """
    if raw is None:
        return None
    if isinstance(raw, bool):
        raise ValueError("Score must be a number.")
    if isinstance(raw, str):
        raw = raw.strip()
        if raw == "":
            return None
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise ValueError("Score must be a number.")
    if not (MIN_SCORE <= value <= MAX_SCORE):
        raise ValueError(f"Score must be between {MIN_SCORE} and {MAX_SCORE}.")
    return value


def apply_score_input(pending: Mapping[Any, float], student_id: Any, raw: Any) -> dict:
    """
    Return a copy of the pending marks with one cell edit applied.
    Invalid input is ignored and the previous value kept.

    Models the class sheet while the teacher is typing, before anything is
    posted. Saved marks go through parse_score in GradebookService.save_marks.
    """
    updated = dict(pending)
    try:
        value = parse_score(raw)
    except ValueError:
        return updated

    if value is None:
        updated.pop(student_id, None)
    else:
        updated[student_id] = value
    return updated


def normalize_assessment_type(raw: Any) -> str:
    value = (str(raw or "").strip() or DEFAULT_ASSESSMENT_TYPE).upper()
    if value not in ASSESSMENT_TYPES:
        raise ValueError("assessment_type must be one of BOT, MOT or EOT.")
    return value
