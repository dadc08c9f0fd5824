# /teacherboard/services/timetable_service.py

from typing import Dict

from ..core.exceptions import ValidationError
from ..models.timetable_model import PERIODS
from .document_store import SERVER_TIMESTAMP, DocumentStore, join_path

SUBJECT_MAX_LENGTH = 20


def _timetable_path(teacher_id: str) -> str:
    return join_path("users", teacher_id, "timetable", "current")


def get_timetable(store: DocumentStore, teacher_id: str) -> Dict:
    stored = store.get(_timetable_path(teacher_id)) or {}
    periods = {period: "" for period in PERIODS}
    periods.update({k: v for k, v in (stored.get("periods") or {}).items() if k in periods})
    return {"periods": periods, "updatedAt": stored.get("updatedAt")}


def save_timetable(store: DocumentStore, teacher_id: str, periods: Dict[str, str]) -> Dict:
    """Replaces the whole timetable. Periods that are left out become empty."""
    unknown = set(periods) - set(PERIODS)
    if unknown:
        raise ValidationError(f"Unknown periods: {', '.join(sorted(unknown))}")

    cleaned = {period: "" for period in PERIODS}
    for period, subject in periods.items():
        subject = (subject or "").strip()
        if len(subject) > SUBJECT_MAX_LENGTH:
            raise ValidationError(f"Subject for {period} must be at most {SUBJECT_MAX_LENGTH} characters.")
        cleaned[period] = subject

    store.set(_timetable_path(teacher_id), {"periods": cleaned, "updatedAt": SERVER_TIMESTAMP})
    return get_timetable(store, teacher_id)
