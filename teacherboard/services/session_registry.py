# /teacherboard/services/session_registry.py

"""
The Session Registry: the lifecycle of student session codes.

A session lives in two places:

- the teacher's pointer at `teachers/{teacherId}/session/current`, which is
  the source of truth for everything about the session including its
  visibility settings;
- the public entry at `sessions/{code}`, which lets an anonymous student turn
  a code into a teacher id.

Every operation that touches both records writes them in one store
transaction. `resolve` joins the two at read time, so a public entry that
the pointer no longer references is reported inactive even if it was never
updated.
"""

import logging
import secrets
import string
from typing import Callable, Dict, Optional

from ..core.exceptions import (
    CodeGenerationError,
    DocumentExistsError,
    NotFoundError,
    SessionNotFoundError,
    ValidationError,
)
from .document_store import SERVER_TIMESTAMP, DocumentStore, join_path

logger = logging.getLogger(__name__)

CODE_ALPHABET = string.ascii_uppercase + string.digits
CODE_LENGTH = 6
MAX_CODE_ATTEMPTS = 10
CLASS_NAME_MAX_LENGTH = 50

SETTINGS_KEYS = ("allowNotices", "allowLinks", "allowClassContent", "allowBookContent")
DEFAULT_SETTINGS = {key: True for key in SETTINGS_KEYS}

# Fields mirrored from the pointer onto the public entry.
PUBLIC_FIELDS = ("teacherId", "teacherName", "className", "isActive")


def pointer_path(teacher_id: str) -> str:
    return join_path("teachers", teacher_id, "session", "current")


def public_path(code: str) -> str:
    return join_path("sessions", code)


def generate_code(choice: Callable = secrets.choice) -> str:
    """A uniformly random code over [A-Z0-9]."""
    return "".join(choice(CODE_ALPHABET) for _ in range(CODE_LENGTH))


def public_url(origin: str, code: str) -> str:
    return f"{origin.rstrip('/')}/student/{code}"


def _settings_with_defaults(settings: Optional[Dict]) -> Dict[str, bool]:
    merged = dict(DEFAULT_SETTINGS)
    for key in SETTINGS_KEYS:
        if settings and isinstance(settings.get(key), bool):
            merged[key] = settings[key]
    return merged


def _require_pointer(store: DocumentStore, teacher_id: str) -> Dict:
    pointer = store.get(pointer_path(teacher_id))
    if not pointer or not pointer.get("sessionCode"):
        raise SessionNotFoundError(teacher_id)
    return pointer


def _public_record(pointer: Dict) -> Dict:
    record = {field: pointer.get(field) for field in PUBLIC_FIELDS}
    record["lastUpdated"] = SERVER_TIMESTAMP
    return record


# --- Reads ---

def get_current_session(store: DocumentStore, teacher_id: str) -> Optional[Dict]:
    """The teacher's own view of their session, or None before the first create."""
    return session_from_pointer(store.get(pointer_path(teacher_id)), teacher_id)


def session_from_pointer(pointer: Optional[Dict], teacher_id: str) -> Optional[Dict]:
    if not pointer or not pointer.get("sessionCode"):
        return None
    return {
        "sessionCode": pointer["sessionCode"],
        "teacherId": pointer.get("teacherId", teacher_id),
        "teacherName": pointer.get("teacherName", ""),
        "className": pointer.get("className", ""),
        "isActive": bool(pointer.get("isActive", False)),
        "createdAt": pointer.get("createdAt"),
        "lastUpdated": pointer.get("lastUpdated"),
        "settings": _settings_with_defaults(pointer.get("settings")),
    }


def resolve(store: DocumentStore, code: str) -> Dict:
    """
    Public, unauthenticated lookup of a session by code. Raises NotFoundError
    for unknown codes. The code is matched verbatim, without case folding or
    trimming. The result includes `teacherId` for the caller's use;
    it must not be forwarded to students.
    """
    code = code or ""
    if len(code) != CODE_LENGTH or any(ch not in CODE_ALPHABET for ch in code):
        raise NotFoundError(code)

    entry = store.get(public_path(code))
    if not entry or not entry.get("teacherId"):
        raise NotFoundError(code)

    pointer = store.get(pointer_path(entry["teacherId"])) or {}
    is_current = pointer.get("sessionCode") == code
    source = pointer if is_current else entry

    return {
        "sessionCode": code,
        "teacherId": entry["teacherId"],
        "teacherName": source.get("teacherName") or entry.get("teacherName", ""),
        "className": source.get("className") or entry.get("className", ""),
        # A superseded code is inactive no matter what its own entry says.
        "isActive": bool(is_current and pointer.get("isActive")),
        "createdAt": entry.get("createdAt"),
        "lastUpdated": source.get("lastUpdated"),
        "settings": _settings_with_defaults(pointer.get("settings")),
    }


# --- Writes ---

def create_session(
    store: DocumentStore,
    teacher_id: str,
    teacher_name: str,
    class_name: str,
    choice: Callable = secrets.choice,
) -> Dict:
    """
    Starts a new session under a fresh code. The teacher's previous code, if
    any, is deactivated in the same transaction, so a teacher has at most one
    active code.
    """
    class_name = (class_name or "").strip()
    if not class_name:
        raise ValidationError("Class name must not be blank.")
    if len(class_name) > CLASS_NAME_MAX_LENGTH:
        raise ValidationError(f"Class name must be at most {CLASS_NAME_MAX_LENGTH} characters.")

    previous = store.get(pointer_path(teacher_id))
    previous_code = previous.get("sessionCode") if previous else None

    for attempt in range(1, MAX_CODE_ATTEMPTS + 1):
        code = generate_code(choice)
        if code == previous_code or store.exists(public_path(code)):
            logger.info("Session code collision on attempt %d, retrying.", attempt)
            continue

        pointer = {
            "id": teacher_id,
            "sessionCode": code,
            "teacherId": teacher_id,
            "teacherName": teacher_name or "",
            "className": class_name,
            "isActive": True,
            "createdAt": SERVER_TIMESTAMP,
            "lastUpdated": SERVER_TIMESTAMP,
            "settings": dict(DEFAULT_SETTINGS),
        }
        try:
            with store.transaction() as batch:
                batch.create(public_path(code), {**_public_record(pointer), "createdAt": SERVER_TIMESTAMP})
                batch.set(pointer_path(teacher_id), pointer)
                if previous_code and store.exists(public_path(previous_code)):
                    batch.update(public_path(previous_code), {"isActive": False, "lastUpdated": SERVER_TIMESTAMP})
        except DocumentExistsError:
            # Lost a race for this code to another teacher.
            logger.info("Session code %s was taken concurrently, retrying.", code)
            continue

        logger.info("Created session %s for teacher %s", code, teacher_id)
        return get_current_session(store, teacher_id)

    raise CodeGenerationError(f"Could not find an unused session code after {MAX_CODE_ATTEMPTS} attempts.")


def set_active(store: DocumentStore, teacher_id: str, active: bool) -> Dict:
    pointer = _require_pointer(store, teacher_id)
    code = pointer["sessionCode"]
    with store.transaction() as batch:
        batch.update(pointer_path(teacher_id), {"isActive": bool(active), "lastUpdated": SERVER_TIMESTAMP})
        batch.set(public_path(code), _public_record({**pointer, "isActive": bool(active)}), merge=True)
    logger.info("Session %s for teacher %s is now %s", code, teacher_id, "active" if active else "inactive")
    return get_current_session(store, teacher_id)


def regenerate_code(store: DocumentStore, teacher_id: str, choice: Callable = secrets.choice) -> str:
    """
    Retires the current code for good and moves the session to a new one.
    Class name, teacher name, settings and the active state carry over.
    """
    pointer = _require_pointer(store, teacher_id)
    old_code = pointer["sessionCode"]

    for attempt in range(1, MAX_CODE_ATTEMPTS + 1):
        new_code = generate_code(choice)
        if new_code == old_code or store.exists(public_path(new_code)):
            logger.info("Session code collision on attempt %d, retrying.", attempt)
            continue
        try:
            with store.transaction() as batch:
                batch.create(public_path(new_code), {**_public_record(pointer), "createdAt": SERVER_TIMESTAMP})
                batch.set(public_path(old_code), {"isActive": False, "lastUpdated": SERVER_TIMESTAMP}, merge=True)
                batch.update(pointer_path(teacher_id), {"sessionCode": new_code, "lastUpdated": SERVER_TIMESTAMP})
        except DocumentExistsError:
            logger.info("Session code %s was taken concurrently, retrying.", new_code)
            continue

        logger.info("Regenerated session code for teacher %s: %s -> %s", teacher_id, old_code, new_code)
        return new_code

    raise CodeGenerationError(f"Could not find an unused session code after {MAX_CODE_ATTEMPTS} attempts.")


def update_settings(store: DocumentStore, teacher_id: str, patch: Dict) -> Dict[str, bool]:
    unknown = set(patch) - set(SETTINGS_KEYS)
    if unknown:
        raise ValidationError(f"Unknown settings: {', '.join(sorted(unknown))}")
    for key, value in patch.items():
        if not isinstance(value, bool):
            raise ValidationError(f"Setting '{key}' must be a boolean.")

    pointer = _require_pointer(store, teacher_id)
    settings = {**_settings_with_defaults(pointer.get("settings")), **patch}
    store.update(pointer_path(teacher_id), {"settings": settings, "lastUpdated": SERVER_TIMESTAMP})
    return settings


def reconcile(store: DocumentStore, teacher_id: str) -> bool:
    """
    Repairs the current public entry from the pointer when the two have
    drifted apart, e.g. after a write made before both were updated together.
    Returns True when something was repaired.
    """
    pointer = store.get(pointer_path(teacher_id))
    if not pointer or not pointer.get("sessionCode"):
        return False

    entry = store.get(public_path(pointer["sessionCode"])) or {}
    expected = {field: pointer.get(field) for field in PUBLIC_FIELDS}
    drifted = {field for field, value in expected.items() if entry.get(field) != value}
    if not drifted:
        return False

    logger.warning(
        "Session %s for teacher %s drifted on %s; repairing.",
        pointer["sessionCode"], teacher_id, ", ".join(sorted(drifted)),
    )
    record = _public_record(pointer)
    if not entry:
        record["createdAt"] = SERVER_TIMESTAMP
    store.set(public_path(pointer["sessionCode"]), record, merge=True)
    return True
