# /teacherboard/services/student_view_service.py

"""
The Student View Resolver.

Turns a bare session code into the read-only bundle a student page shows.
There is no authentication on this path; what a student may see is decided
entirely by the session's active flag, its visibility settings and each
item's own `isActive` flag.
"""

import asyncio
import enum
import logging
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy.orm import Session

from ..core.exceptions import InactiveSessionError, NotFoundError
from . import session_registry
from .content_service import BOOK_CONTENTS, CLASS_CONTENT, NOTICES, SAVED_LINKS, ContentKind
from .document_store import DocumentStore, join_path

logger = logging.getLogger(__name__)

PAGE_SIZE = 20

# Visibility flag -> (bundle key, content kind)
VISIBILITY = {
    "allowNotices": ("notices", NOTICES),
    "allowLinks": ("links", SAVED_LINKS),
    "allowClassContent": ("chalkboardNotes", CLASS_CONTENT),
    "allowBookContent": ("bookContents", BOOK_CONTENTS),
}


def _load_kind(store: DocumentStore, teacher_id: str, kind: ContentKind) -> List[Dict[str, Any]]:
    items = store.query(
        join_path("users", teacher_id, kind.collection),
        order_by="createdAt",
        descending=True,
        limit=PAGE_SIZE,
        where={"isActive": True},
    )
    # The query already filters; items stored without the flag are dropped too.
    return [item for item in items if item.get("isActive") is True]


def load_student_view(store: DocumentStore, code: str) -> Dict[str, Any]:
    """
    Raises NotFoundError for an unknown code and InactiveSessionError for a
    deactivated or superseded one; in both cases no content is read. A kind
    that fails to load comes back empty instead of failing the page.
    """
    session = session_registry.resolve(store, code)
    if not session["isActive"]:
        raise InactiveSessionError(session["sessionCode"])

    settings = session["settings"]
    view: Dict[str, Any] = {
        "session": {
            "sessionCode": session["sessionCode"],
            "className": session["className"],
            "teacherName": session["teacherName"],
            "settings": settings,
        },
    }
    for flag, (key, kind) in VISIBILITY.items():
        view[key] = []
        if not settings.get(flag, True):
            continue
        try:
            view[key] = _load_kind(store, session["teacherId"], kind)
        except Exception:
            logger.exception("Failed to load %s for session %s", kind.collection, session["sessionCode"])
            store.rollback()
    return view


def load_student_view_on_own_session(store: DocumentStore, code: str) -> Dict[str, Any]:
    """
    `load_student_view` on a fresh database session bound to the same engine
    as `store`. Worker threads load through this, so a thread left running
    after a timeout never touches the request's session.
    """
    db = Session(bind=store.db.get_bind())
    try:
        return load_student_view(DocumentStore(db, retry_policy=store.retry_policy), code)
    finally:
        db.close()


async def load_student_view_with_timeout(store: DocumentStore, code: str, timeout_seconds: float) -> Dict[str, Any]:
    """Runs the blocking load in a worker thread and gives up after `timeout_seconds`."""
    return await asyncio.wait_for(
        asyncio.to_thread(load_student_view_on_own_session, store, code), timeout=timeout_seconds
    )


# --- Page-load state machine ---

class PageState(str, enum.Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    NOT_FOUND = "not_found"
    INACTIVE = "inactive"
    ERROR = "error"


TERMINAL_STATES = {PageState.READY, PageState.NOT_FOUND, PageState.INACTIVE, PageState.ERROR}


class StudentViewPage:
    """
    One student's page: Idle, then Loading, then exactly one of Ready,
    NotFound, Inactive or Error. `refresh()` starts over from any terminal
    state; there is no automatic polling.
    """

    def __init__(self, code: str, loader: Callable[[str], Dict[str, Any]]):
        self.code = code
        self._loader = loader
        self.state = PageState.IDLE
        self.view: Optional[Dict[str, Any]] = None
        self.error: Optional[str] = None

    def load(self) -> PageState:
        if self.state not in (PageState.IDLE, *TERMINAL_STATES):
            raise RuntimeError(f"Cannot start loading from state {self.state.value}.")
        self.state = PageState.LOADING
        self.view, self.error = None, None
        try:
            self.view = self._loader(self.code)
            self.state = PageState.READY
        except NotFoundError as e:
            self.error, self.state = str(e), PageState.NOT_FOUND
        except InactiveSessionError as e:
            self.error, self.state = str(e), PageState.INACTIVE
        except Exception as e:
            logger.exception("Student view for %s failed to load", self.code)
            self.error, self.state = str(e) or type(e).__name__, PageState.ERROR
        return self.state

    def refresh(self) -> PageState:
        return self.load()
