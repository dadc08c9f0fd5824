# /teacherboard/services/content_service.py

"""
Workspace Content Managers.

One generic `ContentManager` serves every content kind; a kind is just the
name of a collection under `users/{teacherId}/`. The teacher id is always
the verified principal's uid, handed in by the router, so a teacher can only
ever read or write their own workspace.

Saved links and the chalkboard add a few operations on top of the common
create / update / remove / set_active / list / subscribe contract.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Dict, List, Optional

from ..core.exceptions import ContentNotFoundError, DocumentNotFoundError, DuplicateLinkError, ValidationError
from .document_store import SERVER_TIMESTAMP, DocumentStore, document_path, join_path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ContentKind:
    label: str
    collection: str
    order_by: str = "createdAt"
    descending: bool = True


NOTICES = ContentKind("Notice", "notices")
SAVED_LINKS = ContentKind("Link", "savedLinks")
BOOK_CONTENTS = ContentKind("Book content", "bookContents")
CLASS_CONTENT = ContentKind("Class content", "sharedClassContent")
CHALKBOARD_NOTES = ContentKind("Chalkboard note", "chalkboardNotes")

# The kinds a student page can show.
STUDENT_VISIBLE_KINDS = (NOTICES, SAVED_LINKS, CLASS_CONTENT, BOOK_CONTENTS)


def _clean(fields: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in fields.items() if value is not None and key not in ("id", "createdAt")}


class ContentManager:
    def __init__(self, store: DocumentStore, teacher_id: str, kind: ContentKind):
        self.store = store
        self.teacher_id = teacher_id
        self.kind = kind
        self.collection_path = join_path("users", teacher_id, kind.collection)

    def _item_path(self, item_id: str) -> str:
        try:
            return document_path(self.collection_path, item_id)
        except ValueError:
            raise ContentNotFoundError(self.kind.label, item_id)

    def list(self, active_only: bool = False, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        return self.store.query(
            self.collection_path,
            order_by=self.kind.order_by,
            descending=self.kind.descending,
            limit=limit,
            where={"isActive": True} if active_only else None,
        )

    def get(self, item_id: str) -> Dict[str, Any]:
        item = self.store.get(self._item_path(item_id))
        if item is None:
            raise ContentNotFoundError(self.kind.label, item_id)
        return item

    def create(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        data = _clean(fields)
        data.setdefault("isActive", True)
        data["createdAt"] = SERVER_TIMESTAMP
        data["updatedAt"] = SERVER_TIMESTAMP
        item_id = self.store.add(self.collection_path, data)
        logger.info("Created %s %s for teacher %s", self.kind.collection, item_id, self.teacher_id)
        return self.get(item_id)

    def update(self, item_id: str, patch: Dict[str, Any]) -> Dict[str, Any]:
        data = _clean(patch)
        data["updatedAt"] = SERVER_TIMESTAMP
        try:
            self.store.update(self._item_path(item_id), data)
        except DocumentNotFoundError:
            raise ContentNotFoundError(self.kind.label, item_id)
        return self.get(item_id)

    def remove(self, item_id: str) -> None:
        """Hard delete. Use `set_active(item_id, False)` to merely hide an item."""
        if not self.store.delete(self._item_path(item_id)):
            raise ContentNotFoundError(self.kind.label, item_id)
        logger.info("Deleted %s %s for teacher %s", self.kind.collection, item_id, self.teacher_id)

    def set_active(self, item_id: str, active: bool) -> Dict[str, Any]:
        return self.update(item_id, {"isActive": bool(active)})

    def subscribe(self, callback: Callable[[List[Dict[str, Any]]], None]) -> Callable[[], None]:
        return self.store.subscribe(
            self.collection_path, callback, order_by=self.kind.order_by, descending=self.kind.descending
        )


# --- Saved links ---

DEFAULT_EDUCATIONAL_SITES = [
    {"title": "하이러닝", "url": "https://hi.goe.go.kr", "description": "경기도교육청 온라인 학습 플랫폼", "category": "교육청"},
    {"title": "Hiclass", "url": "https://www.hiclass.net/", "description": "스마트 교실 수업 도구", "category": "수업도구"},
    {"title": "에듀넷", "url": "https://www.edunet.net/", "description": "교육부 교육자료 포털", "category": "교육청"},
    {"title": "아이스크림", "url": "https://www.i-scream.co.kr/", "description": "초등 교육 콘텐츠", "category": "교육콘텐츠"},
    {"title": "EBS 초등", "url": "https://primary.ebs.co.kr/", "description": "EBS 초등 교육방송", "category": "교육방송"},
    {"title": "국립중앙과학관", "url": "https://www.science.go.kr/", "description": "과학 교육 자료", "category": "과학"},
    {"title": "한국사 편찬위원회", "url": "https://www.history.go.kr/", "description": "역사 교육 자료", "category": "사회"},
    {"title": "세종학당", "url": "https://www.ksif.or.kr/", "description": "한국어 교육 자료", "category": "국어"},
]


def normalize_url(url: str) -> str:
    url = (url or "").strip()
    if not url:
        raise ValidationError("URL is required.")
    return url if url.startswith("http") else f"https://{url}"


def format_added_date(value: date) -> str:
    # Matches the ko-KR locale date string, e.g. "2024. 12. 25."
    return f"{value.year}. {value.month}. {value.day}."


class LinkManager(ContentManager):
    def __init__(self, store: DocumentStore, teacher_id: str, today: Callable[[], date] = date.today):
        super().__init__(store, teacher_id, SAVED_LINKS)
        self._today = today

    def create(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        data = dict(fields)
        data["url"] = normalize_url(data.get("url"))
        data.setdefault("category", "기타")
        data.setdefault("description", "")
        data.setdefault("isQuickLink", False)
        data["addedDate"] = format_added_date(self._today())
        return super().create(data)

    def update(self, item_id: str, patch: Dict[str, Any]) -> Dict[str, Any]:
        patch = dict(patch)
        if patch.get("url") is not None:
            patch["url"] = normalize_url(patch["url"])
        return super().update(item_id, patch)

    def _saved_urls(self) -> set:
        return {link.get("url") for link in self.list()}

    def add_quick_link(self, site: Dict[str, Any]) -> Dict[str, Any]:
        """Saves an educational site from the quick-add list, once."""
        url = normalize_url(site.get("url"))
        if url in self._saved_urls():
            raise DuplicateLinkError(url)
        return self.create({**site, "url": url, "isQuickLink": True})

    def seed_default_links(self) -> int:
        """Adds the default educational sites that are not saved yet; returns how many were added."""
        saved = self._saved_urls()
        added = 0
        for site in DEFAULT_EDUCATIONAL_SITES:
            if site["url"] in saved:
                continue
            self.create({**site, "isQuickLink": True})
            added += 1
        return added


# --- Chalkboard ---

CHALKBOARD_HISTORY_LIMIT = 10
NOTE_TITLE_MAX_LENGTH = 40
UNTITLED_NOTE = "무제 노트"


def derive_note_title(content_text: str, custom_title: Optional[str] = None) -> str:
    """A custom title wins; otherwise the first non-empty line, shortened to 40 characters."""
    if custom_title and custom_title.strip():
        return custom_title.strip()
    for line in (content_text or "").splitlines():
        line = line.strip()
        if line:
            return line if len(line) <= NOTE_TITLE_MAX_LENGTH else line[:NOTE_TITLE_MAX_LENGTH] + "…"
    return UNTITLED_NOTE


def _chalkboard_fields(content_html: str, content_text: str, custom_title: Optional[str]) -> Dict[str, Any]:
    if not (content_text or "").strip():
        raise ValidationError("The chalkboard is empty.")
    return {
        "title": derive_note_title(content_text, custom_title),
        "contentHtml": content_html or "",
        "contentText": content_text,
    }


def save_note(store: DocumentStore, teacher_id: str, content_html: str, content_text: str, custom_title: Optional[str] = None) -> Dict[str, Any]:
    """Keeps the chalkboard in the teacher's private history."""
    manager = ContentManager(store, teacher_id, CHALKBOARD_NOTES)
    return manager.create(_chalkboard_fields(content_html, content_text, custom_title))


def list_history(store: DocumentStore, teacher_id: str) -> List[Dict[str, Any]]:
    return ContentManager(store, teacher_id, CHALKBOARD_NOTES).list(limit=CHALKBOARD_HISTORY_LIMIT)


def share_with_students(store: DocumentStore, teacher_id: str, content_html: str, content_text: str, custom_title: Optional[str] = None) -> Dict[str, Any]:
    """Publishes the chalkboard to the class-shared collection the student page reads."""
    manager = ContentManager(store, teacher_id, CLASS_CONTENT)
    return manager.create({**_chalkboard_fields(content_html, content_text, custom_title), "type": "chalkboard"})
