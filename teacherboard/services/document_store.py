# /teacherboard/services/document_store.py

"""
The Document Store Adapter.

`DocumentStore` is the single entry point every service uses to read and
write workspace data. It exposes a path-addressed document API in the shape
of a hosted document database (get / set / update / delete / query /
subscribe), backed by the SQLAlchemy `documents` table.

A store is constructed per request around that request's SQLAlchemy session.
Nothing here is module-level state: the retry policy is passed in, and live
subscriptions live in a `SubscriptionHub` owned by the application.

Writes are collected into a `WriteBatch` and applied in one database
transaction. Single writes (`store.set(...)`) are simply one-operation
batches; `with store.transaction() as batch:` groups several writes so that
they either all land or none do.
"""

import logging
import threading
import time
import uuid
from collections import defaultdict
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..config import RetryPolicy
from ..core.exceptions import DocumentExistsError, DocumentNotFoundError, WriteFailure
from .database_helpers.document_repository_sql import DocumentRepositorySQL, TIMESTAMP_COLUMNS

logger = logging.getLogger(__name__)

Snapshot = Union[Optional[Dict[str, Any]], List[Dict[str, Any]]]
Ordering = Union[None, str, Sequence[Tuple[str, bool]]]


class _ServerTimestamp:
    def __repr__(self) -> str:
        return "SERVER_TIMESTAMP"


# Placeholder replaced with the commit time when a write is applied.
SERVER_TIMESTAMP = _ServerTimestamp()


# --- Path helpers ---

def join_path(*segments: str) -> str:
    """Joins key-path segments, rejecting empty segments or embedded slashes."""
    for segment in segments:
        if not isinstance(segment, str) or not segment or "/" in segment:
            raise ValueError(f"Invalid path segment: {segment!r}")
    return "/".join(segments)


def split_path(path: str) -> List[str]:
    segments = path.split("/")
    if any(not s for s in segments):
        raise ValueError(f"Invalid path: {path!r}")
    return segments


def document_path(collection_path: str, doc_id: str) -> str:
    """Path of document `doc_id` inside an already-joined collection path."""
    return join_path(*split_path(collection_path), doc_id)


def is_collection_path(path: str) -> bool:
    # collection / doc / collection / doc ...
    return len(split_path(path)) % 2 == 1


def parent_collection(document_path: str) -> Tuple[str, str]:
    """Splits a document path into (collection path, document id)."""
    segments = split_path(document_path)
    if len(segments) % 2 != 0:
        raise ValueError(f"Not a document path: {document_path!r}")
    return "/".join(segments[:-1]), segments[-1]


def new_document_id() -> str:
    return uuid.uuid4().hex[:20]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _resolve_timestamps(data: Dict[str, Any], now_iso: str) -> Dict[str, Any]:
    resolved = {}
    for key, value in data.items():
        if value is SERVER_TIMESTAMP:
            resolved[key] = now_iso
        elif isinstance(value, dict):
            resolved[key] = _resolve_timestamps(value, now_iso)
        else:
            resolved[key] = value
    return resolved


def _normalize_ordering(order_by: Ordering, descending: bool) -> List[Tuple[str, bool]]:
    if order_by is None:
        return []
    if isinstance(order_by, str):
        return [(order_by, descending)]
    return [(f, bool(d)) for f, d in order_by]


def _sort_documents(documents: List[Dict[str, Any]], ordering: List[Tuple[str, bool]]) -> List[Dict[str, Any]]:
    # Least significant key first; documents missing a key sort last.
    for field_name, desc in reversed(ordering):
        present = [d for d in documents if d.get(field_name) is not None]
        missing = [d for d in documents if d.get(field_name) is None]
        present.sort(key=lambda d: d[field_name], reverse=desc)
        documents = present + missing
    return documents


def _to_snapshot(document) -> Dict[str, Any]:
    return {"id": document.doc_id, **(document.data or {})}


# --- Write batching ---

@dataclass
class _WriteOp:
    kind: str
    path: str
    data: Dict[str, Any] = field(default_factory=dict)
    merge: bool = False


class WriteBatch:
    """Collects writes to be applied in one transaction."""

    def __init__(self):
        self.ops: List[_WriteOp] = []

    def set(self, path: str, data: Dict[str, Any], merge: bool = False) -> None:
        parent_collection(path)
        self.ops.append(_WriteOp("set", path, dict(data), merge))

    def create(self, path: str, data: Dict[str, Any]) -> None:
        """Writes a document that must not exist yet."""
        parent_collection(path)
        self.ops.append(_WriteOp("create", path, dict(data)))

    def update(self, path: str, patch: Dict[str, Any]) -> None:
        """Merges `patch` into a document that must already exist."""
        parent_collection(path)
        self.ops.append(_WriteOp("update", path, dict(patch)))

    def delete(self, path: str) -> None:
        parent_collection(path)
        self.ops.append(_WriteOp("delete", path))

    def add(self, collection_path: str, data: Dict[str, Any]) -> str:
        """Queues a new document with a generated id and returns that id."""
        if not is_collection_path(collection_path):
            raise ValueError(f"Not a collection path: {collection_path!r}")
        doc_id = new_document_id()
        self.ops.append(_WriteOp("create", f"{collection_path}/{doc_id}", dict(data)))
        return doc_id


# --- Subscriptions ---

@dataclass
class Subscription:
    path: str
    callback: Callable[[Snapshot], None]
    query: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_collection(self) -> bool:
        return is_collection_path(self.path)


class SubscriptionHub:
    """
    Registry of live subscribers, shared by every store of one application.
    Writers notify it after a successful commit.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._subscriptions: Dict[str, List[Subscription]] = defaultdict(list)

    def add(self, subscription: Subscription) -> Callable[[], None]:
        with self._lock:
            self._subscriptions[subscription.path].append(subscription)

        def unsubscribe() -> None:
            with self._lock:
                subscribers = self._subscriptions.get(subscription.path, [])
                if subscription in subscribers:
                    subscribers.remove(subscription)
                if not subscribers:
                    self._subscriptions.pop(subscription.path, None)

        return unsubscribe

    def matching(self, paths: Iterable[str]) -> List[Subscription]:
        with self._lock:
            matched = []
            for path in paths:
                matched.extend(self._subscriptions.get(path, []))
            return matched

    def count(self) -> int:
        with self._lock:
            return sum(len(subs) for subs in self._subscriptions.values())


# --- The store ---

class DocumentStore:
    def __init__(
        self,
        db_session: Session,
        hub: Optional[SubscriptionHub] = None,
        retry_policy: Optional[RetryPolicy] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.db = db_session
        self.repo = DocumentRepositorySQL(db_session)
        self.hub = hub
        self.retry_policy = retry_policy or RetryPolicy()
        self._sleep = sleep

    # --- Reads ---

    def get(self, path: str) -> Optional[Dict[str, Any]]:
        parent_collection(path)
        document = self.repo.get_by_path(path)
        return _to_snapshot(document) if document else None

    def exists(self, path: str) -> bool:
        return self.repo.get_by_path(path) is not None

    def query(
        self,
        collection_path: str,
        order_by: Ordering = None,
        descending: bool = False,
        limit: Optional[int] = None,
        where: Optional[Dict[str, Any]] = None,
    ) -> List[Dict[str, Any]]:
        """
        Lists a collection. `where` is a mapping of field -> required value and
        is enforced by the database. Ordering on `createdAt`/`updatedAt` also
        runs in the database; ordering on any other field is applied after the
        filtered fetch, before the limit.
        """
        if not is_collection_path(collection_path):
            raise ValueError(f"Not a collection path: {collection_path!r}")
        ordering = _normalize_ordering(order_by, descending)
        filters = list((where or {}).items())

        if all(f in TIMESTAMP_COLUMNS for f, _ in ordering):
            rows = self.repo.list_collection(collection_path, where=filters, ordering=ordering, limit=limit)
            return [_to_snapshot(r) for r in rows]

        rows = self.repo.list_collection(collection_path, where=filters)
        documents = _sort_documents([_to_snapshot(r) for r in rows], ordering)
        return documents[:limit] if limit is not None else documents

    # --- Writes ---

    def set(self, path: str, data: Dict[str, Any], merge: bool = False) -> None:
        batch = WriteBatch()
        batch.set(path, data, merge=merge)
        self.commit(batch)

    def create(self, path: str, data: Dict[str, Any]) -> None:
        batch = WriteBatch()
        batch.create(path, data)
        self.commit(batch)

    def update(self, path: str, patch: Dict[str, Any]) -> None:
        batch = WriteBatch()
        batch.update(path, patch)
        self.commit(batch)

    def delete(self, path: str) -> bool:
        batch = WriteBatch()
        batch.delete(path)
        return self.commit(batch)[0]

    def add(self, collection_path: str, data: Dict[str, Any]) -> str:
        batch = WriteBatch()
        doc_id = batch.add(collection_path, data)
        self.commit(batch)
        return doc_id

    @contextmanager
    def transaction(self):
        """Yields a `WriteBatch`; its writes commit together when the block exits cleanly."""
        batch = WriteBatch()
        yield batch
        self.commit(batch)

    def commit(self, batch: WriteBatch) -> List[Any]:
        """
        Applies every queued write in one database transaction. Transient
        database errors are retried per the retry policy; anything else rolls
        back and propagates.
        """
        if not batch.ops:
            return []
        attempts = self.retry_policy.max_retries + 1
        for attempt in range(1, attempts + 1):
            try:
                now = _utcnow()
                results = [self._apply(op, now) for op in batch.ops]
                self.db.commit()
            except OperationalError as e:
                self.db.rollback()
                if attempt >= attempts:
                    logger.error("Store write failed after %d attempts: %s", attempt, e)
                    raise WriteFailure(f"The write could not be saved after {attempt} attempts.") from e
                logger.warning("Transient store error (attempt %d/%d): %s", attempt, attempts, e)
                self._sleep(self.retry_policy.retry_delay_ms / 1000.0)
            except (DocumentExistsError, DocumentNotFoundError):
                self.db.rollback()
                raise
            except SQLAlchemyError as e:
                self.db.rollback()
                logger.error("Store write failed: %s", e)
                raise WriteFailure(f"The write could not be saved: {e}") from e
            else:
                self._notify(op.path for op in batch.ops)
                return results
        return []

    def rollback(self) -> None:
        self.db.rollback()

    def _apply(self, op: _WriteOp, now: datetime) -> Any:
        collection_path, doc_id = parent_collection(op.path)
        data = _resolve_timestamps(op.data, now.isoformat())
        existing = self.repo.get_by_path(op.path)

        if op.kind == "set":
            if existing:
                new_data = {**existing.data, **data} if op.merge else data
                self.repo.replace(existing, new_data, now)
            else:
                self.repo.insert(op.path, collection_path, doc_id, data, now)
            return doc_id

        if op.kind == "create":
            if existing:
                raise DocumentExistsError(op.path)
            try:
                self.repo.insert(op.path, collection_path, doc_id, data, now)
            except IntegrityError:
                # Another writer inserted the same path concurrently.
                raise DocumentExistsError(op.path)
            return doc_id

        if op.kind == "update":
            if not existing:
                raise DocumentNotFoundError(op.path)
            self.repo.replace(existing, {**existing.data, **data}, now)
            return doc_id

        if op.kind == "delete":
            if not existing:
                return False
            self.repo.delete(existing)
            return True

        raise ValueError(f"Unknown write operation: {op.kind}")

    # --- Subscriptions ---

    def subscribe(
        self,
        path: str,
        callback: Callable[[Snapshot], None],
        order_by: Ordering = None,
        descending: bool = False,
        limit: Optional[int] = None,
        where: Optional[Dict[str, Any]] = None,
    ) -> Callable[[], None]:
        """
        Streams snapshots of a document or collection to `callback`. The
        current snapshot is delivered immediately, then again after every
        committed write touching the path. Returns an unsubscribe function.
        """
        if self.hub is None:
            raise RuntimeError("This store was created without a subscription hub.")
        query = {}
        if is_collection_path(path):
            query = {"order_by": order_by, "descending": descending, "limit": limit, "where": where}
        subscription = Subscription(path=path, callback=callback, query=query)
        callback(self._snapshot_for(subscription))
        return self.hub.add(subscription)

    def _snapshot_for(self, subscription: Subscription) -> Snapshot:
        if subscription.is_collection:
            return self.query(subscription.path, **subscription.query)
        return self.get(subscription.path)

    def _notify(self, written_paths: Iterable[str]) -> None:
        if self.hub is None:
            return
        touched = set()
        for path in written_paths:
            touched.add(path)
            touched.add(parent_collection(path)[0])
        for subscription in self.hub.matching(touched):
            try:
                subscription.callback(self._snapshot_for(subscription))
            except Exception:
                # A broken subscriber must not fail the write that triggered it.
                logger.exception("Subscriber callback failed for %s", subscription.path)
