# /teacherboard/services/database_helpers/document_repository_sql.py

"""
Raw SQLAlchemy queries against the `documents` table.

This is the only module that knows how key-path documents map onto rows. It
does not commit; the `DocumentStore` owns transaction boundaries so that a
group of writes can land atomically.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Tuple

from sqlalchemy.orm import Session

from teacherboard.db.models.document_models import Document

# Document fields that are mirrored by real, indexed columns.
TIMESTAMP_COLUMNS = {
    "createdAt": Document.created_at,
    "updatedAt": Document.updated_at,
    "lastUpdated": Document.updated_at,
}


def _json_field_equals(field: str, value: Any):
    """Builds a typed equality filter on a field inside the JSON payload."""
    element = Document.data[field]
    # bool must be checked before int, it is a subclass.
    if isinstance(value, bool):
        return element.as_boolean() == value
    if isinstance(value, int):
        return element.as_integer() == value
    if isinstance(value, float):
        return element.as_float() == value
    return element.as_string() == str(value)


class DocumentRepositorySQL:
    def __init__(self, db_session: Session):
        self.db = db_session

    def get_by_path(self, path: str) -> Optional[Document]:
        return self.db.query(Document).filter(Document.path == path).first()

    def list_collection(
        self,
        collection_path: str,
        where: Sequence[Tuple[str, Any]] = (),
        ordering: Sequence[Tuple[str, bool]] = (),
        limit: Optional[int] = None,
    ) -> List[Document]:
        """
        Lists the documents of one collection. Equality filters run in SQL.
        `ordering` must only name column-backed fields; the caller sorts by
        anything else in Python.
        """
        query = self.db.query(Document).filter(Document.collection_path == collection_path)
        for field, value in where:
            query = query.filter(_json_field_equals(field, value))

        order_clauses = []
        for field, descending in ordering:
            column = TIMESTAMP_COLUMNS[field]
            order_clauses.append(column.desc() if descending else column.asc())
        # Insertion order breaks ties between equal timestamps.
        newest_first = ordering[0][1] if ordering else False
        order_clauses.append(Document.id.desc() if newest_first else Document.id.asc())
        query = query.order_by(*order_clauses)

        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def insert(self, path: str, collection_path: str, doc_id: str, data: Dict[str, Any], now: datetime) -> Document:
        new_document = Document(
            path=path,
            collection_path=collection_path,
            doc_id=doc_id,
            data=data,
            created_at=now,
            updated_at=now,
        )
        self.db.add(new_document)
        # Flush so a unique-path violation surfaces on this write, not at commit.
        self.db.flush()
        return new_document

    def replace(self, document: Document, data: Dict[str, Any], now: datetime) -> Document:
        # Assign a new dict so the JSON column is marked dirty.
        document.data = dict(data)
        document.updated_at = now
        return document

    def delete(self, document: Document) -> None:
        self.db.delete(document)
