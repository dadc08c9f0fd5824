# /teacherboard/db/models/document_models.py

"""
SQLAlchemy model backing the path-addressed document store.

Every document of the workspace lives in this one table, addressed by its
full key path (e.g. `users/{teacherId}/notices/{noticeId}` or
`sessions/{sessionCode}`). The `collection_path` column holds the parent
collection so that collection queries are a single indexed lookup.
"""

from sqlalchemy import Column, Integer, String, JSON, DateTime

from ..base_class import Base


class Document(Base):
    # Autoincrement id doubles as a stable tie-breaker for ordering.
    id = Column(Integer, primary_key=True, autoincrement=True)
    path = Column(String, unique=True, index=True, nullable=False)
    collection_path = Column(String, index=True, nullable=False)
    doc_id = Column(String, nullable=False)
    data = Column(JSON, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False)
