# /teacherboard/db/base.py

# Central registry for all SQLAlchemy models. Importing them here makes sure
# `Base.metadata` knows every table when Alembic or `create_all` runs.

from .base_class import Base

from .models.document_models import Document
