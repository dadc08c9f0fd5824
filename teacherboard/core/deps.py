# /teacherboard/core/deps.py

"""FastAPI dependencies shared by the routers."""

import logging
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.requests import HTTPConnection
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from ..config import get_settings
from ..db.database import get_db
from ..models.auth_model import TeacherAccount
from ..services.document_store import DocumentStore
from . import security
from .exceptions import AuthenticationError

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_teacher(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> TeacherAccount:
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        account = security.decode_access_token(credentials.credentials)
    except AuthenticationError as e:
        logger.info("Rejected bearer token: %s", e)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return TeacherAccount(**account)


def get_document_store(connection: HTTPConnection, db: Session = Depends(get_db)) -> DocumentStore:
    """One store per request, sharing the application's subscription hub."""
    hub = getattr(connection.app.state, "subscriptions", None)
    return DocumentStore(db, hub=hub, retry_policy=get_settings().retry_policy)


def teacher_from_token(token: Optional[str]) -> TeacherAccount:
    """
    Authenticates a WebSocket by its `token` query parameter, since browsers
    cannot set an Authorization header on a WebSocket handshake.
    """
    if not token:
        raise AuthenticationError("Missing token.")
    return TeacherAccount(**security.decode_access_token(token))
