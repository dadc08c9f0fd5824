# /teacherboard/core/security.py

"""
Issues and verifies the application's own bearer tokens.

After the identity provider has vouched for a teacher, the backend hands out
an HS256 JWT that carries the teacher's public profile. Every authenticated
request is scoped by the `sub` claim of that token and nothing else.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import JWTError, jwt

from ..config import get_settings
from .exceptions import AuthenticationError

ALGORITHM = "HS256"


def create_access_token(account: Dict[str, Any], expires_delta: Optional[timedelta] = None, secret_key: Optional[str] = None) -> str:
    settings = get_settings()
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.access_token_expire_minutes)
    expire = datetime.now(timezone.utc) + expires_delta

    to_encode = {
        "sub": account["uid"],
        "name": account.get("displayName"),
        "email": account.get("email"),
        "picture": account.get("photoURL"),
        "exp": expire,
    }
    return jwt.encode(to_encode, secret_key or settings.secret_key, algorithm=ALGORITHM)


def decode_access_token(token: str, secret_key: Optional[str] = None) -> Dict[str, Any]:
    """Returns the account carried by a token, or raises AuthenticationError."""
    try:
        payload = jwt.decode(token, secret_key or get_settings().secret_key, algorithms=[ALGORITHM])
    except JWTError as e:
        raise AuthenticationError(f"Could not validate credentials: {e}") from e

    uid = payload.get("sub")
    if not uid:
        raise AuthenticationError("Token is missing the subject claim.")
    return {
        "uid": uid,
        "displayName": payload.get("name"),
        "email": payload.get("email"),
        "photoURL": payload.get("picture"),
    }
