# /teacherboard/services/identity_service.py

"""
The Identity Provider Adapter.

Verifies an ID token minted by Google sign-in (or by Firebase Auth when
`AUTH_PROVIDER=firebase`) and turns its claims into a `TeacherAccount`. The
provider is a small class so tests can swap in a fake through FastAPI's
dependency overrides.
"""

import logging
from typing import Any, Dict, Optional

from google.auth import exceptions as google_auth_exceptions
from google.auth.transport import requests as google_requests
from google.oauth2 import id_token

from ..config import Settings, get_settings
from ..core.exceptions import AuthenticationError
from ..models.auth_model import TeacherAccount

logger = logging.getLogger(__name__)


class GoogleIdentityProvider:
    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self._request = google_requests.Request()

    def _verify(self, token: str) -> Dict[str, Any]:
        if self.settings.auth_provider == "firebase":
            return id_token.verify_firebase_token(token, self._request, audience=self.settings.firebase_project_id or None)
        return id_token.verify_oauth2_token(token, self._request, audience=self.settings.google_client_id or None)

    def verify(self, token: str) -> TeacherAccount:
        try:
            claims = self._verify(token)
        except (ValueError, google_auth_exceptions.GoogleAuthError) as e:
            logger.info("ID token verification failed: %s", e)
            raise AuthenticationError("The Google sign-in token could not be verified.") from e

        if not claims:
            raise AuthenticationError("The Google sign-in token could not be verified.")
        return claims_to_account(claims)


def claims_to_account(claims: Dict[str, Any]) -> TeacherAccount:
    uid = claims.get("user_id") or claims.get("sub")
    if not uid:
        raise AuthenticationError("The sign-in token does not identify a user.")
    return TeacherAccount(
        uid=uid,
        displayName=claims.get("name"),
        email=claims.get("email"),
        photoURL=claims.get("picture"),
    )


def get_identity_provider() -> GoogleIdentityProvider:
    return GoogleIdentityProvider()
