from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Optional

from google.auth.exceptions import GoogleAuthError
from google.auth.transport import requests as google_requests
from google.oauth2 import id_token

from ..core.exceptions import AuthenticationError, AuthorizationError
from .model import Caller

logger = logging.getLogger(__name__)

TokenVerifier = Callable[[str], Mapping[str, Any]]


def firebase_token_verifier(project_id: Optional[str]) -> TokenVerifier:
    """Verify Firebase ID tokens against Google's public certificates."""

    request = google_requests.Request()

    def verify(token: str) -> Mapping[str, Any]:
        return id_token.verify_firebase_token(token, request, audience=project_id)

    return verify


class AuthService:
    def __init__(self, verifier: TokenVerifier):
        self._verify = verifier

    def authenticate(self, authorization_header: Optional[str]) -> Caller:
        header = (authorization_header or "").strip()
        if not header.lower().startswith("bearer "):
            raise AuthenticationError("Authentication is required.")
        token = header.split(" ", 1)[1].strip()
        if not token:
            raise AuthenticationError("Authentication is required.")

        try:
            claims = self._verify(token)
        except (ValueError, GoogleAuthError) as e:
            logger.info("Rejected ID token: %s", e)
            raise AuthenticationError("Authentication is required.")

        uid = (claims or {}).get("user_id") or (claims or {}).get("sub")
        if not uid:
            raise AuthenticationError("Authentication is required.")
        return Caller(uid=str(uid), claims=dict(claims))

    @staticmethod
    def require_admin(caller: Caller, message: str = "Must be an admin to run this operation.") -> None:
        if not caller.is_admin:
            raise AuthorizationError(message)
