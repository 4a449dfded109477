"""
Security utilities and authentication

Identity tokens are issued by Firebase Authentication; this service only
verifies them.
"""

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from firebase_admin import auth

from app.core.config import settings
from app.services.firebase_client import get_firebase_app
from app.utils.responses import unauthorized_error

logger = logging.getLogger(__name__)

# Missing or non-Bearer headers are rejected with 401 in get_current_user
security = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class CurrentUser:
    """Verified caller identity"""
    uid: str
    email: Optional[str] = None


class InvalidTokenError(Exception):
    """Raised when the identity provider rejects a token"""


class FirebaseTokenVerifier:
    """Verify Firebase ID tokens with the Admin SDK"""

    def __init__(self, check_revoked: bool = False):
        self.check_revoked = check_revoked

    def verify(self, token: str) -> CurrentUser:
        try:
            app = get_firebase_app()
        except RuntimeError as e:
            logger.error("Cannot verify identity tokens: %s", e)
            raise InvalidTokenError("Token verification is not configured") from e

        try:
            decoded = auth.verify_id_token(
                token,
                app=app,
                check_revoked=self.check_revoked,
            )
        except (
            ValueError,
            auth.InvalidIdTokenError,
            auth.UserDisabledError,
            auth.CertificateFetchError,
        ) as e:
            raise InvalidTokenError(str(e)) from e
        return CurrentUser(uid=decoded["uid"], email=decoded.get("email"))


@lru_cache(maxsize=1)
def get_token_verifier() -> FirebaseTokenVerifier:
    """Dependency providing the token verifier; override it in tests"""
    return FirebaseTokenVerifier(check_revoked=settings.FIREBASE_CHECK_REVOKED)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    verifier: FirebaseTokenVerifier = Depends(get_token_verifier),
) -> CurrentUser:
    """Require a valid bearer identity token"""
    if credentials is None or not credentials.credentials:
        unauthorized_error("Unauthorized access")

    try:
        return verifier.verify(credentials.credentials)
    except InvalidTokenError as e:
        logger.warning("Error verifying identity token: %s", e)
        unauthorized_error("Unauthorized access")
