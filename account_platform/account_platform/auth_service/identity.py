"""
Identity provider token verification for protected routes.

These are third-party ID tokens (Firebase Auth), unrelated to the tokens
the auth service issues itself.
"""
from typing import Optional, Protocol
import logging
import threading

import firebase_admin
from firebase_admin import auth as firebase_auth
from firebase_admin import credentials
from firebase_admin.exceptions import FirebaseError

logger = logging.getLogger(__name__)

APP_NAME = "account_platform"


class IdentityVerificationError(Exception):
    """The identity token is malformed, expired or otherwise rejected."""


class IdentityProviderError(Exception):
    """The identity provider client could not be initialized."""


class ClaimsVerifier(Protocol):
    def verify(self, id_token: str) -> dict: ...


class FirebaseClaimsVerifier:
    """
    Verify Firebase ID tokens with the Admin SDK.

    The Firebase app is built from the service account file when one is
    configured and from application default credentials otherwise. Call
    initialize() at startup to surface a bad credential before serving;
    otherwise it happens on first use.
    """

    def __init__(self, service_key_path: Optional[str] = None):
        self.service_key_path = service_key_path
        self._app = None
        self._lock = threading.Lock()

    def initialize(self):
        with self._lock:
            if self._app is None:
                try:
                    cred = credentials.Certificate(self.service_key_path) if self.service_key_path else None
                    self._app = firebase_admin.initialize_app(cred, name=APP_NAME)
                except (ValueError, OSError) as e:
                    raise IdentityProviderError(
                        f"failed to initialize Firebase from {self.service_key_path!r}: {e}"
                    ) from e
                logger.info("Firebase Admin SDK initialized")
            return self._app

    def verify(self, id_token: str) -> dict:
        app = self.initialize()
        try:
            return firebase_auth.verify_id_token(id_token, app=app)
        except (ValueError, FirebaseError) as e:
            raise IdentityVerificationError(str(e)) from e
