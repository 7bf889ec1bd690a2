"""
FastAPI dependency providers wiring the auth service to its collaborators.
"""
from functools import lru_cache

from fastapi import Depends
from sqlalchemy.orm import Session

from .auth import TokenIssuer
from .config import settings
from .db import get_db
from .identity import ClaimsVerifier, FirebaseClaimsVerifier
from .repository import SQLAlchemyCredentialStore
from .service import AuthService
from .utils.mailer import LogOnlySender, NotificationSender, SMTPSender, UnconfiguredSender


@lru_cache(maxsize=1)
def get_token_issuer() -> TokenIssuer:
    return TokenIssuer(settings.JWT_SECRET, settings.JWT_ISSUER)


def get_notification_sender() -> NotificationSender:
    if not settings.SMTP_HOST:
        # Codes only go to the log in local environments
        return LogOnlySender() if settings.is_local else UnconfiguredSender()
    return SMTPSender(
        host=settings.SMTP_HOST,
        port=settings.SMTP_PORT,
        username=settings.SMTP_USER,
        password=settings.SMTP_PASSWORD,
        from_email=settings.FROM_EMAIL,
    )


@lru_cache(maxsize=1)
def get_claims_verifier() -> ClaimsVerifier:
    return FirebaseClaimsVerifier(settings.FIREBASE_SERVICE_KEY_PATH)


def get_auth_service(
    db: Session = Depends(get_db),
    token_issuer: TokenIssuer = Depends(get_token_issuer),
    sender: NotificationSender = Depends(get_notification_sender),
) -> AuthService:
    return AuthService(SQLAlchemyCredentialStore(db), token_issuer, sender)
