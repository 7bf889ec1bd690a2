"""
Authentication service: registration, login and the two-phase password reset.

The service owns the business rules and the ordering of side effects. It
talks to its collaborators through ``CredentialStore``, ``TokenIssuer`` and
``NotificationSender`` and reports failures as ``AuthServiceError``
subclasses (see ``errors.py``).
"""
import logging
import uuid

import jwt

from .auth import TokenIssuer, dummy_verify, generate_numeric_code, hash_password, verify_password
from .errors import (
    DuplicateEmailError,
    DuplicateUserError,
    HashingError,
    InternalError,
    InvalidCredentialsError,
    NotificationError,
    PasswordMismatchError,
    PersistenceError,
    StoreError,
    TokenError,
)
from .models import User, utcnow
from .repository import CredentialStore
from .schemas import AuthResponse
from .utils.mailer import NotificationSender

logger = logging.getLogger(__name__)

RESET_CODE_LENGTH = 6


def normalize_email(email: str) -> str:
    """Emails are matched and stored case-insensitively."""
    return email.strip().lower()


class AuthService:
    def __init__(self, store: CredentialStore, token_issuer: TokenIssuer, sender: NotificationSender):
        self.store = store
        self.token_issuer = token_issuer
        self.sender = sender

    def register(self, name: str, email: str, password: str, confirm_password: str) -> AuthResponse:
        """
        Create a user and issue a token for it.

        Raises:
            PasswordMismatchError: password and confirmation differ
            DuplicateEmailError: the email is already registered
            HashingError, PersistenceError, TokenError: collaborator failures
        """
        if password != confirm_password:
            raise PasswordMismatchError()

        email = normalize_email(email)
        try:
            existing = self.store.get_user_by_email(email)
        except StoreError as e:
            raise PersistenceError("repository error during lookup") from e
        if existing is not None:
            raise DuplicateEmailError()

        hashed = self._hash(password)

        now = utcnow()
        user = User(
            id=str(uuid.uuid4()),
            name=name,
            email=email,
            hashed_password=hashed,
            is_verified=False,
            created_at=now,
            updated_at=now,
        )
        try:
            self.store.create_user(user)
        except DuplicateUserError as e:
            # Lost a race with a concurrent registration for the same email
            raise DuplicateEmailError() from e
        except StoreError as e:
            raise PersistenceError("failed to save new user") from e

        logger.info("User registered: user_id=%s", user.id)
        return self._auth_response(user)

    def login(self, email: str, password: str) -> AuthResponse:
        """
        Verify credentials and issue a token.

        An unknown email, a wrong password and a lookup failure all raise the
        same ``InvalidCredentialsError``.
        """
        email = normalize_email(email)
        try:
            user = self.store.get_user_by_email(email)
        except StoreError:
            logger.exception("Login lookup failed")
            dummy_verify(password)
            raise InvalidCredentialsError() from None

        if user is None:
            dummy_verify(password)
            raise InvalidCredentialsError()
        if not verify_password(password, user.hashed_password):
            raise InvalidCredentialsError()

        return self._auth_response(user)

    def start_password_reset(self, email: str) -> str:
        """
        Generate, store and send a reset code.

        Returns the code when it was delivered, or an empty string when the
        email is unknown or delivery failed. Callers cannot tell those two
        apart.

        Raises:
            InternalError: the user lookup failed
            PersistenceError: the code could not be stored
        """
        email = normalize_email(email)
        try:
            user = self.store.get_user_by_email(email)
        except StoreError as e:
            raise InternalError("user lookup failed") from e
        if user is None:
            logger.info("Password reset requested for non-existent email: %s", email)
            return ""

        code = generate_numeric_code(RESET_CODE_LENGTH)

        try:
            self.store.create_password_reset_code(email, code)
        except StoreError as e:
            raise PersistenceError("failed to save reset code") from e

        try:
            self.sender.send_password_reset_code(email, code)
        except NotificationError:
            logger.exception("Failed to send reset code email to %s", email)
            return ""

        return code

    def reset_password(self, email: str, code: str, new_password: str, confirm_password: str) -> AuthResponse:
        """
        Consume a reset code and set a new password.

        Raises:
            PasswordMismatchError: new password and confirmation differ
            CodeNotFoundError, CodeMismatchError, CodeExpiredError: bad code
            InternalError: the user vanished after the code was verified
            HashingError, PersistenceError, TokenError: collaborator failures
        """
        if new_password != confirm_password:
            raise PasswordMismatchError()

        email = normalize_email(email)
        try:
            self.store.verify_password_reset_code(email, code)
        except StoreError as e:
            raise PersistenceError("failed to verify reset code") from e

        try:
            user = self.store.get_user_by_email(email)
        except StoreError as e:
            raise InternalError("internal error retrieving user") from e
        if user is None:
            raise InternalError("user not found after code verification")

        hashed = self._hash(new_password)

        try:
            self.store.update_user_password(user.id, hashed)
        except StoreError as e:
            raise PersistenceError("failed to update password") from e

        # Cleanup only: the password is already changed at this point
        try:
            self.store.delete_password_reset_code(email)
        except StoreError:
            logger.warning("Failed to delete reset code for %s", email, exc_info=True)

        logger.info("Password reset completed: user_id=%s", user.id)
        return self._auth_response(user)

    def _hash(self, password: str) -> str:
        try:
            return hash_password(password)
        except (ValueError, TypeError) as e:
            raise HashingError() from e

    def _auth_response(self, user: User) -> AuthResponse:
        try:
            token = self.token_issuer.generate_token(user.id, user.email)
        except (jwt.PyJWTError, TypeError, ValueError) as e:
            raise TokenError() from e
        return AuthResponse(user_id=user.id, email=user.email, name=user.name, token=token)
