"""
Error taxonomy for the authentication service.

Every failure the service can report is a subclass of ``AuthServiceError``
carrying an ``ErrorKind``. The HTTP layer maps on the class, never on the
message text. ``public_message`` is what callers see; the wrapped
collaborator exception (``__cause__``) is only for logs.
"""
from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    VALIDATION = "validation_error"
    DUPLICATE_EMAIL = "duplicate_email"
    INVALID_CREDENTIALS = "invalid_credentials"
    CODE_NOT_FOUND = "code_not_found"
    CODE_MISMATCH = "code_mismatch"
    CODE_EXPIRED = "code_expired"
    HASHING_FAILURE = "hashing_failure"
    TOKEN_FAILURE = "token_failure"
    PERSISTENCE_FAILURE = "persistence_failure"
    INTERNAL_FAILURE = "internal_failure"


class AuthServiceError(Exception):
    kind: ErrorKind = ErrorKind.INTERNAL_FAILURE
    public_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.public_message)


class ValidationError(AuthServiceError):
    kind = ErrorKind.VALIDATION
    public_message = "Invalid input"


class PasswordMismatchError(ValidationError):
    public_message = "Password and confirmation do not match"


class DuplicateEmailError(AuthServiceError):
    kind = ErrorKind.DUPLICATE_EMAIL
    public_message = "A user with this email already exists"


class InvalidCredentialsError(AuthServiceError):
    kind = ErrorKind.INVALID_CREDENTIALS
    public_message = "Invalid email or password"


class ResetCodeError(AuthServiceError):
    """Base for the reset-code failures, which are reported to the caller as-is."""


class CodeNotFoundError(ResetCodeError):
    kind = ErrorKind.CODE_NOT_FOUND
    public_message = "Reset code not found for this email"


class CodeMismatchError(ResetCodeError):
    kind = ErrorKind.CODE_MISMATCH
    public_message = "Invalid verification code"


class CodeExpiredError(ResetCodeError):
    kind = ErrorKind.CODE_EXPIRED
    public_message = "Verification code expired"


class HashingError(AuthServiceError):
    kind = ErrorKind.HASHING_FAILURE
    public_message = "Failed to hash password"


class TokenError(AuthServiceError):
    kind = ErrorKind.TOKEN_FAILURE
    public_message = "Failed to generate auth token"


class PersistenceError(AuthServiceError):
    kind = ErrorKind.PERSISTENCE_FAILURE
    public_message = "Failed to persist data"


class InternalError(AuthServiceError):
    kind = ErrorKind.INTERNAL_FAILURE


# Collaborator-level errors, translated by the service


class StoreError(Exception):
    """The credential store could not complete an operation."""


class DuplicateUserError(StoreError):
    """The unique email constraint rejected an insert."""


class NotificationError(Exception):
    """A notification could not be delivered."""
