"""
Public authentication endpoints: register, login, forgot/reset password.
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, status

from ..config import settings
from ..deps import get_auth_service
from ..errors import (
    AuthServiceError,
    DuplicateEmailError,
    InvalidCredentialsError,
    ResetCodeError,
    ValidationError,
)
from ..schemas import (
    AuthResponse,
    ForgotPasswordRequest,
    ForgotPasswordResponse,
    LoginRequest,
    RegisterRequest,
    ResetPasswordRequest,
)
from ..service import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])
logger = logging.getLogger(__name__)

FORGOT_PASSWORD_MESSAGE = "If the email is registered, a password reset code has been sent."


def _http_error(status_code: int, exc: AuthServiceError) -> HTTPException:
    return HTTPException(
        status_code=status_code,
        detail={"error": exc.public_message, "code": exc.kind.value},
    )


def _server_error(exc: AuthServiceError, action: str) -> HTTPException:
    logger.error("%s error: %s", action, exc, exc_info=exc)
    return _http_error(status.HTTP_500_INTERNAL_SERVER_ERROR, exc)


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(payload: RegisterRequest, service: AuthService = Depends(get_auth_service)):
    try:
        return service.register(payload.name, payload.email, payload.password, payload.confirm_password)
    except ValidationError as exc:
        raise _http_error(status.HTTP_400_BAD_REQUEST, exc) from exc
    except DuplicateEmailError as exc:
        raise _http_error(status.HTTP_409_CONFLICT, exc) from exc
    except AuthServiceError as exc:
        raise _server_error(exc, "Registration") from exc


@router.post("/login", response_model=AuthResponse)
def login(payload: LoginRequest, service: AuthService = Depends(get_auth_service)):
    try:
        return service.login(payload.email, payload.password)
    except InvalidCredentialsError as exc:
        raise _http_error(status.HTTP_401_UNAUTHORIZED, exc) from exc
    except AuthServiceError as exc:
        raise _server_error(exc, "Login") from exc


@router.post("/forgot-password", response_model=ForgotPasswordResponse, response_model_exclude_none=True)
def forgot_password(payload: ForgotPasswordRequest, service: AuthService = Depends(get_auth_service)):
    # Same response whether or not the account exists
    try:
        code = service.start_password_reset(payload.email)
    except AuthServiceError as exc:
        raise _server_error(exc, "Password reset initiation") from exc

    response = ForgotPasswordResponse(message=FORGOT_PASSWORD_MESSAGE)
    if code and settings.is_local:
        response.debug_code = code
    return response


@router.post("/reset-password", response_model=AuthResponse)
def reset_password(payload: ResetPasswordRequest, service: AuthService = Depends(get_auth_service)):
    try:
        return service.reset_password(
            payload.email, payload.code, payload.new_password, payload.confirm_password
        )
    except (ResetCodeError, ValidationError) as exc:
        logger.info("Password reset rejected: %s", exc.kind.value)
        raise _http_error(status.HTTP_400_BAD_REQUEST, exc) from exc
    except AuthServiceError as exc:
        raise _server_error(exc, "Password reset") from exc
