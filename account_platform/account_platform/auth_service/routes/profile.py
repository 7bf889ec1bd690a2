"""
Routes protected by identity provider tokens.
"""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Header, HTTPException, status

from ..deps import get_claims_verifier
from ..identity import ClaimsVerifier, IdentityProviderError, IdentityVerificationError
from ..schemas import ProfileResponse

router = APIRouter(tags=["profile"])
logger = logging.getLogger(__name__)


def get_current_claims(
    authorization: Optional[str] = Header(default=None, alias="Authorization"),
    verifier: ClaimsVerifier = Depends(get_claims_verifier),
) -> dict:
    if not authorization:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Authorization header required")

    parts = authorization.split(" ")
    if len(parts) != 2 or parts[0].lower() != "bearer" or not parts[1]:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization format must be Bearer <token>",
        )

    try:
        return verifier.verify(parts[1])
    except IdentityVerificationError as exc:
        logger.info("Identity token rejected: %s", exc)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or expired token") from exc
    except IdentityProviderError as exc:
        logger.error("Identity provider unavailable: %s", exc)
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Identity provider unavailable") from exc


@router.get("/profile", response_model=ProfileResponse)
def profile(claims: dict = Depends(get_current_claims)):
    return ProfileResponse(
        message="Welcome! You are authenticated.",
        user_id=claims.get("uid") or claims.get("sub", ""),
        email=claims.get("email"),
        name=claims.get("name"),
        claims_raw=claims,
    )
