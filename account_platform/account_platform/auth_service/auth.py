from passlib.context import CryptContext
from datetime import datetime, timedelta, timezone
from functools import lru_cache
import secrets
import uuid
import jwt

ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_HOURS = 24

# Use pbkdf2_sha256 to avoid external bcrypt backend issues in some environments
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    # passlib raises on hashes it cannot identify; those simply do not match
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        return False


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    return pwd_context.hash(secrets.token_urlsafe(16))


def dummy_verify(plain_password: str) -> bool:
    """Spend the same work as a real verify when there is no user to check against."""
    verify_password(plain_password, _dummy_hash())
    return False


def generate_numeric_code(length: int) -> str:
    """
    Generate a numeric code of the given length.

    Each digit is drawn independently from the OS CSPRNG; there is no
    fallback source.
    """
    if length <= 0:
        raise ValueError("length must be positive")
    return "".join(str(secrets.randbelow(10)) for _ in range(length))


class TokenIssuer:
    """Signs HS256 bearer tokens for authenticated users."""

    def __init__(self, secret: str, issuer: str, lifetime: timedelta = timedelta(hours=ACCESS_TOKEN_EXPIRE_HOURS)):
        if not secret:
            raise ValueError("A signing secret is required")
        self._secret = secret
        self.issuer = issuer
        self.lifetime = lifetime

    def generate_token(self, user_id: str, email: str) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "user_id": user_id,
            "email": email,
            "iss": self.issuer,
            "sub": user_id,
            "iat": now,
            "nbf": now,
            "exp": now + self.lifetime,
            # unique per issuance, even within the same second
            "jti": uuid.uuid4().hex,
        }
        return jwt.encode(payload, self._secret, algorithm=ALGORITHM)

    def decode_token(self, token: str) -> dict:
        """Verify signature, expiry and issuer; raises ``jwt.PyJWTError`` otherwise."""
        return jwt.decode(token, self._secret, algorithms=[ALGORITHM], issuer=self.issuer)
