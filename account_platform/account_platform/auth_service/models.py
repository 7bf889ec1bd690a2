from sqlalchemy import Column, String, Boolean, DateTime
from datetime import datetime, timezone
from .db import Base
import uuid


def utcnow() -> datetime:
    """Naive UTC timestamp, matching the DateTime columns below."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class User(Base):
    __tablename__ = "users"
    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(50), nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    # Set on creation, not enforced anywhere yet
    is_verified = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, nullable=False)

    def __repr__(self):
        return f"<User(id={self.id}, email={self.email})>"


class PasswordResetCode(Base):
    """
    One live reset code per email. A new code for the same email
    replaces the row instead of adding one.
    """
    __tablename__ = "password_reset_tokens"
    email = Column(String, primary_key=True)
    code = Column(String(6), nullable=False)
    expires_at = Column(DateTime, nullable=False)
