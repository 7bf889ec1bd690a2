"""
Credential store: persistence of users and password reset codes.

``CredentialStore`` is the contract the auth service depends on;
``SQLAlchemyCredentialStore`` implements it over a request-scoped session.
Each operation commits on its own and rolls back on failure.
"""
import hmac
import logging
from datetime import timedelta
from typing import Optional, Protocol

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from .errors import (
    CodeExpiredError,
    CodeMismatchError,
    CodeNotFoundError,
    DuplicateUserError,
    StoreError,
)
from .models import PasswordResetCode, User, utcnow

logger = logging.getLogger(__name__)

RESET_CODE_TTL = timedelta(minutes=15)


class CredentialStore(Protocol):
    def create_user(self, user: User) -> None: ...

    def get_user_by_email(self, email: str) -> Optional[User]: ...

    def update_user_password(self, user_id: str, new_hashed_password: str) -> None: ...

    def create_password_reset_code(self, email: str, code: str) -> None: ...

    def verify_password_reset_code(self, email: str, code: str) -> None: ...

    def delete_password_reset_code(self, email: str) -> None: ...


class SQLAlchemyCredentialStore:
    def __init__(self, db: Session):
        self.db = db

    def create_user(self, user: User) -> None:
        try:
            self.db.add(user)
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise DuplicateUserError(f"user with email {user.email} already exists") from e
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreError("failed to insert user") from e

    def get_user_by_email(self, email: str) -> Optional[User]:
        try:
            return self.db.execute(select(User).where(User.email == email)).scalar_one_or_none()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreError("failed to look up user") from e

    def update_user_password(self, user_id: str, new_hashed_password: str) -> None:
        try:
            self.db.execute(
                update(User)
                .where(User.id == user_id)
                .values(hashed_password=new_hashed_password, updated_at=utcnow())
            )
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreError("failed to update password") from e

    def create_password_reset_code(self, email: str, code: str) -> None:
        expires_at = utcnow() + RESET_CODE_TTL
        try:
            self._upsert_reset_code(email, code, expires_at)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreError("failed to save reset code") from e

    def _upsert_reset_code(self, email, code, expires_at):
        dialect = self.db.get_bind().dialect.name
        if dialect == "postgresql":
            from sqlalchemy.dialects.postgresql import insert
        elif dialect == "sqlite":
            from sqlalchemy.dialects.sqlite import insert
        else:
            self.db.merge(PasswordResetCode(email=email, code=code, expires_at=expires_at))
            return

        stmt = insert(PasswordResetCode).values(email=email, code=code, expires_at=expires_at)
        stmt = stmt.on_conflict_do_update(
            index_elements=[PasswordResetCode.email],
            set_={"code": stmt.excluded.code, "expires_at": stmt.excluded.expires_at},
        )
        self.db.execute(stmt)

    def verify_password_reset_code(self, email: str, code: str) -> None:
        try:
            row = self.db.execute(
                select(PasswordResetCode)
                .where(PasswordResetCode.email == email)
                .execution_options(populate_existing=True)
            ).scalar_one_or_none()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreError("failed to look up reset code") from e

        if row is None:
            raise CodeNotFoundError()
        if not hmac.compare_digest(row.code.encode(), code.encode()):
            raise CodeMismatchError()
        if row.expires_at < utcnow():
            raise CodeExpiredError()

    def delete_password_reset_code(self, email: str) -> None:
        try:
            self.db.execute(delete(PasswordResetCode).where(PasswordResetCode.email == email))
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreError("failed to delete reset code") from e
