"""Storage boundary for accounts: lookups and single-statement writes on the users table."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Any

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import ConflictError, StorageError
from app.models.account import Account

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NewAccount:
    username: str
    email: str
    password_hash: str
    first_name: str | None = None
    last_name: str | None = None
    role: str = "user"


@dataclass(frozen=True)
class AccountPatch:
    """Sparse update: None means 'leave unchanged'."""

    username: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    role: str | None = None

    def values(self) -> dict[str, Any]:
        """Column -> new value for every field that is set."""
        return {k: v for k, v in asdict(self).items() if v is not None}

    def is_empty(self) -> bool:
        return not self.values()


class AccountDirectory:
    """
    Account lookups and writes over one SQLAlchemy session.

    Every write commits on its own. Uniqueness violations become ConflictError;
    any other database failure becomes StorageError after a rollback.
    """

    def __init__(self, db: Session) -> None:
        self._db = db

    def _fail(self, operation: str, exc: Exception) -> StorageError:
        self._db.rollback()
        logger.error(
            "Account directory operation failed",
            extra={"operation": operation, "error": str(exc)},
        )
        return StorageError(detail=f"{operation}: {exc}")

    def _conflict(self, operation: str, exc: IntegrityError) -> ConflictError:
        self._db.rollback()
        logger.info(
            "Account uniqueness violation",
            extra={"operation": operation, "error": str(exc.orig)},
        )
        return ConflictError(detail=f"{operation}: {exc.orig}")

    def find_by_email_or_username(self, email: str, username: str) -> Account | None:
        try:
            return (
                self._db.query(Account)
                .filter(or_(Account.email == email, Account.username == username))
                .first()
            )
        except SQLAlchemyError as e:
            raise self._fail("find_by_email_or_username", e) from e

    def find_by_email(self, email: str) -> Account | None:
        try:
            return self._db.query(Account).filter(Account.email == email).first()
        except SQLAlchemyError as e:
            raise self._fail("find_by_email", e) from e

    def find_by_id(self, account_id: int) -> Account | None:
        try:
            return self._db.query(Account).filter(Account.id == account_id).first()
        except SQLAlchemyError as e:
            raise self._fail("find_by_id", e) from e

    def list_all(self) -> list[Account]:
        """All accounts, newest first."""
        try:
            return (
                self._db.query(Account)
                .order_by(Account.created_at.desc(), Account.id.desc())
                .all()
            )
        except SQLAlchemyError as e:
            raise self._fail("list_all", e) from e

    def insert(self, new_account: NewAccount) -> Account:
        """Insert and return the stored row (id and timestamps populated)."""
        account = Account(**asdict(new_account))
        try:
            self._db.add(account)
            self._db.commit()
            self._db.refresh(account)
        except IntegrityError as e:
            raise self._conflict("insert", e) from e
        except SQLAlchemyError as e:
            raise self._fail("insert", e) from e
        return account

    def update(self, account_id: int, patch: AccountPatch) -> int:
        """Apply patch and bump updated_at; return rows affected (0 if id is unknown)."""
        values = patch.values()
        values["updated_at"] = func.now()
        try:
            rows = (
                self._db.query(Account)
                .filter(Account.id == account_id)
                .update(values, synchronize_session=False)
            )
            self._db.commit()
        except IntegrityError as e:
            raise self._conflict("update", e) from e
        except SQLAlchemyError as e:
            raise self._fail("update", e) from e
        return rows

    def delete(self, account_id: int) -> int:
        """Delete by id; return rows affected (0 if id is unknown)."""
        try:
            rows = (
                self._db.query(Account)
                .filter(Account.id == account_id)
                .delete(synchronize_session=False)
            )
            self._db.commit()
        except SQLAlchemyError as e:
            raise self._fail("delete", e) from e
        return rows
