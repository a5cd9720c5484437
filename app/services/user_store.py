"""Credential store: the narrow lookup/insert interface the auth core needs, plus the SQLAlchemy implementation."""

import logging
from typing import Protocol

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import DuplicateAccount, StoreUnavailable
from app.models.user import User
from app.schemas.auth import Account, NewAccount

logger = logging.getLogger(__name__)


class CredentialStore(Protocol):
    """Lookups return inactive accounts too; callers decide what inactive means."""

    def find_by_username(self, username: str) -> Account | None: ...

    def find_by_id(self, user_id: int) -> Account | None: ...

    def exists_by_username(self, username: str) -> bool: ...

    def exists_by_email(self, email: str) -> bool: ...

    def insert(self, account: NewAccount, password_hash: str) -> int: ...

    def list_active(self) -> list[Account]: ...


def _to_account(user: User) -> Account:
    return Account.model_validate(user)


class SqlAlchemyUserRepository:
    """
    CredentialStore backed by the users table.

    Every query is built from SQLAlchemy expressions, so values are always bound
    parameters. Driver errors are logged here and re-raised as StoreUnavailable.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def _one(self, stmt, what: str) -> User | None:
        try:
            return self.session.execute(stmt).scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.exception("Error retrieving user by %s", what)
            raise StoreUnavailable() from e

    def find_by_username(self, username: str) -> Account | None:
        user = self._one(select(User).where(User.username == username), "username")
        return _to_account(user) if user is not None else None

    def find_by_id(self, user_id: int) -> Account | None:
        user = self._one(select(User).where(User.id == user_id), "id")
        return _to_account(user) if user is not None else None

    def exists_by_username(self, username: str) -> bool:
        return self._one(select(User.id).where(User.username == username), "username") is not None

    def exists_by_email(self, email: str) -> bool:
        return self._one(select(User.id).where(User.email == email), "email") is not None

    def insert(self, account: NewAccount, password_hash: str) -> int:
        user = User(
            username=account.username,
            email=account.email,
            password_hash=password_hash,
            role=account.role.value,
            is_active=account.is_active,
        )
        try:
            self.session.add(user)
            self.session.commit()
        except IntegrityError as e:
            # Lost a race with a concurrent registration of the same username/email.
            self.session.rollback()
            logger.warning("Unique constraint hit inserting user: %s", account.username)
            raise DuplicateAccount("Username or email already exists") from e
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.exception("Error creating user: %s", account.username)
            raise StoreUnavailable() from e
        return user.id

    def list_active(self) -> list[Account]:
        stmt = select(User).where(User.is_active.is_(True)).order_by(User.id)
        try:
            users = self.session.execute(stmt).scalars().all()
        except SQLAlchemyError as e:
            logger.exception("Error retrieving all users")
            raise StoreUnavailable() from e
        return [_to_account(u) for u in users]
