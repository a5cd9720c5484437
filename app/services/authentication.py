"""Authentication service: credential checks and account registration on top of a CredentialStore."""

import logging
from typing import TYPE_CHECKING

from app.core.errors import DuplicateAccount, InvalidCredentials
from app.core.logging_config import AUDIT_LOGGER_NAME
from app.core.security import PasswordHasher
from app.schemas.auth import Account, NewAccount, Role

if TYPE_CHECKING:
    from app.services.user_store import CredentialStore

logger = logging.getLogger(__name__)
audit_logger = logging.getLogger(AUDIT_LOGGER_NAME)


def _audit(event: str, username: str, outcome: str, reason: str | None = None) -> None:
    extra = {"event": event, "username": username, "outcome": outcome, "reason": reason}
    if outcome == "success":
        audit_logger.info("%s succeeded for username: %s", event, username, extra=extra)
    else:
        audit_logger.warning(
            "%s failed for username: %s (reason=%s)", event, username, reason, extra=extra
        )


class AuthenticationService:
    """
    Turns a username/password pair into an Account.

    Every failure (unknown user, inactive, wrong password, unusable stored hash)
    raises the same InvalidCredentials; the reason only goes to the audit log.
    """

    def __init__(self, store: "CredentialStore", hasher: PasswordHasher) -> None:
        self.store = store
        self.hasher = hasher

    def authenticate(self, username: str, password: str) -> Account:
        account = self.store.find_by_username(username)

        if account is None:
            # Same bcrypt cost as a real check so response time does not reveal unknown usernames.
            self.hasher.verify_dummy(password)
            reason = "unknown_username"
        elif not account.is_active:
            self.hasher.verify_dummy(password)
            reason = "inactive"
        elif not account.password_hash:
            self.hasher.verify_dummy(password)
            reason = "login_disabled"
        elif not self.hasher.verify(password, account.password_hash):
            reason = "wrong_password"
        else:
            _audit("login", username, "success")
            return account.redacted()

        _audit("login", username, "failure", reason)
        raise InvalidCredentials()

    def register(
        self,
        username: str,
        email: str,
        password: str,
        role: Role = Role.USER,
    ) -> int:
        """Create an account and return its id. Raises DuplicateAccount naming the clash."""
        if self.store.exists_by_username(username):
            _audit("register", username, "failure", "duplicate_username")
            raise DuplicateAccount("Username already exists")
        if self.store.exists_by_email(email):
            _audit("register", username, "failure", "duplicate_email")
            raise DuplicateAccount("Email already exists")

        password_hash = self.hasher.hash(password)
        user_id = self.store.insert(
            NewAccount(username=username, email=email, role=role),
            password_hash,
        )
        _audit("register", username, "success")
        logger.info("User created successfully: %s (id=%s)", username, user_id)
        return user_id
