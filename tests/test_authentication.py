"""Unit tests for app.services.authentication against the in-memory credential store."""

import unittest
from unittest.mock import patch

from app.core.errors import DuplicateAccount, InvalidCredentials
from app.core.security import PasswordHasher
from app.schemas.auth import NewAccount, Role
from app.services.authentication import AuthenticationService
from tests.fakes import InMemoryUserRepository

PASSWORD = "RealPassw0rd!"


class AuthenticationTestCase(unittest.TestCase):
    hasher: PasswordHasher
    password_hash: str

    @classmethod
    def setUpClass(cls) -> None:
        cls.hasher = PasswordHasher()
        cls.password_hash = cls.hasher.hash(PASSWORD)

    def setUp(self) -> None:
        self.store = InMemoryUserRepository()
        self.service = AuthenticationService(self.store, self.hasher)
        self.realuser = self.store.add(
            NewAccount(username="realuser", email="realuser@acme.org"), self.password_hash
        )


class TestAuthenticateSuccess(AuthenticationTestCase):
    """Correct credentials return the account with its hash cleared."""

    def test_returns_account_without_hash(self) -> None:
        account = self.service.authenticate("realuser", PASSWORD)
        self.assertEqual(account.id, self.realuser.id)
        self.assertEqual(account.username, "realuser")
        self.assertEqual(account.password_hash, "")
        self.assertNotIn("password_hash", account.model_dump())

    def test_store_copy_keeps_its_hash(self) -> None:
        self.service.authenticate("realuser", PASSWORD)
        self.assertEqual(self.store.find_by_id(self.realuser.id).password_hash, self.password_hash)

    def test_success_is_audited_without_password(self) -> None:
        with self.assertLogs("app.audit", level="INFO") as logs:
            self.service.authenticate("realuser", PASSWORD)
        self.assertIn("realuser", logs.output[0])
        self.assertNotIn(PASSWORD, "".join(logs.output))
        self.assertEqual(logs.records[0].outcome, "success")

    def test_usernames_are_case_sensitive(self) -> None:
        with self.assertRaises(InvalidCredentials):
            self.service.authenticate("RealUser", PASSWORD)


class TestAuthenticateFailure(AuthenticationTestCase):
    """All failure causes look the same to the caller."""

    def _failure(self, username: str, password: str) -> InvalidCredentials:
        with self.assertRaises(InvalidCredentials) as ctx:
            self.service.authenticate(username, password)
        return ctx.exception

    def test_unknown_user_and_wrong_password_are_indistinguishable(self) -> None:
        unknown = self._failure("nonexistent_user", "anything")
        wrong = self._failure("realuser", "wrongpassword")
        self.assertIs(type(unknown), type(wrong))
        self.assertEqual(unknown.message, wrong.message)
        self.assertEqual(str(unknown), str(wrong))
        self.assertEqual(vars(unknown), vars(wrong))

    def test_unknown_user_still_pays_hash_cost(self) -> None:
        with patch.object(self.hasher, "verify_dummy", wraps=self.hasher.verify_dummy) as dummy:
            self._failure("nonexistent_user", "anything")
        dummy.assert_called_once_with("anything")

    def test_inactive_account_rejected(self) -> None:
        self.store.add(
            NewAccount(username="ghost", email="ghost@acme.org", is_active=False),
            self.password_hash,
        )
        self._failure("ghost", PASSWORD)

    def test_empty_stored_hash_rejected(self) -> None:
        self.store.add(NewAccount(username="nologin", email="nologin@acme.org"), "")
        self._failure("nologin", "")

    def test_malformed_stored_hash_rejected_not_raised(self) -> None:
        self.store.add(NewAccount(username="broken", email="broken@acme.org"), "plaintext!")
        with self.assertLogs("app.core.security", level="WARNING"):
            self._failure("broken", "plaintext!")

    def test_failure_is_audited_with_reason(self) -> None:
        with self.assertLogs("app.audit", level="WARNING") as logs:
            self._failure("realuser", "wrongpassword")
        record = logs.records[0]
        self.assertEqual(record.username, "realuser")
        self.assertEqual(record.outcome, "failure")
        self.assertEqual(record.reason, "wrong_password")
        self.assertNotIn("wrongpassword", "".join(logs.output))


class TestRegister(AuthenticationTestCase):
    """Registration hashes the password and refuses duplicates."""

    def test_register_stores_hash_not_plaintext(self) -> None:
        user_id = self.service.register("bob", "bob@acme.org", "B0bPassword!", Role.ADMIN)
        stored = self.store.find_by_id(user_id)
        self.assertNotEqual(stored.password_hash, "B0bPassword!")
        self.assertTrue(self.hasher.verify("B0bPassword!", stored.password_hash))
        self.assertEqual(stored.role, Role.ADMIN)

    def test_registered_user_can_authenticate(self) -> None:
        self.service.register("bob", "bob@acme.org", "B0bPassword!")
        self.assertEqual(self.service.authenticate("bob", "B0bPassword!").username, "bob")

    def test_duplicate_username_rejected_without_second_record(self) -> None:
        with self.assertRaises(DuplicateAccount) as ctx:
            self.service.register("realuser", "other@acme.org", "B0bPassword!")
        self.assertEqual(ctx.exception.message, "Username already exists")
        self.assertEqual(len(self.store.accounts), 1)

    def test_duplicate_email_rejected(self) -> None:
        with self.assertRaises(DuplicateAccount) as ctx:
            self.service.register("someoneelse", "realuser@acme.org", "B0bPassword!")
        self.assertEqual(ctx.exception.message, "Email already exists")
        self.assertEqual(len(self.store.accounts), 1)


if __name__ == "__main__":
    unittest.main()
