"""Tests for app.services.user_store.SqlAlchemyUserRepository on an in-memory SQLite database."""

import unittest
from unittest.mock import MagicMock

from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.errors import DuplicateAccount, StoreUnavailable
from app.models import Base, User
from app.schemas.auth import NewAccount, Role
from app.services.user_store import SqlAlchemyUserRepository


class UserStoreTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.engine = create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        Base.metadata.create_all(self.engine)
        self.session = sessionmaker(bind=self.engine)()
        self.repo = SqlAlchemyUserRepository(self.session)

    def tearDown(self) -> None:
        self.session.close()
        self.engine.dispose()


class TestInsertAndLookup(UserStoreTestCase):
    def test_insert_returns_id_and_lookups_find_it(self) -> None:
        user_id = self.repo.insert(
            NewAccount(username="alice", email="alice@acme.org", role=Role.ADMIN), "$2b$12$hash"
        )
        by_name = self.repo.find_by_username("alice")
        by_id = self.repo.find_by_id(user_id)
        self.assertEqual(by_name.id, user_id)
        self.assertEqual(by_id.username, "alice")
        self.assertEqual(by_id.role, Role.ADMIN)
        self.assertEqual(by_id.password_hash, "$2b$12$hash")
        self.assertTrue(by_id.is_active)
        self.assertIsNotNone(by_id.created_at)

    def test_missing_user_returns_none(self) -> None:
        self.assertIsNone(self.repo.find_by_username("nobody"))
        self.assertIsNone(self.repo.find_by_id(999))

    def test_lookup_is_exact_and_parameter_bound(self) -> None:
        self.repo.insert(NewAccount(username="alice", email="alice@acme.org"), "h")
        self.assertIsNone(self.repo.find_by_username("' OR '1'='1"))
        self.assertIsNone(self.repo.find_by_username("ALICE"))
        self.assertFalse(self.repo.exists_by_username("alice' --"))

    def test_exists_checks(self) -> None:
        self.repo.insert(NewAccount(username="alice", email="alice@acme.org"), "h")
        self.assertTrue(self.repo.exists_by_username("alice"))
        self.assertTrue(self.repo.exists_by_email("alice@acme.org"))
        self.assertFalse(self.repo.exists_by_username("bob"))
        self.assertFalse(self.repo.exists_by_email("bob@acme.org"))

    def test_inactive_accounts_found_but_not_listed(self) -> None:
        self.repo.insert(NewAccount(username="alice", email="alice@acme.org"), "h")
        self.repo.insert(
            NewAccount(username="ghost", email="ghost@acme.org", is_active=False), "h"
        )
        self.assertFalse(self.repo.find_by_username("ghost").is_active)
        self.assertTrue(self.repo.exists_by_username("ghost"))
        self.assertEqual([a.username for a in self.repo.list_active()], ["alice"])

    def test_listed_accounts_serialize_without_hash(self) -> None:
        self.repo.insert(NewAccount(username="alice", email="alice@acme.org"), "$2b$12$hash")
        dumped = [a.model_dump() for a in self.repo.list_active()]
        self.assertNotIn("password_hash", dumped[0])


class TestStoreFailures(UserStoreTestCase):
    def test_unique_violation_becomes_duplicate_account(self) -> None:
        self.repo.insert(NewAccount(username="alice", email="alice@acme.org"), "h")
        with self.assertRaises(DuplicateAccount):
            self.repo.insert(NewAccount(username="alice", email="other@acme.org"), "h")
        self.assertEqual(self.session.query(User).count(), 1)

    def test_driver_error_becomes_store_unavailable(self) -> None:
        session = MagicMock()
        session.execute.side_effect = OperationalError("SELECT", {}, Exception("connection refused"))
        repo = SqlAlchemyUserRepository(session)
        with self.assertLogs("app.services.user_store", level="ERROR"):
            with self.assertRaises(StoreUnavailable) as ctx:
                repo.find_by_username("alice")
        self.assertNotIn("connection refused", ctx.exception.message)


if __name__ == "__main__":
    unittest.main()
