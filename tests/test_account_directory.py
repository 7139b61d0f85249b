"""Tests for app.services.account_directory against an in-memory SQLite database."""

import unittest
from unittest.mock import MagicMock

from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.errors import ConflictError, StorageError
from app.models import Account, Base
from app.services.account_directory import AccountDirectory, AccountPatch, NewAccount


def _new(username: str, email: str | None = None, role: str = "user") -> NewAccount:
    return NewAccount(
        username=username,
        email=email or f"{username}@x.com",
        password_hash="$2b$04$placeholderplaceholderplaceholderplaceholderpla",
        role=role,
    )


class DirectoryTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.engine = create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        Base.metadata.create_all(self.engine)
        self.db = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)()
        self.directory = AccountDirectory(self.db)

    def tearDown(self) -> None:
        self.db.close()
        Base.metadata.drop_all(self.engine)
        self.engine.dispose()


class TestInsertAndFind(DirectoryTestCase):
    """insert assigns ids and defaults; lookups find by id, email or username."""

    def test_insert_populates_server_defaults(self) -> None:
        account = self.directory.insert(_new("alice"))
        self.assertIsNotNone(account.id)
        self.assertEqual(account.role, "user")
        self.assertIsNotNone(account.created_at)
        self.assertIsNotNone(account.updated_at)

    def test_find_by_id(self) -> None:
        account = self.directory.insert(_new("alice"))
        self.assertEqual(self.directory.find_by_id(account.id).username, "alice")
        self.assertIsNone(self.directory.find_by_id(account.id + 100))

    def test_find_by_email_or_username(self) -> None:
        self.directory.insert(_new("alice"))
        self.assertIsNotNone(self.directory.find_by_email_or_username("alice@x.com", "other"))
        self.assertIsNotNone(self.directory.find_by_email_or_username("other@x.com", "alice"))
        self.assertIsNone(self.directory.find_by_email_or_username("other@x.com", "other"))

    def test_find_by_email(self) -> None:
        self.directory.insert(_new("alice"))
        self.assertEqual(self.directory.find_by_email("alice@x.com").username, "alice")
        self.assertIsNone(self.directory.find_by_email("alice"))

    def test_duplicate_email_is_conflict(self) -> None:
        self.directory.insert(_new("alice"))
        with self.assertRaises(ConflictError):
            self.directory.insert(_new("alice2", email="alice@x.com"))
        self.assertEqual(len(self.directory.list_all()), 1)

    def test_duplicate_username_is_conflict(self) -> None:
        self.directory.insert(_new("alice"))
        with self.assertRaises(ConflictError):
            self.directory.insert(_new("alice", email="other@x.com"))

    def test_list_all_newest_first(self) -> None:
        for name in ("a", "b", "c"):
            self.directory.insert(_new(name))
        self.assertEqual([a.username for a in self.directory.list_all()], ["c", "b", "a"])


class TestUpdateAndDelete(DirectoryTestCase):
    """update applies only set fields; update/delete report rows affected."""

    def test_partial_update(self) -> None:
        account = self.directory.insert(_new("alice"))
        rows = self.directory.update(account.id, AccountPatch(first_name="Alice", role="admin"))
        self.assertEqual(rows, 1)
        self.db.expire_all()
        stored = self.directory.find_by_id(account.id)
        self.assertEqual(stored.first_name, "Alice")
        self.assertEqual(stored.role, "admin")
        self.assertEqual(stored.username, "alice")
        self.assertEqual(stored.email, "alice@x.com")

    def test_update_unknown_id(self) -> None:
        self.assertEqual(self.directory.update(404, AccountPatch(first_name="X")), 0)

    def test_update_to_taken_email_is_conflict(self) -> None:
        self.directory.insert(_new("alice"))
        bob = self.directory.insert(_new("bob"))
        with self.assertRaises(ConflictError):
            self.directory.update(bob.id, AccountPatch(email="alice@x.com"))
        self.db.expire_all()
        self.assertEqual(self.directory.find_by_id(bob.id).email, "bob@x.com")

    def test_delete(self) -> None:
        account = self.directory.insert(_new("alice"))
        self.assertEqual(self.directory.delete(account.id), 1)
        self.assertIsNone(self.directory.find_by_id(account.id))
        self.assertEqual(self.directory.delete(account.id), 0)


class TestStorageFailures(unittest.TestCase):
    """Database errors other than uniqueness become StorageError after rollback."""

    def test_query_failure(self) -> None:
        db = MagicMock()
        db.query.side_effect = OperationalError("SELECT", {}, Exception("connection lost"))
        with self.assertRaises(StorageError):
            AccountDirectory(db).find_by_id(1)
        db.rollback.assert_called_once()


class TestAccountPatch(unittest.TestCase):
    def test_values_skip_unset_fields(self) -> None:
        self.assertEqual(AccountPatch(email="a@x.com").values(), {"email": "a@x.com"})
        self.assertTrue(AccountPatch().is_empty())
        self.assertFalse(AccountPatch(role="user").is_empty())


if __name__ == "__main__":
    unittest.main()
