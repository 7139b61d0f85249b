"""Unit tests for app.core.database: session lifetime and connectivity check."""

import unittest
from unittest.mock import MagicMock, patch

from sqlalchemy.exc import OperationalError

from app.core.database import check_db_connected, get_db, session_scope


class TestSessionScope(unittest.TestCase):
    """Sessions opened by session_scope and get_db are always closed."""

    @patch("app.core.database.SessionLocal")
    def test_closes_on_success(self, session_local: MagicMock) -> None:
        with session_scope() as db:
            self.assertIs(db, session_local.return_value)
        db.close.assert_called_once()

    @patch("app.core.database.SessionLocal")
    def test_closes_on_error(self, session_local: MagicMock) -> None:
        with self.assertRaises(RuntimeError):
            with session_scope():
                raise RuntimeError("boom")
        session_local.return_value.close.assert_called_once()

    @patch("app.core.database.SessionLocal")
    def test_get_db_yields_one_session(self, session_local: MagicMock) -> None:
        gen = get_db()
        self.assertIs(next(gen), session_local.return_value)
        session_local.return_value.close.assert_not_called()
        gen.close()
        session_local.return_value.close.assert_called_once()


class TestCheckDbConnected(unittest.TestCase):
    def test_connected(self) -> None:
        self.assertTrue(check_db_connected(MagicMock()))

    def test_unreachable(self) -> None:
        db = MagicMock()
        db.execute.side_effect = OperationalError("SELECT 1", {}, Exception("refused"))
        self.assertFalse(check_db_connected(db))


if __name__ == "__main__":
    unittest.main()
