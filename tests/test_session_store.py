import os
import tempfile
import unittest

from api.models import User
from store import database as store_database
from store import session_store
from utils.state import Session


class SessionStoreTestCase(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        # Point the store at a temporary file and force re-initialization
        self.temp_dir = tempfile.TemporaryDirectory()
        self.db_path = os.path.join(self.temp_dir.name, "nested", "session.sqlite")
        store_database.DB_PATH = self.db_path
        store_database._initialized = False

    def tearDown(self):
        self.temp_dir.cleanup()

    async def test_empty_store(self):
        self.assertEqual(await session_store.load(), {})
        self.assertTrue(os.path.exists(self.db_path))

    async def test_save_overwrites_and_none_deletes(self):
        await session_store.save({"token": "a", "role": "admin"})
        await session_store.save({"token": "b", "role": None})
        self.assertEqual(await session_store.load(), {"token": "b"})

    async def test_clear_only_touches_session_keys(self):
        await session_store.save({"token": "a", "name": "Ada", "theme": "dark"})
        await session_store.clear()
        self.assertEqual(await session_store.load(), {"theme": "dark"})

    async def test_session_survives_restart(self):
        session = Session()
        await session.start(
            "tok-1", User(id="u1", name="Ada", email="ada@example.com", role="admin")
        )
        self.assertTrue(session.is_authenticated)

        resumed = Session()
        self.assertTrue(await resumed.restore())
        self.assertEqual(resumed.token, "tok-1")
        self.assertEqual(resumed.role, "admin")
        self.assertEqual(resumed.name, "Ada")

    async def test_logout_clears_store(self):
        session = Session()
        await session.start("tok-1", User("u1", "Ada", "ada@example.com", "admin"))
        await session.end()
        self.assertIsNone(session.token)
        self.assertFalse(session.is_authenticated)

        resumed = Session()
        self.assertFalse(await resumed.restore())
        self.assertIsNone(resumed.token)

    async def test_unknown_role_is_not_resolved(self):
        session = Session()
        await session.start("tok-2", User("u2", "", "ops@example.com", "auditor"))
        self.assertIsNone(session.role)
        self.assertEqual(session.name, "ops@example.com")
        self.assertFalse(session.is_authenticated)

        resumed = Session()
        self.assertFalse(await resumed.restore())
        self.assertEqual(resumed.token, "tok-2")


if __name__ == "__main__":
    unittest.main()
