"""Unit tests for services: scale rules, taxonomy lookups and first-boot admin bootstrap."""

import asyncio
import shutil
import tempfile
import unittest
from pathlib import Path
from unittest.mock import MagicMock, patch

from pydantic import SecretStr

from lifetracker.core.security import verify_password
from lifetracker.core.storage import Storage
from lifetracker.models.taxonomy import Category
from lifetracker.services.errors import ValidationFailure
from lifetracker.services.scales import SCALES, check_value, default_scale_type
from lifetracker.services.taxonomy import describe_item, find_node
from lifetracker.services.users import add_user, get_user_by_username, initialize_storage, parse_users
from tests.support import seed_categories


class TestScales(unittest.TestCase):
    def test_default_scale_by_category_type(self) -> None:
        self.assertEqual(default_scale_type("food"), "weight")
        self.assertEqual(default_scale_type("self"), "rating")

    def test_scale_table(self) -> None:
        self.assertEqual((SCALES["rating"].min, SCALES["rating"].max, SCALES["rating"].step), (1, 5, 1))
        self.assertEqual((SCALES["weight"].min, SCALES["weight"].max, SCALES["weight"].step), (0, 500, 10))
        self.assertEqual((SCALES["count"].min, SCALES["count"].max, SCALES["count"].step), (0, 10, 1))
        self.assertEqual((SCALES["volume"].min, SCALES["volume"].max, SCALES["volume"].step), (0, 1000, 50))
        self.assertEqual(SCALES["intensity"].field, "rating")

    def test_check_value(self) -> None:
        self.assertIsNone(check_value("rating", "rating", 1))
        self.assertIsNone(check_value("intensity", "rating", 5))
        self.assertIsNone(check_value("weight", "weight", 0))
        self.assertIn("between", check_value("rating", "rating", 0))
        self.assertIn("recorded as 'volume'", check_value("volume", "weight", 100))


class TestTaxonomyLookup(unittest.TestCase):
    def setUp(self) -> None:
        self.categories = [Category.model_validate(c) for c in seed_categories()]

    def test_find_item_and_sub_item(self) -> None:
        category, item, sub = find_node(self.categories, "item2")
        self.assertEqual((category.id, item.id, sub), ("cat2", "item2", None))
        category, item, sub = find_node(self.categories, "toast")
        self.assertEqual((category.id, item.id, sub.id), ("cat2", "item2", "toast"))
        self.assertIsNone(find_node(self.categories, "missing"))

    def test_describe_item_falls_back_to_raw_id(self) -> None:
        self.assertEqual(describe_item(self.categories, "item1"), "Physical")
        self.assertEqual(describe_item(self.categories, "headache"), "Physical / Headache")
        self.assertEqual(describe_item(self.categories, "deleted-item"), "deleted-item")

    def test_describe_category_level_rating(self) -> None:
        self.assertEqual(describe_item(self.categories, "cat3"), "Mood")


@patch("lifetracker.core.security.BCRYPT_ROUNDS", 4)
class TestUsers(unittest.TestCase):
    def setUp(self) -> None:
        self.data_dir = Path(tempfile.mkdtemp(prefix="lifetracker-users-"))
        self.addCleanup(shutil.rmtree, self.data_dir, ignore_errors=True)
        self.storage = Storage(self.data_dir / "data")

    def _settings(self, password: str | None) -> MagicMock:
        settings = MagicMock()
        settings.ADMIN_USERNAME = "admin"
        settings.ADMIN_PASSWORD = SecretStr(password) if password else None
        return settings

    def test_first_boot_creates_admin_and_files(self) -> None:
        asyncio.run(initialize_storage(self.storage, self._settings("boot-password")))
        users = parse_users(asyncio.run(self.storage.users.read()))
        self.assertEqual(len(users), 1)
        self.assertEqual((users[0].username, users[0].role), ("admin", "admin"))
        self.assertTrue(verify_password("boot-password", users[0].password_hash))
        self.assertTrue(self.storage.categories.path.exists())
        self.assertEqual(asyncio.run(self.storage.entries.read()), [])

    def test_first_boot_without_password_fails(self) -> None:
        with self.assertRaises(RuntimeError):
            asyncio.run(initialize_storage(self.storage, self._settings(None)))

    def test_existing_admin_needs_no_password(self) -> None:
        asyncio.run(initialize_storage(self.storage, self._settings("boot-password")))
        asyncio.run(initialize_storage(self.storage, self._settings(None)))
        users = parse_users(asyncio.run(self.storage.users.read()))
        self.assertEqual([u.role for u in users], ["admin"])

    def test_admin_name_taken_by_regular_account_fails_startup(self) -> None:
        asyncio.run(add_user(self.storage, "admin", "regular-password"))
        with self.assertRaises(RuntimeError) as ctx:
            asyncio.run(initialize_storage(self.storage, self._settings("boot-password")))
        self.assertIn("ADMIN_USERNAME", str(ctx.exception))
        users = parse_users(asyncio.run(self.storage.users.read()))
        self.assertEqual([(u.username, u.role) for u in users], [("admin", "user")])

    def test_add_user_rejects_duplicates_and_short_passwords(self) -> None:
        asyncio.run(add_user(self.storage, "alice", "long-enough-pw"))
        with self.assertRaises(ValidationFailure):
            asyncio.run(add_user(self.storage, "alice", "another-password"))
        with self.assertRaises(ValidationFailure):
            asyncio.run(add_user(self.storage, "bob", "short"))
        user = asyncio.run(get_user_by_username(self.storage, "alice"))
        self.assertEqual(user.role, "user")
        self.assertIsNone(asyncio.run(get_user_by_username(self.storage, "ALICE")))


if __name__ == "__main__":
    unittest.main()
