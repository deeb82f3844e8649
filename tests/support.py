"""Shared fixtures: a temporary data directory wired into the app, seeded users and tokens."""

import json
import shutil
import tempfile
import unittest
from pathlib import Path
from typing import Any

import bcrypt
from fastapi.testclient import TestClient

from lifetracker.core.security import create_access_token
from lifetracker.core.storage import Storage, get_storage
from lifetracker.main import app

PASSWORD = "correct-horse-battery"

ADMIN = {"id": "admin-id", "username": "admin", "role": "admin"}
ALICE = {"id": "test-user-id", "username": "alice", "role": "user"}
BOB = {"id": "other-user-id", "username": "bob", "role": "user"}


def _fast_hash(password: str) -> str:
    # Low cost factor keeps the suite fast; verification is identical.
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=4)).decode("utf-8")


def seed_users() -> list[dict[str, Any]]:
    hashed = _fast_hash(PASSWORD)
    return [{**u, "passwordHash": hashed} for u in (ADMIN, ALICE, BOB)]


def seed_categories() -> list[dict[str, Any]]:
    return [
        {
            "id": "cat1",
            "name": "How do you feel?",
            "categoryType": "self",
            "items": [
                {
                    "id": "item1",
                    "name": "Physical",
                    "scaleType": "rating",
                    "subItems": [{"id": "headache", "name": "Headache"}],
                },
                {"id": "item3", "name": "Steps", "scaleType": "count", "subItems": []},
            ],
        },
        {
            "id": "cat2",
            "name": "What did you eat?",
            "categoryType": "food",
            "items": [
                {
                    "id": "item2",
                    "name": "Breakfast",
                    "scaleType": "weight",
                    "subItems": [{"id": "toast", "name": "Toast"}],
                },
                {"id": "water", "name": "Water", "scaleType": "volume", "subItems": []},
            ],
        },
        {"id": "cat3", "name": "Mood", "categoryType": "self", "items": []},
    ]


def seed_entries() -> list[dict[str, Any]]:
    return [
        {
            "id": "entry1",
            "timestamp": "2024-01-01T10:00:00.000Z",
            "userId": "test-user-id",
            "categoryId": "cat1",
            "items": [{"itemId": "item1", "rating": 4}],
            "notes": "Test entry 1",
        },
        {
            "id": "entry2",
            "timestamp": "2024-01-02T10:00:00.000Z",
            "userId": "test-user-id",
            "categoryId": "cat2",
            "items": [{"itemId": "item2", "weight": 120}],
            "notes": "Test entry 2",
        },
        {
            "id": "entry3",
            "timestamp": "2024-01-03T10:00:00.000Z",
            "userId": "other-user-id",
            "categoryId": "cat1",
            "items": [{"itemId": "item3", "count": 3}],
            "notes": "Test entry 3",
        },
    ]


def auth_header(user: dict[str, str]) -> dict[str, str]:
    token = create_access_token(user["id"], user["username"], user["role"])
    return {"Authorization": f"Bearer {token}"}


class ApiTestCase(unittest.TestCase):
    """Runs the app against a fresh temporary data directory seeded with users, taxonomy and entries."""

    def setUp(self) -> None:
        self.data_dir = Path(tempfile.mkdtemp(prefix="lifetracker-test-"))
        self.addCleanup(shutil.rmtree, self.data_dir, ignore_errors=True)
        self.write_json("users.json", seed_users())
        self.write_json("categories.json", seed_categories())
        self.write_json("entries.json", seed_entries())
        self.storage = Storage(self.data_dir)
        app.dependency_overrides[get_storage] = lambda: self.storage
        self.addCleanup(app.dependency_overrides.clear)
        self.client = TestClient(app)

    def path(self, name: str) -> Path:
        return self.data_dir / name

    def write_json(self, name: str, value: Any) -> None:
        (self.data_dir / name).write_text(json.dumps(value, indent=2), encoding="utf-8")

    def read_json(self, name: str) -> Any:
        return json.loads((self.data_dir / name).read_text(encoding="utf-8"))

    def read_bytes(self, name: str) -> bytes:
        return (self.data_dir / name).read_bytes()
