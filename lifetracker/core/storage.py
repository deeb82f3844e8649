"""JSON file persistence: one whole-document file per collection, serialized per file."""

import asyncio
import json
import logging
import os
import secrets
import time
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from functools import lru_cache
from pathlib import Path
from typing import Any

from lifetracker.core.config import settings

logger = logging.getLogger(__name__)

USERS_FILE = "users.json"
CATEGORIES_FILE = "categories.json"
ENTRIES_FILE = "entries.json"


class StorageError(Exception):
    """Raised when a data file cannot be read, parsed or written."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.message = message
        self.cause = cause
        super().__init__(message)


def generate_id() -> str:
    """Millisecond timestamp plus a random suffix so same-millisecond ids do not collide."""
    return f"{int(time.time() * 1000)}-{secrets.token_hex(4)}"


class JsonDocument:
    """
    A single JSON document on disk, always read and written whole.

    Every access goes through a per-document asyncio.Lock, so read-modify-write
    sequences started with edit() never interleave within the process. Writes
    go to a temporary sibling and are moved into place with os.replace.
    """

    def __init__(self, path: Path, default: Callable[[], Any]) -> None:
        self.path = path
        self._default = default
        self._lock = asyncio.Lock()

    def _read_sync(self) -> Any:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            value = self._default()
            logger.info("Initializing missing data file %s", self.path)
            self._write_sync(value)
            return value
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(f"Failed to read {self.path.name}", e) from e
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            raise StorageError(f"Malformed JSON in {self.path.name}", e) from e

    def _write_sync(self, value: Any) -> None:
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            text = json.dumps(value, indent=2, allow_nan=False)
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tmp.open("w", encoding="utf-8") as f:
                f.write(text)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp, self.path)
        except (OSError, TypeError, ValueError) as e:
            raise StorageError(f"Failed to write {self.path.name}", e) from e

    async def read(self) -> Any:
        """Return the whole document, creating it with default content if missing."""
        async with self._lock:
            return await asyncio.to_thread(self._read_sync)

    async def write(self, value: Any) -> None:
        """Replace the whole document."""
        async with self._lock:
            await asyncio.to_thread(self._write_sync, value)

    @asynccontextmanager
    async def edit(self) -> AsyncIterator[Any]:
        """
        Atomic read-modify-write. Mutate the yielded value in place; it is written
        back when the block exits normally. If the block raises, nothing is written.
        """
        async with self._lock:
            value = await asyncio.to_thread(self._read_sync)
            yield value
            await asyncio.to_thread(self._write_sync, value)


class Storage:
    """The three data files of the application, rooted at data_dir."""

    def __init__(self, data_dir: Path | str) -> None:
        self.data_dir = Path(data_dir)
        self.users = JsonDocument(self.data_dir / USERS_FILE, list)
        self.categories = JsonDocument(self.data_dir / CATEGORIES_FILE, default_categories)
        self.entries = JsonDocument(self.data_dir / ENTRIES_FILE, list)


@lru_cache
def get_storage() -> Storage:
    """Dependency returning the process-wide storage (one lock per file for all requests)."""
    return Storage(settings.DATA_DIR)


def check_storage_ready(storage: Storage) -> bool:
    """True if the data directory exists and is writable."""
    return storage.data_dir.is_dir() and os.access(storage.data_dir, os.W_OK)


def default_categories() -> list[dict[str, Any]]:
    """Starter taxonomy written when categories.json does not exist yet."""

    def item(item_id: str, name: str, scale: str, subs: list[tuple[str, str]]) -> dict[str, Any]:
        return {
            "id": item_id,
            "name": name,
            "scaleType": scale,
            "subItems": [{"id": sid, "name": sname} for sid, sname in subs],
        }

    return [
        {
            "id": "feelings",
            "name": "How do you feel?",
            "categoryType": "self",
            "items": [
                item(
                    "physical",
                    "Physical",
                    "intensity",
                    [("headache", "Headache"), ("neck-tension", "Neck Tension"), ("back-pain", "Back Pain")],
                ),
                item(
                    "emotional",
                    "Emotional",
                    "rating",
                    [("happy", "Happy"), ("sad", "Sad"), ("anxious", "Anxious"), ("stressed", "Stressed")],
                ),
            ],
        },
        {
            "id": "food",
            "name": "What did you eat?",
            "categoryType": "food",
            "items": [
                item("breakfast", "Breakfast", "weight", [("cereal", "Cereal"), ("toast", "Toast"), ("eggs", "Eggs")]),
                item("lunch", "Lunch", "weight", [("sandwich", "Sandwich"), ("salad", "Salad"), ("soup", "Soup")]),
                item("dinner", "Dinner", "weight", [("pasta", "Pasta"), ("meat", "Meat"), ("vegetables", "Vegetables")]),
                item("drinks", "Drinks", "volume", [("water", "Water"), ("coffee", "Coffee"), ("tea", "Tea")]),
            ],
        },
        {
            "id": "sleep",
            "name": "How did you sleep?",
            "categoryType": "self",
            "items": [
                item(
                    "quality",
                    "Sleep Quality",
                    "rating",
                    [("deep", "Deep Sleep"), ("light", "Light Sleep"), ("interrupted", "Interrupted")],
                ),
                item("wake-ups", "Wake-ups", "count", []),
            ],
        },
    ]
