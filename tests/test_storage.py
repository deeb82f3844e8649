"""Unit tests for lifetracker.core.storage: whole-document JSON files with per-file locking."""

import asyncio
import json
import shutil
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from lifetracker.core.storage import (
    JsonDocument,
    Storage,
    StorageError,
    check_storage_ready,
    default_categories,
    generate_id,
)


class StorageTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.data_dir = Path(tempfile.mkdtemp(prefix="lifetracker-storage-"))
        self.addCleanup(shutil.rmtree, self.data_dir, ignore_errors=True)
        self.path = self.data_dir / "doc.json"


class TestRead(StorageTestCase):
    """read() returns the document; a missing file is created with default content."""

    def test_missing_file_is_initialized_with_default(self) -> None:
        doc = JsonDocument(self.path, list)
        self.assertEqual(asyncio.run(doc.read()), [])
        self.assertEqual(json.loads(self.path.read_text()), [])

    def test_missing_directory_is_created(self) -> None:
        doc = JsonDocument(self.data_dir / "nested" / "doc.json", dict)
        self.assertEqual(asyncio.run(doc.read()), {})
        self.assertTrue((self.data_dir / "nested" / "doc.json").exists())

    def test_existing_content_is_returned(self) -> None:
        self.path.write_text('[{"id": "a"}]')
        doc = JsonDocument(self.path, list)
        self.assertEqual(asyncio.run(doc.read()), [{"id": "a"}])

    def test_malformed_json_raises_storage_error(self) -> None:
        self.path.write_text("invalid json")
        doc = JsonDocument(self.path, list)
        with self.assertRaises(StorageError) as ctx:
            asyncio.run(doc.read())
        self.assertIn("Malformed JSON", ctx.exception.message)
        self.assertEqual(self.path.read_text(), "invalid json")

    def test_undecodable_bytes_raise_storage_error(self) -> None:
        self.path.write_bytes(b"[\xff\xfe]")
        doc = JsonDocument(self.path, list)
        with self.assertRaises(StorageError) as ctx:
            asyncio.run(doc.read())
        self.assertIn("Failed to read", ctx.exception.message)
        self.assertEqual(self.path.read_bytes(), b"[\xff\xfe]")


class TestWrite(StorageTestCase):
    """write() replaces the whole document with 2-space indented JSON."""

    def test_write_replaces_document(self) -> None:
        doc = JsonDocument(self.path, list)
        asyncio.run(doc.write([1, 2]))
        asyncio.run(doc.write([3]))
        self.assertEqual(self.path.read_text(), json.dumps([3], indent=2))
        self.assertFalse(self.path.with_suffix(".json.tmp").exists())

    def test_os_error_raises_storage_error(self) -> None:
        doc = JsonDocument(self.path, list)
        with patch("lifetracker.core.storage.os.replace", side_effect=OSError("disk full")):
            with self.assertRaises(StorageError) as ctx:
                asyncio.run(doc.write([1]))
        self.assertIn("Failed to write", ctx.exception.message)

    def test_non_finite_numbers_are_never_written(self) -> None:
        self.path.write_text("[1]")
        doc = JsonDocument(self.path, list)
        with self.assertRaises(StorageError):
            asyncio.run(doc.write([float("nan")]))
        self.assertEqual(self.path.read_text(), "[1]")
        self.assertFalse(self.path.with_suffix(".json.tmp").exists())


class TestEdit(StorageTestCase):
    """edit() is an atomic read-modify-write; a failing block writes nothing."""

    def test_mutation_is_persisted(self) -> None:
        self.path.write_text("[1]")
        doc = JsonDocument(self.path, list)

        async def run() -> None:
            async with doc.edit() as value:
                value.append(2)

        asyncio.run(run())
        self.assertEqual(json.loads(self.path.read_text()), [1, 2])

    def test_exception_in_block_skips_write(self) -> None:
        self.path.write_text("[1]")
        doc = JsonDocument(self.path, list)

        async def run() -> None:
            async with doc.edit() as value:
                value.append(2)
                raise LookupError("not found")

        with self.assertRaises(LookupError):
            asyncio.run(run())
        self.assertEqual(self.path.read_text(), "[1]")

    def test_concurrent_edits_do_not_lose_updates(self) -> None:
        doc = JsonDocument(self.path, list)

        async def append(n: int) -> None:
            async with doc.edit() as value:
                await asyncio.sleep(0)
                value.append(n)

        async def run() -> None:
            await asyncio.gather(*(append(n) for n in range(25)))

        asyncio.run(run())
        self.assertEqual(sorted(json.loads(self.path.read_text())), list(range(25)))


class TestStorage(StorageTestCase):
    def test_files_live_in_data_dir(self) -> None:
        storage = Storage(self.data_dir)
        self.assertEqual(storage.users.path, self.data_dir / "users.json")
        self.assertEqual(storage.categories.path, self.data_dir / "categories.json")
        self.assertEqual(storage.entries.path, self.data_dir / "entries.json")

    def test_categories_default_to_starter_taxonomy(self) -> None:
        storage = Storage(self.data_dir)
        categories = asyncio.run(storage.categories.read())
        self.assertEqual(categories, default_categories())
        self.assertEqual({c["categoryType"] for c in categories}, {"food", "self"})

    def test_check_storage_ready(self) -> None:
        self.assertTrue(check_storage_ready(Storage(self.data_dir)))
        self.assertFalse(check_storage_ready(Storage(self.data_dir / "missing")))


class TestGenerateId(unittest.TestCase):
    def test_ids_are_unique_within_same_millisecond(self) -> None:
        with patch("lifetracker.core.storage.time.time", return_value=1700000000.5):
            ids = {generate_id() for _ in range(500)}
        self.assertEqual(len(ids), 500)
        self.assertTrue(all(i.startswith("1700000000500-") for i in ids))


if __name__ == "__main__":
    unittest.main()
