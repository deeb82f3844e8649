"""Entry service: list, create and delete entries in entries.json."""

import logging
from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import TypeAdapter, ValidationError

from lifetracker.core.storage import Storage, StorageError, generate_id
from lifetracker.models.entry import Entry, EntryItem
from lifetracker.models.taxonomy import Category
from lifetracker.schemas.auth import CurrentUser
from lifetracker.schemas.entries import EntryCreate
from lifetracker.services.errors import ForbiddenError, NotFoundError, ValidationFailure
from lifetracker.services.scales import check_value
from lifetracker.services.taxonomy import find_node, parse_categories

logger = logging.getLogger(__name__)

ReadScope = Literal["all", "own"]

_entries_adapter = TypeAdapter(list[Entry])


def parse_entries(raw: Any) -> list[Entry]:
    """Validate the raw entries.json document."""
    try:
        return _entries_adapter.validate_python(raw)
    except ValidationError as e:
        raise StorageError("entries.json does not match the entry schema", e) from e


def utc_timestamp() -> str:
    """ISO-8601 UTC with millisecond precision and a trailing Z (2024-01-01T10:00:00.000Z)."""
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def can_delete(entry: Entry, principal: CurrentUser) -> bool:
    return principal.is_admin or entry.user_id == principal.id


def validate_measurements(categories: list[Category], body: EntryCreate) -> None:
    """
    Check each measurement against the scale of the node it references.

    References that no longer resolve are accepted unchecked.
    """
    problems: list[str] = []
    for index, entry_item in enumerate(body.items):
        node = find_node(categories, entry_item.item_id)
        if node is None:
            continue
        _, item, _ = node
        field, value = entry_item.measurement
        problem = check_value(item.scale_type, field, value)
        if problem:
            problems.append(f"items[{index}] ({entry_item.item_id}): {problem}")
    if problems:
        raise ValidationFailure("; ".join(problems))


async def list_entries(storage: Storage, principal: CurrentUser, scope: ReadScope = "all") -> list[Entry]:
    """
    Return entries visible to principal.

    scope "all": every entry. scope "own": only the caller's entries, except for
    admins who always see everything.
    """
    entries = parse_entries(await storage.entries.read())
    if scope == "own" and not principal.is_admin:
        entries = [e for e in entries if e.user_id == principal.id]
    return entries


async def create_entry(storage: Storage, principal: CurrentUser, body: EntryCreate) -> Entry:
    """Stamp id, timestamp and owner on a new entry and append it."""
    categories = parse_categories(await storage.categories.read())
    if not any(c.id == body.category_id for c in categories):
        raise NotFoundError("Category not found")
    validate_measurements(categories, body)

    entry = Entry(
        id=generate_id(),
        timestamp=utc_timestamp(),
        user_id=principal.id,
        category_id=body.category_id,
        items=[
            EntryItem.model_validate(item.model_dump(exclude_none=True))
            for item in body.items
        ],
        notes=body.notes,
    )
    async with storage.entries.edit() as doc:
        parse_entries(doc)
        doc.append(entry.to_document())
    logger.info(
        "Entry created",
        extra={"entry_id": entry.id, "user_id": principal.id, "item_count": len(entry.items)},
    )
    return entry


async def delete_entry(storage: Storage, principal: CurrentUser, entry_id: str) -> None:
    """
    Delete one entry, keeping the order of the others.

    NotFoundError if absent; ForbiddenError if the caller is neither owner nor admin.
    Neither failure writes the file.
    """
    async with storage.entries.edit() as doc:
        entries = parse_entries(doc)
        index = next((i for i, e in enumerate(entries) if e.id == entry_id), None)
        if index is None:
            raise NotFoundError("Entry not found")
        if not can_delete(entries[index], principal):
            logger.warning(
                "Forbidden entry delete",
                extra={"entry_id": entry_id, "user_id": principal.id},
            )
            raise ForbiddenError("Forbidden: Cannot delete entry belonging to another user")
        del doc[index]
    logger.info("Entry deleted", extra={"entry_id": entry_id, "user_id": principal.id})
