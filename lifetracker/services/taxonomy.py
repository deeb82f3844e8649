"""Taxonomy service: CRUD over the Category -> Item -> SubItem tree in categories.json."""

import logging
from typing import Any

from pydantic import TypeAdapter, ValidationError

from lifetracker.core.storage import Storage, StorageError, generate_id
from lifetracker.models.taxonomy import Category, Item, SubItem
from lifetracker.schemas.taxonomy import (
    CategoryCreate,
    CategoryUpdate,
    ItemCreate,
    ItemUpdate,
    SubItemCreate,
    SubItemUpdate,
)
from lifetracker.services.errors import NotFoundError
from lifetracker.services.scales import default_scale_type

logger = logging.getLogger(__name__)

_categories_adapter = TypeAdapter(list[Category])


def parse_categories(raw: Any) -> list[Category]:
    """Validate the raw categories.json document."""
    try:
        return _categories_adapter.validate_python(raw)
    except ValidationError as e:
        raise StorageError("categories.json does not match the taxonomy schema", e) from e


def _replace_document(doc: list, categories: list[Category]) -> None:
    """Write categories back into the list yielded by JsonDocument.edit()."""
    doc[:] = [c.to_document() for c in categories]


def _find_category(categories: list[Category], category_id: str) -> Category:
    for category in categories:
        if category.id == category_id:
            return category
    raise NotFoundError("Category not found")


def _find_item(category: Category, item_id: str) -> Item:
    for item in category.items:
        if item.id == item_id:
            return item
    raise NotFoundError("Item not found")


def _find_sub_item(item: Item, sub_item_id: str) -> SubItem:
    for sub in item.sub_items:
        if sub.id == sub_item_id:
            return sub
    raise NotFoundError("Sub-item not found")


def _merge(record: Any, update: Any) -> None:
    """Shallow merge: copy only fields the client actually sent (explicit nulls are skipped)."""
    for name, value in update.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(record, name, value)


def find_node(
    categories: list[Category], node_id: str
) -> tuple[Category, Item, SubItem | None] | None:
    """
    Resolve an item or sub-item id anywhere in the tree.

    Returns (category, item, sub_item) where sub_item is None for an item match,
    or None if the id is dangling.
    """
    for category in categories:
        for item in category.items:
            if item.id == node_id:
                return category, item, None
            for sub in item.sub_items:
                if sub.id == node_id:
                    return category, item, sub
    return None


def describe_item(categories: list[Category], item_id: str) -> str:
    """
    Display label for an entry item. A category id (a rating on the category
    itself) shows the category name; dangling references show the raw id.
    """
    node = find_node(categories, item_id)
    if node is None:
        for category in categories:
            if category.id == item_id:
                return category.name
        return item_id
    _, item, sub = node
    return f"{item.name} / {sub.name}" if sub is not None else item.name


async def list_categories(storage: Storage) -> list[Category]:
    """Return the full taxonomy tree."""
    return parse_categories(await storage.categories.read())


async def create_category(storage: Storage, body: CategoryCreate) -> Category:
    category = Category(
        id=generate_id(),
        name=body.name,
        category_type=body.category_type,
        items=[],
    )
    async with storage.categories.edit() as doc:
        categories = parse_categories(doc)
        categories.append(category)
        _replace_document(doc, categories)
    logger.info("Category created", extra={"category_id": category.id})
    return category


async def update_category(storage: Storage, category_id: str, body: CategoryUpdate) -> Category:
    async with storage.categories.edit() as doc:
        categories = parse_categories(doc)
        category = _find_category(categories, category_id)
        _merge(category, body)
        _replace_document(doc, categories)
    return category


async def delete_category(storage: Storage, category_id: str) -> None:
    """Remove the category with all its items and sub-items. Entries are left untouched."""
    async with storage.categories.edit() as doc:
        categories = parse_categories(doc)
        category = _find_category(categories, category_id)
        categories.remove(category)
        _replace_document(doc, categories)
    logger.info("Category deleted", extra={"category_id": category_id})


async def create_item(storage: Storage, category_id: str, body: ItemCreate) -> Item:
    """Add an item; without an explicit scale_type it follows the category type (food -> weight)."""
    async with storage.categories.edit() as doc:
        categories = parse_categories(doc)
        category = _find_category(categories, category_id)
        item = Item(
            id=generate_id(),
            name=body.name,
            scale_type=body.scale_type or default_scale_type(category.category_type),
            sub_items=[],
        )
        category.items.append(item)
        _replace_document(doc, categories)
    logger.info("Item created", extra={"category_id": category_id, "item_id": item.id})
    return item


async def update_item(storage: Storage, category_id: str, item_id: str, body: ItemUpdate) -> Item:
    async with storage.categories.edit() as doc:
        categories = parse_categories(doc)
        item = _find_item(_find_category(categories, category_id), item_id)
        _merge(item, body)
        _replace_document(doc, categories)
    return item


async def delete_item(storage: Storage, category_id: str, item_id: str) -> None:
    async with storage.categories.edit() as doc:
        categories = parse_categories(doc)
        category = _find_category(categories, category_id)
        category.items.remove(_find_item(category, item_id))
        _replace_document(doc, categories)
    logger.info("Item deleted", extra={"category_id": category_id, "item_id": item_id})


async def create_sub_item(
    storage: Storage, category_id: str, item_id: str, body: SubItemCreate
) -> SubItem:
    async with storage.categories.edit() as doc:
        categories = parse_categories(doc)
        item = _find_item(_find_category(categories, category_id), item_id)
        sub = SubItem(id=generate_id(), name=body.name)
        item.sub_items.append(sub)
        _replace_document(doc, categories)
    return sub


async def update_sub_item(
    storage: Storage, category_id: str, item_id: str, sub_item_id: str, body: SubItemUpdate
) -> SubItem:
    async with storage.categories.edit() as doc:
        categories = parse_categories(doc)
        item = _find_item(_find_category(categories, category_id), item_id)
        sub = _find_sub_item(item, sub_item_id)
        _merge(sub, body)
        _replace_document(doc, categories)
    return sub


async def delete_sub_item(storage: Storage, category_id: str, item_id: str, sub_item_id: str) -> None:
    async with storage.categories.edit() as doc:
        categories = parse_categories(doc)
        item = _find_item(_find_category(categories, category_id), item_id)
        item.sub_items.remove(_find_sub_item(item, sub_item_id))
        _replace_document(doc, categories)
