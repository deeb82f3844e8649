"""Taxonomy endpoints: categories, their items and sub-items. Reads need a login, writes need admin."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status

from lifetracker.api.auth import get_current_user, require_admin
from lifetracker.api.errors import http_error
from lifetracker.core.storage import Storage, get_storage
from lifetracker.models.taxonomy import Category, Item, SubItem
from lifetracker.schemas.auth import CurrentUser
from lifetracker.schemas.taxonomy import (
    CategoriesResponse,
    CategoryCreate,
    CategoryUpdate,
    ItemCreate,
    ItemUpdate,
    SubItemCreate,
    SubItemUpdate,
)
from lifetracker.services import taxonomy
from lifetracker.services.errors import LifeTrackerError

router = APIRouter()

StorageDep = Annotated[Storage, Depends(get_storage)]
AdminDep = Annotated[CurrentUser, Depends(require_admin)]


@router.get("", response_model=CategoriesResponse)
async def get_categories(
    storage: StorageDep,
    _user: Annotated[CurrentUser, Depends(get_current_user)],
) -> CategoriesResponse:
    """Return the whole taxonomy tree."""
    return CategoriesResponse(categories=await taxonomy.list_categories(storage))


@router.post("", response_model=Category, status_code=status.HTTP_201_CREATED)
async def post_category(body: CategoryCreate, storage: StorageDep, _admin: AdminDep) -> Category:
    return await taxonomy.create_category(storage, body)


@router.put("/{category_id}", response_model=Category)
async def put_category(
    category_id: str, body: CategoryUpdate, storage: StorageDep, _admin: AdminDep
) -> Category:
    """Shallow-merge the supplied fields onto the category; omitted fields are kept."""
    try:
        return await taxonomy.update_category(storage, category_id, body)
    except LifeTrackerError as e:
        raise http_error(e) from e


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_category(category_id: str, storage: StorageDep, _admin: AdminDep) -> Response:
    """Delete the category and its whole subtree. Existing entries keep their references."""
    try:
        await taxonomy.delete_category(storage, category_id)
    except LifeTrackerError as e:
        raise http_error(e) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{category_id}/items", response_model=Item, status_code=status.HTTP_201_CREATED)
async def post_item(
    category_id: str, body: ItemCreate, storage: StorageDep, _admin: AdminDep
) -> Item:
    """Add an item. Without scaleType, food categories default to weight and others to rating."""
    try:
        return await taxonomy.create_item(storage, category_id, body)
    except LifeTrackerError as e:
        raise http_error(e) from e


@router.put("/{category_id}/items/{item_id}", response_model=Item)
async def put_item(
    category_id: str, item_id: str, body: ItemUpdate, storage: StorageDep, _admin: AdminDep
) -> Item:
    try:
        return await taxonomy.update_item(storage, category_id, item_id, body)
    except LifeTrackerError as e:
        raise http_error(e) from e


@router.delete("/{category_id}/items/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_item(
    category_id: str, item_id: str, storage: StorageDep, _admin: AdminDep
) -> Response:
    try:
        await taxonomy.delete_item(storage, category_id, item_id)
    except LifeTrackerError as e:
        raise http_error(e) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{category_id}/items/{item_id}/subitems",
    response_model=SubItem,
    status_code=status.HTTP_201_CREATED,
)
async def post_sub_item(
    category_id: str, item_id: str, body: SubItemCreate, storage: StorageDep, _admin: AdminDep
) -> SubItem:
    try:
        return await taxonomy.create_sub_item(storage, category_id, item_id, body)
    except LifeTrackerError as e:
        raise http_error(e) from e


@router.put("/{category_id}/items/{item_id}/subitems/{sub_item_id}", response_model=SubItem)
async def put_sub_item(
    category_id: str,
    item_id: str,
    sub_item_id: str,
    body: SubItemUpdate,
    storage: StorageDep,
    _admin: AdminDep,
) -> SubItem:
    try:
        return await taxonomy.update_sub_item(storage, category_id, item_id, sub_item_id, body)
    except LifeTrackerError as e:
        raise http_error(e) from e


@router.delete(
    "/{category_id}/items/{item_id}/subitems/{sub_item_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def remove_sub_item(
    category_id: str, item_id: str, sub_item_id: str, storage: StorageDep, _admin: AdminDep
) -> Response:
    try:
        await taxonomy.delete_sub_item(storage, category_id, item_id, sub_item_id)
    except LifeTrackerError as e:
        raise http_error(e) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)
