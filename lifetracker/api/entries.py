"""Entry endpoints: list, create and delete measurement entries."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status

from lifetracker.api.auth import get_current_user
from lifetracker.api.errors import http_error
from lifetracker.core.config import get_settings
from lifetracker.core.storage import Storage, get_storage
from lifetracker.models.entry import Entry
from lifetracker.schemas.auth import CurrentUser
from lifetracker.schemas.entries import EntryCreate
from lifetracker.services import entries
from lifetracker.services.errors import LifeTrackerError

router = APIRouter()

StorageDep = Annotated[Storage, Depends(get_storage)]
UserDep = Annotated[CurrentUser, Depends(get_current_user)]


@router.get("", response_model=list[Entry], response_model_exclude_none=True)
async def get_entries(storage: StorageDep, user: UserDep) -> list[Entry]:
    """
    Return entries. With ENTRIES_READ_SCOPE=all (default) every user sees every
    entry; with "own" non-admins only see their own.
    """
    return await entries.list_entries(storage, user, get_settings().ENTRIES_READ_SCOPE)


@router.post(
    "",
    response_model=Entry,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def post_entry(body: EntryCreate, storage: StorageDep, user: UserDep) -> Entry:
    """
    Record an entry for the caller. id, timestamp and userId are assigned by the
    server. Each item carries exactly one of rating, weight, count, volume,
    matching the scale of the referenced item when it still exists.
    """
    try:
        return await entries.create_entry(storage, user, body)
    except LifeTrackerError as e:
        raise http_error(e) from e


@router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_entry(entry_id: str, storage: StorageDep, user: UserDep) -> Response:
    """Delete an entry owned by the caller (admins may delete any entry)."""
    try:
        await entries.delete_entry(storage, user, entry_id)
    except LifeTrackerError as e:
        raise http_error(e) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)
