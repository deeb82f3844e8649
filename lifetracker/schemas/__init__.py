"""Pydantic request/response schemas."""

from lifetracker.schemas.auth import CurrentUser, LoginRequest, LoginResponse
from lifetracker.schemas.entries import EntryCreate, EntryItemCreate
from lifetracker.schemas.health import HealthResponse
from lifetracker.schemas.scales import ScaleInfo, ScalesResponse
from lifetracker.schemas.taxonomy import (
    CategoriesResponse,
    CategoryCreate,
    CategoryUpdate,
    ItemCreate,
    ItemUpdate,
    SubItemCreate,
    SubItemUpdate,
)

__all__ = [
    "CategoriesResponse",
    "CategoryCreate",
    "CategoryUpdate",
    "CurrentUser",
    "EntryCreate",
    "EntryItemCreate",
    "HealthResponse",
    "ItemCreate",
    "ItemUpdate",
    "LoginRequest",
    "LoginResponse",
    "ScaleInfo",
    "ScalesResponse",
    "SubItemCreate",
    "SubItemUpdate",
]
