"""Persisted taxonomy tree: Category -> Item -> SubItem."""

from typing import Literal

from pydantic import Field

from lifetracker.models.base import Base

CategoryType = Literal["food", "self"]
ScaleType = Literal["rating", "weight", "count", "volume", "intensity"]


class SubItem(Base):
    """Leaf node; measured on the parent item's scale."""

    id: str
    name: str


class Item(Base):
    """Trackable thing inside a category; scale_type picks the numeric domain of entries."""

    id: str
    name: str
    scale_type: ScaleType = "rating"
    sub_items: list[SubItem] = Field(default_factory=list)


class Category(Base):
    """
    Top-level node of the taxonomy.

    category_type decides the default scale of new items and the composer layout
    offered to clients. A category without items is rated directly.
    """

    id: str
    name: str
    category_type: CategoryType = "self"
    items: list[Item] = Field(default_factory=list)
