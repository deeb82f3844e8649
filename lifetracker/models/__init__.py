"""Records persisted in the JSON data files."""

from lifetracker.models.base import Base
from lifetracker.models.entry import Entry, EntryItem, Measurement
from lifetracker.models.taxonomy import Category, Item, SubItem
from lifetracker.models.user import User

__all__ = ["Base", "Category", "Entry", "EntryItem", "Item", "Measurement", "SubItem", "User"]
