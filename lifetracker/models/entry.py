"""Persisted entries: one user's measurements against taxonomy nodes at a point in time."""

from typing import Literal, NamedTuple

from pydantic import ConfigDict, Field
from pydantic.alias_generators import to_camel

from lifetracker.models.base import Base

MeasurementField = Literal["rating", "weight", "count", "volume"]

MEASUREMENT_FIELDS: tuple[MeasurementField, ...] = ("rating", "weight", "count", "volume")


class Measurement(NamedTuple):
    """Tagged value of an entry item: which field is populated and its number."""

    field: MeasurementField
    value: int | float


class EntryItem(Base):
    """Measurement for one item or sub-item. Exactly one numeric field is expected to be set."""

    # Unknown keys from older data files are kept on rewrite.
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    item_id: str
    rating: int | float | None = None
    weight: int | float | None = None
    count: int | float | None = None
    volume: int | float | None = None

    @property
    def measurement(self) -> Measurement | None:
        for name in MEASUREMENT_FIELDS:
            value = getattr(self, name)
            if value is not None:
                return Measurement(name, value)
        return None


class Entry(Base):
    """
    Entry stored in entries.json. id, timestamp and user_id are server-assigned.

    Entries written before owners were recorded have an empty user_id; only admins can delete them.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    id: str
    timestamp: str = ""
    user_id: str = ""
    category_id: str = ""
    items: list[EntryItem] = Field(default_factory=list)
    notes: str | None = None
