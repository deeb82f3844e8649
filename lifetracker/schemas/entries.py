"""Request schemas for entries."""

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from lifetracker.models.entry import MEASUREMENT_FIELDS, Measurement

NOTES_MAX_LENGTH = 5_000
MAX_ITEMS_PER_ENTRY = 200


class EntryItemCreate(BaseModel):
    """One measurement in a new entry: itemId plus exactly one of rating, weight, count, volume."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore", allow_inf_nan=False
    )

    item_id: str = Field(..., min_length=1, max_length=255)
    rating: int | float | None = None
    weight: int | float | None = None
    count: int | float | None = None
    volume: int | float | None = None

    @model_validator(mode="after")
    def exactly_one_measurement(self) -> "EntryItemCreate":
        populated = [name for name in MEASUREMENT_FIELDS if getattr(self, name) is not None]
        if len(populated) != 1:
            raise ValueError(
                f"exactly one of {', '.join(MEASUREMENT_FIELDS)} must be set, got {len(populated)}"
            )
        return self

    @property
    def measurement(self) -> Measurement:
        for name in MEASUREMENT_FIELDS:
            value = getattr(self, name)
            if value is not None:
                return Measurement(name, value)
        raise AssertionError("validated entry item has no measurement")


class EntryCreate(BaseModel):
    """
    Body of POST /entries.

    id, timestamp and userId are server-assigned; if a client sends them they are ignored.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    category_id: str = Field(..., min_length=1, max_length=255)
    items: list[EntryItemCreate] = Field(..., min_length=1, max_length=MAX_ITEMS_PER_ENTRY)
    notes: str | None = Field(default=None, max_length=NOTES_MAX_LENGTH)
