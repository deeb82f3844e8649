"""Measurement scales: numeric domain per scale type and per-category-type defaults."""

from typing import NamedTuple

from lifetracker.models.entry import MeasurementField
from lifetracker.models.taxonomy import CategoryType, ScaleType


class ScaleRange(NamedTuple):
    min: int
    max: int
    step: int
    unit: str
    field: MeasurementField


SCALES: dict[ScaleType, ScaleRange] = {
    "rating": ScaleRange(1, 5, 1, "", "rating"),
    "intensity": ScaleRange(1, 5, 1, "", "rating"),
    "weight": ScaleRange(0, 500, 10, "g", "weight"),
    "count": ScaleRange(0, 10, 1, "", "count"),
    "volume": ScaleRange(0, 1000, 50, "ml", "volume"),
}

DEFAULT_SCALE_TYPES: dict[CategoryType, ScaleType] = {
    "food": "weight",
    "self": "rating",
}

# food: flat checklist with free-text search; self: category -> item -> sub-item navigation
COMPOSER_LAYOUTS: dict[CategoryType, str] = {
    "food": "checklist",
    "self": "nested",
}


def default_scale_type(category_type: CategoryType) -> ScaleType:
    """Scale given to a new item when the caller does not choose one."""
    return DEFAULT_SCALE_TYPES[category_type]


def scale_for(scale_type: ScaleType) -> ScaleRange:
    return SCALES[scale_type]


def check_value(scale_type: ScaleType, field: MeasurementField, value: int | float) -> str | None:
    """Return a problem description if value cannot be recorded on scale_type, else None."""
    scale = SCALES[scale_type]
    if field != scale.field:
        return f"{scale_type} items are recorded as '{scale.field}', not '{field}'"
    if not scale.min <= value <= scale.max:
        return f"{field} must be between {scale.min} and {scale.max}, got {value}"
    return None
