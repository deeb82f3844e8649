"""Schemas describing measurement scales and composer layouts for clients."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from lifetracker.models.entry import MeasurementField


class ScaleInfo(BaseModel):
    """Slider domain for one scale type."""

    min: int
    max: int
    step: int
    unit: str = ""
    field: MeasurementField = Field(description="EntryItem field that stores values on this scale")


class ScalesResponse(BaseModel):
    """Response for GET /scales."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    scales: dict[str, ScaleInfo]
    default_scale_types: dict[str, str] = Field(description="categoryType -> default item scaleType")
    layouts: dict[str, str] = Field(description="categoryType -> composer layout")
