"""Request/response schemas for the taxonomy (categories, items, sub-items)."""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from lifetracker.models.taxonomy import Category, CategoryType, ScaleType

NAME_MAX_LENGTH = 255


def _validate_name(value: str | None) -> str | None:
    """Strip and require a non-empty name when one is given."""
    if value is None:
        return None
    stripped = value.strip()
    if not stripped:
        raise ValueError("name must be non-empty")
    return stripped


class _TaxonomyBody(BaseModel):
    """Accepts camelCase or snake_case keys; unknown keys (id, items, ...) are ignored."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    @field_validator("name", check_fields=False)
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        return _validate_name(v)


class CategoryCreate(_TaxonomyBody):
    name: str = Field(..., max_length=NAME_MAX_LENGTH)
    category_type: CategoryType = "self"


class CategoryUpdate(_TaxonomyBody):
    """Shallow merge: only the fields present in the request are changed."""

    name: str | None = Field(default=None, max_length=NAME_MAX_LENGTH)
    category_type: CategoryType | None = None


class ItemCreate(_TaxonomyBody):
    """scale_type defaults from the parent category type when omitted."""

    name: str = Field(..., max_length=NAME_MAX_LENGTH)
    scale_type: ScaleType | None = None


class ItemUpdate(_TaxonomyBody):
    name: str | None = Field(default=None, max_length=NAME_MAX_LENGTH)
    scale_type: ScaleType | None = None


class SubItemCreate(_TaxonomyBody):
    name: str = Field(..., max_length=NAME_MAX_LENGTH)


class SubItemUpdate(_TaxonomyBody):
    name: str | None = Field(default=None, max_length=NAME_MAX_LENGTH)


class CategoriesResponse(BaseModel):
    """Response for GET /categories: the whole taxonomy tree."""

    categories: list[Category]
