"""Shared base for records persisted in the JSON data files."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class Base(BaseModel):
    """Base for all persisted records: snake_case in Python, camelCase on disk and on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_document(self) -> dict:
        """Return the JSON-ready dict stored in the data file."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
