"""
Shared base classes for the wire models.

The REST backend speaks camelCase JSON; attributes are snake_case in
Python and converted through the alias generator.
"""

from typing import Annotated, Any, Dict

from pydantic import BaseModel, ConfigDict, StringConstraints
from pydantic.alias_generators import to_camel

NonBlankStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_payload(self) -> Dict[str, Any]:
        """Serialize for a request body or query string, dropping unset values."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class PatchModel(CamelModel):
    """Partial update payload: only explicitly assigned fields are sent."""

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)
