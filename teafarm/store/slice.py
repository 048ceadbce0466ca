"""
Generic entity state slice.

A slice mirrors one remote collection in memory:

    items    latest successful fetch, patched by create/update/delete
    current  the record last loaded by id
    loading  True while an operation is in flight
    error    message of the last failed operation

Every operation flips ``loading``/``error`` on start, applies its result on
success, and on failure stores a human-readable message instead of raising.
Operations are not serialized: when two overlap, whichever completes last
determines ``items``.
"""

import logging
from dataclasses import dataclass
from typing import Any, ClassVar, Generic, List, Optional, Type, TypeVar, Union

from pydantic import BaseModel, Field, ValidationError

from teafarm.models.base import CamelModel
from teafarm.services.api_client import ApiClient, ApiError, ResourceClient

logger = logging.getLogger(__name__)

T = TypeVar("T")
EntityT = TypeVar("EntityT", bound=BaseModel)
DraftT = TypeVar("DraftT", bound=CamelModel)
PatchT = TypeVar("PatchT", bound=CamelModel)
FilterT = TypeVar("FilterT", bound=CamelModel)


@dataclass
class OperationResult(Generic[T]):
    """Outcome of a slice operation: a value on success, a message on failure."""

    value: Optional[T] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class SliceState(BaseModel, Generic[EntityT]):
    """In-memory state of one entity slice."""

    items: List[EntityT] = Field(default_factory=list)
    current: Optional[EntityT] = None
    loading: bool = False
    error: Optional[str] = None


def error_message(exc: Exception, fallback: str) -> str:
    """
    Turn a failure into the message stored in a slice.

    Client-side validation errors are listed field by field; server errors
    use the message from the response body; anything else gets ``fallback``.
    """
    if isinstance(exc, ValidationError):
        parts = []
        for err in exc.errors():
            location = ".".join(str(part) for part in err["loc"])
            parts.append(f"{location}: {err['msg']}" if location else err["msg"])
        return "; ".join(parts) or fallback
    if isinstance(exc, ApiError) and exc.server_message:
        return exc.server_message
    return fallback


class EntitySlice(Generic[EntityT, DraftT, PatchT, FilterT]):
    """
    State slice for one REST collection.

    Subclasses bind the resource and the models:

        class FieldSlice(EntitySlice[Field, FieldDraft, FieldPatch, FieldSearchParams]):
            resource_name = "fields"
            noun = "field"
            draft_model = FieldDraft
            patch_model = FieldPatch
            filter_model = FieldSearchParams
    """

    resource_name: ClassVar[str]
    noun: ClassVar[str]
    draft_model: ClassVar[Type[CamelModel]]
    patch_model: ClassVar[Type[CamelModel]]
    filter_model: ClassVar[Type[CamelModel]]

    def __init__(self, api: ApiClient):
        self._resource: ResourceClient[EntityT] = getattr(api, self.resource_name)
        self.state: SliceState[EntityT] = SliceState()

    @property
    def plural(self) -> str:
        return f"{self.noun}s"

    def _begin(self) -> None:
        self.state.loading = True
        self.state.error = None

    def _fail(self, exc: Exception, fallback: str) -> OperationResult[Any]:
        message = error_message(exc, fallback)
        logger.warning(f"[{self.resource_name}] {fallback}: {exc}")
        self.state.loading = False
        self.state.error = message
        return OperationResult(error=message)

    @staticmethod
    def _coerce(model: Type[CamelModel], payload: Union[CamelModel, Any]) -> CamelModel:
        if isinstance(payload, model):
            return payload
        return model.model_validate(payload)

    def _matches(self, item: EntityT, id: int) -> bool:
        return getattr(item, "id", None) == id

    async def fetch(self, filter: Optional[Union[FilterT, dict]] = None) -> OperationResult[List[EntityT]]:
        """Replace ``items`` with the collection, narrowed by ``filter`` when given."""
        self._begin()
        try:
            params = self._coerce(self.filter_model, filter) if filter is not None else None
            items = await self._resource.list(params)
        except (ApiError, ValidationError) as e:
            return self._fail(e, f"Failed to fetch {self.plural}")

        self.state.items = items
        self.state.loading = False
        return OperationResult(value=items)

    async def fetch_by_id(self, id: int) -> OperationResult[EntityT]:
        """Load one record into ``current``."""
        self._begin()
        try:
            item = await self._resource.get(id)
        except ApiError as e:
            return self._fail(e, f"Failed to fetch {self.noun}")

        self.state.current = item
        self.state.loading = False
        return OperationResult(value=item)

    async def create(self, draft: Union[DraftT, dict]) -> OperationResult[EntityT]:
        """Create a record and append the server's copy to ``items``."""
        self._begin()
        try:
            payload = self._coerce(self.draft_model, draft)
            created = await self._resource.create(payload)
        except (ApiError, ValidationError) as e:
            return self._fail(e, f"Failed to create {self.noun}")

        self.state.items.append(created)
        self.state.loading = False
        return OperationResult(value=created)

    async def update(self, id: int, patch: Union[PatchT, dict]) -> OperationResult[EntityT]:
        """
        Partially update a record.

        The first element of ``items`` with the same id is replaced; nothing
        happens to ``items`` when no element matches. ``current`` is
        refreshed when it holds the same record.
        """
        self._begin()
        try:
            payload = self._coerce(self.patch_model, patch)
            updated = await self._resource.update(id, payload)
        except (ApiError, ValidationError) as e:
            return self._fail(e, f"Failed to update {self.noun}")

        for index, item in enumerate(self.state.items):
            if self._matches(item, updated.id):
                self.state.items[index] = updated
                break
        if self.state.current is not None and self._matches(self.state.current, updated.id):
            self.state.current = updated
        self.state.loading = False
        return OperationResult(value=updated)

    async def delete(self, id: int) -> OperationResult[int]:
        """Delete a record, dropping it from ``items`` and ``current``."""
        self._begin()
        try:
            await self._resource.delete(id)
        except ApiError as e:
            return self._fail(e, f"Failed to delete {self.noun}")

        self.state.items = [item for item in self.state.items if not self._matches(item, id)]
        if self.state.current is not None and self._matches(self.state.current, id):
            self.state.current = None
        self.state.loading = False
        return OperationResult(value=id)

    def clear_error(self) -> None:
        self.state.error = None

    def clear_current(self) -> None:
        self.state.current = None
