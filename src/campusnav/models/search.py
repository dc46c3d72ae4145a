"""Search mode and result models."""

from __future__ import annotations

from collections.abc import Iterator
from enum import StrEnum
from typing import ClassVar

from campusnav.models._base import CampusBaseModel
from campusnav.models.entity import CampusEntity


class SearchMode(StrEnum):
    """Empty-query policy for a search call site.

    ``FILTER`` backs a browse view: an empty query shows the whole roster.
    ``LOOKUP`` backs a directed "find a room" search: nothing is shown
    until the user types something.
    """

    FILTER = "filter"
    LOOKUP = "lookup"


class SearchResult(CampusBaseModel):
    """Entities matching a query, in roster order."""

    _LITERAL_FIELDS: ClassVar[frozenset[str]] = frozenset({"query"})

    query: str = ""
    mode: SearchMode
    entities: tuple[CampusEntity, ...] = ()

    def __iter__(self) -> Iterator[CampusEntity]:  # type: ignore[override]
        return iter(self.entities)

    def __len__(self) -> int:
        return len(self.entities)

    @property
    def names(self) -> list[str]:
        return [entity.display_name for entity in self.entities]
