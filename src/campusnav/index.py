"""Searchable roster of campus entities.

The index is the only writer of the roster.  The roster is always
swapped wholesale; a failed load leaves the last good roster in place.

Two search policies exist for an empty query and each call site picks
one explicitly (see :class:`campusnav.models.search.SearchMode`):

* the map's browse/filter list uses :meth:`EntityIndex.filter`, where an
  empty query shows every entity;
* the "find a room" box uses :meth:`EntityIndex.lookup`, where an empty
  query shows nothing until the user types.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from datetime import UTC, datetime
from typing import Any, Protocol

from campusnav._api.entities import fetch_entity_records
from campusnav._transport import Transport
from campusnav.config import CampusNavConfig
from campusnav.exceptions import DataUnavailableError
from campusnav.ingestion.normalize import normalize_query
from campusnav.models.entity import CampusEntity
from campusnav.models.search import SearchMode, SearchResult
from campusnav.state.events import ChangeKind, ChangeNotifier, Listener

_logger = logging.getLogger(__name__)


class EntityProvider(Protocol):
    """External source of entity records."""

    async def fetch_all(self) -> list[dict[str, Any]]: ...


class PostgrestEntityProvider:
    """Reads rooms with their floor and building from a PostgREST store."""

    def __init__(self, config: CampusNavConfig, transport: Transport) -> None:
        self._config = config
        self._transport = transport

    async def fetch_all(self) -> list[dict[str, Any]]:
        return await fetch_entity_records(self._config, self._transport)


class StaticEntityProvider:
    """Serves a fixed list of records, e.g. a bundled campus directory."""

    def __init__(self, records: Iterable[dict[str, Any]]) -> None:
        self._records = [dict(record) for record in records]

    async def fetch_all(self) -> list[dict[str, Any]]:
        return [dict(record) for record in self._records]


class EntityIndex:
    """Hold the roster and answer substring queries."""

    def __init__(self, provider: EntityProvider | None = None) -> None:
        self._provider = provider
        self._roster: tuple[CampusEntity, ...] = ()
        self._by_id: dict[str, CampusEntity] = {}
        self._loaded_at: datetime | None = None
        self._last_error: DataUnavailableError | None = None
        self._notifier = ChangeNotifier()

    @property
    def roster(self) -> tuple[CampusEntity, ...]:
        return self._roster

    @property
    def loaded_at(self) -> datetime | None:
        return self._loaded_at

    @property
    def last_error(self) -> DataUnavailableError | None:
        return self._last_error

    def __len__(self) -> int:
        return len(self._roster)

    def get(self, entity_id: str) -> CampusEntity | None:
        return self._by_id.get(str(entity_id))

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Receive ``ROSTER`` changes."""
        return self._notifier.subscribe(listener)

    # ------------------------------------------------------------------
    # Write side
    # ------------------------------------------------------------------

    def replace(self, entities: Iterable[CampusEntity]) -> None:
        """Swap in a new roster as one batch."""
        roster = tuple(entities)
        self._roster = roster
        self._by_id = {entity.id: entity for entity in roster}
        self._loaded_at = datetime.now(UTC)
        self._last_error = None
        self._notifier.publish(ChangeKind.ROSTER, len(roster))

    async def load(self) -> tuple[CampusEntity, ...]:
        """Fetch the roster from the provider and replace it wholesale.

        Raises
        ------
        DataUnavailableError
            If the provider fails or any record cannot be parsed.  The
            previous roster is kept.
        """
        if self._provider is None:
            raise self._fail(DataUnavailableError("No entity provider configured"))

        try:
            records = await self._provider.fetch_all()
        except DataUnavailableError as exc:
            raise self._fail(exc) from None
        except Exception as exc:
            raise self._fail(DataUnavailableError(f"Entity provider failed: {exc}")) from exc

        if not isinstance(records, list):
            raise self._fail(DataUnavailableError(f"Entity provider returned {type(records).__name__}, not a list"))

        entities: list[CampusEntity] = []
        for record in records:
            try:
                entities.append(CampusEntity.from_record(record))
            except ValueError as exc:
                raise self._fail(DataUnavailableError(f"Malformed entity record: {exc}")) from exc

        self.replace(entities)
        _logger.debug("Roster loaded: %d entities", len(entities))
        return self._roster

    def _fail(self, error: DataUnavailableError) -> DataUnavailableError:
        self._last_error = error
        _logger.warning("Roster load failed; keeping %d cached entities: %s", len(self._roster), error)
        return error

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    def search(self, query: str | None, mode: SearchMode) -> SearchResult:
        """Match *query* against display names and secondary labels.

        ``mode`` decides what an empty query returns; there is no default
        so every call site states its policy.
        """
        normalized = normalize_query(query)
        if not normalized:
            entities = self._roster if mode == SearchMode.FILTER else ()
        else:
            entities = tuple(entity for entity in self._roster if entity.matches(normalized))
        return SearchResult(query=normalized, mode=mode, entities=entities)

    def filter(self, query: str | None) -> SearchResult:
        """Browse view: empty query returns the whole roster."""
        return self.search(query, SearchMode.FILTER)

    def lookup(self, query: str | None) -> SearchResult:
        """Directed search: empty query returns nothing."""
        return self.search(query, SearchMode.LOOKUP)
