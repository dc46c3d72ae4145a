"""High-level async entry point wiring tracking, search and routing."""

from __future__ import annotations

import logging
from typing import Any

import aiohttp

from campusnav._transport import AiohttpTransport, Transport
from campusnav.config import CampusNavConfig
from campusnav.exceptions import CampusNavError
from campusnav.index import EntityIndex, EntityProvider, PostgrestEntityProvider
from campusnav.location import GeolocationProvider, LocationTracker, WatchHandle
from campusnav.models.entity import CampusEntity
from campusnav.models.position import LocationOptions, Position
from campusnav.models.search import SearchResult
from campusnav.models.view import ViewState
from campusnav.routing import OsrmRouteProvider, RouteProvider, RouteResolver
from campusnav.view import MapViewState

_logger = logging.getLogger(__name__)


class CampusNavigator:
    """Async facade for a campus map screen.

    Usage::

        async with CampusNavigator(config, geolocation=provider) as nav:
            await nav.refresh_entities()
            nav.start_tracking()
            result = nav.lookup("lab 101")
            view = await nav.select(result.entities[0])

    Parameters
    ----------
    config : CampusNavConfig
        Library configuration.
    geolocation : GeolocationProvider or None
        Platform location API.  ``None`` means location is unsupported.
    session : aiohttp.ClientSession or None
        Shared HTTP session; one is created (and closed) if omitted.
    route_provider : RouteProvider or None
        Overrides the OSRM provider.
    entity_provider : EntityProvider or None
        Overrides the PostgREST provider.
    """

    def __init__(
        self,
        config: CampusNavConfig | None = None,
        *,
        geolocation: GeolocationProvider | None = None,
        session: aiohttp.ClientSession | None = None,
        route_provider: RouteProvider | None = None,
        entity_provider: EntityProvider | None = None,
    ) -> None:
        self._config = config or CampusNavConfig()
        self._geolocation = geolocation
        self._external_session = session is not None
        self._http_session = session
        self._transport: Transport | None = None
        self._route_provider = route_provider
        self._entity_provider = entity_provider
        self._tracker: LocationTracker | None = None
        self._index: EntityIndex | None = None
        self._resolver: RouteResolver | None = None
        self._map: MapViewState | None = None
        self._watch: WatchHandle | None = None

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> CampusNavigator:
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        transport = AiohttpTransport(self._http_session)
        self._transport = transport

        route_provider = self._route_provider or OsrmRouteProvider(self._config, transport)
        entity_provider = self._entity_provider
        if entity_provider is None and self._config.entities_base_url:
            entity_provider = PostgrestEntityProvider(self._config, transport)

        self._tracker = LocationTracker(
            self._geolocation,
            one_shot_options=self._config.one_shot,
            watch_options=self._config.watch,
        )
        self._index = EntityIndex(entity_provider)
        self._resolver = RouteResolver(route_provider, timeout=self._config.routing_timeout)
        self._map = MapViewState(self._tracker, self._resolver, self._config)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if self._tracker is not None:
            self._tracker.stop_all()
        if self._map is not None:
            self._map.close()
        self._watch = None
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._transport = None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_map(self) -> MapViewState:
        if self._map is None:
            raise CampusNavError("Navigator not initialized. Use 'async with CampusNavigator(...) as nav:'")
        return self._map

    @property
    def tracker(self) -> LocationTracker:
        self._require_map()
        assert self._tracker is not None  # noqa: S101
        return self._tracker

    @property
    def index(self) -> EntityIndex:
        self._require_map()
        assert self._index is not None  # noqa: S101
        return self._index

    @property
    def resolver(self) -> RouteResolver:
        self._require_map()
        assert self._resolver is not None  # noqa: S101
        return self._resolver

    @property
    def map(self) -> MapViewState:
        return self._require_map()

    @property
    def view(self) -> ViewState:
        return self._require_map().view

    # ------------------------------------------------------------------
    # Location
    # ------------------------------------------------------------------

    async def locate(self, options: LocationOptions | None = None) -> Position:
        """One-shot "My Location" request.  Raises :class:`LocationError`."""
        return await self.tracker.request_one_shot(options)

    def start_tracking(self, options: LocationOptions | None = None) -> WatchHandle:
        """Start the navigator's watch (idempotent)."""
        if self._watch is not None and self._watch.active:
            return self._watch
        self._watch = self.tracker.start_watch(options)
        return self._watch

    def stop_tracking(self) -> None:
        if self._watch is None:
            return
        self.tracker.stop_watch(self._watch)
        self._watch = None

    # ------------------------------------------------------------------
    # Entities
    # ------------------------------------------------------------------

    async def refresh_entities(self) -> tuple[CampusEntity, ...]:
        """Reload the roster.  Raises :class:`DataUnavailableError`."""
        return await self.index.load()

    def filter(self, query: str | None) -> SearchResult:
        """Browse list search: empty query lists every entity."""
        return self.index.filter(query)

    def lookup(self, query: str | None) -> SearchResult:
        """Directed "find a room" search: empty query lists nothing."""
        return self.index.lookup(query)

    # ------------------------------------------------------------------
    # Destination
    # ------------------------------------------------------------------

    async def select(self, entity: CampusEntity | str) -> ViewState:
        """Select a destination by entity or entity id."""
        if isinstance(entity, str):
            found = self.index.get(entity)
            if found is None:
                _logger.debug("Unknown entity id %s; selection ignored", entity)
                return self.view
            entity = found
        return await self.map.select(entity)

    def clear_destination(self) -> ViewState:
        return self.map.clear_destination()
