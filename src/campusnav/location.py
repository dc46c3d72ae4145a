"""Device location tracking.

The tracker is the only writer of the current position.  It wraps a
:class:`GeolocationProvider` (the platform's location API) and adds what
the raw provider does not guarantee:

* latest-timestamp-wins arbitration between one-shot and watch fixes,
* an enforced one-shot timeout whose late result is never applied,
* supersession of older one-shot calls by newer ones,
* a hard stop for watch subscriptions, including fixes already in flight.
"""

from __future__ import annotations

import asyncio
import functools
import itertools
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Protocol

from campusnav.exceptions import LocationError, LocationTimeoutError, LocationUnavailableError, LocationUnsupportedError
from campusnav.models.position import ONE_SHOT_DEFAULTS, WATCH_DEFAULTS, LocationErrorCode, LocationOptions, Position
from campusnav.state.events import ChangeKind, ChangeNotifier, Listener
from campusnav.state.policy import is_superseded
from campusnav.state.store import PositionStore

_logger = logging.getLogger(__name__)

FixCallback = Callable[[Position], None]
ErrorCallback = Callable[[LocationError], None]


class GeolocationProvider(Protocol):
    """Structural interface of the platform location API.

    ``watch`` callbacks must be invoked on the tracker's event loop.
    """

    async def one_shot(self, options: LocationOptions) -> Position:
        """Return a single fix or raise :class:`LocationError`."""
        ...

    def watch(self, options: LocationOptions, on_fix: FixCallback, on_error: ErrorCallback) -> Any:
        """Start continuous fixes; returns a provider-specific handle."""
        ...

    def unwatch(self, handle: Any) -> None:
        ...


@dataclass(slots=True, eq=False)
class WatchHandle:
    """Subscription returned by :meth:`LocationTracker.start_watch`."""

    watch_id: int
    options: LocationOptions
    provider_handle: Any = None
    active: bool = True
    fixes_applied: int = field(default=0)


def _as_location_error(error: Any) -> LocationError:
    if isinstance(error, LocationError):
        return error
    if isinstance(error, (int, LocationErrorCode)):
        return LocationError.from_code(error)
    code = getattr(error, "code", None)
    if isinstance(code, int):
        return LocationError.from_code(code, str(error))
    return LocationUnavailableError(str(error) or LocationErrorCode.UNAVAILABLE.message)


class LocationTracker:
    """Expose "where is the user" as a query and as a live stream.

    Usage::

        tracker = LocationTracker(provider)
        position = await tracker.request_one_shot()
        handle = tracker.start_watch()
        ...
        tracker.stop_watch(handle)
    """

    def __init__(
        self,
        provider: GeolocationProvider | None,
        *,
        one_shot_options: LocationOptions = ONE_SHOT_DEFAULTS,
        watch_options: LocationOptions = WATCH_DEFAULTS,
        store: PositionStore | None = None,
    ) -> None:
        self._provider = provider
        self._one_shot_options = one_shot_options
        self._watch_options = watch_options
        self._store = store if store is not None else PositionStore()
        self._errors = ChangeNotifier()
        self._last_error: LocationError | None = None
        self._request_ids = itertools.count(1)
        self._last_success_request = 0
        self._watch_ids = itertools.count(1)
        self._watches: dict[int, WatchHandle] = {}

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    @property
    def current(self) -> Position | None:
        """The current position, or ``None`` before the first fix."""
        return self._store.current

    @property
    def last_error(self) -> LocationError | None:
        return self._last_error

    @property
    def is_supported(self) -> bool:
        return self._provider is not None

    @property
    def active_watches(self) -> list[WatchHandle]:
        return list(self._watches.values())

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Receive ``POSITION`` and ``LOCATION_ERROR`` changes."""
        unsubscribe_store = self._store.subscribe(listener)
        unsubscribe_errors = self._errors.subscribe(listener)

        def _unsubscribe() -> None:
            unsubscribe_store()
            unsubscribe_errors()

        return _unsubscribe

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_provider(self) -> GeolocationProvider:
        if self._provider is None:
            error = LocationUnsupportedError()
            self._record_error(error)
            raise error
        return self._provider

    def _record_error(self, error: LocationError) -> None:
        self._last_error = error
        self._errors.publish(ChangeKind.LOCATION_ERROR, error.code)

    def _clear_error(self) -> None:
        if self._last_error is None:
            return
        self._last_error = None
        self._errors.publish(ChangeKind.LOCATION_ERROR, None)

    # ------------------------------------------------------------------
    # One-shot
    # ------------------------------------------------------------------

    async def request_one_shot(self, options: LocationOptions | None = None) -> Position:
        """Ask the provider for a single fix.

        Raises
        ------
        LocationError
            One of the ``Location*Error`` subclasses.  A timeout is
            terminal for this call: its result is never applied, even if
            the provider delivers it later.
        """
        provider = self._require_provider()
        opts = options or self._one_shot_options
        request_id = next(self._request_ids)

        _logger.debug("One-shot location request id=%d timeout_ms=%d", request_id, opts.timeout_ms)
        try:
            position = await asyncio.wait_for(provider.one_shot(opts), opts.timeout_seconds)
        except TimeoutError as exc:
            error = LocationTimeoutError()
            self._record_error(error)
            raise error from exc
        except LocationError as exc:
            self._record_error(exc)
            raise
        except Exception as exc:
            error = _as_location_error(exc)
            self._record_error(error)
            raise error from exc

        if is_superseded(request_id, self._last_success_request):
            _logger.debug(
                "One-shot id=%d superseded by id=%d; not applied",
                request_id,
                self._last_success_request,
            )
            return position

        self._last_success_request = request_id
        self._clear_error()
        self._store.apply(position)
        return position

    # ------------------------------------------------------------------
    # Watch
    # ------------------------------------------------------------------

    def start_watch(self, options: LocationOptions | None = None) -> WatchHandle:
        """Begin continuous tracking; returns a handle for :meth:`stop_watch`."""
        provider = self._require_provider()
        opts = options or self._watch_options
        handle = WatchHandle(watch_id=next(self._watch_ids), options=opts)
        handle.provider_handle = provider.watch(
            opts,
            functools.partial(self._on_watch_fix, handle),
            functools.partial(self._on_watch_error, handle),
        )
        self._watches[handle.watch_id] = handle
        _logger.debug("Started location watch id=%d", handle.watch_id)
        return handle

    def stop_watch(self, handle: WatchHandle) -> None:
        """Release *handle*.  No fix for it is applied afterwards."""
        if not handle.active:
            return
        handle.active = False
        self._watches.pop(handle.watch_id, None)
        if self._provider is None:
            return
        try:
            self._provider.unwatch(handle.provider_handle)
        except Exception:
            _logger.debug("Provider unwatch failed for id=%d", handle.watch_id, exc_info=True)
        _logger.debug("Stopped location watch id=%d", handle.watch_id)

    def stop_all(self) -> None:
        for handle in list(self._watches.values()):
            self.stop_watch(handle)

    def _on_watch_fix(self, handle: WatchHandle, fix: Position | dict[str, Any]) -> None:
        if not handle.active:
            _logger.debug("Dropping fix for stopped watch id=%d", handle.watch_id)
            return
        if isinstance(fix, Position):
            position = fix
        else:
            try:
                position = Position.model_validate(fix)
            except ValueError:
                _logger.warning("Ignoring malformed fix for watch id=%d", handle.watch_id, exc_info=True)
                return
        if self._store.apply(position):
            handle.fixes_applied += 1
            self._clear_error()

    def _on_watch_error(self, handle: WatchHandle, error: Any) -> None:
        if not handle.active:
            return
        location_error = _as_location_error(error)
        _logger.warning("Watch location error (id=%d): %s", handle.watch_id, location_error)
        self._record_error(location_error)
