"""Configuration for campusnav."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from campusnav._constants import (
    DEFAULT_CENTER_LATITUDE,
    DEFAULT_CENTER_LONGITUDE,
    DEFAULT_ZOOM,
    FOUND_ZOOM,
    OSRM_BASE_URL,
    OSRM_WALKING_PROFILE,
    ROUTING_TIMEOUT_S,
)
from campusnav.exceptions import CampusNavConfigError
from campusnav.models.position import ONE_SHOT_DEFAULTS, WATCH_DEFAULTS, Coordinate, LocationOptions


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_options(env: Any, prefix: str, base: LocationOptions) -> LocationOptions:
    updates: dict[str, Any] = {}
    high_accuracy = env.get(f"{prefix}_HIGH_ACCURACY")
    if high_accuracy is not None:
        updates["enable_high_accuracy"] = _env_bool(high_accuracy, base.enable_high_accuracy)
    timeout = env.get(f"{prefix}_TIMEOUT_MS")
    if timeout is not None:
        updates["timeout_ms"] = int(timeout)
    max_age = env.get(f"{prefix}_MAX_AGE_MS")
    if max_age is not None:
        updates["max_fix_age_ms"] = int(max_age)
    if not updates:
        return base
    return LocationOptions.model_validate({**base.model_dump(), **updates})


@dataclasses.dataclass(frozen=True)
class CampusNavConfig:
    """Library configuration.

    Parameters
    ----------
    routing_base_url : str
        OSRM server base URL.
    routing_profile : str
        OSRM profile used for walking routes.
    routing_timeout : float
        Seconds allowed for a routing request before the straight-line
        fallback is used.
    entities_base_url : str or None
        PostgREST (Supabase) project URL holding the room/floor/building
        tables.  ``None`` when entities are supplied by another provider.
    entities_api_key : str or None
        API key sent as ``apikey`` and bearer token to the entity store.
    entities_timeout : float
        Seconds allowed for a roster fetch.
    default_latitude : float
        Map center latitude used until a position is known.
    default_longitude : float
        Map center longitude used until a position is known.
    default_zoom : int
        Zoom level used until a position is known.
    found_zoom : int
        Zoom level once a position is known.
    one_shot : LocationOptions
        Options for single location requests.
    watch : LocationOptions
        Options for continuous tracking.
    route_on_first_fix : bool
        Resolve the route for a destination that was selected before any
        position was known as soon as the first fix arrives.
    """

    routing_base_url: str = OSRM_BASE_URL
    routing_profile: str = OSRM_WALKING_PROFILE
    routing_timeout: float = ROUTING_TIMEOUT_S
    entities_base_url: str | None = None
    entities_api_key: str | None = None
    entities_timeout: float = 15.0
    default_latitude: float = DEFAULT_CENTER_LATITUDE
    default_longitude: float = DEFAULT_CENTER_LONGITUDE
    default_zoom: int = DEFAULT_ZOOM
    found_zoom: int = FOUND_ZOOM
    one_shot: LocationOptions = ONE_SHOT_DEFAULTS
    watch: LocationOptions = WATCH_DEFAULTS
    route_on_first_fix: bool = True

    def __post_init__(self) -> None:
        if self.routing_timeout <= 0:
            raise CampusNavConfigError(f"routing_timeout must be positive, got {self.routing_timeout}")
        if self.entities_timeout <= 0:
            raise CampusNavConfigError(f"entities_timeout must be positive, got {self.entities_timeout}")
        if not (-90.0 <= self.default_latitude <= 90.0 and -180.0 <= self.default_longitude <= 180.0):
            raise CampusNavConfigError(
                f"default center out of range: {self.default_latitude}, {self.default_longitude}"
            )

    @property
    def default_center(self) -> Coordinate:
        return Coordinate(latitude=self.default_latitude, longitude=self.default_longitude)

    @classmethod
    def from_env(cls, **overrides: Any) -> CampusNavConfig:
        """Create configuration from environment variables.

        Reads optional ``CAMPUSNAV_*`` variables.  Explicit keyword
        arguments override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        CampusNavConfig
            Populated configuration.
        """
        env = os.environ

        _ENV_STR_MAP = {
            "CAMPUSNAV_ROUTING_BASE_URL": "routing_base_url",
            "CAMPUSNAV_ROUTING_PROFILE": "routing_profile",
            "CAMPUSNAV_ENTITIES_BASE_URL": "entities_base_url",
            "CAMPUSNAV_ENTITIES_API_KEY": "entities_api_key",
        }
        _ENV_FLOAT_MAP = {
            "CAMPUSNAV_ROUTING_TIMEOUT": "routing_timeout",
            "CAMPUSNAV_ENTITIES_TIMEOUT": "entities_timeout",
            "CAMPUSNAV_DEFAULT_LATITUDE": "default_latitude",
            "CAMPUSNAV_DEFAULT_LONGITUDE": "default_longitude",
        }
        _ENV_INT_MAP = {
            "CAMPUSNAV_DEFAULT_ZOOM": "default_zoom",
            "CAMPUSNAV_FOUND_ZOOM": "found_zoom",
        }

        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_STR_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        try:
            for env_key, field_name in _ENV_FLOAT_MAP.items():
                val = env.get(env_key)
                if val is not None and field_name not in overrides:
                    config_kwargs[field_name] = float(val)
            for env_key, field_name in _ENV_INT_MAP.items():
                val = env.get(env_key)
                if val is not None and field_name not in overrides:
                    config_kwargs[field_name] = int(val)
            if "one_shot" not in overrides:
                config_kwargs["one_shot"] = _env_options(env, "CAMPUSNAV_ONE_SHOT", ONE_SHOT_DEFAULTS)
            if "watch" not in overrides:
                config_kwargs["watch"] = _env_options(env, "CAMPUSNAV_WATCH", WATCH_DEFAULTS)
        except ValueError as exc:
            raise CampusNavConfigError(f"Invalid CAMPUSNAV_* environment value: {exc}") from exc

        if "route_on_first_fix" not in overrides:
            config_kwargs["route_on_first_fix"] = _env_bool(env.get("CAMPUSNAV_ROUTE_ON_FIRST_FIX"), True)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
