"""Entity roster endpoint (PostgREST / Supabase).

Endpoint:
  - GET /rest/v1/rooms?select=...&order=...

The select clause renames columns and embeds the floor and building so
each row already has the provider record shape::

    {"id", "name", "number", "floor": {"name", "building": {"name", "latitude", "longitude"}}}
"""

from __future__ import annotations

import logging
from typing import Any

from campusnav._constants import ENTITY_ORDER, ENTITY_SELECT, ENTITY_TABLE
from campusnav._transport import Transport
from campusnav.config import CampusNavConfig
from campusnav.exceptions import CampusNavConfigError, CampusNavTransportError, DataUnavailableError

_logger = logging.getLogger(__name__)


def _build_headers(api_key: str | None) -> dict[str, str]:
    if not api_key:
        return {}
    return {"apikey": api_key, "authorization": f"Bearer {api_key}"}


async def fetch_entity_records(config: CampusNavConfig, transport: Transport) -> list[dict[str, Any]]:
    """Fetch all room records with their floor and building.

    Raises
    ------
    CampusNavConfigError
        If no entity endpoint is configured.
    DataUnavailableError
        On transport failure or an unexpected response shape.
    """
    if not config.entities_base_url:
        raise CampusNavConfigError("entities_base_url is not configured")

    url = f"{config.entities_base_url.rstrip('/')}/rest/v1/{ENTITY_TABLE}"
    params = {"select": ENTITY_SELECT, "order": ENTITY_ORDER}
    try:
        response = await transport.get_json(
            url,
            params=params,
            headers=_build_headers(config.entities_api_key),
            timeout=config.entities_timeout,
        )
    except CampusNavTransportError as exc:
        raise DataUnavailableError(f"Entity fetch failed: {exc}") from exc

    if not isinstance(response, list):
        raise DataUnavailableError(f"Entity response is not a list: {type(response).__name__}")

    _logger.debug("Fetched %d entity records", len(response))
    return response
