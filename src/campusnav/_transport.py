"""HTTP transport for the routing and entity providers."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol
from urllib.parse import urlsplit

import aiohttp

from campusnav._constants import USER_AGENT
from campusnav._redact import redact_for_log
from campusnav.exceptions import CampusNavTransportError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by provider modules.

    Having a protocol here makes it easy to pass test doubles while
    keeping the production implementation (`AiohttpTransport`) concrete.
    """

    async def get_json(
        self,
        url: str,
        *,
        params: Mapping[str, str] | None = None,
        headers: Mapping[str, str] | None = None,
        timeout: float | None = None,
    ) -> Any: ...


class AiohttpTransport:
    """JSON-over-HTTP GET transport on a shared :class:`aiohttp.ClientSession`."""

    def __init__(self, http_session: aiohttp.ClientSession, *, user_agent: str = USER_AGENT) -> None:
        self._http = http_session
        self._user_agent = user_agent

    async def get_json(
        self,
        url: str,
        *,
        params: Mapping[str, str] | None = None,
        headers: Mapping[str, str] | None = None,
        timeout: float | None = None,
    ) -> Any:
        """GET *url* and decode the JSON body.

        Raises
        ------
        CampusNavTransportError
            On network errors, timeouts, non-200 status or invalid JSON.
        """
        endpoint = urlsplit(url).path
        request_headers: dict[str, str] = {
            "accept": "application/json",
            "user-agent": self._user_agent,
        }
        if headers:
            request_headers.update(headers)

        _logger.debug(
            "GET %s params=%s headers=%s",
            url,
            redact_for_log(dict(params or {})),
            redact_for_log(request_headers),
        )

        client_timeout = aiohttp.ClientTimeout(total=timeout) if timeout is not None else None
        try:
            async with self._http.get(
                url,
                params=dict(params) if params else None,
                headers=request_headers,
                timeout=client_timeout,
            ) as resp:
                text = await resp.text()
                if resp.status != 200:
                    raise CampusNavTransportError(
                        f"HTTP {resp.status} from {endpoint}: {text[:200]}",
                        status_code=resp.status,
                        endpoint=endpoint,
                    )
        except CampusNavTransportError:
            raise
        except TimeoutError as exc:
            raise CampusNavTransportError(
                f"Request to {endpoint} timed out",
                endpoint=endpoint,
            ) from exc
        except aiohttp.ClientError as exc:
            raise CampusNavTransportError(
                f"Request to {endpoint} failed: {exc}",
                endpoint=endpoint,
            ) from exc

        try:
            body = json.loads(text)
        except json.JSONDecodeError as exc:
            raise CampusNavTransportError(
                f"Invalid JSON from {endpoint}: {text[:200]}",
                endpoint=endpoint,
            ) from exc

        _logger.debug("Response from %s: %s", endpoint, redact_for_log(body, max_items=8))
        return body
