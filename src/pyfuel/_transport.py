"""HTTP transport with timeout handling and error classification."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from pyfuel._constants import USER_AGENT
from pyfuel.exceptions import FuelApiError, FuelNetworkError, FuelTimeoutError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by endpoint modules.

    Having a protocol here makes it easy to pass test doubles while keeping
    the production implementation (`HttpTransport`) concrete.
    """

    async def request_json(
        self,
        method: str,
        url: str,
        *,
        params: Mapping[str, str] | None = None,
        headers: Mapping[str, str] | None = None,
        json_body: Any = None,
        timeout: float | None = None,
        raise_for_status: bool = True,
    ) -> Any:
        ...


class HttpTransport:
    """aiohttp-backed transport that maps failures onto the pyfuel taxonomy.

    * ``TimeoutError`` → :class:`FuelTimeoutError` (retryable)
    * ``aiohttp.ClientConnectionError`` → :class:`FuelNetworkError` (retryable)
    * any other ``aiohttp.ClientError``, HTTP status >= 400 or a body that is
      not JSON → :class:`FuelApiError` (fatal)
    """

    def __init__(self, http_session: aiohttp.ClientSession, *, default_timeout: float) -> None:
        self._http = http_session
        self._default_timeout = default_timeout

    async def request_json(
        self,
        method: str,
        url: str,
        *,
        params: Mapping[str, str] | None = None,
        headers: Mapping[str, str] | None = None,
        json_body: Any = None,
        timeout: float | None = None,
        raise_for_status: bool = True,
    ) -> Any:
        """Send a request and return the decoded JSON body.

        An empty body (e.g. ``201 Created`` with ``Prefer: return=minimal``)
        decodes to ``None``.  With ``raise_for_status=False`` error statuses
        are returned to the caller as long as the body is JSON, which the
        routing service uses to report ``NoRoute`` and similar codes.
        """
        request_headers: dict[str, str] = {
            "accept": "application/json",
            "user-agent": USER_AGENT,
        }
        if headers:
            request_headers.update(headers)

        client_timeout = aiohttp.ClientTimeout(total=timeout if timeout is not None else self._default_timeout)

        _logger.debug("%s %s params=%s", method, url, dict(params or {}))

        try:
            async with self._http.request(
                method,
                url,
                params=params,
                headers=request_headers,
                json=json_body,
                timeout=client_timeout,
            ) as resp:
                status = resp.status
                text = await resp.text()
        except TimeoutError as exc:
            raise FuelTimeoutError(f"Request to {url} timed out", endpoint=url) from exc
        except aiohttp.ClientConnectionError as exc:
            raise FuelNetworkError(f"Request to {url} failed: {exc}", endpoint=url) from exc
        except aiohttp.ClientError as exc:
            raise FuelApiError(f"Request to {url} failed: {exc}", endpoint=url) from exc

        if status >= 400 and raise_for_status:
            raise FuelApiError(
                f"HTTP {status} from {url}: {text[:200]}",
                status_code=status,
                endpoint=url,
            )

        if not text.strip():
            if status >= 400:
                raise FuelApiError(f"HTTP {status} from {url}", status_code=status, endpoint=url)
            return None

        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise FuelApiError(
                f"Invalid JSON from {url}: {text[:200]}",
                status_code=status,
                endpoint=url,
            ) from exc
