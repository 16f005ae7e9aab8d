"""Shared helpers for the PostgREST endpoint modules.

This module centralizes the most repeated patterns:
- building the ``apikey``/bearer headers
- GET of a table with a select/filter query
- rejecting responses that are not a list of rows

It is internal to pyfuel and may change at any time.
"""

from __future__ import annotations

import math
from typing import Any

from pyfuel._transport import Transport
from pyfuel.config import FuelConfig
from pyfuel.exceptions import FuelApiError


def safe_float(value: Any) -> float | None:
    if value is None or value == "":
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(result):
        return None
    return result


def build_rest_headers(config: FuelConfig, *, prefer: str | None = None) -> dict[str, str]:
    """Headers required by every Supabase REST call."""
    headers = {
        "apikey": config.supabase_key,
        "authorization": f"Bearer {config.supabase_key}",
    }
    if prefer:
        headers["prefer"] = prefer
    return headers


def ilike_pattern(query: str) -> str:
    """PostgREST ``ilike`` operand for a case-insensitive substring match."""
    escaped = query.strip().replace("*", "").replace(",", " ")
    return f"ilike.*{escaped}*"


async def fetch_rows(
    *,
    config: FuelConfig,
    transport: Transport,
    table: str,
    params: dict[str, str],
) -> list[dict[str, Any]]:
    """GET ``/rest/v1/<table>`` and return the decoded rows."""
    url = f"{config.rest_url}/{table}"
    decoded = await transport.request_json(
        "GET",
        url,
        params=params,
        headers=build_rest_headers(config),
        timeout=config.request_timeout,
    )
    if not isinstance(decoded, list):
        raise FuelApiError(f"Expected a list of rows from {table}", endpoint=url)
    return [row for row in decoded if isinstance(row, dict)]


async def insert_row(
    *,
    config: FuelConfig,
    transport: Transport,
    table: str,
    row: dict[str, Any],
) -> None:
    """POST a single row to ``/rest/v1/<table>``."""
    url = f"{config.rest_url}/{table}"
    await transport.request_json(
        "POST",
        url,
        headers=build_rest_headers(config, prefer="return=minimal"),
        json_body=row,
        timeout=config.request_timeout,
    )
