"""Client configuration for pyfuel."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pyfuel._constants import (
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_ROUTING_TIMEOUT,
    OSRM_API_VERSION,
    OSRM_BASE_URL,
    OSRM_PROFILE,
    RETRY_INITIAL_DELAY,
    RETRY_MAX_ATTEMPTS,
    RETRY_MAX_DELAY,
    SUPABASE_REST_PATH,
)
from pyfuel.exceptions import FuelConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclasses.dataclass(frozen=True)
class FuelConfig:
    """Client configuration.

    Parameters
    ----------
    supabase_url : str
        Project URL of the Supabase backend (``https://<ref>.supabase.co``).
    supabase_key : str
        Anonymous API key sent as ``apikey`` and bearer token.
    osrm_base_url : str
        Base URL of the OSRM routing server.  Defaults to the public
        demo server; self-host for production traffic.
    osrm_profile : str
        Routing profile (``driving``, ``walking``, ``cycling``).
    osrm_alternatives : bool
        Ask OSRM for alternative routes (only the first is used).
    osrm_steps : bool
        Ask OSRM for turn-by-turn steps.
    request_timeout : float
        Per-request timeout in seconds for the data API.
    routing_timeout : float
        Per-request timeout in seconds for the routing API.
    cache_dir : str or None
        Directory for the persistent cache.  ``None`` keeps the cache in
        memory for the lifetime of the client.
    retry_max_attempts : int
        Attempts per remote fetch, including the first.
    retry_initial_delay : float
        Seconds to wait before the second attempt.
    retry_max_delay : float
        Upper bound for the exponential backoff delay.
    """

    supabase_url: str = ""
    supabase_key: str = ""
    osrm_base_url: str = OSRM_BASE_URL
    osrm_profile: str = OSRM_PROFILE
    osrm_alternatives: bool = False
    osrm_steps: bool = False
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    routing_timeout: float = DEFAULT_ROUTING_TIMEOUT
    cache_dir: str | None = None
    retry_max_attempts: int = RETRY_MAX_ATTEMPTS
    retry_initial_delay: float = RETRY_INITIAL_DELAY
    retry_max_delay: float = RETRY_MAX_DELAY

    @property
    def rest_url(self) -> str:
        """Base URL of the PostgREST API."""
        return f"{self.supabase_url.rstrip('/')}{SUPABASE_REST_PATH}"

    @property
    def route_url(self) -> str:
        """Base URL of the OSRM route service for the configured profile."""
        return f"{self.osrm_base_url.rstrip('/')}/route/{OSRM_API_VERSION}/{self.osrm_profile}"

    def validate(self) -> None:
        """Raise :class:`FuelConfigError` when the configuration is unusable."""
        if not self.supabase_url:
            raise FuelConfigError("supabase_url is required (set SUPABASE_URL)")
        if not self.supabase_key:
            raise FuelConfigError("supabase_key is required (set SUPABASE_ANON_KEY)")
        if self.request_timeout <= 0 or self.routing_timeout <= 0:
            raise FuelConfigError("timeouts must be positive")
        if self.retry_max_attempts < 1:
            raise FuelConfigError("retry_max_attempts must be at least 1")
        if self.retry_initial_delay < 0 or self.retry_max_delay < self.retry_initial_delay:
            raise FuelConfigError("retry delays must satisfy 0 <= initial_delay <= max_delay")

    @classmethod
    def from_env(cls, **overrides: Any) -> FuelConfig:
        """Create configuration from environment variables.

        Reads ``SUPABASE_URL`` and ``SUPABASE_ANON_KEY`` (the same names the
        mobile app's ``.env`` uses), ``OSRM_*`` routing settings and the
        ``PYFUEL_*`` tuning knobs.  Explicit keyword arguments override
        environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        FuelConfig
            Populated configuration.
        """
        env = os.environ

        _ENV_STR_MAP = {
            "SUPABASE_URL": "supabase_url",
            "SUPABASE_ANON_KEY": "supabase_key",
            "OSRM_BASE_URL": "osrm_base_url",
            "OSRM_PROFILE": "osrm_profile",
            "PYFUEL_CACHE_DIR": "cache_dir",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_STR_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        _ENV_FLOAT_MAP = {
            "PYFUEL_REQUEST_TIMEOUT": "request_timeout",
            "PYFUEL_ROUTING_TIMEOUT": "routing_timeout",
            "PYFUEL_RETRY_INITIAL_DELAY": "retry_initial_delay",
            "PYFUEL_RETRY_MAX_DELAY": "retry_max_delay",
        }
        for env_key, field_name in _ENV_FLOAT_MAP.items():
            val = env.get(env_key)
            if val is not None and field_name not in overrides:
                config_kwargs[field_name] = float(val)

        attempts_env = env.get("PYFUEL_RETRY_MAX_ATTEMPTS")
        if attempts_env is not None and "retry_max_attempts" not in overrides:
            config_kwargs["retry_max_attempts"] = int(attempts_env)

        if "osrm_alternatives" not in overrides:
            config_kwargs["osrm_alternatives"] = _env_bool(env.get("OSRM_ALTERNATIVES"), False)
        if "osrm_steps" not in overrides:
            config_kwargs["osrm_steps"] = _env_bool(env.get("OSRM_STEPS"), False)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
