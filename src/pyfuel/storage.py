"""Persistent key/value backends for the TTL cache.

The cache only needs string values under string keys.  A backend is
crash-consistent at the granularity of a single :meth:`KeyValueStore.set`.
"""

from __future__ import annotations

import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Protocol

import aiofiles
import aiofiles.os

from pyfuel.exceptions import FuelCacheError

_logger = logging.getLogger(__name__)

_SAFE_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")


class KeyValueStore(Protocol):
    """Durable string-keyed storage."""

    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str) -> None: ...

    async def delete(self, key: str) -> None: ...

    async def contains(self, key: str) -> bool: ...


class MemoryStore:
    """Process-local store; contents are lost when the process exits."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    async def get(self, key: str) -> str | None:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)

    async def contains(self, key: str) -> bool:
        return key in self._data


class JsonFileStore:
    """One file per key under *root*, written via temp file + rename.

    ``os.replace`` is atomic on POSIX and Windows, so a reader sees either
    the previous value or the new one, never a partial write.
    """

    SUFFIX = ".json"

    def __init__(self, root: str | os.PathLike[str]) -> None:
        self.root = Path(root).expanduser().resolve()
        self.root.mkdir(parents=True, exist_ok=True, mode=0o700)

    def _path(self, key: str) -> Path:
        if not _SAFE_KEY.match(key):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self.root / f"{key}{self.SUFFIX}"

    async def get(self, key: str) -> str | None:
        """Return the stored text, or ``None`` when *key* was never written.

        Raises :class:`~pyfuel.exceptions.FuelCacheError` when the file is
        not valid UTF-8.
        """
        path = self._path(key)
        try:
            async with aiofiles.open(path, encoding="utf-8") as f:
                return await f.read()
        except FileNotFoundError:
            return None
        except UnicodeDecodeError as exc:
            raise FuelCacheError(f"Unreadable cache file {path.name}") from exc

    async def set(self, key: str, value: str) -> None:
        path = self._path(key)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{key}.", suffix=".tmp", dir=self.root)
        os.close(fd)
        try:
            async with aiofiles.open(tmp_name, "w", encoding="utf-8") as f:
                await f.write(value)
                await f.flush()
            await aiofiles.os.replace(tmp_name, path)
        except BaseException:
            if await aiofiles.os.path.exists(tmp_name):
                await aiofiles.os.remove(tmp_name)
            raise
        _logger.debug("Wrote %s (%d bytes)", path, len(value))

    async def delete(self, key: str) -> None:
        path = self._path(key)
        try:
            await aiofiles.os.remove(path)
        except FileNotFoundError:
            pass

    async def contains(self, key: str) -> bool:
        return bool(await aiofiles.os.path.exists(self._path(key)))
