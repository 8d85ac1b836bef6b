"""
Persistent Storage - key/value snapshots for the cart

Provides:
- Upstash Redis storage (REST client) for deployments
- JSON file storage for a single local machine
- In-memory storage for tests and throwaway sessions

Values are opaque strings; the cart decides what goes in them.
"""

import asyncio
import json
from pathlib import Path
from typing import Optional, Protocol

from upstash_redis.asyncio import Redis as AsyncRedis

from cartstore.config import Settings
from cartstore.logging import get_logger

logger = get_logger(__name__)


class PersistentStore(Protocol):
    async def get(self, key: str) -> Optional[str]:
        ...

    async def set(self, key: str, value: str) -> None:
        ...

    async def close(self) -> None:
        ...


class MemoryStorage:
    """Dict-backed storage, lost when the process exits."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value

    async def close(self) -> None:
        return None


class FileStorage:
    """
    Storage backed by one JSON object file on local disk.

    Every key lives in the same file. Reads and writes run in a worker
    thread so the event loop is never blocked on disk I/O.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        # One writer at a time: writes share the temp file and read-modify-write the object
        self._write_lock = asyncio.Lock()

    def _read_all(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Unreadable storage file {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(data), encoding="utf-8")
        tmp_path.replace(self.path)

    async def get(self, key: str) -> Optional[str]:
        data = await asyncio.to_thread(self._read_all)
        value = data.get(key)
        return value if isinstance(value, str) else None

    async def set(self, key: str, value: str) -> None:
        async with self._write_lock:
            await asyncio.to_thread(self._write, key, value)

    async def close(self) -> None:
        return None


class RedisStorage:
    """Storage backed by Upstash Redis. Keys never expire."""

    def __init__(self, redis: AsyncRedis):
        self._redis = redis

    @classmethod
    def from_settings(cls, settings: Settings) -> "RedisStorage":
        if not settings.redis_configured:
            raise ValueError("UPSTASH_REDIS_REST_URL and UPSTASH_REDIS_REST_TOKEN must be set")
        return cls(AsyncRedis(url=settings.redis_url, token=settings.redis_token))

    async def get(self, key: str) -> Optional[str]:
        value = await self._redis.get(key)
        return value if value else None

    async def set(self, key: str, value: str) -> None:
        await self._redis.set(key, value)

    async def close(self) -> None:
        await self._redis.close()


def build_storage(settings: Settings) -> PersistentStore:
    """Redis when Upstash credentials are configured, local file otherwise."""
    if settings.redis_configured:
        logger.info("Using Upstash Redis cart storage")
        return RedisStorage.from_settings(settings)
    logger.info(f"Using file cart storage at {settings.storage_path}")
    return FileStorage(settings.storage_path)


__all__ = [
    "PersistentStore",
    "MemoryStorage",
    "FileStorage",
    "RedisStorage",
    "build_storage",
]
