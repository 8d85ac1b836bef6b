"""Tests for persistent storage backends"""
import asyncio
import json
from pathlib import Path

import pytest
from unittest.mock import AsyncMock, Mock, patch

from cartstore.config import Settings
from cartstore.storage import (
    FileStorage,
    MemoryStorage,
    RedisStorage,
    build_storage,
)


@pytest.mark.asyncio
async def test_memory_storage_get_set():
    storage = MemoryStorage()

    assert await storage.get("cart") is None
    await storage.set("cart", "[]")
    assert await storage.get("cart") == "[]"


@pytest.mark.asyncio
async def test_file_storage_persists_between_instances(tmp_path):
    path = tmp_path / "nested" / "storage.json"
    await FileStorage(path).set("@RocketShoes:cart", '[{"id":1,"amount":2}]')

    reopened = FileStorage(path)

    assert await reopened.get("@RocketShoes:cart") == '[{"id":1,"amount":2}]'
    assert await reopened.get("other") is None


@pytest.mark.asyncio
async def test_file_storage_keeps_other_keys(tmp_path):
    path = tmp_path / "storage.json"
    storage = FileStorage(path)
    await storage.set("a", "1")
    await storage.set("b", "2")

    assert json.loads(path.read_text(encoding="utf-8")) == {"a": "1", "b": "2"}


@pytest.mark.asyncio
async def test_file_storage_concurrent_writes(tmp_path):
    """Test that overlapping writes all succeed and the last one wins"""
    storage = FileStorage(tmp_path / "storage.json")

    for _ in range(50):
        results = await asyncio.gather(
            *(storage.set("cart", str(j)) for j in range(4)),
            return_exceptions=True,
        )
        assert results == [None] * 4
        assert await storage.get("cart") == "3"


@pytest.mark.asyncio
async def test_file_storage_concurrent_writes_keep_every_key(tmp_path):
    storage = FileStorage(tmp_path / "storage.json")

    await asyncio.gather(*(storage.set(f"key-{j}", str(j)) for j in range(8)))

    for j in range(8):
        assert await storage.get(f"key-{j}") == str(j)


@pytest.mark.asyncio
async def test_file_storage_missing_file(tmp_path):
    assert await FileStorage(tmp_path / "absent.json").get("cart") is None


@pytest.mark.asyncio
async def test_file_storage_corrupt_file(tmp_path):
    path = tmp_path / "storage.json"
    path.write_text("{broken", encoding="utf-8")
    storage = FileStorage(path)

    assert await storage.get("cart") is None
    # A write replaces the unreadable file
    await storage.set("cart", "[]")
    assert await storage.get("cart") == "[]"


@pytest.mark.asyncio
async def test_redis_storage_delegates_to_client():
    redis = Mock()
    redis.get = AsyncMock(return_value='[{"id":1,"amount":1}]')
    redis.set = AsyncMock()
    redis.close = AsyncMock()
    storage = RedisStorage(redis)

    assert await storage.get("@RocketShoes:cart") == '[{"id":1,"amount":1}]'
    await storage.set("@RocketShoes:cart", "[]")
    await storage.close()

    redis.get.assert_awaited_once_with("@RocketShoes:cart")
    redis.set.assert_awaited_once_with("@RocketShoes:cart", "[]")
    redis.close.assert_awaited_once()


@pytest.mark.asyncio
async def test_redis_storage_missing_key():
    redis = Mock()
    redis.get = AsyncMock(return_value=None)

    assert await RedisStorage(redis).get("cart") is None


def test_redis_storage_requires_credentials():
    with pytest.raises(ValueError):
        RedisStorage.from_settings(Settings())


def test_build_storage_defaults_to_file(tmp_path):
    storage = build_storage(Settings(storage_path=tmp_path / "storage.json"))

    assert isinstance(storage, FileStorage)
    assert storage.path == Path(tmp_path / "storage.json")


def test_build_storage_uses_redis_when_configured():
    settings = Settings(redis_url="https://redis.test", redis_token="token")

    with patch("cartstore.storage.AsyncRedis") as mock_redis:
        storage = build_storage(settings)

    assert isinstance(storage, RedisStorage)
    mock_redis.assert_called_once_with(url="https://redis.test", token="token")
