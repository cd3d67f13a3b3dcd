import redis.asyncio as redis
from redis.exceptions import RedisError
from typing import Dict, Optional

from vetcare.core.config import settings
from vetcare.core.exceptions import StorageUnavailable

class RedisClient:
    def __init__(self, url: str = None, client=None):
        self.redis = client or redis.from_url(url or settings.REDIS_URL, encoding="utf-8", decode_responses=True)

    async def get(self, key: str) -> Optional[str]:
        try:
            return await self.redis.get(key)
        except RedisError as exc:
            raise StorageUnavailable(f"redis get failed: {exc}") from exc

    async def set(self, key: str, value: str, expire: Optional[int] = None):
        try:
            await self.redis.set(key, value, ex=expire)
        except RedisError as exc:
            raise StorageUnavailable(f"redis set failed: {exc}") from exc

    async def delete(self, key: str):
        try:
            await self.redis.delete(key)
        except RedisError as exc:
            raise StorageUnavailable(f"redis delete failed: {exc}") from exc

    async def close(self):
        await self.redis.close()

class MemoryBackend:
    """Process-local stand-in for Redis, used by the mock setup and tests."""

    def __init__(self):
        self.data: Dict[str, str] = {}

    async def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    async def set(self, key: str, value: str, expire: Optional[int] = None):
        self.data[key] = value

    async def delete(self, key: str):
        self.data.pop(key, None)

    async def close(self):
        self.data.clear()

def build_backend(backend: str = None):
    backend = backend or settings.SESSION_BACKEND
    if backend == "redis":
        return RedisClient()
    if backend == "memory":
        return MemoryBackend()
    raise ValueError(f"Unknown session backend '{backend}'")
