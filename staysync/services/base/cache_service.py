"""
Cache service with pluggable backends.

``memory`` keeps values in-process with per-key expiry; ``redis`` stores JSON
encoded values with a TTL. Cache failures are logged and treated as misses so
a cache outage never breaks a request.
"""

import json
import threading
import time
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional, Tuple

import redis

from staysync.config.settings import Settings
from staysync.core.logging import get_logger

logger = get_logger(__name__)


class CacheBackend(ABC):
    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        ...

    @abstractmethod
    def set(self, key: str, value: Any, ttl: int) -> None:
        ...

    @abstractmethod
    def delete(self, key: str) -> None:
        ...


class MemoryCacheBackend(CacheBackend):
    """Thread-safe in-process TTL cache."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._store: Dict[str, Tuple[float, Any]] = {}
        self._lock = threading.Lock()
        self._clock = clock

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return None
            expires_at, value = entry
            if expires_at <= self._clock():
                del self._store[key]
                return None
            return value

    def set(self, key: str, value: Any, ttl: int) -> None:
        with self._lock:
            self._store[key] = (self._clock() + ttl, value)

    def delete(self, key: str) -> None:
        with self._lock:
            self._store.pop(key, None)


class RedisCacheBackend(CacheBackend):
    """Redis backed cache storing JSON values."""

    def __init__(self, url: str):
        self._client = redis.Redis.from_url(url, decode_responses=True)

    def get(self, key: str) -> Optional[Any]:
        raw = self._client.get(key)
        return json.loads(raw) if raw is not None else None

    def set(self, key: str, value: Any, ttl: int) -> None:
        self._client.setex(key, ttl, json.dumps(value, default=str))

    def delete(self, key: str) -> None:
        self._client.delete(key)


class CacheService:
    """Facade over the configured backend with a key prefix."""

    def __init__(self, backend: CacheBackend, prefix: str = "staysync"):
        self.backend = backend
        self.prefix = prefix

    @classmethod
    def from_settings(cls, settings: Settings) -> "CacheService":
        if settings.CACHE_BACKEND == "redis":
            backend: CacheBackend = RedisCacheBackend(settings.REDIS_URL)
        else:
            backend = MemoryCacheBackend()
        return cls(backend)

    def _key(self, key: str) -> str:
        return f"{self.prefix}:{key}"

    def get(self, key: str) -> Optional[Any]:
        try:
            return self.backend.get(self._key(key))
        except redis.RedisError as e:
            logger.warning(f"Cache get failed: {e}", extra={"cache_key": key})
            return None

    def set(self, key: str, value: Any, ttl: int) -> None:
        try:
            self.backend.set(self._key(key), value, ttl)
        except redis.RedisError as e:
            logger.warning(f"Cache set failed: {e}", extra={"cache_key": key})

    def delete(self, key: str) -> None:
        try:
            self.backend.delete(self._key(key))
        except redis.RedisError as e:
            logger.warning(f"Cache delete failed: {e}", extra={"cache_key": key})

    def get_or_set(self, key: str, factory: Callable[[], Any], ttl: int) -> Any:
        cached = self.get(key)
        if cached is not None:
            return cached
        value = factory()
        self.set(key, value, ttl)
        return value
