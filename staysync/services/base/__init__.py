from staysync.services.base.base_service import BaseService
from staysync.services.base.cache_service import CacheService, MemoryCacheBackend, RedisCacheBackend

__all__ = ["BaseService", "CacheService", "MemoryCacheBackend", "RedisCacheBackend"]
