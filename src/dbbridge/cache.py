"""
Caching for shape metadata.

Target shapes are inspected once and the result is kept for the life of the
process, keyed by the shape itself. Uses cachetools LRUCache so that shapes
created on the fly (local classes in tests, generated dataclasses) cannot
grow the cache without bound.
"""
import functools
import logging
import threading

import cachetools

logger = logging.getLogger(__name__)


class Cache:
    """Process-wide registry of the named shape caches.

    Thread-safe singleton; tests clear it between cases.
    """

    _instance = None
    _caches: dict[str, cachetools.LRUCache] = {}
    _lock = threading.RLock()

    @classmethod
    def get_instance(cls) -> 'Cache':
        with cls._lock:
            if cls._instance is None:
                cls._instance = cls()
            return cls._instance

    def get_cache(self, name: str, maxsize: int = 256) -> cachetools.LRUCache:
        """Named LRU cache, created on first request.
        """
        with self._lock:
            return self._caches.setdefault(name, cachetools.LRUCache(maxsize=maxsize))

    def clear_all(self) -> None:
        """Empty every cache, keeping the caches themselves."""
        with self._lock:
            for name, cache in self._caches.items():
                if cache:
                    logger.debug(f'Clearing {len(cache)} entries from {name} cache')
                cache.clear()


def cached_by_shape(name: str, maxsize: int = 256):
    """Cache the result of a one-argument function keyed on its argument.

    Usage:
        @cached_by_shape('record_fields')
        def record_fields(shape):
            ...
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(shape):
            cache = Cache.get_instance().get_cache(name, maxsize)
            try:
                return cache[shape]
            except KeyError:
                pass
            except TypeError:
                logger.debug(f'Unhashable shape {shape!r}, not cached')
                return func(shape)
            result = func(shape)
            with Cache._lock:
                cache[shape] = result
            return result
        return wrapper
    return decorator
