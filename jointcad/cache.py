"""
Component cache.

Memoises expensive solids by string key. ``get_or_build`` does not hold the
lock while building: two threads missing the same key concurrently may both
build, and the later write wins. Sequential callers build once per key.
"""

from typing import Callable, Dict, Optional

from build123d import Shape

from .locking import ReadWriteLock


_MISSING = object()


class ComponentCache:
    def __init__(self):
        self._cache: Dict[str, Shape] = {}
        self._lock = ReadWriteLock()

    def get(self, key: str) -> Optional[Shape]:
        with self._lock.read():
            return self._cache.get(key)

    def set(self, key: str, component: Shape) -> None:
        with self._lock.write():
            self._cache[key] = component

    def get_or_build(self, key: str, builder: Callable[[], Shape]) -> Shape:
        """Return the cached solid for ``key``, building and storing it on a miss."""
        with self._lock.read():
            component = self._cache.get(key, _MISSING)
        if component is not _MISSING:
            return component

        # Errors from builder propagate and nothing is stored
        component = builder()
        self.set(key, component)
        return component

    def clear(self) -> None:
        with self._lock.write():
            self._cache = {}

    def size(self) -> int:
        with self._lock.read():
            return len(self._cache)

    def __contains__(self, key: str) -> bool:
        with self._lock.read():
            return key in self._cache
