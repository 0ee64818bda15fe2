import threading
import unittest

from jointcad.cache import ComponentCache
from jointcad.components import ComponentMode, cover_plate
from jointcad.config import default_config


class TestComponentCache(unittest.TestCase):
    def setUp(self):
        self.cache = ComponentCache()
        self.calls = 0

    def build(self):
        self.calls += 1
        return object()

    def test_sequential_builds_once(self):
        first = self.cache.get_or_build('base', self.build)
        second = self.cache.get_or_build('base', self.build)
        self.assertIs(first, second)
        self.assertEqual(self.calls, 1)
        self.assertEqual(self.cache.size(), 1)
        self.assertIn('base', self.cache)

    def test_keys_are_independent(self):
        self.cache.get_or_build('a', self.build)
        self.cache.get_or_build('b', self.build)
        self.assertEqual(self.calls, 2)
        self.assertEqual(self.cache.size(), 2)

    def test_set_get_clear(self):
        part = object()
        self.cache.set('x', part)
        self.assertIs(self.cache.get('x'), part)
        self.cache.clear()
        self.assertEqual(self.cache.size(), 0)
        self.assertIsNone(self.cache.get('x'))

    def test_builder_error_not_cached(self):
        def fail():
            raise RuntimeError("boom")

        with self.assertRaises(RuntimeError):
            self.cache.get_or_build('k', fail)
        self.assertNotIn('k', self.cache)
        self.cache.get_or_build('k', self.build)
        self.assertEqual(self.calls, 1)

    def test_concurrent_misses_may_build_twice(self):
        # Best-effort memoisation: both racing callers build, last write wins
        both_building = threading.Barrier(2)
        lock = threading.Lock()
        built = []

        def slow_build():
            both_building.wait(timeout=5)
            part = object()
            with lock:
                built.append(part)
            return part

        results = []

        def worker():
            results.append(self.cache.get_or_build('gear', slow_build))

        threads = [threading.Thread(target=worker) for _ in range(2)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=10)

        self.assertEqual(len(built), 2)
        self.assertEqual(self.cache.size(), 1)
        self.assertIn(self.cache.get('gear'), built)


class TestCachedEmptyResult(unittest.TestCase):
    def test_none_is_cached(self):
        cache = ComponentCache()
        cfg = default_config()
        calls = []

        def build():
            calls.append(1)
            return cover_plate(cfg, ComponentMode.BOSS)

        self.assertIsNone(cache.get_or_build('cover_boss', build))
        self.assertIsNone(cache.get_or_build('cover_boss', build))
        self.assertEqual(len(calls), 1)
        self.assertIn('cover_boss', cache)


if __name__ == '__main__':
    unittest.main()
