import sys
import threading
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from resume_ai.sessions.store import SessionStore  # noqa: E402


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


class SessionStoreTests(unittest.TestCase):
    def setUp(self):
        self.store = SessionStore(shards=4)

    def test_put_then_get_returns_exact_text(self):
        text = "Jane Doe\n  5 years Java backend éè \n" * 300
        self.store.put("s1", text)
        self.assertEqual(self.store.get("s1"), text)
        self.assertTrue(self.store.has("s1"))

    def test_empty_text_is_stored(self):
        self.store.put("s1", "")
        self.assertEqual(self.store.get("s1"), "")
        self.assertTrue(self.store.has("s1"))

    def test_get_unknown_reports_absence(self):
        self.assertIsNone(self.store.get("missing"))
        self.assertFalse(self.store.has("missing"))

    def test_put_overwrites_existing_entry(self):
        self.store.put("s1", "first")
        self.store.put("s1", "second")
        self.assertEqual(self.store.get("s1"), "second")
        self.assertEqual(len(self.store), 1)

    def test_remove_is_idempotent(self):
        self.store.put("s1", "text")
        self.store.remove("s1")
        self.store.remove("s1")
        self.store.remove("never-existed")
        self.assertIsNone(self.store.get("s1"))
        self.assertFalse(self.store.has("s1"))

    def test_len_counts_across_shards(self):
        for i in range(25):
            self.store.put(f"session-{i}", str(i))
        self.assertEqual(len(self.store), 25)

    def test_rejects_non_positive_shard_count(self):
        with self.assertRaises(ValueError):
            SessionStore(shards=0)

    def test_purge_expired_drops_only_stale_entries(self):
        clock = FakeClock()
        store = SessionStore(shards=2, clock=clock)
        store.put("old", "a")
        clock.now += 100
        store.put("fresh", "b")
        clock.now += 10

        removed = store.purge_expired(50)

        self.assertEqual(removed, 1)
        self.assertIsNone(store.get("old"))
        self.assertEqual(store.get("fresh"), "b")

    def test_rewrite_refreshes_expiry(self):
        clock = FakeClock()
        store = SessionStore(shards=2, clock=clock)
        store.put("s1", "a")
        clock.now += 100
        store.put("s1", "b")
        self.assertEqual(store.purge_expired(50), 0)
        self.assertEqual(store.get("s1"), "b")

    def test_concurrent_writers_and_readers(self):
        errors: list[Exception] = []

        def worker(index: int) -> None:
            try:
                for j in range(200):
                    key = f"session-{index}-{j % 10}"
                    text = f"resume {index} {j}"
                    self.store.put(key, text)
                    self.assertEqual(self.store.get(key), text)
                    if j % 7 == 0:
                        self.store.remove(key)
            except Exception as exc:  # pragma: no cover - surfaced below
                errors.append(exc)

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertEqual(errors, [])
        self.assertLessEqual(len(self.store), 80)


if __name__ == "__main__":
    unittest.main()
