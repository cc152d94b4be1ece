"""Tests for the SQLite and in-memory key/value caches."""

import threading
from pathlib import Path

import pytest

from forecast_builder.models.common import epoch_ms, utc_now
from forecast_builder.storage import cache_repo
from forecast_builder.storage.database import connect, run_migrations
from forecast_builder.storage.kv_cache import MemoryCache, SqliteCache


def _future() -> int:
    return epoch_ms(utc_now()) + 60_000


def _past() -> int:
    return epoch_ms(utc_now()) - 1


@pytest.fixture
def sqlite_cache(tmp_path: Path):
    cache = SqliteCache(tmp_path / "cache.db")
    yield cache
    cache.close()


class TestCacheRepo:
    def test_set_and_get(self, tmp_path: Path):
        conn = connect(tmp_path / "test.db")
        run_migrations(conn)
        cache_repo.set_entry(conn, "k", '{"a": 1}', 2000)

        assert cache_repo.get_entry(conn, "k", 1000) == '{"a": 1}'
        assert cache_repo.get_entry(conn, "k", 2000) is None
        conn.close()

    def test_upsert_last_writer_wins(self, tmp_path: Path):
        conn = connect(tmp_path / "test.db")
        run_migrations(conn)
        cache_repo.set_entry(conn, "k", "1", 5000)
        cache_repo.set_entry(conn, "k", "2", 5000)

        assert cache_repo.get_entry(conn, "k", 0) == "2"
        assert cache_repo.count_entries(conn) == 1
        conn.close()


class TestCaches:
    @pytest.fixture(params=["sqlite", "memory"])
    def cache(self, request, tmp_path: Path):
        if request.param == "memory":
            yield MemoryCache()
            return
        cache = SqliteCache(tmp_path / "cache.db")
        yield cache
        cache.close()

    def test_miss(self, cache):
        assert cache.get("nope") is None

    def test_round_trip(self, cache):
        value = {"dataStr": "aGVsbG8=", "width": 1, "height": 1}
        cache.set("icon", value, _future())
        assert cache.get("icon") == value

    def test_expired_not_returned(self, cache):
        cache.set("icon", {"dataStr": "x"}, _past())
        assert cache.get("icon") is None

    def test_overwrite(self, cache):
        cache.set("icon", {"v": 1}, _future())
        cache.set("icon", {"v": 2}, _future())
        assert cache.get("icon") == {"v": 2}
        assert len(cache) == 1

    def test_concurrent_writers(self, cache):
        def write(n: int) -> None:
            for i in range(20):
                cache.set(f"key-{i}", {"writer": n}, _future())

        threads = [threading.Thread(target=write, args=(n,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(cache) == 20
        assert cache.get("key-0")["writer"] in range(4)


class TestSqliteCache:
    def test_persists_across_instances(self, tmp_path: Path):
        path = tmp_path / "cache.db"
        first = SqliteCache(path)
        first.set("icon", {"v": 1}, _future())
        first.close()

        second = SqliteCache(path)
        assert second.get("icon") == {"v": 1}
        second.close()

    def test_purge_expired(self, sqlite_cache: SqliteCache):
        sqlite_cache.set("old", {"v": 1}, _past())
        sqlite_cache.set("new", {"v": 2}, _future())

        assert sqlite_cache.purge_expired() == 1
        assert len(sqlite_cache) == 1
        assert sqlite_cache.get("new") == {"v": 2}
