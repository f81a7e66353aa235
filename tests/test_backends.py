"""Tests for idea_scanner.backends - key-value storage."""

import pytest

from idea_scanner import (
    CookieBackend,
    MemoryBackend,
    SqliteBackend,
    StorageError,
    StorageQuotaError,
    session_cookie_size,
)


class TestMemoryBackend:
    """Tests for MemoryBackend."""

    def test_set_get_remove(self):
        backend = MemoryBackend()
        backend.set('k', 'v')
        assert backend.get('k') == 'v'
        backend.remove('k')
        assert backend.get('k') is None

    def test_remove_missing_is_noop(self):
        MemoryBackend().remove('missing')

    def test_quota(self):
        backend = MemoryBackend(quota_bytes=4)
        backend.set('k', 'abcd')
        with pytest.raises(StorageQuotaError):
            backend.set('k', 'abcde')
        assert backend.get('k') == 'abcd'

    def test_quota_counts_utf8_bytes(self):
        backend = MemoryBackend(quota_bytes=4)
        with pytest.raises(StorageQuotaError):
            backend.set('k', 'عالي')


class TestSqliteBackend:
    """Tests for SqliteBackend."""

    def test_creates_parent_dirs(self, tmp_path):
        db_path = tmp_path / 'nested' / 'kv.db'
        backend = SqliteBackend(db_path)
        backend.open()
        assert db_path.exists()
        backend.close()

    def test_set_get_overwrite(self, tmp_path):
        backend = SqliteBackend(tmp_path / 'kv.db')
        backend.set('k', 'one')
        backend.set('k', 'two')
        assert backend.get('k') == 'two'
        backend.close()

    def test_remove(self, tmp_path):
        backend = SqliteBackend(tmp_path / 'kv.db')
        backend.set('k', 'one')
        backend.remove('k')
        assert backend.get('k') is None
        backend.close()

    def test_persists_across_instances(self, tmp_path):
        first = SqliteBackend(tmp_path / 'kv.db')
        first.set('k', 'kept')
        first.close()
        second = SqliteBackend(tmp_path / 'kv.db')
        assert second.get('k') == 'kept'
        second.close()

    def test_quota(self, tmp_path):
        backend = SqliteBackend(tmp_path / 'kv.db', quota_bytes=10)
        with pytest.raises(StorageQuotaError):
            backend.set('k', 'x' * 11)
        backend.close()

    def test_unopenable_path_raises_storage_error(self, tmp_path):
        blocker = tmp_path / 'file'
        blocker.write_text('not a directory')
        backend = SqliteBackend(blocker / 'kv.db')
        with pytest.raises(StorageError):
            backend.open()


class TestCookieBackend:
    """Tests for CookieBackend."""

    def test_writes_through_to_jar(self):
        jar = {}
        backend = CookieBackend(jar)
        backend.set('k', 'v')
        assert jar == {'k': 'v'}
        assert backend.get('k') == 'v'
        backend.remove('k')
        assert jar == {}

    def test_non_string_value_raises(self):
        with pytest.raises(StorageError):
            CookieBackend({'k': ['list']}).get('k')

    def test_max_value_bytes(self):
        backend = CookieBackend({}, max_value_bytes=3)
        with pytest.raises(StorageQuotaError):
            backend.set('k', 'abcd')

    def test_max_cookie_bytes_counts_whole_jar(self):
        jar = {'consent': 'granted'}
        limit = session_cookie_size({'consent': 'granted', 'k': 'abc'})
        backend = CookieBackend(jar, max_cookie_bytes=limit)
        backend.set('k', 'abc')
        assert jar['k'] == 'abc'
        with pytest.raises(StorageQuotaError):
            backend.set('k', 'abcdefgh')
        assert jar == {'consent': 'granted', 'k': 'abc'}

    def test_session_cookie_size(self):
        assert session_cookie_size({}) == 4
        assert session_cookie_size({'a': 'b'}) == 16
