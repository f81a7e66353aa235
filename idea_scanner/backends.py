"""Key-value storage backends for the analysis history.

All backends store strings under string keys and expose the same small
interface: ``open()``, ``close()``, ``get(key)``, ``set(key, value)`` and
``remove(key)``. Failures surface as StorageError so the history store can
recover from them.
"""

import base64
import json
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import MutableMapping, Optional


# Typical browser local storage allowance
DEFAULT_LOCAL_QUOTA_BYTES = 5 * 1024 * 1024


class StorageError(Exception):
    """A backend could not read or write a value."""


class StorageQuotaError(StorageError):
    """A write would exceed the backend's size allowance."""


def _check_quota(key: str, value: str, quota_bytes: Optional[int]) -> None:
    if quota_bytes is None:
        return
    size = len(value.encode('utf-8'))
    if size > quota_bytes:
        raise StorageQuotaError(
            f'value for {key!r} is {size} bytes, limit is {quota_bytes}'
        )


class MemoryBackend:
    """In-process dict storage."""

    def __init__(self, quota_bytes: Optional[int] = None):
        self.quota_bytes = quota_bytes
        self._data = {}

    def open(self) -> None:
        pass

    def close(self) -> None:
        pass

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        _check_quota(key, value, self.quota_bytes)
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


class SqliteBackend:
    """Local-storage equivalent kept in a single SQLite table."""

    def __init__(self, db_path, quota_bytes: Optional[int] = DEFAULT_LOCAL_QUOTA_BYTES):
        self.db_path = Path(db_path)
        self.quota_bytes = quota_bytes
        self._conn: Optional[sqlite3.Connection] = None

    def open(self) -> None:
        """Connect and create the table if needed."""
        if self._conn is not None:
            return
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
            self._conn.execute(
                """
                CREATE TABLE IF NOT EXISTS kv (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
                """
            )
            self._conn.commit()
        except (sqlite3.Error, OSError) as exc:
            self._conn = None
            raise StorageError(f'cannot open {self.db_path}: {exc}') from exc

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def _connection(self) -> sqlite3.Connection:
        if self._conn is None:
            self.open()
        return self._conn

    def get(self, key: str) -> Optional[str]:
        try:
            row = self._connection().execute(
                "SELECT value FROM kv WHERE key = ?",
                (key,)
            ).fetchone()
        except sqlite3.Error as exc:
            raise StorageError(f'read of {key!r} failed: {exc}') from exc
        return row[0] if row else None

    def set(self, key: str, value: str) -> None:
        _check_quota(key, value, self.quota_bytes)
        updated_at = datetime.now(timezone.utc).isoformat()
        conn = self._connection()
        try:
            conn.execute(
                """
                INSERT INTO kv (key, value, updated_at) VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value,
                                               updated_at = excluded.updated_at
                """,
                (key, value, updated_at)
            )
            conn.commit()
        except sqlite3.Error as exc:
            raise StorageError(f'write of {key!r} failed: {exc}') from exc

    def remove(self, key: str) -> None:
        conn = self._connection()
        try:
            conn.execute("DELETE FROM kv WHERE key = ?", (key,))
            conn.commit()
        except sqlite3.Error as exc:
            raise StorageError(f'delete of {key!r} failed: {exc}') from exc


def session_cookie_size(jar) -> int:
    """Bytes the jar takes once encoded into a signed session cookie body.

    Matches Starlette's SessionMiddleware, which base64-encodes the
    JSON-serialised session before signing it.
    """
    payload = json.dumps(dict(jar)).encode('utf-8')
    return len(base64.b64encode(payload))


class CookieBackend:
    """Cookie-jar storage over any mutable mapping.

    The API server passes the signed session cookie (``request.session``);
    tests pass a plain dict. ``max_cookie_bytes`` bounds the encoded size
    of the whole jar.
    """

    def __init__(self, jar: MutableMapping, max_value_bytes: Optional[int] = None,
                 max_cookie_bytes: Optional[int] = None):
        self.jar = jar
        self.max_value_bytes = max_value_bytes
        self.max_cookie_bytes = max_cookie_bytes

    def open(self) -> None:
        pass

    def close(self) -> None:
        pass

    def get(self, key: str) -> Optional[str]:
        value = self.jar.get(key)
        if value is None:
            return None
        if not isinstance(value, str):
            raise StorageError(f'cookie {key!r} does not hold a string')
        return value

    def set(self, key: str, value: str) -> None:
        _check_quota(key, value, self.max_value_bytes)
        if self.max_cookie_bytes is not None:
            candidate = dict(self.jar)
            candidate[key] = value
            size = session_cookie_size(candidate)
            if size > self.max_cookie_bytes:
                raise StorageQuotaError(
                    f'cookie would be {size} bytes, limit is {self.max_cookie_bytes}'
                )
        self.jar[key] = value

    def remove(self, key: str) -> None:
        self.jar.pop(key, None)
