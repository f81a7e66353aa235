"""Capped, versioned history of past analyses.

The store owns one slot in a key-value backend and keeps the whole history
there as a JSON wrapper::

    {"version": "2.0", "lastUpdated": "...", "results": [...]}

Results are newest first and capped at ``max_items``. A bare JSON array
(the pre-2.0 format) is migrated on read; anything else is treated as
corruption and the slot is reset. No operation raises to the caller:
storage problems are logged and reported through return values.
"""

import json
import logging
import re
from datetime import date, datetime
from typing import Optional

from .backends import CookieBackend, SqliteBackend, StorageError
from .models import AnalysisHistoryItem, format_timestamp, parse_timestamp, utc_now
from .patterns import canonical_innovation_level


log = logging.getLogger(__name__)


HISTORY_KEY = 'saascan_analysis_history'
CONSENT_KEY = 'saascan_cookie_consent'
STORAGE_VERSION = '2.0'

COOKIE_MAX_ITEMS = 50
LOCAL_MAX_ITEMS = 100
RETRY_ITEMS = 10

_RECOVERABLE = (StorageError, OSError, TypeError, ValueError)

_DATE_ONLY = re.compile(r'\d{4}-\d{2}-\d{2}')


def _as_datetime(value) -> Optional[datetime]:
    if isinstance(value, date):
        return parse_timestamp(value.isoformat())
    return parse_timestamp(value)


def _is_whole_day(value) -> bool:
    """True for a bare calendar date, as a ``date`` or 'YYYY-MM-DD' string."""
    if isinstance(value, datetime):
        return False
    if isinstance(value, date):
        return True
    return isinstance(value, str) and _DATE_ONLY.fullmatch(value.strip()) is not None


class AnalysisHistoryStore:
    """History CRUD, queries and import/export over a storage backend."""

    def __init__(self, backend, max_items: int = LOCAL_MAX_ITEMS,
                 key: str = HISTORY_KEY, clock=utc_now):
        if max_items < 1:
            raise ValueError('max_items must be positive')
        self.backend = backend
        self.max_items = max_items
        self.key = key
        self.clock = clock

    # -- lifecycle ---------------------------------------------------------

    def open(self) -> 'AnalysisHistoryStore':
        self.backend.open()
        return self

    def close(self) -> None:
        self.backend.close()

    def __enter__(self) -> 'AnalysisHistoryStore':
        return self.open()

    def __exit__(self, *exc_info) -> None:
        self.close()

    # -- persistence -------------------------------------------------------

    def _read_raw(self) -> Optional[str]:
        try:
            return self.backend.get(self.key)
        except _RECOVERABLE as exc:
            log.error('Failed to read analysis history: %s', exc)
            self._reset()
            return None

    def _reset(self) -> None:
        try:
            self.backend.remove(self.key)
        except _RECOVERABLE as exc:
            log.error('Failed to clear analysis history slot: %s', exc)

    def _load(self) -> list:
        raw = self._read_raw()
        if raw is None:
            return []
        try:
            data = json.loads(raw)
        except ValueError:
            log.warning('Corrupted analysis history detected, resetting...')
            self._reset()
            return []

        if isinstance(data, list):
            entries, migrate = data, True
        elif isinstance(data, dict) and isinstance(data.get('results'), list):
            entries, migrate = data['results'], False
        else:
            log.warning('Corrupted analysis history detected, resetting...')
            self._reset()
            return []

        items = []
        for entry in entries:
            item = AnalysisHistoryItem.from_dict(entry)
            if item is None:
                log.warning('Dropping malformed history entry')
                continue
            items.append(item)

        if migrate:
            log.info('Migrating %d analyses to history format %s', len(items), STORAGE_VERSION)
            self._persist(items)
        return items[:self.max_items]

    def _serialise(self, items: list) -> str:
        return json.dumps({
            'version': STORAGE_VERSION,
            'lastUpdated': format_timestamp(self.clock()),
            'results': [item.to_dict() for item in items],
        }, ensure_ascii=False)

    def _persist(self, items: list) -> bool:
        items = items[:self.max_items]
        try:
            self.backend.set(self.key, self._serialise(items))
            return True
        except _RECOVERABLE as exc:
            log.error('Failed to save analysis history: %s', exc)

        try:
            self.backend.set(self.key, self._serialise(items[:RETRY_ITEMS]))
        except _RECOVERABLE as exc:
            log.error('Failed to save analysis history even with %d items: %s', RETRY_ITEMS, exc)
            return False
        log.warning('Analysis history trimmed to the %d most recent entries', RETRY_ITEMS)
        return True

    # -- CRUD --------------------------------------------------------------

    def save(self, record) -> bool:
        """Prepend a record (or history item) and persist."""
        try:
            if isinstance(record, AnalysisHistoryItem):
                item = AnalysisHistoryItem.from_dict(record.to_dict())
            else:
                item = AnalysisHistoryItem.from_record(record)
        except (AttributeError, TypeError) as exc:
            log.error('Cannot save analysis: %s', exc)
            return False
        if item is None:
            log.error('Cannot save malformed history item')
            return False
        items = [i for i in self._load() if i.id != item.id]
        return self._persist([item] + items)

    def get_all(self) -> list:
        """Newest-first copies of every stored item."""
        return self._load()

    def get_by_id(self, analysis_id: str) -> Optional[AnalysisHistoryItem]:
        for item in self._load():
            if item.id == analysis_id:
                return item
        return None

    def delete(self, analysis_id: str) -> bool:
        """Remove one item; False when it is absent or the write fails."""
        items = self._load()
        remaining = [i for i in items if i.id != analysis_id]
        if len(remaining) == len(items):
            return False
        return self._persist(remaining)

    def delete_many(self, analysis_ids) -> bool:
        doomed = set(analysis_ids)
        return self._persist([i for i in self._load() if i.id not in doomed])

    def clear(self) -> bool:
        try:
            self.backend.remove(self.key)
        except _RECOVERABLE as exc:
            log.error('Failed to clear analysis history: %s', exc)
            return False
        return True

    # -- queries -----------------------------------------------------------

    def search(self, query: str) -> list:
        """Case-insensitive match over the idea, audience and problem text."""
        needle = (query or '').strip().lower()
        items = self._load()
        if not needle:
            return items

        def matches(item):
            results = item.analysis_results
            haystacks = (item.original_idea, results.get('targetAudience'),
                         results.get('problemsSolved'))
            return any(isinstance(h, str) and needle in h.lower() for h in haystacks)

        return [i for i in items if matches(i)]

    def filter_by_score_range(self, min_score: float, max_score: float) -> list:
        return [i for i in self._load() if min_score <= i.overall_score <= max_score]

    def filter_by_date_range(self, start, end) -> list:
        """Items stamped between ``start`` and ``end`` inclusive.

        Bounds are datetimes, dates or ISO-8601 strings; naive values are
        UTC. A date-only ``end`` covers the whole of that day.
        """
        lower, upper = _as_datetime(start), _as_datetime(end)
        if lower is None or upper is None:
            return []
        if _is_whole_day(end):
            upper = upper.replace(hour=23, minute=59, second=59, microsecond=999999)
        return [i for i in self._load() if lower <= i.moment <= upper]

    def filter_by_innovation_level(self, level: str) -> list:
        wanted = canonical_innovation_level(level)
        matched = []
        for item in self._load():
            raw = item.analysis_results.get('innovationLevel')
            if raw is not None and canonical_innovation_level(raw) == wanted:
                matched.append(item)
        return matched

    # -- import / export ---------------------------------------------------

    def export_as_json(self) -> str:
        return json.dumps([i.to_dict() for i in self._load()], indent=2, ensure_ascii=False)

    def import_from_json(self, text: str) -> bool:
        """Merge valid items from an export; False when none are valid."""
        try:
            data = json.loads(text)
        except (TypeError, ValueError) as exc:
            log.warning('Import rejected, not valid JSON: %s', exc)
            return False
        if isinstance(data, dict) and isinstance(data.get('results'), list):
            data = data['results']
        if not isinstance(data, list):
            log.warning('Import rejected, expected a list of analyses')
            return False

        valid = [item for item in map(AnalysisHistoryItem.from_dict, data) if item]
        if not valid:
            log.warning('Import rejected, no valid analyses found')
            return False
        if len(valid) < len(data):
            log.warning('Import skipped %d invalid entries', len(data) - len(valid))

        existing = self._load()
        seen = {i.id for i in existing}
        merged = list(existing)
        for item in valid:
            if item.id not in seen:
                merged.append(item)
                seen.add(item.id)
        merged.sort(key=lambda i: i.moment, reverse=True)
        return self._persist(merged)

    def get_stats(self) -> dict:
        items = self._load()
        raw = self._read_raw() or ''
        stamps = sorted(i.moment for i in items)
        scores = [i.overall_score for i in items]
        return {
            'total_analyses': len(items),
            'storage_size_kb': round(len(raw.encode('utf-8')) / 1024, 2),
            'oldest_timestamp': format_timestamp(stamps[0]) if stamps else None,
            'newest_timestamp': format_timestamp(stamps[-1]) if stamps else None,
            'average_score': round(sum(scores) / len(scores), 1) if scores else None,
        }


# ---------------------------------------------------------------------------
# Factories and consent
# ---------------------------------------------------------------------------

def cookie_history_store(jar, max_value_bytes: Optional[int] = None,
                         max_cookie_bytes: Optional[int] = None,
                         **kwargs) -> AnalysisHistoryStore:
    """History kept in a cookie jar, capped at 50."""
    backend = CookieBackend(jar, max_value_bytes, max_cookie_bytes)
    return AnalysisHistoryStore(backend,
                                max_items=COOKIE_MAX_ITEMS, **kwargs)


def local_history_store(db_path, **kwargs) -> AnalysisHistoryStore:
    """History kept in a local SQLite file, capped at 100."""
    return AnalysisHistoryStore(SqliteBackend(db_path), max_items=LOCAL_MAX_ITEMS, **kwargs)


def get_cookie_consent(backend) -> Optional[bool]:
    """True/False once the user has answered, None before."""
    try:
        value = backend.get(CONSENT_KEY)
    except _RECOVERABLE as exc:
        log.error('Failed to read cookie consent: %s', exc)
        return None
    if value == 'granted':
        return True
    if value == 'denied':
        return False
    return None


def set_cookie_consent(backend, granted: bool) -> bool:
    try:
        backend.set(CONSENT_KEY, 'granted' if granted else 'denied')
    except _RECOVERABLE as exc:
        log.error('Failed to store cookie consent: %s', exc)
        return False
    return True
