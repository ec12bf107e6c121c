"""
Shared fakes for unit tests.

Services reach the database only through utils.database.db_cursor /
db_fetch_*; tests patch those names inside the service module under test and
hand in one of the fakes below.
"""

import threading
from contextlib import contextmanager
from datetime import date


TEST_USER_ID = "123e4567-e89b-12d3-a456-426614174000"


class ScriptedCursor:
    """Cursor that records executed SQL and returns queued fetchone() rows."""

    def __init__(self, fetchone_results=None, execute_error=None):
        self.executed = []
        self._results = list(fetchone_results or [])
        self._execute_error = execute_error

    def execute(self, query, params=None):
        self.executed.append((" ".join(query.split()), params))
        if self._execute_error is not None:
            raise self._execute_error

    def fetchone(self):
        return self._results.pop(0) if self._results else None

    def statements(self):
        return [query for query, _ in self.executed]


def scripted_db_cursor(cursor, commit_error=None):
    """Stand-in for db_cursor(commit=...) that always yields `cursor`; `commit_error` is raised on commit."""
    @contextmanager
    def _db_cursor(commit=False):
        yield cursor
        if commit and commit_error is not None:
            raise commit_error
    return _db_cursor


class InMemoryReviewStore:
    """
    Minimal model of the review_records table with PostgreSQL row locking.

    The row lock taken by SELECT ... FOR UPDATE is held until the transaction
    (the db_cursor block) ends, like in PostgreSQL.
    """

    def __init__(self):
        self.rows = {}
        self._locks = {}
        self._guard = threading.Lock()

    def _lock_for(self, key):
        with self._guard:
            return self._locks.setdefault(key, threading.Lock())

    @contextmanager
    def db_cursor(self, commit=False):
        cursor = _ReviewStoreCursor(self)
        try:
            yield cursor
        finally:
            for lock in cursor.held_locks:
                lock.release()


class _ReviewStoreCursor:

    def __init__(self, store):
        self.store = store
        self.held_locks = []
        self._result = None

    def execute(self, query, params=None):
        sql = " ".join(query.split())
        store = self.store

        if sql.startswith("INSERT INTO review_records"):
            user_id, vocabulary_id, epoch = params
            with store._guard:
                store.rows.setdefault((user_id, vocabulary_id), {
                    'user_id': user_id,
                    'vocabulary_id': vocabulary_id,
                    'srs_level': 0,
                    'next_review_date': epoch,
                    'last_reviewed_at': None,
                })
            self._result = None
        elif "FOR UPDATE" in sql:
            key = tuple(params)
            lock = store._lock_for(key)
            lock.acquire()
            self.held_locks.append(lock)
            self._result = {'srs_level': store.rows[key]['srs_level']}
        elif sql.startswith("UPDATE review_records"):
            level, due, reviewed_at, user_id, vocabulary_id = params
            row = store.rows[(user_id, vocabulary_id)]
            row.update(srs_level=level, next_review_date=due, last_reviewed_at=reviewed_at)
            self._result = dict(row)
        else:
            raise AssertionError(f"Unexpected SQL: {sql}")

    def fetchone(self):
        return self._result


def progress_row(xp=0, current_streak=0, longest_streak=0, last_activity_date=None):
    return {
        'xp': xp,
        'current_streak': current_streak,
        'longest_streak': longest_streak,
        'last_activity_date': last_activity_date,
    }


def catalog_row(item_id, source_term="Wasser", next_review_date=None, srs_level=0, lesson="basics"):
    return {
        'id': item_id,
        'target_term': f"amharic-{item_id}",
        'source_term': source_term,
        'lesson': lesson,
        'srs_level': srs_level,
        'next_review_date': next_review_date,
        'last_reviewed_at': None,
    }


TODAY = date(2024, 3, 15)
