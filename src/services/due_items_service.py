"""
Due Items Service

Decides which vocabulary items a user should practise next.

An item is due for a user if:
1. It has a translation in the requested source language (hard filter), and
2. It has never been reviewed, or its next_review_date is on or before today.

The SQL query narrows the catalog to due candidates; select_due_batch() then
orders them (never-reviewed first, then oldest due date first, random order
among equal dates) and cuts the batch. Both use the same rules so the pure
function can be tested without a database.
"""

import logging
import random
from datetime import date
from typing import Optional, List, Dict, Any, Tuple

import psycopg2

from config.config import DUE_BATCH_SIZE, EPOCH_DATE
from config.languages import SourceLanguage
from middleware.metrics import due_batch_size
from services.errors import StorageError
from utils.clock import get_today
from utils.database import db_fetch_all, db_fetch_scalar

logger = logging.getLogger(__name__)


def build_due_items_base_query(
    user_id: str,
    source_language: SourceLanguage,
    today: date,
    lesson: Optional[str] = None
) -> Tuple[str, List]:
    """
    Build FROM/WHERE clauses shared by the due-batch fetch and the due count.

    The source column comes from the SourceLanguage table, never from request
    text.

    Returns:
        Tuple of (from_where_clause, params_list)

    Example:
        from_where, params = build_due_items_base_query(user_id, SourceLanguage.GERMAN, today)
        count_query = f"SELECT COUNT(*) AS due_count {from_where}"
    """
    source_column = source_language.column

    lesson_clause = ""
    lesson_params = []
    if lesson:
        lesson_clause = "AND v.lesson = %s"
        lesson_params = [lesson]

    from_where_clause = f"""
        FROM vocabulary v
        LEFT JOIN review_records r
            ON r.vocabulary_id = v.id AND r.user_id = %s
        WHERE v.{source_column} IS NOT NULL
        AND v.{source_column} <> ''
        AND COALESCE(r.next_review_date, %s) <= %s
        {lesson_clause}
    """

    params = [user_id, EPOCH_DATE, today] + lesson_params
    return from_where_clause, params


def is_due(next_review_date: Optional[date], today: date) -> bool:
    """A missing record (None) or the epoch sentinel is always due."""
    return next_review_date is None or next_review_date <= today


def select_due_batch(
    rows: List[Dict[str, Any]],
    today: date,
    batch_size: int = DUE_BATCH_SIZE,
    rng: Optional[random.Random] = None
) -> List[Dict[str, Any]]:
    """
    Order due candidates and cut a batch.

    Args:
        rows: Candidate rows with 'source_term' and 'next_review_date'
              (None when the item has no review record)
        today: Calendar date used for the due check
        batch_size: Maximum number of items returned
        rng: Random source for tie-breaking (default: module random)

    Returns:
        Up to batch_size rows, never-reviewed first, then by due date
        ascending, ties in random order. Empty list when nothing is due.
    """
    rng = rng or random

    due_rows = [
        row for row in rows
        if row.get('source_term') and is_due(row.get('next_review_date'), today)
    ]

    # Fresh permutation per call, then a stable sort keeps it within equal keys
    rng.shuffle(due_rows)
    due_rows.sort(key=lambda row: (
        row.get('next_review_date') is not None,
        row.get('next_review_date') or EPOCH_DATE,
    ))

    return due_rows[:max(batch_size, 0)]


def fetch_due_batch(
    user_id: str,
    source_language: SourceLanguage,
    lesson: Optional[str] = None,
    batch_size: int = DUE_BATCH_SIZE,
    today: Optional[date] = None
) -> List[Dict[str, Any]]:
    """
    Get the ordered batch of items due for a user in one source language.

    Returns:
        List of dicts: id, target_term, source_term, lesson, srs_level,
        next_review_date, last_reviewed_at. Empty when nothing is due.

    Raises:
        StorageError: If the candidate query fails
    """
    if today is None:
        today = get_today()

    from_where, params = build_due_items_base_query(user_id, source_language, today, lesson)

    try:
        rows = db_fetch_all(f"""
            SELECT
                v.id,
                v.amharic_word AS target_term,
                v.{source_language.column} AS source_term,
                v.lesson,
                COALESCE(r.srs_level, 0) AS srs_level,
                r.next_review_date,
                r.last_reviewed_at
            {from_where}
        """, tuple(params))
    except psycopg2.Error as e:
        raise StorageError(operation='fetch_due_batch') from e

    batch = select_due_batch(rows, today, batch_size)
    due_batch_size.observe(len(batch))

    logger.info(
        f"Due batch for user_id={user_id}, language={source_language.value}, lesson={lesson}: "
        f"{len(batch)} of {len(rows)} due candidates"
    )
    return batch


def count_due_items(
    user_id: str,
    source_language: SourceLanguage,
    lesson: Optional[str] = None,
    today: Optional[date] = None
) -> int:
    """Count all items currently due for the user, without the batch limit."""
    if today is None:
        today = get_today()

    from_where, params = build_due_items_base_query(user_id, source_language, today, lesson)

    try:
        count = db_fetch_scalar(f"SELECT COUNT(*) AS due_count {from_where}", tuple(params))
    except psycopg2.Error as e:
        raise StorageError(operation='count_due_items') from e

    return count or 0
