"""
Review Record Store

One row per (user, vocabulary item) holding the repetition level, the next due
date and the last review timestamp. Rows are created lazily on the first
answer and updated on every answer after that; they are never deleted.

record_answer() runs as a single transaction:
    1. INSERT ... ON CONFLICT DO NOTHING materialises the row (level 0, due at
       the epoch sentinel) if this is the first answer.
    2. SELECT ... FOR UPDATE row-locks it.
    3. The pure scheduler computes the next state from the locked level.
    4. UPDATE writes it back.
Two concurrent answers for the same pair serialise on the row lock, and the
second one computes from the first one's committed level, so no update is
lost. Answers for different items never wait on each other.
"""

import logging
from datetime import date, datetime
from typing import Optional, Dict, Any

import psycopg2
import psycopg2.errors

from config.config import EPOCH_DATE
from middleware.metrics import answers_total
from services.errors import NotFoundError, StorageError
from services.scheduler_service import compute_next_review
from utils.database import db_cursor

logger = logging.getLogger(__name__)


def record_answer(
    user_id: str,
    vocabulary_id: int,
    was_correct: bool,
    today: Optional[date] = None,
    now: Optional[datetime] = None
) -> Dict[str, Any]:
    """
    Apply one answer to the (user, item) review record.

    Args:
        user_id: UUID of the user
        vocabulary_id: Catalog id of the item answered
        was_correct: Whether the answer was correct
        today, now: Injectable clock values (default: clock)

    Returns:
        The updated record: user_id, vocabulary_id, srs_level,
        next_review_date, last_reviewed_at

    Raises:
        NotFoundError: If the user or the item does not exist
        StorageError: On any other database failure
    """
    try:
        with db_cursor(commit=True) as cur:
            cur.execute("""
                INSERT INTO review_records (user_id, vocabulary_id, srs_level, next_review_date)
                VALUES (%s, %s, 0, %s)
                ON CONFLICT (user_id, vocabulary_id) DO NOTHING
            """, (user_id, vocabulary_id, EPOCH_DATE))

            cur.execute("""
                SELECT srs_level
                FROM review_records
                WHERE user_id = %s AND vocabulary_id = %s
                FOR UPDATE
            """, (user_id, vocabulary_id))
            locked = cur.fetchone()

            outcome = compute_next_review(locked['srs_level'], was_correct, today=today, now=now)

            cur.execute("""
                UPDATE review_records
                SET srs_level = %s,
                    next_review_date = %s,
                    last_reviewed_at = %s
                WHERE user_id = %s AND vocabulary_id = %s
                RETURNING user_id, vocabulary_id, srs_level, next_review_date, last_reviewed_at
            """, (outcome.new_level, outcome.next_due_date, outcome.reviewed_at, user_id, vocabulary_id))
            record = cur.fetchone()

    except psycopg2.errors.ForeignKeyViolation as e:
        raise NotFoundError(
            f"User {user_id} or vocabulary item {vocabulary_id} does not exist",
            resource='review_record'
        ) from e
    except psycopg2.Error as e:
        raise StorageError(operation='record_answer') from e

    answers_total.labels(result='correct' if was_correct else 'incorrect').inc()
    logger.info(
        f"Recorded answer: user_id={user_id}, vocabulary_id={vocabulary_id}, "
        f"correct={was_correct}, level {locked['srs_level']} -> {record['srs_level']}, "
        f"next_review_date={record['next_review_date']}"
    )
    return record
