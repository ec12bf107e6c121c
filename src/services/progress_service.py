"""
Progress Ledger

Per-user cumulative counters: experience points, current daily streak,
longest streak and last activity date. A row is created at registration
(services.user_service) and only updated here; a missing row is a lookup
failure, never silently created.
"""

import logging
from datetime import date
from typing import NamedTuple, Optional, Dict, Any

import psycopg2

from config.config import SESSION_COMPLETION_XP
from middleware.metrics import (
    sessions_completed_total,
    experience_awarded_total,
    streak_transitions_total,
)
from services.errors import UserNotFoundError, ValidationError, StorageError
from services.streak_service import apply_session_activity
from utils.clock import get_today
from utils.database import db_cursor, db_fetch_one

logger = logging.getLogger(__name__)


class SessionSummary(NamedTuple):
    experience_awarded: int
    total_experience: int
    current_streak: int
    longest_streak: int


def get_progress(user_id: str) -> Dict[str, Any]:
    """
    Get the progress counters for a user.

    Raises:
        UserNotFoundError: If the user has no progress record
    """
    try:
        row = db_fetch_one("""
            SELECT user_id, xp, current_streak, longest_streak, last_activity_date
            FROM user_progress
            WHERE user_id = %s
        """, (user_id,))
    except psycopg2.Error as e:
        raise StorageError(operation='get_progress') from e

    if row is None:
        raise UserNotFoundError(user_id)
    return row


def _add_experience(cur, user_id: str, points: int) -> int:
    cur.execute("""
        UPDATE user_progress
        SET xp = xp + %s, updated_at = NOW()
        WHERE user_id = %s
        RETURNING xp
    """, (points, user_id))
    row = cur.fetchone()

    if row is None:
        raise UserNotFoundError(user_id)
    return row['xp']


def award_experience(user_id: str, points: int, cur=None) -> int:
    """
    Add experience points to a user. No cap, no decay.

    The increment is a single UPDATE, so concurrent awards add up. Pass `cur`
    to run inside a caller's transaction; the caller then owns the commit and
    the experience metric.

    Returns:
        The new experience total

    Raises:
        ValidationError: If points is negative
        UserNotFoundError: If the user has no progress record
    """
    if points < 0:
        raise ValidationError("Experience points cannot be negative", field='points')

    if cur is not None:
        return _add_experience(cur, user_id, points)

    try:
        with db_cursor(commit=True) as own_cur:
            total = _add_experience(own_cur, user_id, points)
    except psycopg2.Error as e:
        raise StorageError(operation='award_experience') from e

    experience_awarded_total.inc(points)
    return total


def record_session_completion(
    user_id: str,
    mode: str,
    score: int,
    total: int,
    today: Optional[date] = None
) -> SessionSummary:
    """
    Close a practice session: award the flat session XP and advance the daily
    streak once.

    The progress row is locked for the whole read-modify-write, so two
    completions racing for the same user apply one after the other.

    Args:
        user_id: UUID of the user
        mode: Exercise mode of the session
        score: Correct answers in the session (recorded in the log only)
        total: Questions in the session
        today: Calendar date of the completion (default: clock today)

    Returns:
        SessionSummary(experience_awarded, total_experience, current_streak, longest_streak)

    Raises:
        UserNotFoundError: If the user has no progress record
    """
    if today is None:
        today = get_today()

    points = SESSION_COMPLETION_XP

    try:
        with db_cursor(commit=True) as cur:
            cur.execute("""
                SELECT xp, current_streak, longest_streak, last_activity_date
                FROM user_progress
                WHERE user_id = %s
                FOR UPDATE
            """, (user_id,))
            progress = cur.fetchone()

            if progress is None:
                raise UserNotFoundError(user_id)

            streak = apply_session_activity(
                progress['current_streak'],
                progress['longest_streak'],
                progress['last_activity_date'],
                today
            )

            if streak.changed:
                cur.execute("""
                    UPDATE user_progress
                    SET current_streak = %s,
                        longest_streak = %s,
                        last_activity_date = %s
                    WHERE user_id = %s
                """, (streak.current_streak, streak.longest_streak, streak.last_activity_date, user_id))

            total_experience = award_experience(user_id, points, cur=cur)
    except psycopg2.Error as e:
        raise StorageError(operation='record_session_completion') from e

    experience_awarded_total.inc(points)
    sessions_completed_total.labels(mode=mode).inc()
    streak_transitions_total.labels(transition=streak.transition).inc()

    logger.info(
        f"Session completed: user_id={user_id}, mode={mode}, score={score}/{total}, "
        f"xp +{points} -> {total_experience}, streak {streak.transition} -> {streak.current_streak} "
        f"(longest {streak.longest_streak})"
    )

    return SessionSummary(
        experience_awarded=points,
        total_experience=total_experience,
        current_streak=streak.current_streak,
        longest_streak=streak.longest_streak
    )
