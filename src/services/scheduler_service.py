"""
Scheduler Service - spaced repetition interval policy

Maps (current level, correctness) to the next repetition level, the next due
date and the review timestamp. Pure: "today" and "now" are injectable and no
storage is touched, so the policy can be exercised in isolation.

Policy (simplified SM-2 curve, no ease factors):
- Incorrect answer: level resets to 0 and the item is due again today.
- Correct answer: level goes up by one. New level 1 waits 1 day, new level 2
  waits 6 days, anything above waits round(current_level * 2.5) days but never
  less than current_level + 1 days.
"""

from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import NamedTuple, Optional

from config.config import INITIAL_INTERVALS, INTERVAL_MULTIPLIER
from utils.clock import get_today, get_now, add_days


class NextReview(NamedTuple):
    new_level: int
    next_due_date: date
    reviewed_at: datetime


def _round_half_up(value: float) -> int:
    # round() would send 12.5 to 12; intervals always round .5 upward
    return int(Decimal(str(value)).quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def interval_for_level(new_level: int) -> int:
    """
    Days until the next review for an item that just reached new_level.

    Level 0 (just failed) is due immediately, so its interval is 0.
    """
    if new_level <= 0:
        return 0
    if new_level <= len(INITIAL_INTERVALS):
        return INITIAL_INTERVALS[new_level - 1]

    previous_level = new_level - 1
    return max(_round_half_up(previous_level * INTERVAL_MULTIPLIER), previous_level + 1)


def compute_next_review(
    current_level: int,
    was_correct: bool,
    today: Optional[date] = None,
    now: Optional[datetime] = None
) -> NextReview:
    """
    Compute the review record state after one answer.

    Args:
        current_level: Level stored before this answer (0 when no record exists)
        was_correct: Whether the learner answered correctly
        today: Calendar date the answer counts for (defaults to clock today)
        now: Review timestamp (defaults to clock now)

    Returns:
        NextReview(new_level, next_due_date, reviewed_at)

    Example:
        >>> compute_next_review(2, True, today=date(2024, 1, 1)).next_due_date
        datetime.date(2024, 1, 6)
    """
    if today is None:
        today = get_today()
    if now is None:
        now = get_now()

    new_level = current_level + 1 if was_correct else 0
    next_due_date = add_days(today, interval_for_level(new_level))

    return NextReview(new_level, next_due_date, now)
