"""
Streak Service - daily streak state machine

The streak counts consecutive calendar days with at least one completed
session. It is advanced only by a session-completion event; answering single
questions never touches it, so replaying answers on the same day cannot
inflate it.

States, evaluated against today:
    NO_ACTIVITY       last_activity_date is None
    ACTIVE_TODAY      last activity was today            -> no change
    ACTIVE_YESTERDAY  last activity was yesterday        -> streak + 1
    LAPSED            anything else (gap >= 2 days, or a
                      last_activity_date in the future)  -> streak = 1

NO_ACTIVITY also starts the streak at 1. After a change the longest streak is
raised to the new streak if it is larger. An unchanged streak returns the stored
counters as they are, since nothing is written back for it.
"""

from datetime import date
from enum import Enum
from typing import NamedTuple, Optional

from utils.clock import days_between


class StreakState(Enum):
    NO_ACTIVITY = 'no_activity'
    ACTIVE_TODAY = 'active_today'
    ACTIVE_YESTERDAY = 'active_yesterday'
    LAPSED = 'lapsed'


class StreakUpdate(NamedTuple):
    current_streak: int
    longest_streak: int
    last_activity_date: date
    transition: str  # started|unchanged|extended|reset

    @property
    def changed(self) -> bool:
        return self.transition != 'unchanged'


def classify_streak(last_activity_date: Optional[date], today: date) -> StreakState:
    if last_activity_date is None:
        return StreakState.NO_ACTIVITY

    gap = days_between(last_activity_date, today)
    if gap == 0:
        return StreakState.ACTIVE_TODAY
    if gap == 1:
        return StreakState.ACTIVE_YESTERDAY
    return StreakState.LAPSED


def apply_session_activity(
    current_streak: int,
    longest_streak: int,
    last_activity_date: Optional[date],
    today: date
) -> StreakUpdate:
    """
    Apply one session completion on `today` to the streak counters.

    Calling this twice on the same day returns the same counters the second
    time.
    """
    state = classify_streak(last_activity_date, today)

    if state == StreakState.ACTIVE_TODAY:
        return StreakUpdate(current_streak, longest_streak, last_activity_date, 'unchanged')

    if state == StreakState.ACTIVE_YESTERDAY:
        new_streak, transition = current_streak + 1, 'extended'
    elif state == StreakState.NO_ACTIVITY:
        new_streak, transition = 1, 'started'
    else:
        new_streak, transition = 1, 'reset'

    return StreakUpdate(new_streak, max(longest_streak, new_streak), today, transition)
