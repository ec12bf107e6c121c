#!/usr/bin/env python3

import unittest
import sys
import os
from datetime import date

# Add the src directory to Python path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from services.streak_service import StreakState, classify_streak, apply_session_activity


class TestClassifyStreak(unittest.TestCase):

    def setUp(self):
        self.today = date(2024, 3, 15)

    def test_states(self):
        self.assertEqual(classify_streak(None, self.today), StreakState.NO_ACTIVITY)
        self.assertEqual(classify_streak(date(2024, 3, 15), self.today), StreakState.ACTIVE_TODAY)
        self.assertEqual(classify_streak(date(2024, 3, 14), self.today), StreakState.ACTIVE_YESTERDAY)
        self.assertEqual(classify_streak(date(2024, 3, 13), self.today), StreakState.LAPSED)

    def test_future_date_counts_as_lapsed(self):
        self.assertEqual(classify_streak(date(2024, 3, 20), self.today), StreakState.LAPSED)

    def test_yesterday_across_month_boundary(self):
        self.assertEqual(
            classify_streak(date(2024, 2, 29), date(2024, 3, 1)),
            StreakState.ACTIVE_YESTERDAY
        )


class TestApplySessionActivity(unittest.TestCase):

    def setUp(self):
        self.today = date(2024, 3, 15)

    def test_first_session_starts_streak(self):
        update = apply_session_activity(0, 0, None, self.today)
        self.assertEqual(update.current_streak, 1)
        self.assertEqual(update.longest_streak, 1)
        self.assertEqual(update.last_activity_date, self.today)
        self.assertEqual(update.transition, 'started')
        self.assertTrue(update.changed)

    def test_activity_yesterday_extends_streak(self):
        """current=3, longest=5, last=yesterday -> current=4, longest=5"""
        update = apply_session_activity(3, 5, date(2024, 3, 14), self.today)
        self.assertEqual(update.current_streak, 4)
        self.assertEqual(update.longest_streak, 5)
        self.assertEqual(update.last_activity_date, self.today)
        self.assertEqual(update.transition, 'extended')

    def test_extending_past_longest_raises_longest(self):
        update = apply_session_activity(5, 5, date(2024, 3, 14), self.today)
        self.assertEqual(update.current_streak, 6)
        self.assertEqual(update.longest_streak, 6)

    def test_gap_resets_streak(self):
        """current=3, longest=5, last=three days ago -> current=1, longest=5"""
        update = apply_session_activity(3, 5, date(2024, 3, 12), self.today)
        self.assertEqual(update.current_streak, 1)
        self.assertEqual(update.longest_streak, 5)
        self.assertEqual(update.last_activity_date, self.today)
        self.assertEqual(update.transition, 'reset')

    def test_same_day_is_unchanged(self):
        update = apply_session_activity(4, 7, self.today, self.today)
        self.assertEqual(update.current_streak, 4)
        self.assertEqual(update.longest_streak, 7)
        self.assertEqual(update.last_activity_date, self.today)
        self.assertEqual(update.transition, 'unchanged')
        self.assertFalse(update.changed)

    def test_same_day_returns_stored_longest(self):
        """Nothing is written for an unchanged streak, so longest must be what is stored"""
        update = apply_session_activity(9, 3, self.today, self.today)
        self.assertEqual(update.current_streak, 9)
        self.assertEqual(update.longest_streak, 3)
        self.assertFalse(update.changed)

    def test_idempotent_within_a_day(self):
        first = apply_session_activity(3, 5, date(2024, 3, 14), self.today)
        second = apply_session_activity(
            first.current_streak, first.longest_streak, first.last_activity_date, self.today
        )
        self.assertEqual(first.current_streak, second.current_streak)
        self.assertEqual(first.longest_streak, second.longest_streak)
        self.assertEqual(first.last_activity_date, second.last_activity_date)

    def test_longest_never_below_current(self):
        cases = [
            (0, 0, None),
            (2, 2, date(2024, 3, 14)),
            (9, 3, date(2024, 3, 14)),
            (1, 10, date(2023, 1, 1)),
        ]
        for current, longest, last in cases:
            update = apply_session_activity(current, longest, last, self.today)
            self.assertGreaterEqual(update.longest_streak, update.current_streak)
            self.assertGreaterEqual(update.longest_streak, longest)

    def test_consecutive_days_build_streak(self):
        current, longest, last = 0, 0, None
        for day in range(1, 8):
            update = apply_session_activity(current, longest, last, date(2024, 4, day))
            current, longest, last = update.current_streak, update.longest_streak, update.last_activity_date
        self.assertEqual(current, 7)
        self.assertEqual(longest, 7)


if __name__ == '__main__':
    unittest.main()
