#!/usr/bin/env python3

import unittest
import sys
import os
from datetime import date, datetime, timedelta

# Add the src directory to Python path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from services.scheduler_service import compute_next_review, interval_for_level, NextReview


class TestSchedulerService(unittest.TestCase):
    """Unit tests for the spaced repetition interval policy"""

    def setUp(self):
        self.today = date(2024, 1, 1)
        self.now = datetime(2024, 1, 1, 12, 0, 0)

    def review(self, level, correct):
        return compute_next_review(level, correct, today=self.today, now=self.now)

    def test_incorrect_answer_resets_level_and_is_due_today(self):
        for level in [0, 1, 2, 3, 7, 25]:
            result = self.review(level, False)
            self.assertEqual(result.new_level, 0)
            self.assertEqual(result.next_due_date, self.today)

    def test_correct_answer_increments_level(self):
        for level in [0, 1, 2, 3, 7, 25]:
            self.assertEqual(self.review(level, True).new_level, level + 1)

    def test_first_two_intervals(self):
        """New level 1 waits 1 day, new level 2 waits 6 days"""
        self.assertEqual(self.review(0, True).next_due_date, self.today + timedelta(days=1))
        self.assertEqual(self.review(1, True).next_due_date, self.today + timedelta(days=6))

    def test_level_two_correct_waits_five_days(self):
        """max(round(2 * 2.5), 3) = 5"""
        result = self.review(2, True)
        self.assertEqual(result.new_level, 3)
        self.assertEqual(result.next_due_date, date(2024, 1, 6))

    def test_multiplier_rounds_half_up(self):
        """5 * 2.5 = 12.5 rounds to 13, 3 * 2.5 = 7.5 rounds to 8"""
        self.assertEqual(self.review(5, True).next_due_date, self.today + timedelta(days=13))
        self.assertEqual(self.review(3, True).next_due_date, self.today + timedelta(days=8))

    def test_interval_strictly_grows_from_level_two(self):
        previous = None
        for level in range(2, 60):
            interval = (self.review(level, True).next_due_date - self.today).days
            self.assertGreaterEqual(interval, level + 1)
            if previous is not None:
                self.assertGreater(interval, previous, f"interval did not grow at level {level}")
            previous = interval

    def test_interval_for_level_table(self):
        self.assertEqual(interval_for_level(0), 0)
        self.assertEqual(interval_for_level(1), 1)
        self.assertEqual(interval_for_level(2), 6)
        self.assertEqual(interval_for_level(3), 5)
        self.assertEqual(interval_for_level(4), 8)

    def test_reviewed_at_always_now(self):
        self.assertEqual(self.review(4, True).reviewed_at, self.now)
        self.assertEqual(self.review(4, False).reviewed_at, self.now)

    def test_returns_named_tuple(self):
        result = self.review(0, True)
        self.assertIsInstance(result, NextReview)
        new_level, next_due_date, reviewed_at = result
        self.assertEqual(new_level, 1)

    def test_defaults_to_clock(self):
        """Without injected values the clock supplies today and now"""
        result = compute_next_review(0, False)
        self.assertIsInstance(result.next_due_date, date)
        self.assertIsInstance(result.reviewed_at, datetime)
        self.assertIsNotNone(result.reviewed_at.tzinfo)


if __name__ == '__main__':
    unittest.main()
