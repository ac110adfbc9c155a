"""
Tests for XP award calculation.
"""

from foliorank.utils.xp import XPScorer


class TestScoreSide:
    """Tests for the per-side feedback buckets."""

    def test_empty_feedback_scores_zero(self):
        assert XPScorer.score_side("") == 0

    def test_none_feedback_scores_zero(self):
        assert XPScorer.score_side(None) == 0

    def test_bucket_lower_edges(self):
        assert XPScorer.score_side("x" * 51) == 10
        assert XPScorer.score_side("x" * 151) == 15
        assert XPScorer.score_side("x" * 301) == 20

    def test_exact_bounds_fall_into_lower_bucket(self):
        assert XPScorer.score_side("x" * 50) == 0
        assert XPScorer.score_side("x" * 150) == 10
        assert XPScorer.score_side("x" * 300) == 15

    def test_whitespace_is_trimmed_before_measuring(self):
        padded = "   " + "x" * 50 + "\n\n  "
        assert XPScorer.score_side(padded) == 0


class TestScore:
    """Tests for the total award."""

    def test_long_and_short_feedback(self):
        assert XPScorer.score("x" * 310, "x" * 60) == 40

    def test_minimum_award_is_completion_bonus(self):
        assert XPScorer.score("ok", "fine") == 10

    def test_maximum_award(self):
        assert XPScorer.score("x" * 1000, "y" * 1000) == 50

    def test_sides_are_scored_independently(self):
        assert XPScorer.score("x" * 151, "x" * 20) == XPScorer.score("x" * 20, "x" * 151) == 25

    def test_deterministic(self):
        text = "Clear hierarchy, but the hero image overwhelms the call to action. " * 3
        assert XPScorer.score(text, text) == XPScorer.score(text, text)
