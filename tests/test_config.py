"""
Tests for configuration validation and engine wiring.
"""

import random
from datetime import timezone
from zoneinfo import ZoneInfo

import pytest

from foliorank.config import Config
from foliorank.engine import ReviewEngine


class TestConfig:
    """Tests for Config settings."""

    def test_defaults_validate(self, monkeypatch):
        monkeypatch.setattr(Config, "TIMEZONE", "UTC")
        monkeypatch.setattr(Config, "DAILY_REVIEW_CAP", 10)
        Config.validate()

    def test_utc_timezone(self, monkeypatch):
        monkeypatch.setattr(Config, "TIMEZONE", "utc")
        assert Config.get_timezone() is timezone.utc

    def test_named_timezone(self, monkeypatch):
        monkeypatch.setattr(Config, "TIMEZONE", "Europe/Berlin")
        assert Config.get_timezone() == ZoneInfo("Europe/Berlin")

    def test_unknown_timezone_rejected(self, monkeypatch):
        monkeypatch.setattr(Config, "TIMEZONE", "Mars/Olympus_Mons")
        with pytest.raises(ValueError):
            Config.validate()

    @pytest.mark.parametrize("name, value", [
        ("DAILY_REVIEW_CAP", 0),
        ("CANDIDATE_POOL_SIZE", 1),
        ("LEADERBOARD_CACHE_TTL", -1),
        ("DATABASE_URL", ""),
    ])
    def test_bad_values_rejected(self, monkeypatch, name, value):
        monkeypatch.setattr(Config, "TIMEZONE", "UTC")
        monkeypatch.setattr(Config, name, value)
        with pytest.raises(ValueError):
            Config.validate()


class TestReviewEngine:
    """Tests for wiring the services onto one database."""

    async def test_setup_builds_shared_services(self, tmp_path, monkeypatch):
        monkeypatch.setattr(Config, "TIMEZONE", "UTC")
        engine = ReviewEngine(f"sqlite:///{tmp_path / 'engine.db'}", rng=random.Random(1))
        await engine.setup()
        try:
            await engine.db.create_profile("alice", "Alice")
            await engine.db.create_profile("bob", "Bob")
            first = await engine.db.create_portfolio("bob", "One", "https://one.dev")
            second = await engine.db.create_portfolio("bob", "Two", "https://two.dev")

            pairing = await engine.pair_selector.next_pair("alice")
            review = await engine.review_submitter.submit(
                "alice", pairing.left.id, pairing.right.id, 7, 3, "Clean grid.", "Slow to load."
            )
            summary = await engine.profiles.get_profile_summary("alice")

            assert pairing.portfolio_ids == {first.id, second.id}
            assert engine.review_submitter.rate_limiter is engine.rate_limiter
            assert await engine.rate_limiter.remaining_today("alice") == Config.DAILY_REVIEW_CAP - 1
            assert summary.xp == review.xp_awarded == 10
            assert summary.rank == 1
        finally:
            await engine.close()
