"""
Tests for the profile summary.
"""

import dataclasses
from datetime import timedelta, timezone

import pytest

from foliorank.data_models.review import ReviewData
from foliorank.services.leaderboard import LeaderboardAggregator
from foliorank.services.profile import ProfileService
from foliorank.utils.exceptions import ProfileNotFoundError
from foliorank.utils.ranking import UNRANKED

from conftest import NOW


def add_review(repo, reviewer_id, left_id, right_id, xp=20, hours_ago=0, scores=(6, 8)):
    repo.reviews.append(ReviewData(
        reviewer_id=reviewer_id, left_portfolio_id=left_id, right_portfolio_id=right_id,
        score_left=scores[0], score_right=scores[1],
        feedback_left=f"left notes from {reviewer_id}", feedback_right=f"right notes from {reviewer_id}",
        xp_awarded=xp, created_at=NOW - timedelta(hours=hours_ago), id=len(repo.reviews) + 1,
        xp_credited=True,
    ))


@pytest.fixture
def service(repo, clock):
    leaderboard = LeaderboardAggregator(repo, cache_ttl=0, tz=timezone.utc, clock=clock)
    return ProfileService(repo, leaderboard=leaderboard, tz=timezone.utc, clock=clock)


class TestProfileSummary:
    """Tests for assembling the profile page."""

    async def test_basic_fields_and_rank(self, repo, service):
        add_review(repo, "bob", 1, 5, xp=40)
        add_review(repo, "carol", 2, 3, xp=20)
        repo.profiles["bob"] = dataclasses.replace(
            repo.profiles["bob"], username="Bobby", avatar_url="https://example.com/bob.png", xp=40
        )

        summary = await service.get_profile_summary("bob")

        assert summary.username == "Bobby"
        assert summary.avatar_url == "https://example.com/bob.png"
        assert summary.xp == 40
        assert summary.rank == 1
        assert summary.total_users == 3

    async def test_portfolios_newest_first(self, service):
        summary = await service.get_profile_summary("alice")

        assert [p.id for p in summary.portfolios] == [1, 2]

    async def test_received_feedback_covers_both_sides(self, repo, service):
        add_review(repo, "bob", 1, 5, hours_ago=2, scores=(9, 3))
        add_review(repo, "carol", 3, 2, hours_ago=1, scores=(4, 7))

        summary = await service.get_profile_summary("alice")

        assert [(f.reviewer_name, f.portfolio_id, f.score) for f in summary.received_feedback] == [
            ("carol", 2, 7),
            ("bob", 1, 9),
        ]
        assert summary.received_feedback[0].feedback == "right notes from carol"
        assert summary.received_feedback[1].portfolio_link == "https://example.com/1"

    async def test_own_portfolios_on_both_sides_yield_two_items(self, repo, service):
        add_review(repo, "bob", 1, 2)

        summary = await service.get_profile_summary("alice")

        assert sorted(f.portfolio_id for f in summary.received_feedback) == [1, 2]

    async def test_user_without_portfolios(self, repo, service):
        repo.add_profile("dave")

        summary = await service.get_profile_summary("dave")

        assert summary.portfolios == []
        assert summary.received_feedback == []
        assert "list_reviews_for_portfolios" not in repo.calls

    async def test_unknown_user_raises(self, service):
        with pytest.raises(ProfileNotFoundError):
            await service.get_profile_summary("ghost")

    async def test_profile_missing_from_aggregate_is_unranked(self, repo, service):
        original = repo.get_leaderboard_aggregate

        async def without_alice(month_start, week_start):
            rows = await original(month_start, week_start)
            return [row for row in rows if row.user_id != "alice"]

        repo.get_leaderboard_aggregate = without_alice

        summary = await service.get_profile_summary("alice")

        assert summary.rank is UNRANKED
