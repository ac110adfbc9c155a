"""
Pytest fixtures for the FolioRank review engine tests.

Service tests run against an in-memory fake repository; repository tests use a
throwaway SQLite file through aiosqlite.
"""

import dataclasses
from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio

from foliorank.data_models.leaderboard import LeaderboardEntry
from foliorank.data_models.profile import ProfileData
from foliorank.data_models.review import PortfolioData
from foliorank.database.database import Database
from foliorank.database.repository import Repository
from foliorank.database.sql_repository import SQLAlchemyRepository
from foliorank.utils.exceptions import PersistenceError, ProfileNotFoundError

# Wednesday; the week started Monday 2026-10-12 and the month on 2026-10-01
NOW = datetime(2026, 10, 14, 12, 0, tzinfo=timezone.utc)


class FakeRepository(Repository):
    """In-memory repository that records every call made to it."""
    
    def __init__(self):
        self.profiles = {}
        self.portfolios = {}
        self.reviews = []
        self.calls = []
        self.fail_insert = False
        self.fail_credit = None  # Exception instance to raise from credit_xp
    
    # Setup helpers, not part of the contract
    
    def add_profile(self, user_id, username=None, avatar_url=None, xp=0, created_at=None):
        self.profiles[user_id] = ProfileData(
            user_id=user_id,
            username=username or user_id,
            avatar_url=avatar_url,
            xp=xp,
            created_at=created_at or NOW - timedelta(days=365),
        )
    
    def add_portfolio(self, portfolio_id, user_id, title=None, created_at=None):
        self.portfolios[portfolio_id] = PortfolioData(
            id=portfolio_id,
            user_id=user_id,
            title=title or f"Portfolio {portfolio_id}",
            link=f"https://example.com/{portfolio_id}",
            niche="Design",
            image=None,
            created_at=created_at or NOW - timedelta(hours=portfolio_id),
        )
    
    def writes(self):
        return [name for name in self.calls if name in ("insert_review", "credit_xp")]
    
    # Contract
    
    async def list_candidate_portfolios(self, exclude_owner, limit):
        self.calls.append("list_candidate_portfolios")
        pool = [p for p in self.portfolios.values() if p.user_id != exclude_owner]
        pool.sort(key=lambda p: (p.created_at, p.id), reverse=True)
        return pool[:limit]
    
    async def list_reviewed_portfolio_ids(self, reviewer_id):
        self.calls.append("list_reviewed_portfolio_ids")
        reviewed = set()
        for review in self.reviews:
            if review.reviewer_id == reviewer_id:
                reviewed.update((review.left_portfolio_id, review.right_portfolio_id))
        return reviewed
    
    async def get_portfolios(self, portfolio_ids):
        self.calls.append("get_portfolios")
        return {pid: self.portfolios[pid] for pid in portfolio_ids if pid in self.portfolios}
    
    async def insert_review(self, review):
        self.calls.append("insert_review")
        if self.fail_insert:
            raise PersistenceError("review insert", "connection reset")
        review_id = len(self.reviews) + 1
        self.reviews.append(dataclasses.replace(review, id=review_id, xp_credited=False))
        return review_id
    
    async def credit_xp(self, user_id, amount, review_id=None):
        self.calls.append("credit_xp")
        if self.fail_credit is not None:
            raise self.fail_credit
        if user_id not in self.profiles:
            raise ProfileNotFoundError(user_id)
        if review_id is not None:
            index = next(i for i, r in enumerate(self.reviews) if r.id == review_id)
            if self.reviews[index].xp_credited:
                return False
            self.reviews[index] = dataclasses.replace(self.reviews[index], xp_credited=True)
        profile = self.profiles[user_id]
        self.profiles[user_id] = dataclasses.replace(profile, xp=profile.xp + amount)
        return True
    
    async def count_reviews_since(self, user_id, since):
        self.calls.append("count_reviews_since")
        return sum(1 for r in self.reviews if r.reviewer_id == user_id and r.created_at >= since)
    
    async def list_uncredited_reviews(self, reviewer_id):
        self.calls.append("list_uncredited_reviews")
        return [r for r in self.reviews if r.reviewer_id == reviewer_id and not r.xp_credited]
    
    async def get_leaderboard_aggregate(self, month_start, week_start):
        self.calls.append("get_leaderboard_aggregate")
        rows = []
        for profile in self.profiles.values():
            mine = [r for r in self.reviews if r.reviewer_id == profile.user_id]
            rows.append(LeaderboardEntry(
                user_id=profile.user_id,
                username=profile.username,
                avatar_url=profile.avatar_url,
                total_xp=sum(r.xp_awarded for r in mine),
                month_xp=sum(r.xp_awarded for r in mine if r.created_at >= month_start),
                week_xp=sum(r.xp_awarded for r in mine if r.created_at >= week_start),
                joined_at=profile.created_at,
            ))
        return rows
    
    async def get_profile(self, user_id):
        self.calls.append("get_profile")
        return self.profiles.get(user_id)
    
    async def get_usernames(self, user_ids):
        self.calls.append("get_usernames")
        return {uid: self.profiles[uid].username for uid in user_ids if uid in self.profiles}
    
    async def list_portfolios_by_owner(self, user_id):
        self.calls.append("list_portfolios_by_owner")
        owned = [p for p in self.portfolios.values() if p.user_id == user_id]
        return sorted(owned, key=lambda p: (p.created_at, p.id), reverse=True)
    
    async def list_reviews_for_portfolios(self, portfolio_ids):
        self.calls.append("list_reviews_for_portfolios")
        ids = set(portfolio_ids)
        matched = [r for r in self.reviews if r.left_portfolio_id in ids or r.right_portfolio_id in ids]
        return sorted(matched, key=lambda r: (r.created_at, r.id), reverse=True)


@pytest.fixture
def clock():
    """Fixed clock at NOW."""
    return lambda: NOW


@pytest.fixture
def repo():
    """Fake repository with three reviewers and six portfolios."""
    repository = FakeRepository()
    repository.add_profile("alice", created_at=NOW - timedelta(days=300))
    repository.add_profile("bob", created_at=NOW - timedelta(days=200))
    repository.add_profile("carol", created_at=NOW - timedelta(days=100))
    for portfolio_id, owner in enumerate(["alice", "alice", "bob", "bob", "carol", "carol"], start=1):
        repository.add_portfolio(portfolio_id, owner)
    return repository


@pytest.fixture
def long_feedback():
    """Feedback texts by XP bucket."""
    return {
        0: "Nice.",
        10: "x" * 51,
        15: "x" * 151,
        20: "x" * 301,
    }


@pytest_asyncio.fixture
async def db(tmp_path):
    """Fresh SQLite database for each test."""
    database = Database(f"sqlite:///{tmp_path / 'foliorank_test.db'}")
    await database.initialize()
    yield database
    await database.close()


@pytest.fixture
def sql_repo(db):
    return SQLAlchemyRepository(db)
