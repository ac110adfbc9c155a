"""Wires the review engine services onto one database."""

import random
from typing import Optional

from foliorank.config import Config
from foliorank.database.database import Database
from foliorank.database.sql_repository import SQLAlchemyRepository
from foliorank.services import (
    DailyReviewLimiter, LeaderboardAggregator, PairSelector, ProfileService, ReviewSubmitter
)
from foliorank.utils.logger import setup_logger


class ReviewEngine:
    """Owns the database connection and the services built on it."""
    
    def __init__(self, database_url: Optional[str] = None, rng: Optional[random.Random] = None):
        self.logger = setup_logger(__name__)
        self.db = Database(database_url)
        self.rng = rng
        self.repository: Optional[SQLAlchemyRepository] = None
        self.pair_selector: Optional[PairSelector] = None
        self.rate_limiter: Optional[DailyReviewLimiter] = None
        self.review_submitter: Optional[ReviewSubmitter] = None
        self.leaderboard: Optional[LeaderboardAggregator] = None
        self.profiles: Optional[ProfileService] = None
    
    async def setup(self):
        """Connect to the database and build the services"""
        self.logger.info("Setting up review engine...")
        Config.validate()
        
        await self.db.initialize()
        self.repository = SQLAlchemyRepository(self.db)
        
        self.pair_selector = PairSelector(self.repository, rng=self.rng)
        self.rate_limiter = DailyReviewLimiter(self.repository)
        self.review_submitter = ReviewSubmitter(self.repository, rate_limiter=self.rate_limiter)
        self.leaderboard = LeaderboardAggregator(self.repository)
        self.profiles = ProfileService(self.repository, leaderboard=self.leaderboard)
        
        self.logger.info("Review engine setup complete!")
    
    async def close(self):
        await self.db.close()
