"""
Services package for the FolioRank review engine.

Each service receives a Repository; none of them touches storage directly.
"""

from .base import BaseService
from .leaderboard import LeaderboardAggregator
from .pair_selector import PairSelector
from .profile import ProfileService
from .rate_limiter import DailyReviewLimiter
from .review_submitter import ReviewSubmitter

__all__ = [
    'BaseService',
    'DailyReviewLimiter',
    'LeaderboardAggregator',
    'PairSelector',
    'ProfileService',
    'ReviewSubmitter',
]
