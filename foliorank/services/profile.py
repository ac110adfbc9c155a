"""
Profile service for the profile summary page.

Aggregates a user's stored profile, all-time rank, portfolios and the
feedback other reviewers left on those portfolios.
"""

import logging
from typing import List, Optional

from foliorank.data_models.profile import ProfileSummary, ReceivedFeedback
from foliorank.data_models.review import PortfolioData, ReviewData
from foliorank.database.repository import Repository
from foliorank.services.base import BaseService
from foliorank.services.leaderboard import LeaderboardAggregator
from foliorank.utils.exceptions import ProfileNotFoundError
from foliorank.utils.ranking import RankResolver

logger = logging.getLogger(__name__)


class ProfileService(BaseService):
    """Service for aggregating profile page data."""
    
    def __init__(self, repository: Repository,
                 leaderboard: Optional[LeaderboardAggregator] = None, **kwargs):
        super().__init__(repository, **kwargs)
        self.leaderboard = leaderboard or LeaderboardAggregator(
            repository, tz=self.tz, clock=self._clock
        )
    
    async def get_profile_summary(self, user_id: str) -> ProfileSummary:
        """Fetch complete profile data for ``user_id``."""
        profile = await self.repository.get_profile(user_id)
        if profile is None:
            raise ProfileNotFoundError(user_id)
        
        # Rank the same way the leaderboard does so both pages agree
        all_time = (await self.leaderboard.aggregate()).all_time
        rank = RankResolver.rank_of(user_id, all_time)
        
        portfolios = await self.repository.list_portfolios_by_owner(user_id)
        received = await self._fetch_received_feedback(portfolios)
        
        return ProfileSummary(
            user_id=profile.user_id,
            username=profile.username,
            avatar_url=profile.avatar_url,
            xp=profile.xp,
            rank=rank,
            total_users=len(all_time),
            portfolios=portfolios,
            received_feedback=received,
        )
    
    async def _fetch_received_feedback(self, portfolios: List[PortfolioData]) -> List[ReceivedFeedback]:
        """One item per review side that targeted one of ``portfolios``, newest first."""
        if not portfolios:
            return []
        
        by_id = {portfolio.id: portfolio for portfolio in portfolios}
        reviews = await self.repository.list_reviews_for_portfolios(by_id.keys())
        reviewer_names = await self.repository.get_usernames(review.reviewer_id for review in reviews)
        
        received = []
        for review in reviews:
            for portfolio_id, score, feedback in self._sides(review):
                portfolio = by_id.get(portfolio_id)
                if portfolio is None:
                    continue
                received.append(ReceivedFeedback(
                    review_id=review.id,
                    reviewer_name=reviewer_names.get(review.reviewer_id, "Anonymous"),
                    portfolio_id=portfolio.id,
                    portfolio_title=portfolio.title,
                    portfolio_link=portfolio.link,
                    score=score,
                    feedback=feedback,
                    created_at=review.created_at,
                ))
        
        received.sort(key=lambda item: (item.created_at, item.review_id), reverse=True)
        return received
    
    @staticmethod
    def _sides(review: ReviewData):
        return (
            (review.left_portfolio_id, review.score_left, review.feedback_left),
            (review.right_portfolio_id, review.score_right, review.feedback_right),
        )
