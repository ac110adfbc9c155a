"""
SQLAlchemy implementation of the Repository contract.

Every call opens its own transaction on the shared Database. XP credits run
as a single ``UPDATE ... SET xp = xp + :amount`` so concurrent credits for the
same user never lose an update.
"""

import logging
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Set

from sqlalchemy import select, update, func, case, or_, desc
from sqlalchemy.exc import OperationalError, SQLAlchemyError

from foliorank.database.database import Database
from foliorank.database.models import Profile, Portfolio, Review
from foliorank.database.repository import Repository
from foliorank.data_models.leaderboard import LeaderboardEntry
from foliorank.data_models.profile import ProfileData
from foliorank.data_models.review import PortfolioData, ReviewData
from foliorank.utils.exceptions import ConcurrencyConflict, PersistenceError, ProfileNotFoundError
from foliorank.utils.time_windows import to_utc

logger = logging.getLogger(__name__)


class SQLAlchemyRepository(Repository):
    """Repository backed by an async SQLAlchemy engine."""
    
    def __init__(self, db: Database):
        self.db = db
    
    async def list_candidate_portfolios(self, exclude_owner: str, limit: int) -> List[PortfolioData]:
        async with self.db.get_session() as session:
            result = await session.execute(
                select(Portfolio)
                .where(Portfolio.user_id != exclude_owner)
                .order_by(desc(Portfolio.created_at), desc(Portfolio.id))
                .limit(limit)
            )
            return [portfolio.to_data() for portfolio in result.scalars()]
    
    async def list_reviewed_portfolio_ids(self, reviewer_id: str) -> Set[int]:
        async with self.db.get_session() as session:
            result = await session.execute(
                select(Review.left_portfolio_id, Review.right_portfolio_id)
                .where(Review.reviewer_id == reviewer_id)
            )
            reviewed = set()
            for left_id, right_id in result:
                reviewed.add(left_id)
                reviewed.add(right_id)
            return reviewed
    
    async def get_portfolios(self, portfolio_ids: Iterable[int]) -> Dict[int, PortfolioData]:
        ids = list(set(portfolio_ids))
        if not ids:
            return {}
        async with self.db.get_session() as session:
            result = await session.execute(select(Portfolio).where(Portfolio.id.in_(ids)))
            return {portfolio.id: portfolio.to_data() for portfolio in result.scalars()}
    
    async def insert_review(self, review: ReviewData) -> int:
        try:
            async with self.db.transaction() as session:
                row = Review(
                    reviewer_id=review.reviewer_id,
                    left_portfolio_id=review.left_portfolio_id,
                    right_portfolio_id=review.right_portfolio_id,
                    score_left=review.score_left,
                    score_right=review.score_right,
                    feedback_left=review.feedback_left,
                    feedback_right=review.feedback_right,
                    xp_awarded=review.xp_awarded,
                    xp_credited=False,
                    created_at=to_utc(review.created_at),
                )
                session.add(row)
                await session.flush()
                return row.id
        except SQLAlchemyError as e:
            logger.error(f"Failed to insert review by {review.reviewer_id}: {e}")
            raise PersistenceError("review insert", str(e)) from e
    
    async def credit_xp(self, user_id: str, amount: int, review_id: Optional[int] = None) -> bool:
        if amount < 0:
            raise ValueError("XP credit amount cannot be negative")
        try:
            async with self.db.transaction() as session:
                if review_id is not None:
                    # Claim the review first; a second claim matches no rows
                    claimed = await session.execute(
                        update(Review)
                        .where(
                            Review.id == review_id,
                            Review.reviewer_id == user_id,
                            Review.xp_credited == False,  # noqa: E712
                        )
                        .values(xp_credited=True)
                        .execution_options(synchronize_session=False)
                    )
                    if claimed.rowcount == 0:
                        logger.info(f"Review {review_id} already credited to {user_id}, skipping")
                        return False
                
                credited = await session.execute(
                    update(Profile)
                    .where(Profile.user_id == user_id)
                    .values(xp=Profile.xp + amount)
                    .execution_options(synchronize_session=False)
                )
                if credited.rowcount == 0:
                    # Raising rolls the claim back with it
                    raise ProfileNotFoundError(user_id)
                return True
        except OperationalError as e:
            logger.warning(f"Conflicting XP update for {user_id}: {e}")
            raise ConcurrencyConflict(user_id, str(e)) from e
        except SQLAlchemyError as e:
            logger.error(f"Failed to credit {amount} XP to {user_id}: {e}")
            raise PersistenceError("xp credit", str(e)) from e
    
    async def count_reviews_since(self, user_id: str, since: datetime) -> int:
        async with self.db.get_session() as session:
            count = await session.scalar(
                select(func.count(Review.id)).where(
                    Review.reviewer_id == user_id,
                    Review.created_at >= to_utc(since),
                )
            )
            return count or 0
    
    async def list_uncredited_reviews(self, reviewer_id: str) -> List[ReviewData]:
        async with self.db.get_session() as session:
            result = await session.execute(
                select(Review)
                .where(Review.reviewer_id == reviewer_id, Review.xp_credited == False)  # noqa: E712
                .order_by(Review.created_at, Review.id)
            )
            return [review.to_data() for review in result.scalars()]
    
    async def get_leaderboard_aggregate(self, month_start: datetime,
                                        week_start: datetime) -> List[LeaderboardEntry]:
        month_start = to_utc(month_start)
        week_start = to_utc(week_start)
        
        month_xp = func.sum(case((Review.created_at >= month_start, Review.xp_awarded), else_=0))
        week_xp = func.sum(case((Review.created_at >= week_start, Review.xp_awarded), else_=0))
        
        # Outer join keeps profiles with no reviews on every board at 0 XP
        query = (
            select(
                Profile.user_id,
                Profile.username,
                Profile.avatar_url,
                Profile.created_at,
                func.coalesce(func.sum(Review.xp_awarded), 0).label('total_xp'),
                func.coalesce(month_xp, 0).label('month_xp'),
                func.coalesce(week_xp, 0).label('week_xp'),
            )
            .select_from(Profile)
            .outerjoin(Review, Review.reviewer_id == Profile.user_id)
            .group_by(Profile.user_id, Profile.username, Profile.avatar_url, Profile.created_at)
        )
        
        async with self.db.get_session() as session:
            result = await session.execute(query)
            return [
                LeaderboardEntry(
                    user_id=row.user_id,
                    username=row.username,
                    avatar_url=row.avatar_url,
                    total_xp=int(row.total_xp),
                    month_xp=int(row.month_xp),
                    week_xp=int(row.week_xp),
                    joined_at=to_utc(row.created_at),
                )
                for row in result
            ]
    
    async def get_profile(self, user_id: str) -> Optional[ProfileData]:
        return await self.db.get_profile(user_id)
    
    async def get_usernames(self, user_ids: Iterable[str]) -> Dict[str, str]:
        ids = list(set(user_ids))
        if not ids:
            return {}
        async with self.db.get_session() as session:
            result = await session.execute(
                select(Profile.user_id, Profile.username).where(Profile.user_id.in_(ids))
            )
            return {user_id: username for user_id, username in result}
    
    async def list_portfolios_by_owner(self, user_id: str) -> List[PortfolioData]:
        async with self.db.get_session() as session:
            result = await session.execute(
                select(Portfolio)
                .where(Portfolio.user_id == user_id)
                .order_by(desc(Portfolio.created_at), desc(Portfolio.id))
            )
            return [portfolio.to_data() for portfolio in result.scalars()]
    
    async def list_reviews_for_portfolios(self, portfolio_ids: Iterable[int]) -> List[ReviewData]:
        ids = list(set(portfolio_ids))
        if not ids:
            return []
        async with self.db.get_session() as session:
            result = await session.execute(
                select(Review)
                .where(or_(Review.left_portfolio_id.in_(ids), Review.right_portfolio_id.in_(ids)))
                .order_by(desc(Review.created_at), desc(Review.id))
            )
            return [review.to_data() for review in result.scalars()]
