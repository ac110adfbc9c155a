"""
Data-access contract consumed by the review engine.

Services depend on this abstraction only. Every operation is a coroutine
because the backing store is remote; no ordering is guaranteed between calls
issued for different users.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Set

from foliorank.data_models.leaderboard import LeaderboardEntry
from foliorank.data_models.profile import ProfileData
from foliorank.data_models.review import PortfolioData, ReviewData


class Repository(ABC):
    """Read/write access to portfolios, reviews and profiles."""
    
    # Pairing
    
    @abstractmethod
    async def list_candidate_portfolios(self, exclude_owner: str, limit: int) -> List[PortfolioData]:
        """Newest-first portfolios not owned by ``exclude_owner``, at most ``limit``."""
    
    @abstractmethod
    async def list_reviewed_portfolio_ids(self, reviewer_id: str) -> Set[int]:
        """Ids of every portfolio the reviewer has reviewed, on either side."""
    
    @abstractmethod
    async def get_portfolios(self, portfolio_ids: Iterable[int]) -> Dict[int, PortfolioData]:
        """Portfolios by id; unknown ids are left out of the result."""
    
    # Submission
    
    @abstractmethod
    async def insert_review(self, review: ReviewData) -> int:
        """Store a review and return its id. Raises PersistenceError on failure."""
    
    @abstractmethod
    async def credit_xp(self, user_id: str, amount: int, review_id: Optional[int] = None) -> bool:
        """
        Atomically add ``amount`` to the user's cumulative XP.
        
        When ``review_id`` is given the increment is applied at most once for
        that review; a repeated call returns False and changes nothing.
        
        Raises:
            ProfileNotFoundError: No profile for ``user_id``
            ConcurrencyConflict: The store rejected the update as conflicting
            PersistenceError: Any other storage failure
        """
    
    @abstractmethod
    async def count_reviews_since(self, user_id: str, since: datetime) -> int:
        """Number of reviews the user submitted at or after ``since``."""
    
    @abstractmethod
    async def list_uncredited_reviews(self, reviewer_id: str) -> List[ReviewData]:
        """Stored reviews whose XP has not reached the reviewer's profile yet."""
    
    # Leaderboards and profiles
    
    @abstractmethod
    async def get_leaderboard_aggregate(self, month_start: datetime,
                                        week_start: datetime) -> List[LeaderboardEntry]:
        """One row per profile with review XP summed all-time, since ``month_start`` and since ``week_start``."""
    
    @abstractmethod
    async def get_profile(self, user_id: str) -> Optional[ProfileData]:
        """Profile by user id, or None."""
    
    @abstractmethod
    async def get_usernames(self, user_ids: Iterable[str]) -> Dict[str, str]:
        """Usernames by user id; unknown ids are left out of the result."""
    
    @abstractmethod
    async def list_portfolios_by_owner(self, user_id: str) -> List[PortfolioData]:
        """The user's portfolios, newest first."""
    
    @abstractmethod
    async def list_reviews_for_portfolios(self, portfolio_ids: Iterable[int]) -> List[ReviewData]:
        """Reviews with either side on one of ``portfolio_ids``, newest first."""
