"""
Daily review cap.

Counts a user's stored reviews since local midnight in the service timezone.
The count comes from the repository, so every device and tab of the same user
shares one budget.
"""

import logging
from typing import Optional

from foliorank.config import Config
from foliorank.database.repository import Repository
from foliorank.services.base import BaseService
from foliorank.utils.time_windows import day_start

logger = logging.getLogger(__name__)

class DailyReviewLimiter(BaseService):
    """Storage-backed per-user daily limit on submitted reviews."""
    
    def __init__(self, repository: Repository, daily_cap: Optional[int] = None, **kwargs):
        super().__init__(repository, **kwargs)
        self.daily_cap = daily_cap if daily_cap is not None else Config.DAILY_REVIEW_CAP
    
    async def count_submitted_today(self, user_id: str) -> int:
        """Reviews submitted since today's local midnight."""
        since = day_start(self.now(), self.tz)
        return await self.repository.count_reviews_since(user_id, since)
    
    async def is_allowed(self, user_id: str) -> bool:
        """Check if user can submit another review today."""
        # Input validation: a non-positive cap allows nothing
        if self.daily_cap <= 0:
            return False
        
        count = await self.count_submitted_today(user_id)
        allowed = count < self.daily_cap
        if not allowed:
            logger.info(f"User {user_id} at daily cap ({count}/{self.daily_cap})")
        return allowed
    
    async def remaining_today(self, user_id: str) -> int:
        """Reviews the user may still submit today."""
        return max(self.daily_cap - await self.count_submitted_today(user_id), 0)
