"""
Leaderboard aggregation for the all-time, monthly and weekly XP windows.

All three lists are ranked from one aggregate snapshot, so they always agree
on which users exist. Snapshots are cached with a short TTL; reads may lag a
fresh submission by up to that TTL.
"""

from typing import Optional, Union
import asyncio
import time
import logging

from foliorank.config import Config
from foliorank.constants import CacheConstants, PaginationConstants
from foliorank.data_models.leaderboard import (
    LeaderboardPage, LeaderboardRow, Leaderboards, LeaderboardWindow
)
from foliorank.database.repository import Repository
from foliorank.services.base import BaseService
from foliorank.utils.ranking import RankingUtility, RankResolver
from foliorank.utils.time_windows import month_start, week_start

logger = logging.getLogger(__name__)


class LeaderboardAggregator(BaseService):
    """Service for ranked leaderboards with caching."""
    
    def __init__(self, repository: Repository, cache_ttl: Optional[int] = None, **kwargs):
        super().__init__(repository, **kwargs)
        # TTL cache for leaderboard snapshots
        self._cache = {}
        self._cache_timestamps = {}
        self._cache_ttl = cache_ttl if cache_ttl is not None else Config.LEADERBOARD_CACHE_TTL
        self._cache_max_size = CacheConstants.DEFAULT_MAX_CACHE_SIZE
        self._cache_lock = asyncio.Lock()
    
    async def _is_cache_valid(self, key: str) -> bool:
        """Check if cached leaderboard data is still valid."""
        async with self._cache_lock:
            if key not in self._cache_timestamps:
                return False
            return time.time() - self._cache_timestamps[key] < self._cache_ttl
    
    async def _cleanup_cache(self):
        """Remove expired entries and enforce size limits."""
        async with self._cache_lock:
            current_time = time.time()
            expired_keys = [
                key for key, timestamp in self._cache_timestamps.items()
                if current_time - timestamp >= self._cache_ttl
            ]
            for key in expired_keys:
                self._cache.pop(key, None)
                self._cache_timestamps.pop(key, None)
            
            # Enforce size limit by removing oldest entries
            if len(self._cache) > self._cache_max_size:
                sorted_keys = sorted(self._cache_timestamps.items(), key=lambda x: x[1])
                for key, _ in sorted_keys[:len(self._cache) - self._cache_max_size]:
                    self._cache.pop(key, None)
                    self._cache_timestamps.pop(key, None)
    
    async def aggregate(self) -> Leaderboards:
        """Rank every user on the all-time, monthly and weekly boards."""
        now = self.now()
        current_month = month_start(now, self.tz)
        current_week = week_start(now, self.tz)
        
        # Boundaries are part of the key so a cached board never crosses into a new week
        cache_key = f"leaderboards:{current_month.isoformat()}:{current_week.isoformat()}"
        if await self._is_cache_valid(cache_key):
            async with self._cache_lock:
                return self._cache[cache_key]
        
        await self._cleanup_cache()
        
        rows = await self.repository.get_leaderboard_aggregate(current_month, current_week)
        leaderboards = Leaderboards(
            all_time=RankingUtility.rank(rows, LeaderboardWindow.ALL_TIME),
            monthly=RankingUtility.rank(rows, LeaderboardWindow.MONTHLY),
            weekly=RankingUtility.rank(rows, LeaderboardWindow.WEEKLY),
        )
        logger.debug(f"Aggregated leaderboards for {len(rows)} users")
        
        async with self._cache_lock:
            self._cache[cache_key] = leaderboards
            self._cache_timestamps[cache_key] = time.time()
        
        return leaderboards
    
    async def get_page(
        self,
        window: LeaderboardWindow = LeaderboardWindow.ALL_TIME,
        page: int = 1,
        page_size: int = PaginationConstants.DEFAULT_PAGE_SIZE
    ) -> LeaderboardPage:
        """Get one page of a window's leaderboard."""
        if not isinstance(page, int) or page < 1:
            raise ValueError("page must be a positive integer")
        if not isinstance(page_size, int) or page_size < 1 or page_size > PaginationConstants.MAX_PAGE_SIZE:
            raise ValueError(f"page_size must be between 1 and {PaginationConstants.MAX_PAGE_SIZE}")
        if not isinstance(window, LeaderboardWindow):
            window = LeaderboardWindow(window)
        
        ranked = (await self.aggregate()).for_window(window)
        total_users = len(ranked)
        
        start_idx = (page - 1) * page_size
        rows = [
            LeaderboardRow(
                rank=rank,
                user_id=entry.user_id,
                username=entry.username or "Anonymous",
                avatar_url=entry.avatar_url,
                xp=entry.xp_for(window),
            )
            for rank, entry in enumerate(ranked[start_idx:start_idx + page_size], start=start_idx + 1)
        ]
        
        return LeaderboardPage(
            entries=rows,
            current_page=page,
            total_pages=(total_users + page_size - 1) // page_size if total_users > 0 else 1,
            total_users=total_users,
            window=window,
        )
    
    async def get_user_rank(self, user_id: str,
                            window: LeaderboardWindow = LeaderboardWindow.ALL_TIME) -> Union[int, object]:
        """Get a specific user's rank on one window, or UNRANKED."""
        ranked = (await self.aggregate()).for_window(window)
        return RankResolver.rank_of(user_id, ranked)
    
    async def clear_cache(self):
        """Clears the entire leaderboard cache."""
        async with self._cache_lock:
            self._cache.clear()
            self._cache_timestamps.clear()
        logger.info("Leaderboard cache cleared.")
