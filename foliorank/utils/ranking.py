"""
Shared ranking utilities for the leaderboard and profile services.

Both services rank through these helpers so a user's rank on the profile page
always matches the leaderboard.
"""

from datetime import datetime
from typing import Iterable, Union

from foliorank.data_models.leaderboard import LeaderboardEntry, LeaderboardWindow, RankedList
from foliorank.utils.time_windows import to_utc


class _Unranked:
    """Sentinel for a user missing from a ranked list."""
    
    _instance = None
    
    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance
    
    def __repr__(self):
        return "UNRANKED"
    
    def __bool__(self):
        return False


UNRANKED = _Unranked()

# Sorts after every real timestamp so profiles without one lose ties
_NEVER = datetime.max


class RankingUtility:
    """Shared ranking logic for consistent ordering across services."""
    
    @staticmethod
    def sort_key(entry: LeaderboardEntry, window: LeaderboardWindow):
        """
        Ordering key: window XP descending, then earlier account creation,
        then user id so the order never depends on input order.
        """
        joined_at = to_utc(entry.joined_at).replace(tzinfo=None) if entry.joined_at else _NEVER
        return (-entry.xp_for(window), joined_at, entry.user_id)
    
    @staticmethod
    def rank(entries: Iterable[LeaderboardEntry], window: LeaderboardWindow) -> RankedList:
        """Build the ranked list for one window."""
        ordered = sorted(entries, key=lambda entry: RankingUtility.sort_key(entry, window))
        return RankedList(window=window, entries=tuple(ordered))


class RankResolver:
    """Finds a user's position inside a ranked list."""
    
    @staticmethod
    def rank_of(user_id: str, ranked_list: Iterable[LeaderboardEntry]) -> Union[int, _Unranked]:
        """
        Get the 1-based rank of a user
        
        Args:
            user_id: User to look up
            ranked_list: Entries in rank order
            
        Returns:
            The user's rank, or UNRANKED if the user is not listed
        """
        for position, entry in enumerate(ranked_list, start=1):
            if entry.user_id == user_id:
                return position
        return UNRANKED
