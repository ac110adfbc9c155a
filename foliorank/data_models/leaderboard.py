"""
Leaderboard data models for the three XP windows.

Provides immutable data transfer objects for leaderboard aggregation and display.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Iterator, List, Optional, Tuple


class LeaderboardWindow(Enum):
    ALL_TIME = "all_time"
    MONTHLY = "monthly"
    WEEKLY = "weekly"


@dataclass(frozen=True)
class LeaderboardEntry:
    """Per-user XP aggregate across all windows."""
    user_id: str
    username: str
    avatar_url: Optional[str]
    total_xp: int
    month_xp: int
    week_xp: int
    joined_at: Optional[datetime] = None  # Profile creation, used to break ties
    
    def xp_for(self, window: LeaderboardWindow) -> int:
        if window is LeaderboardWindow.MONTHLY:
            return self.month_xp
        if window is LeaderboardWindow.WEEKLY:
            return self.week_xp
        return self.total_xp


@dataclass(frozen=True)
class RankedList:
    """Entries for one window, best first. Rank is the 1-based position."""
    window: LeaderboardWindow
    entries: Tuple[LeaderboardEntry, ...]
    
    def __iter__(self) -> Iterator[LeaderboardEntry]:
        return iter(self.entries)
    
    def __len__(self) -> int:
        return len(self.entries)
    
    def __getitem__(self, index):
        return self.entries[index]


@dataclass(frozen=True)
class Leaderboards:
    """The three ranked lists computed from one aggregate snapshot."""
    all_time: RankedList
    monthly: RankedList
    weekly: RankedList
    
    def for_window(self, window: LeaderboardWindow) -> RankedList:
        return {
            LeaderboardWindow.ALL_TIME: self.all_time,
            LeaderboardWindow.MONTHLY: self.monthly,
            LeaderboardWindow.WEEKLY: self.weekly,
        }[window]


@dataclass(frozen=True)
class LeaderboardRow:
    """Single leaderboard row as displayed."""
    rank: int
    user_id: str
    username: str
    avatar_url: Optional[str]
    xp: int


@dataclass(frozen=True)
class LeaderboardPage:
    """Paginated leaderboard data."""
    entries: List[LeaderboardRow]
    current_page: int
    total_pages: int
    total_users: int
    window: LeaderboardWindow
