"""
Profile data models for the profile summary page.

Provides immutable data transfer objects for profile-related data aggregation.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Union

from foliorank.data_models.review import PortfolioData


@dataclass(frozen=True)
class ProfileData:
    """Stored profile of a reviewer."""
    user_id: str
    username: str
    avatar_url: Optional[str]
    xp: int
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class ReceivedFeedback:
    """One side of a review that targeted a portfolio owned by the profile user."""
    review_id: int
    reviewer_name: str
    portfolio_id: int
    portfolio_title: str
    portfolio_link: str
    score: int
    feedback: str
    created_at: datetime


@dataclass(frozen=True)
class ProfileSummary:
    """Complete profile page data for a user."""
    # Basic info
    user_id: str
    username: str
    avatar_url: Optional[str]
    
    # Progress
    xp: int
    rank: Union[int, object]  # int, or ranking.UNRANKED
    total_users: int
    
    # Content
    portfolios: List[PortfolioData]  # Newest first
    received_feedback: List[ReceivedFeedback]  # Newest first
