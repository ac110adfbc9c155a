"""
Review data models for portfolio pairing and review submission.

Provides immutable data transfer objects decoupled from the ORM rows so the
services never hold on to a live database session.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class PortfolioData:
    """A submitted portfolio."""
    id: int
    user_id: str
    title: str
    link: str
    niche: str
    image: Optional[str]
    created_at: datetime


@dataclass(frozen=True)
class ReviewData:
    """A completed side-by-side review.
    
    ``id`` is None until the repository has stored the review.
    """
    reviewer_id: str
    left_portfolio_id: int
    right_portfolio_id: int
    score_left: int
    score_right: int
    feedback_left: str
    feedback_right: str
    xp_awarded: int
    created_at: datetime
    id: Optional[int] = None
    xp_credited: bool = False


@dataclass(frozen=True)
class Pairing:
    """Two portfolios shown together in one review session."""
    left: PortfolioData
    right: PortfolioData
    reduced_novelty: bool = False  # Exclusions had to be dropped to fill the pair
    
    @property
    def portfolio_ids(self) -> frozenset:
        return frozenset((self.left.id, self.right.id))
