"""
Portfolio pairing for review sessions.

Draws two distinct portfolios from the newest candidates, skipping the
reviewer's own work, everything already reviewed, and the previous pair.
"""

import logging
import random
from typing import Iterable, List, Optional, Set

from foliorank.config import Config
from foliorank.data_models.review import Pairing, PortfolioData
from foliorank.database.repository import Repository
from foliorank.services.base import BaseService
from foliorank.utils.exceptions import InsufficientCandidates

logger = logging.getLogger(__name__)


class PairSelector(BaseService):
    """Chooses a fair, non-repeating pair of portfolios for a reviewer."""
    
    def __init__(self, repository: Repository, rng: Optional[random.Random] = None,
                 pool_size: Optional[int] = None, **kwargs):
        super().__init__(repository, **kwargs)
        self.rng = rng or random.Random()
        self.pool_size = pool_size or Config.CANDIDATE_POOL_SIZE
    
    async def build_exclusions(self, reviewer_id: str,
                               previous_pair: Optional[Pairing] = None) -> Set[int]:
        """
        Collect the portfolio ids a reviewer should not see next.
        
        The reviewer's own portfolios are not listed here; the candidate
        query already leaves them out.
        
        Args:
            reviewer_id: Reviewer starting a session
            previous_pair: Pair shown in the session just finished, if any
            
        Returns:
            Already-reviewed portfolio ids plus the previous pair
        """
        excluded = set(await self.repository.list_reviewed_portfolio_ids(reviewer_id))
        if previous_pair is not None:
            excluded |= previous_pair.portfolio_ids
        return excluded
    
    async def select_pair(self, reviewer_id: str, exclude_ids: Iterable[int] = ()) -> Pairing:
        """
        Select two distinct portfolios for ``reviewer_id``.
        
        Exclusions are honored whenever at least two candidates survive them.
        Otherwise the unfiltered pool is used and the pairing is flagged
        ``reduced_novelty`` instead of failing.
        
        Raises:
            InsufficientCandidates: Fewer than two portfolios exist that the
                reviewer does not own
        """
        pool = await self.repository.list_candidate_portfolios(
            exclude_owner=reviewer_id, limit=self.pool_size
        )
        # Guard against a store that ignores exclude_owner
        pool = [p for p in self._dedupe(pool) if p.user_id != reviewer_id]
        
        if len(pool) < 2:
            logger.info(f"Only {len(pool)} candidate portfolios for reviewer {reviewer_id}")
            raise InsufficientCandidates(len(pool))
        
        excluded = set(exclude_ids)
        filtered = [p for p in pool if p.id not in excluded]
        reduced_novelty = len(filtered) < 2
        if reduced_novelty:
            logger.info(
                f"Exclusions left {len(filtered)} of {len(pool)} candidates for reviewer "
                f"{reviewer_id}; falling back to the unfiltered pool"
            )
            filtered = pool
        
        shuffled = list(filtered)
        self.rng.shuffle(shuffled)
        
        left = shuffled[0]
        right = next((p for p in shuffled[1:] if p.id != left.id), None)
        if right is None:
            raise InsufficientCandidates(1)
        
        return Pairing(left=left, right=right, reduced_novelty=reduced_novelty)
    
    async def next_pair(self, reviewer_id: str, previous_pair: Optional[Pairing] = None) -> Pairing:
        """Build the standard exclusions and select a pair in one call."""
        excluded = await self.build_exclusions(reviewer_id, previous_pair)
        return await self.select_pair(reviewer_id, excluded)
    
    @staticmethod
    def _dedupe(pool: List[PortfolioData]) -> List[PortfolioData]:
        seen = set()
        unique = []
        for portfolio in pool:
            if portfolio.id not in seen:
                seen.add(portfolio.id)
                unique.append(portfolio)
        return unique
