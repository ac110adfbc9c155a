"""
Review submission: validation, daily cap, XP award and crediting.

Sequence for one submission:
1. Validate scores, feedback and portfolio ids (no repository access)
2. Reject self-review and unknown portfolios (reads only)
3. Check the daily cap
4. Score the feedback and store the review
5. Credit the award to the reviewer's profile

Nothing is written before step 4. A failure in step 5 leaves a stored,
uncredited review which ``retry_credit`` or ``reconcile`` completes without
counting its XP twice.
"""

import dataclasses
import logging
from datetime import timezone
from typing import Optional

from foliorank.constants import ReviewConstants
from foliorank.data_models.review import ReviewData
from foliorank.database.repository import Repository
from foliorank.services.base import BaseService
from foliorank.services.rate_limiter import DailyReviewLimiter
from foliorank.utils.exceptions import (
    ConcurrencyConflict, CreditPendingError, PersistenceError, ProfileNotFoundError,
    RateLimitExceeded, ValidationError
)
from foliorank.utils.xp import XPScorer

logger = logging.getLogger(__name__)


class ReviewSubmitter(BaseService):
    """Composition root for turning a review session into stored XP."""
    
    def __init__(self, repository: Repository, rate_limiter: Optional[DailyReviewLimiter] = None,
                 **kwargs):
        super().__init__(repository, **kwargs)
        self.rate_limiter = rate_limiter or DailyReviewLimiter(
            repository, tz=self.tz, clock=self._clock
        )
    
    async def submit(self, reviewer_id: str, left_id: int, right_id: int,
                     score_left: int, score_right: int,
                     feedback_left: str, feedback_right: str) -> ReviewData:
        """
        Validate, store and credit one review.
        
        Returns:
            The stored review with its id and XP award
            
        Raises:
            ValidationError: Bad scores, empty feedback, same portfolio twice,
                unknown portfolio or self-review
            RateLimitExceeded: Daily cap already reached
            PersistenceError: The review could not be stored; nothing was credited
            CreditPendingError: The review is stored but its XP is not credited yet
        """
        self._validate_fields(left_id, right_id, score_left, score_right, feedback_left, feedback_right)
        await self._validate_portfolios(reviewer_id, left_id, right_id)
        
        if not await self.rate_limiter.is_allowed(reviewer_id):
            raise RateLimitExceeded(reviewer_id, self.rate_limiter.daily_cap)
        
        xp_awarded = XPScorer.score(feedback_left, feedback_right)
        review = ReviewData(
            reviewer_id=reviewer_id,
            left_portfolio_id=left_id,
            right_portfolio_id=right_id,
            score_left=score_left,
            score_right=score_right,
            feedback_left=feedback_left.strip(),
            feedback_right=feedback_right.strip(),
            xp_awarded=xp_awarded,
            created_at=self.now().astimezone(timezone.utc),
        )
        
        try:
            review_id = await self.repository.insert_review(review)
        except PersistenceError:
            logger.error(f"Review by {reviewer_id} on {left_id}/{right_id} was not stored")
            raise
        review = dataclasses.replace(review, id=review_id)
        logger.info(f"Stored review {review_id} by {reviewer_id} worth {xp_awarded} XP")
        
        try:
            await self.repository.credit_xp(reviewer_id, xp_awarded, review_id=review_id)
        except (PersistenceError, ConcurrencyConflict, ProfileNotFoundError) as e:
            logger.warning(f"Review {review_id} stored but XP credit failed: {e}")
            raise CreditPendingError(review, e) from e
        
        return dataclasses.replace(review, xp_credited=True)
    
    async def retry_credit(self, review: ReviewData) -> bool:
        """
        Credit a stored review's XP if it has not been credited yet.
        
        Returns:
            True if XP was added now, False if it had already been credited
        """
        if review.id is None:
            raise ValueError("Only stored reviews can be credited")
        applied = await self.repository.credit_xp(
            review.reviewer_id, review.xp_awarded, review_id=review.id
        )
        if applied:
            logger.info(f"Credited {review.xp_awarded} XP for review {review.id} on retry")
        return applied
    
    async def reconcile(self, user_id: str) -> int:
        """
        Credit every stored review of ``user_id`` still waiting for its XP.
        
        Returns:
            Total XP credited by this call
        """
        credited = 0
        for review in await self.repository.list_uncredited_reviews(user_id):
            if await self.retry_credit(review):
                credited += review.xp_awarded
        if credited:
            logger.info(f"Reconciled {credited} pending XP for {user_id}")
        return credited
    
    @staticmethod
    def _validate_fields(left_id, right_id, score_left, score_right, feedback_left, feedback_right):
        for side, score in (("left", score_left), ("right", score_right)):
            # bool is an int subclass but never a valid score
            if not isinstance(score, int) or isinstance(score, bool):
                raise ValidationError(f"score_{side}", f"The {side} score must be a whole number.")
            if not ReviewConstants.MIN_SCORE <= score <= ReviewConstants.MAX_SCORE:
                raise ValidationError(
                    f"score_{side}",
                    f"The {side} score must be between {ReviewConstants.MIN_SCORE} "
                    f"and {ReviewConstants.MAX_SCORE}."
                )
        
        for side, feedback in (("left", feedback_left), ("right", feedback_right)):
            if not isinstance(feedback, str) or not feedback.strip():
                raise ValidationError(f"feedback_{side}", f"Please leave feedback for the {side} portfolio.")
        
        if left_id == right_id:
            raise ValidationError("portfolio", "A portfolio can't be compared with itself.")
    
    async def _validate_portfolios(self, reviewer_id: str, left_id: int, right_id: int):
        portfolios = await self.repository.get_portfolios([left_id, right_id])
        
        for portfolio_id in (left_id, right_id):
            portfolio = portfolios.get(portfolio_id)
            if portfolio is None:
                raise ValidationError("portfolio", f"Portfolio {portfolio_id} no longer exists.")
            if portfolio.user_id == reviewer_id:
                raise ValidationError("reviewer", "You can't review your own portfolio.")
