"""
Custom exceptions for the review engine with user-friendly error messages.
"""

class FolioRankException(Exception):
    """Base exception for review engine errors."""
    def __init__(self, message: str, user_message: str = None):
        super().__init__(message)
        self.user_message = user_message or message

class ValidationError(FolioRankException):
    """Raised when a review submission fails validation."""
    def __init__(self, field: str, reason: str):
        super().__init__(
            f"Invalid {field}: {reason}",
            f"❌ {reason}"
        )
        self.field = field

class InsufficientCandidates(FolioRankException):
    """Raised when fewer than two portfolios are available for pairing."""
    def __init__(self, available: int):
        super().__init__(
            f"Need at least 2 candidate portfolios, found {available}",
            "❌ Not enough portfolios to review yet. Check back soon!"
        )
        self.available = available

class RateLimitExceeded(FolioRankException):
    """Raised when a user has reached the daily review cap."""
    def __init__(self, user_id: str, daily_cap: int):
        super().__init__(
            f"User {user_id} reached the daily cap of {daily_cap} reviews",
            f"❌ You've submitted {daily_cap} reviews today. Come back tomorrow!"
        )
        self.user_id = user_id
        self.daily_cap = daily_cap

class PersistenceError(FolioRankException):
    """Raised when a storage write fails."""
    def __init__(self, operation: str, details: str = None):
        super().__init__(
            f"Storage error during {operation}: {details}",
            "❌ Database error occurred. Please try again later."
        )
        self.operation = operation

class ConcurrencyConflict(FolioRankException):
    """Raised when the store reports a conflicting concurrent XP update."""
    def __init__(self, user_id: str, details: str = None):
        super().__init__(
            f"Concurrent XP update conflict for user {user_id}: {details}",
            "❌ Your XP is being updated elsewhere. Please try again."
        )
        self.user_id = user_id

class CreditPendingError(FolioRankException):
    """Raised when a review was recorded but its XP credit failed.
    
    Retry the credit for ``review`` alone; resubmitting the review would
    count its XP twice.
    """
    def __init__(self, review, cause: Exception = None):
        super().__init__(
            f"Review {review.id} recorded but crediting {review.xp_awarded} XP "
            f"to {review.reviewer_id} failed: {cause}",
            "⚠️ Review recorded! Your XP will be credited shortly."
        )
        self.review = review
        self.cause = cause

class ProfileNotFoundError(FolioRankException):
    """Raised when a profile doesn't exist."""
    def __init__(self, user_id: str):
        super().__init__(
            f"Profile {user_id} not found",
            "❌ Profile not found. Finish account setup first!"
        )
        self.user_id = user_id
