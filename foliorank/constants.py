"""
Engine-wide constants for the FolioRank review engine.

This module contains the fixed scoring rules and magic numbers used throughout
the codebase. Deployment-tunable values live in foliorank.config instead.
"""

class XPConstants:
    """Constants related to XP awards."""
    
    # Per-side feedback buckets: (exclusive lower bound on trimmed length, award).
    # Checked from the longest bucket down; a length exactly on a bound
    # falls into the lower bucket.
    FEEDBACK_TIERS = (
        (300, 20),
        (150, 15),
        (50, 10),
    )
    
    # Awarded for any completed review, on top of both sides
    COMPLETION_BONUS = 10

class ReviewConstants:
    """Constants for review validation."""
    
    MIN_SCORE = 0
    MAX_SCORE = 10

class PaginationConstants:
    """Constants for paginated displays."""
    
    # Default page size for leaderboards
    DEFAULT_PAGE_SIZE = 10
    
    # Hard upper bound for a single leaderboard page
    MAX_PAGE_SIZE = 50

class CacheConstants:
    """Constants for caching behavior."""
    
    # Maximum cached leaderboard snapshots
    DEFAULT_MAX_CACHE_SIZE = 100
