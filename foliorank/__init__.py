"""
FolioRank review engine.

Pairs portfolios for blind peer review, turns submitted feedback into XP under
a daily cap, and ranks reviewers on all-time, monthly and weekly leaderboards.
"""

__version__ = "0.1.0"
