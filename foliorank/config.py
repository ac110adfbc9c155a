import os
from datetime import timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

load_dotenv()

class Config:
    """Review engine configuration settings"""
    
    # Database settings
    DATABASE_URL = os.getenv('DATABASE_URL', 'sqlite:///foliorank.db')
    
    # Engine settings
    DEBUG = os.getenv('DEBUG', 'False').lower() == 'true'
    
    # IANA zone name; "today", "this week" and "this month" start at local midnight here
    TIMEZONE = os.getenv('TIMEZONE', 'UTC')
    
    # Review settings
    DAILY_REVIEW_CAP = int(os.getenv('DAILY_REVIEW_CAP', 10))
    CANDIDATE_POOL_SIZE = int(os.getenv('CANDIDATE_POOL_SIZE', 100))
    
    # Leaderboard settings
    LEADERBOARD_CACHE_TTL = int(os.getenv('LEADERBOARD_CACHE_TTL', 180))  # 3 minutes
    
    @classmethod
    def get_timezone(cls) -> tzinfo:
        """Get the timezone used for day, week and month boundaries"""
        if cls.TIMEZONE.upper() == 'UTC':
            return timezone.utc
        try:
            return ZoneInfo(cls.TIMEZONE)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"TIMEZONE must be a valid IANA zone name, got '{cls.TIMEZONE}'")
    
    @classmethod
    def validate(cls):
        """Validate that configuration values are usable"""
        if not cls.DATABASE_URL:
            raise ValueError("DATABASE_URL is required")
        if cls.DAILY_REVIEW_CAP < 1:
            raise ValueError("DAILY_REVIEW_CAP must be at least 1")
        if cls.CANDIDATE_POOL_SIZE < 2:
            raise ValueError("CANDIDATE_POOL_SIZE must be at least 2")
        if cls.LEADERBOARD_CACHE_TTL < 0:
            raise ValueError("LEADERBOARD_CACHE_TTL cannot be negative")
        cls.get_timezone()
