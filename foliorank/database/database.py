from datetime import datetime
from typing import Optional
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from contextlib import asynccontextmanager

from foliorank.config import Config
from foliorank.database.models import Base, Profile, Portfolio
from foliorank.data_models.profile import ProfileData
from foliorank.data_models.review import PortfolioData
from foliorank.utils.logger import setup_logger
from foliorank.utils.time_windows import to_utc

class Database:
    def __init__(self, database_url: Optional[str] = None):
        self.logger = setup_logger(__name__)
        self.database_url = database_url or Config.DATABASE_URL
        self.engine = None
        self.async_session = None
        
    async def initialize(self):
        """Initialize the database connection and create tables"""
        self.logger.info("Initializing database...")
        
        # Convert sqlite URL to async if needed
        database_url = self.database_url
        if database_url.startswith('sqlite:///'):
            database_url = database_url.replace('sqlite:///', 'sqlite+aiosqlite:///')
        
        self.engine = create_async_engine(
            database_url,
            echo=Config.DEBUG,
        )
        
        self.async_session = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False
        )
        
        # Create all tables
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
            
        self.logger.info("Database initialized successfully")
    
    @asynccontextmanager
    async def get_session(self):
        """Get a database session for reads"""
        async with self.async_session() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()
    
    @asynccontextmanager
    async def transaction(self):
        """
        Create a transaction boundary for atomic operations.
        
        All operations within the context are committed together on success,
        or rolled back together on failure. Exceptions must be allowed to
        propagate out of the context for rollback to occur.
        
        Usage:
            async with db.transaction() as session:
                session.add(review)
                await session.execute(update(Profile)...)
                # Both commit together here
        """
        async with self.async_session() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()
    
    async def close(self):
        """Close the database connection"""
        if self.engine:
            await self.engine.dispose()
            self.logger.info("Database connection closed")
    
    # Account setup and portfolio submission belong to the surrounding
    # application; these helpers are the write side it calls.
    
    async def create_profile(self, user_id: str, username: str, avatar_url: str = None,
                             created_at: datetime = None) -> ProfileData:
        """Create a new profile with zero XP"""
        async with self.transaction() as session:
            profile = Profile(
                user_id=user_id,
                username=username,
                avatar_url=avatar_url,
                xp=0,
            )
            if created_at is not None:
                profile.created_at = to_utc(created_at)
            session.add(profile)
            await session.flush()
            return profile.to_data()
    
    async def get_profile(self, user_id: str) -> Optional[ProfileData]:
        """Get a profile by user ID"""
        async with self.get_session() as session:
            profile = await session.get(Profile, user_id)
            return profile.to_data() if profile else None
    
    async def create_portfolio(self, user_id: str, title: str, link: str, niche: str = '',
                               image: str = None, created_at: datetime = None) -> PortfolioData:
        """Submit a portfolio for review"""
        async with self.transaction() as session:
            portfolio = Portfolio(
                user_id=user_id,
                title=title,
                link=link,
                niche=niche,
                image=image,
            )
            if created_at is not None:
                portfolio.created_at = to_utc(created_at)
            session.add(portfolio)
            await session.flush()
            return portfolio.to_data()
