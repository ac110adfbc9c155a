from sqlalchemy import (
    Column, Integer, String, DateTime, Boolean, Text,
    ForeignKey, CheckConstraint, Index
)
from sqlalchemy.orm import declarative_base, relationship
from datetime import datetime, timezone

from foliorank.data_models.profile import ProfileData
from foliorank.data_models.review import PortfolioData, ReviewData
from foliorank.utils.time_windows import to_utc

Base = declarative_base()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Profile(Base):
    __tablename__ = 'profiles'
    
    user_id = Column(String(64), primary_key=True)
    username = Column(String(100), nullable=False)
    avatar_url = Column(String(512), nullable=True)
    
    # Cumulative XP; only ever changed by an in-place increment
    xp = Column(Integer, nullable=False, default=0)
    
    # Metadata
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    
    # Relationships
    portfolios = relationship("Portfolio", back_populates="owner")
    
    __table_args__ = (
        CheckConstraint('xp >= 0', name='ck_profiles_xp_non_negative'),
    )
    
    def to_data(self) -> ProfileData:
        return ProfileData(
            user_id=self.user_id,
            username=self.username,
            avatar_url=self.avatar_url,
            xp=self.xp or 0,
            created_at=to_utc(self.created_at),
        )
    
    def __repr__(self):
        return f"<Profile(user_id='{self.user_id}', username='{self.username}', xp={self.xp})>"

class Portfolio(Base):
    __tablename__ = 'portfolios'
    
    id = Column(Integer, primary_key=True)
    user_id = Column(String(64), ForeignKey('profiles.user_id'), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    link = Column(String(512), nullable=False)
    niche = Column(String(200), nullable=False, default='')
    image = Column(String(512), nullable=True)
    
    # Metadata
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    
    # Relationships
    owner = relationship("Profile", back_populates="portfolios")
    
    def to_data(self) -> PortfolioData:
        return PortfolioData(
            id=self.id,
            user_id=self.user_id,
            title=self.title,
            link=self.link,
            niche=self.niche,
            image=self.image,
            created_at=to_utc(self.created_at),
        )
    
    def __repr__(self):
        return f"<Portfolio(id={self.id}, title='{self.title}', owner='{self.user_id}')>"

class Review(Base):
    __tablename__ = 'reviews'
    
    id = Column(Integer, primary_key=True)
    reviewer_id = Column(String(64), ForeignKey('profiles.user_id'), nullable=False)
    left_portfolio_id = Column(Integer, ForeignKey('portfolios.id'), nullable=False, index=True)
    right_portfolio_id = Column(Integer, ForeignKey('portfolios.id'), nullable=False, index=True)
    
    # Scores and written feedback per side
    score_left = Column(Integer, nullable=False)
    score_right = Column(Integer, nullable=False)
    feedback_left = Column(Text, nullable=False)
    feedback_right = Column(Text, nullable=False)
    
    # XP award, fixed at submission time
    xp_awarded = Column('xp', Integer, nullable=False, default=0)
    # Set together with the profile increment so a retried credit is a no-op
    xp_credited = Column(Boolean, nullable=False, default=False)
    
    # Metadata
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    
    __table_args__ = (
        CheckConstraint('score_left >= 0 AND score_left <= 10', name='ck_reviews_score_left_range'),
        CheckConstraint('score_right >= 0 AND score_right <= 10', name='ck_reviews_score_right_range'),
        CheckConstraint('left_portfolio_id != right_portfolio_id', name='ck_reviews_distinct_portfolios'),
        CheckConstraint('xp >= 0', name='ck_reviews_xp_non_negative'),
        Index('ix_reviews_reviewer_created', 'reviewer_id', 'created_at'),
    )
    
    def to_data(self) -> ReviewData:
        return ReviewData(
            id=self.id,
            reviewer_id=self.reviewer_id,
            left_portfolio_id=self.left_portfolio_id,
            right_portfolio_id=self.right_portfolio_id,
            score_left=self.score_left,
            score_right=self.score_right,
            feedback_left=self.feedback_left,
            feedback_right=self.feedback_right,
            xp_awarded=self.xp_awarded,
            created_at=to_utc(self.created_at),
            xp_credited=bool(self.xp_credited),
        )
    
    def __repr__(self):
        return (f"<Review(id={self.id}, reviewer='{self.reviewer_id}', "
                f"left={self.left_portfolio_id}, right={self.right_portfolio_id}, xp={self.xp_awarded})>")
