"""
SQLAlchemy ORM Models for FSRS Database

Defines card memory state, review log and per-user scheduler settings.
"""

from sqlalchemy import JSON, Boolean, Column, DateTime, Float, Integer, String
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class CardState(Base):
    """
    Persistent memory state for a single card of a single user.
    """
    __tablename__ = 'card_state'

    user_id = Column(String(255), primary_key=True, nullable=False)
    card_id = Column(String(255), primary_key=True, nullable=False)

    stability = Column(Float, nullable=False)  # Days until R drops to 90%
    difficulty = Column(Float, nullable=False)  # 1-10

    last_review = Column(DateTime(timezone=True), nullable=True)
    next_review = Column(DateTime(timezone=True), nullable=False)

    def __repr__(self):
        return f"<CardState({self.user_id}, {self.card_id})>"


class ReviewLog(Base):
    """
    Log entry for a single graded review.

    This history is what gets exported for the external weight optimizer.
    """
    __tablename__ = 'review_log'

    id = Column(Integer, primary_key=True, autoincrement=True)

    user_id = Column(String(255), nullable=False, index=True)
    card_id = Column(String(255), nullable=False)

    reviewed_at = Column(DateTime(timezone=True), nullable=False)
    grade = Column(Integer, nullable=False)  # 1=AGAIN, 2=HARD, 3=GOOD, 4=EASY
    duration_ms = Column(Integer, nullable=True)

    # State before review (null for a new card)
    elapsed_days = Column(Float, nullable=True)
    retrievability_before = Column(Float, nullable=True)
    stability_before = Column(Float, nullable=True)
    difficulty_before = Column(Float, nullable=True)

    # State after review
    stability_after = Column(Float, nullable=False)
    difficulty_after = Column(Float, nullable=False)
    interval_days = Column(Float, nullable=False)

    def __repr__(self):
        return f"<ReviewLog(id={self.id}, {self.card_id}, grade={self.grade})>"


class UserSettings(Base):
    """
    Per-user scheduler weights, retention and exposure policy.

    Null columns mean "use the default".
    """
    __tablename__ = 'user_settings'

    user_id = Column(String(255), primary_key=True, nullable=False)

    fsrs_weights = Column(JSON, nullable=True)
    target_retention = Column(Float, nullable=True)
    last_optimized_at = Column(DateTime(timezone=True), nullable=True)

    min_reveal_seconds = Column(Float, nullable=True)
    fuzzing_hours_min = Column(Float, nullable=True)
    fuzzing_hours_max = Column(Float, nullable=True)
    adaptive_fuzzing = Column(Boolean, nullable=True)
    warn_before_managing = Column(Boolean, nullable=True)

    def __repr__(self):
        return f"<UserSettings({self.user_id})>"
