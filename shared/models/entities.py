"""SQLAlchemy ORM database models."""
from datetime import datetime
from sqlalchemy import Column, String, Integer, Text, DateTime, Boolean, ForeignKey, Index
from sqlalchemy.ext.declarative import declarative_base
from sqlalchemy.orm import relationship

Base = declarative_base()


class Club(Base):
    """Club table - one row per tenant (martial-arts school)."""
    __tablename__ = "clubs"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    owner_email = Column(String, nullable=True)
    owner_name = Column(String, nullable=True)
    wizard_data = Column(Text, nullable=True)  # JSON: onboarding wizard snapshot
    coach_bonus_enabled = Column(Boolean, default=False, nullable=False)
    homework_enabled = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    students = relationship("Student", back_populates="club", cascade="all, delete-orphan")


class Student(Base):
    """Student table - holds the reward currencies and video trust state."""
    __tablename__ = "students"

    id = Column(String, primary_key=True)
    club_id = Column(String, ForeignKey("clubs.id"), nullable=False)
    name = Column(String, nullable=False)
    belt = Column(String, default="White")
    stripes = Column(Integer, default=0)
    current_stripe_points = Column(Integer, default=0, nullable=False)  # PTS, reset on promotion
    lifetime_xp = Column(Integer, default=0, nullable=False)
    global_xp = Column(Integer, default=0, nullable=False)  # never resets
    world_rank = Column(Integer, nullable=True)  # written by the ranking job
    previous_world_rank = Column(Integer, nullable=True)
    trust_tier = Column(String(20), default="unverified", nullable=False)
    video_approval_streak = Column(Integer, default=0, nullable=False)
    video_rejection_count = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    club = relationship("Club", back_populates="students")

    __table_args__ = (
        Index("idx_student_club", "club_id"),
        Index("idx_student_global_xp", "global_xp"),
    )


class SupportSession(Base):
    """
    Support session table - time-bounded bearer grants for super-admins.

    kind='impersonation': short-lived access to a club's data.
    kind='operator': the super-admin's own login session.
    """
    __tablename__ = "support_sessions"

    id = Column(String, primary_key=True)
    token = Column(String(255), nullable=False, unique=True)
    kind = Column(String(20), nullable=False, default="impersonation")
    operator_id = Column(String, nullable=True)
    target_club_id = Column(String, ForeignKey("clubs.id"), nullable=True)
    target_user_id = Column(String, nullable=True)
    reason = Column(Text, nullable=True)
    started_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    expires_at = Column(DateTime, nullable=False)
    ended_at = Column(DateTime, nullable=True)
    was_used = Column(Boolean, default=False, nullable=False)
    ip = Column(String(50), nullable=True)
    user_agent = Column(Text, nullable=True)

    club = relationship("Club")

    __table_args__ = (
        Index("idx_support_session_token", "token"),
        Index("idx_support_session_club", "target_club_id"),
    )
