"""Study session and rejection feedback model definitions."""

from enum import Enum

from sqlalchemy import Column, Date, DateTime, Float, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import relationship

from educollab.database import Base


class SessionStatus(str, Enum):
    PENDING = "pending"
    SUCCESS = "success"
    REJECTED = "rejected"

    def __str__(self):
        return self.value


class StudySession(Base):
    """A study session proposed by a tutor."""
    __tablename__ = "study_sessions"

    id = Column(Integer, primary_key=True, index=True)
    tutor_email = Column(String, index=True, nullable=False)
    tutor_name = Column(String)
    title = Column(String, nullable=False)
    description = Column(Text)
    image = Column(String)
    registration_start_date = Column(Date)
    registration_end_date = Column(Date)
    class_start_date = Column(Date)
    class_end_date = Column(Date)
    duration = Column(String)
    fee = Column(Float, default=0)
    max_participants = Column(Integer)
    status = Column(String, index=True, default=SessionStatus.PENDING.value)
    created_at = Column(DateTime, server_default=func.now())

    feedback = relationship(
        "RejectionFeedback",
        back_populates="study_session",
        cascade="all, delete-orphan",
        order_by="RejectionFeedback.id",
    )
    bookings = relationship("Booking", back_populates="study_session", cascade="all, delete-orphan")

    @property
    def current_status(self) -> SessionStatus:
        # rows written before status was always set count as pending
        return SessionStatus(self.status) if self.status else SessionStatus.PENDING


class RejectionFeedback(Base):
    """Reason given by an admin for rejecting a study session."""
    __tablename__ = "rejection_feedback"

    id = Column(Integer, primary_key=True)
    study_session_id = Column(Integer, ForeignKey("study_sessions.id", ondelete="CASCADE"), index=True, nullable=False)
    reason = Column(Text, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    study_session = relationship("StudySession", back_populates="feedback")
