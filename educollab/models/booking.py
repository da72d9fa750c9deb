"""Booking model definitions."""

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String, UniqueConstraint, func
from sqlalchemy.orm import relationship

from educollab.database import Base


class Booking(Base):
    """A student's seat in a study session."""
    __tablename__ = "bookings"
    __table_args__ = (
        UniqueConstraint("study_session_id", "student_email", name="uq_booking_session_student"),
    )

    id = Column(Integer, primary_key=True)
    study_session_id = Column(Integer, ForeignKey("study_sessions.id", ondelete="CASCADE"), index=True, nullable=False)
    student_email = Column(String, index=True, nullable=False)
    student_name = Column(String)
    tutor_email = Column(String)
    fee = Column(Float)
    transaction_id = Column(String)
    status = Column(String, default="booked")
    booked_at = Column(DateTime, server_default=func.now())

    study_session = relationship("StudySession", back_populates="bookings")
