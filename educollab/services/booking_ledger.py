"""Study session bookings.

A student holds at most one booking per study session. The rule is enforced
by the ``uq_booking_session_student`` constraint: the insert either succeeds
or collides, and a collision is reported as an existing booking.
"""

import logging
from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from educollab.core.errors import invalid_state
from educollab.models.booking import Booking
from educollab.models.study_session import SessionStatus
from educollab.services.session_lifecycle import get_study_session

logger = logging.getLogger(__name__)

ALREADY_BOOKED_MESSAGE = "Already Booked!"


@dataclass
class BookingResult:
    created: bool
    booking: Booking | None = None


def already_booked(db: Session, study_session_id: int, student_email: str) -> bool:
    return (
        db.query(Booking.id)
        .filter(
            Booking.study_session_id == study_session_id,
            Booking.student_email == student_email,
        )
        .first()
        is not None
    )


def create_booking(db: Session, study_session_id: int, student_email: str, details: dict | None = None) -> BookingResult:
    study_session = get_study_session(db, study_session_id)
    if study_session.current_status != SessionStatus.SUCCESS:
        if already_booked(db, study_session_id, student_email):
            return BookingResult(created=False)
        raise invalid_state("Only approved study sessions can be booked.")

    details = dict(details or {})
    details.setdefault("tutor_email", study_session.tutor_email)
    details.setdefault("fee", study_session.fee)
    booking = Booking(study_session_id=study_session_id, student_email=student_email, **details)
    db.add(booking)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.info("Student %s already booked study session %s", student_email, study_session_id)
        return BookingResult(created=False)

    db.refresh(booking)
    logger.info("Student %s booked study session %s", student_email, study_session_id)
    return BookingResult(created=True, booking=booking)


def list_student_bookings(db: Session, student_email: str) -> list[Booking]:
    return (
        db.query(Booking)
        .filter(Booking.student_email == student_email)
        .order_by(Booking.booked_at.desc(), Booking.id.desc())
        .all()
    )
