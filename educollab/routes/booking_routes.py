from fastapi import APIRouter, Depends
from pydantic import Field, field_validator
from sqlalchemy.orm import Session

from educollab.auth.dependencies import normalize_email, require_self, require_student
from educollab.database import get_db
from educollab.schemas import ApiModel, BookingResponse, InsertResponse, MessageResponse
from educollab.services import booking_ledger

router = APIRouter(tags=['bookings'])


class BookingKey(ApiModel):
    study_session_id: int
    student_email: str

    @field_validator('student_email')
    @classmethod
    def validate_student_email(cls, value: str) -> str:
        normalized = normalize_email(value)
        if not normalized:
            raise ValueError('Student email is required.')
        return normalized


class CreateBookingRequest(BookingKey):
    student_name: str | None = None
    tutor_email: str | None = None
    fee: float | None = Field(default=None, ge=0)
    transaction_id: str | None = None
    status: str | None = None


class AlreadyBookedResponse(ApiModel):
    already_booked: bool


@router.post('/study-session-booked', response_model=InsertResponse | MessageResponse)
def book_study_session(data: CreateBookingRequest, db: Session = Depends(get_db)):
    details = data.model_dump(exclude={'study_session_id', 'student_email'}, exclude_none=True)
    result = booking_ledger.create_booking(db, data.study_session_id, data.student_email, details)
    if not result.created:
        return MessageResponse(message=booking_ledger.ALREADY_BOOKED_MESSAGE)
    return InsertResponse(inserted_id=result.booking.id)


@router.post('/check-study-session-already-booked-by-user', response_model=AlreadyBookedResponse)
def check_already_booked(data: BookingKey, db: Session = Depends(get_db)):
    return AlreadyBookedResponse(
        already_booked=booking_ledger.already_booked(db, data.study_session_id, data.student_email),
    )


@router.get(
    '/booked-study-sessions/{email}',
    response_model=list[BookingResponse],
    dependencies=[Depends(require_student), Depends(require_self)],
)
def list_booked_study_sessions(email: str, db: Session = Depends(get_db)):
    return booking_ledger.list_student_bookings(db, normalize_email(email))
