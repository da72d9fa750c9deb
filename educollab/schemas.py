"""
Response schemas shared by the routers.

Fields are snake_case in Python and camelCase on the wire; requests are
accepted in either form.
"""
from datetime import date, datetime

from pydantic import BaseModel, field_validator
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class InsertResponse(ApiModel):
    acknowledged: bool = True
    inserted_id: int | None


class MessageResponse(ApiModel):
    message: str


class AccountResponse(ApiModel):
    id: int
    email: str
    name: str | None = None
    photo_url: str | None = None
    role: str


class StudySessionResponse(ApiModel):
    id: int
    tutor_email: str
    tutor_name: str | None = None
    title: str
    description: str | None = None
    image: str | None = None
    registration_start_date: date | None = None
    registration_end_date: date | None = None
    class_start_date: date | None = None
    class_end_date: date | None = None
    duration: str | None = None
    fee: float | None = None
    max_participants: int | None = None
    status: str

    @field_validator("status", mode="before")
    @classmethod
    def default_pending(cls, value: str | None) -> str:
        return value or "pending"


class BookingResponse(ApiModel):
    id: int
    study_session_id: int
    student_email: str
    student_name: str | None = None
    tutor_email: str | None = None
    fee: float | None = None
    transaction_id: str | None = None
    status: str | None = None
    booked_at: datetime | None = None


class RejectionFeedbackResponse(ApiModel):
    id: int
    study_session_id: int
    reason: str
    created_at: datetime | None = None
