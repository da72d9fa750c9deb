from datetime import date

from fastapi import APIRouter, Depends, Query, status
from pydantic import Field, field_validator
from sqlalchemy.orm import Session

from educollab.auth.dependencies import (
    normalize_email,
    require_admin,
    require_authenticated,
    require_self,
    require_tutor,
)
from educollab.core.errors import AuthorizationError
from educollab.database import get_db
from educollab.models.account import Account
from educollab.models.study_session import SessionStatus
from educollab.schemas import ApiModel, RejectionFeedbackResponse, StudySessionResponse
from educollab.services import accounts, session_lifecycle

router = APIRouter(tags=['study-sessions'])

MAX_FEEDBACK_LENGTH = 1000


class CreateStudySessionRequest(ApiModel):
    title: str = Field(validation_alias='sessionTitle')
    description: str | None = Field(default=None, validation_alias='sessionDescription')
    tutor_name: str | None = None
    image: str | None = None
    registration_start_date: date | None = None
    registration_end_date: date | None = None
    class_start_date: date | None = None
    class_end_date: date | None = None
    duration: str | None = None
    fee: float = Field(default=0, ge=0)
    max_participants: int | None = Field(default=None, ge=1)

    @field_validator('title')
    @classmethod
    def validate_title(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError('Session title is required.')
        return normalized

    @field_validator('registration_end_date')
    @classmethod
    def validate_registration_window(cls, value: date | None, info) -> date | None:
        start = info.data.get('registration_start_date')
        if value is not None and start is not None and value < start:
            raise ValueError('Registration must end after it starts.')
        return value


class ApproveRequest(ApiModel):
    fee: float = Field(ge=0)
    max_participants: int = Field(ge=1)


class UpdateStudySessionRequest(ApiModel):
    fee: float | None = Field(default=None, ge=0)
    max_participants: int | None = Field(default=None, ge=1)


class RejectionFeedbackRequest(ApiModel):
    reason: str

    @field_validator('reason')
    @classmethod
    def validate_reason(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError('A rejection reason is required.')
        if len(normalized) > MAX_FEEDBACK_LENGTH:
            raise ValueError(f'Feedback must be {MAX_FEEDBACK_LENGTH} characters or fewer.')
        return normalized


@router.get('/study-session', response_model=list[StudySessionResponse])
def list_study_sessions(db: Session = Depends(get_db)):
    return session_lifecycle.list_public_study_sessions(db)


@router.get('/study-session-details/{study_session_id}', response_model=StudySessionResponse)
@router.get('/study-session-detailes/{study_session_id}', response_model=StudySessionResponse, include_in_schema=False)
def get_study_session_details(study_session_id: int, db: Session = Depends(get_db)):
    return session_lifecycle.get_public_study_session(db, study_session_id)


@router.post(
    '/create-study-session',
    response_model=StudySessionResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_study_session(
    data: CreateStudySessionRequest,
    tutor: Account = Depends(require_tutor),
    db: Session = Depends(get_db),
):
    return session_lifecycle.create_study_session(db, tutor, data.model_dump())


@router.get(
    '/tutor-study-sessions/{email}',
    response_model=list[StudySessionResponse],
    dependencies=[Depends(require_tutor), Depends(require_self)],
)
def list_tutor_study_sessions(email: str, db: Session = Depends(get_db)):
    return session_lifecycle.list_tutor_study_sessions(db, normalize_email(email))


@router.get(
    '/all-study-sessions',
    response_model=list[StudySessionResponse],
    dependencies=[Depends(require_admin)],
)
def list_all_study_sessions(
    status_filter: SessionStatus | None = Query(default=None, alias='status'),
    db: Session = Depends(get_db),
):
    return session_lifecycle.list_all_study_sessions(db, status_filter)


@router.patch('/status-accept-request/{study_session_id}', response_model=StudySessionResponse)
def accept_study_session(
    study_session_id: int,
    data: ApproveRequest,
    admin: Account = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return session_lifecycle.approve(db, study_session_id, admin, data.fee, data.max_participants)


@router.patch('/status-reject-request/{study_session_id}', response_model=StudySessionResponse)
def reject_study_session(
    study_session_id: int,
    admin: Account = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return session_lifecycle.reject(db, study_session_id, admin)


@router.patch('/status-pending-request/{study_session_id}', response_model=StudySessionResponse)
def revert_study_session_to_pending(
    study_session_id: int,
    tutor: Account = Depends(require_tutor),
    db: Session = Depends(get_db),
):
    return session_lifecycle.revert_to_pending(db, study_session_id, tutor)


@router.patch(
    '/update-study-session/{study_session_id}',
    response_model=StudySessionResponse,
    dependencies=[Depends(require_admin)],
)
def update_study_session(
    study_session_id: int,
    data: UpdateStudySessionRequest,
    db: Session = Depends(get_db),
):
    return session_lifecycle.update_study_session(
        db,
        study_session_id,
        fee=data.fee,
        max_participants=data.max_participants,
    )


@router.delete(
    '/delete-study-session/{study_session_id}',
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_admin)],
)
def delete_study_session(study_session_id: int, db: Session = Depends(get_db)):
    session_lifecycle.delete_study_session(db, study_session_id)


@router.post(
    '/rejection-feedback/{study_session_id}',
    response_model=RejectionFeedbackResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def add_rejection_feedback(
    study_session_id: int,
    data: RejectionFeedbackRequest,
    db: Session = Depends(get_db),
):
    return session_lifecycle.record_rejection_feedback(db, study_session_id, data.reason)


@router.get('/rejection-feedback/{study_session_id}', response_model=list[RejectionFeedbackResponse])
def list_rejection_feedback(
    study_session_id: int,
    claims: dict = Depends(require_authenticated),
    db: Session = Depends(get_db),
):
    viewer = accounts.get_account(db, normalize_email(claims['email']))
    if viewer is None:
        raise AuthorizationError()
    return session_lifecycle.list_rejection_feedback(db, study_session_id, viewer)
