"""Study session approval workflow.

A session is created ``pending``; an admin approves it (``success``) or
rejects it (``rejected``), and the owning tutor can send it back to
``pending``. Every transition is applied as one conditional UPDATE so the
stored status only changes if it still matches an allowed source state at
write time.
"""

import logging
from dataclasses import dataclass
from enum import Enum

from sqlalchemy import or_, update
from sqlalchemy.orm import Session

from educollab.core.errors import AuthorizationError, invalid_state, not_found
from educollab.models.account import Account, Role
from educollab.models.study_session import RejectionFeedback, SessionStatus, StudySession

logger = logging.getLogger(__name__)


class SessionEvent(str, Enum):
    APPROVE = "approve"
    REJECT = "reject"
    REVERT_TO_PENDING = "revert_to_pending"


@dataclass(frozen=True)
class Transition:
    sources: frozenset[SessionStatus]
    target: SessionStatus
    actor: Role
    owner_only: bool = False


TRANSITIONS = {
    SessionEvent.APPROVE: Transition(
        sources=frozenset({SessionStatus.PENDING}),
        target=SessionStatus.SUCCESS,
        actor=Role.ADMIN,
    ),
    SessionEvent.REJECT: Transition(
        sources=frozenset(SessionStatus),
        target=SessionStatus.REJECTED,
        actor=Role.ADMIN,
    ),
    # rejected sessions may be resubmitted by their tutor
    SessionEvent.REVERT_TO_PENDING: Transition(
        sources=frozenset(SessionStatus),
        target=SessionStatus.PENDING,
        actor=Role.TUTOR,
        owner_only=True,
    ),
}


OWNER_FIELDS = ("tutor_email", "tutor_name", "status")


def _status_in(sources: frozenset[SessionStatus]):
    condition = StudySession.status.in_([status.value for status in sources])
    if SessionStatus.PENDING in sources:
        condition = or_(condition, StudySession.status.is_(None))
    return condition


def get_study_session(db: Session, study_session_id: int) -> StudySession:
    study_session = db.query(StudySession).filter(StudySession.id == study_session_id).first()
    if study_session is None:
        raise not_found("Study session not found.")
    return study_session


def apply_transition(
    db: Session,
    study_session_id: int,
    event: SessionEvent,
    actor: Account,
    values: dict | None = None,
) -> StudySession:
    transition = TRANSITIONS[event]
    if actor.role_value != transition.actor:
        raise AuthorizationError()

    statement = (
        update(StudySession)
        .where(StudySession.id == study_session_id, _status_in(transition.sources))
        .values(status=transition.target.value, **(values or {}))
        .execution_options(synchronize_session=False)
    )
    if transition.owner_only:
        statement = statement.where(StudySession.tutor_email == actor.email)

    result = db.execute(statement)
    if result.rowcount == 0:
        db.rollback()
        study_session = get_study_session(db, study_session_id)
        if transition.owner_only and study_session.tutor_email != actor.email:
            raise AuthorizationError("Only the tutor who created this session can change it.")
        raise invalid_state(
            f"Cannot {event.value.replace('_', ' ')} a study session that is {study_session.current_status.value}."
        )

    db.commit()
    logger.info(
        "Study session %s moved to %s by %s (%s)",
        study_session_id,
        transition.target.value,
        actor.email,
        event.value,
    )
    study_session = get_study_session(db, study_session_id)
    db.refresh(study_session)
    return study_session


def approve(db: Session, study_session_id: int, actor: Account, fee: float, max_participants: int) -> StudySession:
    return apply_transition(
        db,
        study_session_id,
        SessionEvent.APPROVE,
        actor,
        values={"fee": fee, "max_participants": max_participants},
    )


def reject(db: Session, study_session_id: int, actor: Account) -> StudySession:
    return apply_transition(db, study_session_id, SessionEvent.REJECT, actor)


def revert_to_pending(db: Session, study_session_id: int, actor: Account) -> StudySession:
    return apply_transition(db, study_session_id, SessionEvent.REVERT_TO_PENDING, actor)


def create_study_session(db: Session, tutor: Account, data: dict) -> StudySession:
    fields = {key: value for key, value in data.items() if key not in OWNER_FIELDS}
    study_session = StudySession(
        **fields,
        tutor_email=tutor.email,
        tutor_name=data.get("tutor_name") or tutor.name,
        status=SessionStatus.PENDING.value,
    )
    db.add(study_session)
    db.commit()
    db.refresh(study_session)
    logger.info("Tutor %s proposed study session %s", tutor.email, study_session.id)
    return study_session


def list_public_study_sessions(db: Session) -> list[StudySession]:
    return (
        db.query(StudySession)
        .filter(StudySession.status == SessionStatus.SUCCESS.value)
        .order_by(StudySession.id.asc())
        .all()
    )


def get_public_study_session(db: Session, study_session_id: int) -> StudySession:
    study_session = get_study_session(db, study_session_id)
    if study_session.current_status != SessionStatus.SUCCESS:
        raise not_found("Study session not found.")
    return study_session


def list_tutor_study_sessions(db: Session, tutor_email: str) -> list[StudySession]:
    return (
        db.query(StudySession)
        .filter(StudySession.tutor_email == tutor_email)
        .order_by(StudySession.id.asc())
        .all()
    )


def list_all_study_sessions(db: Session, status: SessionStatus | None = None) -> list[StudySession]:
    query = db.query(StudySession)
    if status is not None:
        query = query.filter(_status_in(frozenset({status})))
    return query.order_by(StudySession.id.asc()).all()


def update_study_session(
    db: Session,
    study_session_id: int,
    fee: float | None = None,
    max_participants: int | None = None,
) -> StudySession:
    study_session = get_study_session(db, study_session_id)
    if fee is not None:
        study_session.fee = fee
    if max_participants is not None:
        study_session.max_participants = max_participants
    db.commit()
    db.refresh(study_session)
    return study_session


def delete_study_session(db: Session, study_session_id: int) -> None:
    study_session = get_study_session(db, study_session_id)
    db.delete(study_session)
    db.commit()
    logger.info("Study session %s deleted", study_session_id)


def record_rejection_feedback(db: Session, study_session_id: int, reason: str) -> RejectionFeedback:
    study_session = get_study_session(db, study_session_id)
    if study_session.current_status != SessionStatus.REJECTED:
        raise invalid_state("Feedback can only be added to a rejected study session.")

    feedback = RejectionFeedback(study_session_id=study_session_id, reason=reason)
    db.add(feedback)
    db.commit()
    db.refresh(feedback)
    return feedback


def list_rejection_feedback(db: Session, study_session_id: int, viewer: Account) -> list[RejectionFeedback]:
    study_session = get_study_session(db, study_session_id)
    role = viewer.role_value
    if role != Role.ADMIN and not (role == Role.TUTOR and study_session.tutor_email == viewer.email):
        raise AuthorizationError()
    return list(study_session.feedback)
