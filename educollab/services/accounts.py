import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from educollab.core import config
from educollab.core.errors import ValidationError, ValidationFailure, not_found
from educollab.models.account import Account, Role

logger = logging.getLogger(__name__)


def get_account(db: Session, email: str) -> Account | None:
    return db.query(Account).filter(Account.email == email).first()


def register_account(
    db: Session,
    email: str,
    role: Role = Role.UNASSIGNED,
    name: str | None = None,
    photo_url: str | None = None,
) -> Account:
    if email in config.ADMIN_EMAILS:
        role = Role.ADMIN

    account = Account(email=email, role=role.value, name=name, photo_url=photo_url)
    db.add(account)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ValidationError(
            ValidationFailure.DUPLICATE_EMAIL,
            "Email already exists!",
            insertedId=None,
        ) from exc

    db.refresh(account)
    logger.info("Registered %s account for %s", account.role, email)
    return account


def promote_account(db: Session, email: str, role: Role = Role.ADMIN) -> Account:
    account = get_account(db, email)
    if account is None:
        raise not_found("Account not found.")

    account.role = role.value
    db.commit()
    db.refresh(account)
    logger.info("Account %s promoted to %s", email, role.value)
    return account


def list_accounts(db: Session) -> list[Account]:
    return db.query(Account).order_by(Account.id.asc()).all()
