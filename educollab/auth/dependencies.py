"""Request guards for protected routes.

Guards are FastAPI dependencies and compose left to right: ``require_role``
and ``require_self`` depend on ``require_authenticated``, so a request whose
token is missing or invalid never reaches the role lookup. Each guard wraps a
plain function that can be exercised without a request.
"""

import logging

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from educollab.auth import jwt_handler
from educollab.core.errors import AuthenticationError, AuthenticationFailure, AuthorizationError
from educollab.database import get_db
from educollab.models.account import Account, Role

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def normalize_email(value: str) -> str:
    return value.strip().lower()


def authenticate(credentials: HTTPAuthorizationCredentials | None) -> dict:
    if credentials is None or not credentials.credentials:
        raise AuthenticationError(AuthenticationFailure.MISSING)
    return jwt_handler.decode_access_token(credentials.credentials)


def authorize_role(db: Session, email: str, role: Role) -> Account:
    account = db.query(Account).filter(Account.email == normalize_email(email)).first()
    if account is None or account.role_value != role:
        logger.warning("Denied %s access to %s", role.value, email)
        raise AuthorizationError()
    return account


def ensure_self(claims: dict, email: str) -> None:
    if normalize_email(claims.get("email", "")) != normalize_email(email):
        logger.warning("Denied %s access to identity %s", claims.get("email"), email)
        raise AuthorizationError()


def require_authenticated(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> dict:
    try:
        claims = authenticate(credentials)
    except AuthenticationError as exc:
        logger.warning("Rejected request to %s: %s token", request.url.path, exc.reason.value)
        raise
    request.state.claims = claims
    return claims


def require_role(role: Role):
    def guard(
        claims: dict = Depends(require_authenticated),
        db: Session = Depends(get_db),
    ) -> Account:
        return authorize_role(db, claims["email"], role)

    guard.__name__ = f"require_{role.value}"
    return guard


def require_self(email: str, claims: dict = Depends(require_authenticated)) -> dict:
    ensure_self(claims, email)
    return claims


require_admin = require_role(Role.ADMIN)
require_tutor = require_role(Role.TUTOR)
require_student = require_role(Role.STUDENT)
