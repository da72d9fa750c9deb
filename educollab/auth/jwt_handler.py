from datetime import datetime, timedelta, timezone

import jwt

from educollab.core import config
from educollab.core.errors import AuthenticationError, AuthenticationFailure

RESERVED_CLAIMS = ("exp", "iat")


def create_access_token(claims: dict, expires_minutes: int | None = None) -> str:
    if not claims.get("email"):
        raise ValueError("Token claims must include an email.")

    expire_minutes = config.JWT_EXPIRES_MINUTES if expires_minutes is None else expires_minutes
    now = datetime.now(timezone.utc)
    payload = {key: value for key, value in claims.items() if key not in RESERVED_CLAIMS}
    payload.update({"exp": now + timedelta(minutes=expire_minutes), "iat": now})
    return jwt.encode(payload, config.JWT_SECRET_KEY, algorithm=config.JWT_ALGORITHM)


def decode_access_token(token: str) -> dict:
    try:
        payload = jwt.decode(
            token,
            config.JWT_SECRET_KEY,
            algorithms=[config.JWT_ALGORITHM],
            options={"require": ["exp"]},
        )
    except jwt.ExpiredSignatureError as exc:
        raise AuthenticationError(AuthenticationFailure.EXPIRED) from exc
    except jwt.InvalidTokenError as exc:
        raise AuthenticationError(AuthenticationFailure.INVALID) from exc

    if not payload.get("email"):
        raise AuthenticationError(AuthenticationFailure.INVALID)
    return payload
