import datetime
import logging
from datetime import timezone

import jwt
from werkzeug.security import check_password_hash, generate_password_hash

from .config import settings
from .errors import Unauthenticated

logger = logging.getLogger(__name__)


class TokenExpired(Unauthenticated):
    pass


class TokenInvalid(Unauthenticated):
    pass


def hash_password(password: str) -> str:
    return generate_password_hash(password)


def verify_password(password: str, hashed: str) -> bool:
    if not hashed:
        return False
    return check_password_hash(hashed, password)


def create_token(user, *, expires_minutes: int | None = None) -> str:
    """Sign a bearer token for ``user`` (anything with ``id`` and ``email``)."""
    now = datetime.datetime.now(timezone.utc)
    minutes = expires_minutes or settings.jwt_expires_minutes
    payload = {
        # PyJWT requires the subject to be a string
        "sub": str(user.id),
        "email": user.email,
        "iat": now,
        "exp": now + datetime.timedelta(minutes=minutes),
    }
    return jwt.encode(payload, settings.jwt_secret,
                      algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> dict:
    try:
        return jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["exp", "sub"]},
        )
    except jwt.ExpiredSignatureError:
        logger.info("Rejected bearer token (expired)")
        raise TokenExpired()
    except jwt.InvalidTokenError as exc:
        logger.info("Rejected bearer token (invalid, %s)",
                    exc.__class__.__name__)
        raise TokenInvalid()


def token_subject(payload: dict) -> int:
    try:
        return int(payload["sub"])
    except (KeyError, TypeError, ValueError):
        logger.info("Rejected bearer token (malformed subject)")
        raise TokenInvalid()
