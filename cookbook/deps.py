import logging
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from . import crud, schemas
from .db import SessionLocal
from .errors import Unauthenticated
from .security import decode_token, token_subject

logger = logging.getLogger(__name__)

bearer = HTTPBearer(auto_error=False)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
    db: Session = Depends(get_db),
) -> schemas.CurrentUser:
    """Resolve the bearer token to the caller's public identity.

    Expired, invalid and orphaned tokens all end in the same 401; only the
    log line tells them apart.
    """
    if credentials is None or credentials.scheme.lower() != "bearer":
        logger.info("Rejected request without bearer token")
        raise Unauthenticated()
    payload = decode_token(credentials.credentials)
    user = crud.get_user(db, token_subject(payload))
    if user is None:
        # token outlived its user
        logger.info("Rejected bearer token (unknown user %s)", payload["sub"])
        raise Unauthenticated()
    return schemas.CurrentUser(id=user.id, email=user.email)
