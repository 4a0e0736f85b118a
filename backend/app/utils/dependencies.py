import logging

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.revoked_token import RevokedToken
from ..services.context import Identity, ServiceContext
from .error_handlers import UnauthorizedError, get_error_message
from .jwt import decode_access_token

logger = logging.getLogger(__name__)

_bearer = HTTPBearer(auto_error=False)


def _identity_from_token(db: Session, token: str) -> Identity:
    payload = decode_access_token(token)
    if not payload or not payload.get("sub"):
        raise UnauthorizedError(get_error_message("session_expired"))

    jti = payload.get("jti")
    if jti and db.query(RevokedToken.id).filter(RevokedToken.jti == jti).first():
        logger.info("Rejected revoked token for user %s", payload.get("sub"))
        raise UnauthorizedError(get_error_message("session_expired"))

    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError):
        raise UnauthorizedError(get_error_message("session_expired")) from None
    return Identity(user_id=user_id, role=str(payload.get("role") or ""), token_id=jti)


def get_optional_identity(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
    db: Session = Depends(get_db),
) -> Identity | None:
    if credentials is None or not credentials.credentials:
        return None
    return _identity_from_token(db, credentials.credentials)


def get_current_identity(identity: Identity | None = Depends(get_optional_identity)) -> Identity:
    if identity is None:
        raise UnauthorizedError(get_error_message("unauthorized"))
    return identity


def get_context(
    db: Session = Depends(get_db),
    identity: Identity | None = Depends(get_optional_identity),
) -> ServiceContext:
    return ServiceContext(db=db, identity=identity)


def get_authenticated_context(
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
) -> ServiceContext:
    return ServiceContext(db=db, identity=identity)
