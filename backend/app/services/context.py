"""
Explicit per-request context threaded through every service call.

There is no process-wide "current user": the HTTP layer builds a
`ServiceContext` from the bearer token and hands it to the services, and tests
build one directly with whatever identity they need.
"""
from dataclasses import dataclass

from sqlalchemy.orm import Session

from ..utils.error_handlers import ForbiddenError, UnauthorizedError, get_error_message


@dataclass(frozen=True)
class Identity:
    user_id: int
    role: str
    token_id: str | None = None


@dataclass(frozen=True)
class ServiceContext:
    db: Session
    identity: Identity | None = None

    def require_identity(self) -> Identity:
        if self.identity is None:
            raise UnauthorizedError(get_error_message("not_authenticated"))
        return self.identity

    def require_role(self, *roles: str) -> Identity:
        identity = self.require_identity()
        if identity.role not in roles:
            raise ForbiddenError(f"{' / '.join(r.capitalize() for r in roles)} access only")
        return identity

    def with_identity(self, identity: Identity | None) -> "ServiceContext":
        return ServiceContext(db=self.db, identity=identity)
