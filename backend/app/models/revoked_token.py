from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.sql import func

from ..database import Base


class RevokedToken(Base):
    """Access tokens invalidated by sign-out, keyed by their `jti` claim."""
    __tablename__ = "revoked_tokens"

    id = Column(Integer, primary_key=True, index=True)
    jti = Column(String(64), unique=True, nullable=False, index=True)
    user_id = Column(Integer, nullable=True)
    revoked_at = Column(DateTime(timezone=True), server_default=func.now())
