"""
Identity operations: sign-up, sign-in, sign-out, session hydration and
profile updates. The caller's identity is always read from the
`ServiceContext`; nothing here keeps a process-wide current user.
"""
import logging
from dataclasses import dataclass

from ..models.enums import UserType
from ..models.revoked_token import RevokedToken
from ..models.user import User
from ..models.user_profile import UserProfile
from ..utils.error_handlers import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
    get_error_message,
)
from ..utils.jwt import create_access_token
from ..utils.security import hash_password, verify_password
from ..utils.validation import (
    validate_email,
    validate_password,
    validate_password_confirmation,
    validate_user_type,
)
from .context import Identity, ServiceContext
from .projections import profile_to_dict
from .store import store_errors, utcnow

logger = logging.getLogger(__name__)

SIGNUP_USER_TYPES = {UserType.CANDIDATE.value, UserType.EMPLOYER.value}

PROFILE_FIELDS = (
    "first_name",
    "last_name",
    "phone",
    "bio",
    "location",
    "profile_picture_url",
    "resume_url",
    "linkedin_url",
    "github_url",
    "portfolio_url",
    "skills",
    "experience_years",
)


@dataclass
class AuthSession:
    access_token: str
    identity: Identity
    email: str
    profile: dict | None
    token_type: str = "bearer"

    def to_dict(self) -> dict:
        return {
            "access_token": self.access_token,
            "token_type": self.token_type,
            "user": {"id": self.identity.user_id, "email": self.email, "role": self.identity.role},
            "profile": self.profile,
        }


def _issue_session(user: User, profile: UserProfile | None) -> AuthSession:
    token = create_access_token({"sub": str(user.id), "role": user.role})
    return AuthSession(
        access_token=token,
        identity=Identity(user_id=user.id, role=user.role),
        email=user.email,
        profile=profile_to_dict(profile),
    )


def sign_up(
    ctx: ServiceContext,
    email: str,
    password: str,
    attributes: dict | None = None,
    password_confirm: str | None = None,
) -> AuthSession:
    """
    Register an account and its profile.

    Password checks happen before the store is touched, so a mismatched
    confirmation never reaches the database.
    """
    attributes = attributes or {}
    validate_password_confirmation(password, password_confirm)
    validate_password(password)
    email = validate_email(email)
    user_type = validate_user_type(attributes.get("user_type") or UserType.CANDIDATE.value)
    if user_type not in SIGNUP_USER_TYPES:
        raise ValidationError("Only candidate or employer accounts can register")

    with store_errors(ctx.db, "checking existing user"):
        existing = ctx.db.query(User.id).filter(User.email == email).first()
    if existing:
        raise ConflictError(get_error_message("email_exists"))

    try:
        hashed = hash_password(password)
    except ValueError as e:
        raise ValidationError(str(e)) from e

    user = User(email=email, password=hashed, role=user_type)
    profile = UserProfile(
        user=user,
        user_type=user_type,
        first_name=(attributes.get("first_name") or "").strip(),
        last_name=(attributes.get("last_name") or "").strip(),
        experience_years=0,
    )
    with store_errors(ctx.db, "creating user"):
        ctx.db.add(user)
        ctx.db.add(profile)
        ctx.db.commit()
        ctx.db.refresh(user)
        ctx.db.refresh(profile)

    logger.info("Registered %s account %s", user_type, user.id)
    return _issue_session(user, profile)


def sign_in(ctx: ServiceContext, email: str, password: str, role: str | None = None) -> AuthSession:
    email = validate_email(email)
    if not password:
        raise ValidationError("Password is required")

    with store_errors(ctx.db, "login"):
        user = ctx.db.query(User).filter(User.email == email).first()

    if not user or not verify_password(password, user.password):
        logger.warning("Failed sign-in for %s", email)
        raise UnauthorizedError(get_error_message("invalid_credentials"))

    if role and user.role != role:
        raise ForbiddenError("Role mismatch. Please select the correct account type.")

    logger.info("User %s signed in", user.id)
    return _issue_session(user, user.profile)


def sign_out(ctx: ServiceContext) -> None:
    """Revoke the token the current identity was authenticated with."""
    identity = ctx.require_identity()
    if not identity.token_id:
        return
    with store_errors(ctx.db, "revoking token"):
        already = ctx.db.query(RevokedToken.id).filter(RevokedToken.jti == identity.token_id).first()
        if not already:
            ctx.db.add(RevokedToken(jti=identity.token_id, user_id=identity.user_id))
            ctx.db.commit()
    logger.info("User %s signed out", identity.user_id)


def get_session(ctx: ServiceContext) -> dict:
    """Hydrate the current identity with its account and profile."""
    identity = ctx.require_identity()
    with store_errors(ctx.db, "loading session"):
        user = ctx.db.query(User).filter(User.id == identity.user_id).first()
    if user is None:
        raise UnauthorizedError(get_error_message("session_expired"))
    return {
        "user": {"id": user.id, "email": user.email, "role": user.role},
        "profile": profile_to_dict(user.profile),
    }


def _clean_profile_updates(partial: dict) -> dict:
    updates = {k: v for k, v in partial.items() if k in PROFILE_FIELDS}
    if "experience_years" in updates:
        raw = updates["experience_years"]
        try:
            updates["experience_years"] = max(int(raw or 0), 0)
        except (TypeError, ValueError):
            updates["experience_years"] = 0
    for key, value in list(updates.items()):
        if isinstance(value, str):
            value = value.strip()
            if key in ("first_name", "last_name"):
                updates[key] = value
            else:
                updates[key] = value or None
    return updates


def update_profile(ctx: ServiceContext, partial: dict) -> dict:
    """Write profile fields and return the refreshed profile."""
    identity = ctx.require_identity()
    with store_errors(ctx.db, "loading profile"):
        profile = ctx.db.query(UserProfile).filter(UserProfile.user_id == identity.user_id).first()
    if profile is None:
        raise NotFoundError(get_error_message("profile_not_found"))

    for key, value in _clean_profile_updates(partial).items():
        setattr(profile, key, value)
    profile.updated_at = utcnow()

    with store_errors(ctx.db, "updating profile"):
        ctx.db.commit()
        ctx.db.refresh(profile)
    return profile_to_dict(profile)
