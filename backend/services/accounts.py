# backend/services/accounts.py
"""
Account registration, login and self-service profile changes.

Functions raise errors from ``utils.errors``; mapping them to HTTP responses
happens in the exception handlers registered by ``main.py``.
"""
import logging
from datetime import datetime, timezone

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from config import settings
from models.business_profile import BUSINESS_EDITABLE_FIELDS, BusinessProfile, VerificationStatus
from models.community_profile import COMMUNITY_EDITABLE_FIELDS, CommunityProfile
from models.impact import UserImpact
from models.users import AccountStatus, Role, SELF_SERVICE_ROLES, User
from schemas.user import PasswordChange, ProfileUpdate, UserCreate
from utils.errors import AccountSuspended, AuthError, ValidationError
from utils.hashing import get_password_hash, verify_password
from utils.tokenJWT import create_access_token

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def get_user_by_email(db: Session, email: str):
    return db.query(User).filter(func.lower(User.email) == normalize_email(email)).first()


def _check_password_length(password: str, label: str = "Password") -> None:
    if len(password or "") < settings.PASSWORD_MIN_LENGTH:
        raise ValidationError(f"{label} must be at least {settings.PASSWORD_MIN_LENGTH} characters")


def _validate_registration(db: Session, payload: UserCreate) -> None:
    if not payload.name or not payload.name.strip() or not payload.email or not payload.password:
        raise ValidationError("Name, email and password are required")

    _check_password_length(payload.password)

    allowed = {r.value for r in SELF_SERVICE_ROLES}
    if payload.role not in allowed:
        raise ValidationError("Invalid role")

    if get_user_by_email(db, payload.email):
        raise ValidationError("Email already registered")

    # Profile payloads are checked before anything is written
    if payload.role == Role.BUSINESS.value and payload.business_profile:
        bp = payload.business_profile
        if not bp.business_name or not bp.business_type:
            raise ValidationError("Business name and type are required for business accounts")

    if payload.role == Role.COMMUNITY.value and payload.community_profile:
        cp = payload.community_profile
        if not cp.organization_name or not cp.organization_type:
            raise ValidationError("Organization name and type are required for community accounts")


def register(db: Session, payload: UserCreate):
    """Create an account (and its pending profile, if supplied) and issue a token.

    Returns ``(token, user)``.
    """
    _validate_registration(db, payload)

    user = User(
        email=normalize_email(payload.email),
        password_hash=get_password_hash(payload.password),
        name=payload.name.strip(),
        phone=payload.phone,
        role=payload.role,
        status=AccountStatus.ACTIVE.value,
    )
    try:
        db.add(user)
        db.flush()

        db.add(UserImpact(user_id=user.id))

        if user.role == Role.BUSINESS.value and payload.business_profile:
            db.add(BusinessProfile(
                user_id=user.id,
                verification_status=VerificationStatus.PENDING.value,
                **payload.business_profile.model_dump(),
            ))
        elif user.role == Role.COMMUNITY.value and payload.community_profile:
            db.add(CommunityProfile(
                user_id=user.id,
                verification_status=VerificationStatus.PENDING.value,
                **payload.community_profile.model_dump(),
            ))

        db.commit()
    except IntegrityError:
        # A concurrent registration took the email between the check and the insert
        db.rollback()
        raise ValidationError("Email already registered")

    db.refresh(user)
    logger.info("Registered account %s with role %s", user.id, user.role)

    return create_access_token(user), user


def login(db: Session, email: str, password: str):
    """Check credentials and issue a fresh token. Returns ``(token, user)``."""
    user = get_user_by_email(db, email)
    if not user or not verify_password(password, user.password_hash):
        raise AuthError("Invalid email or password")

    # Checked after the password so the response does not reveal which emails exist
    if user.is_suspended:
        raise AccountSuspended("Your account has been suspended. Please contact support.")

    user.last_login = datetime.now(timezone.utc)
    db.commit()
    db.refresh(user)

    return create_access_token(user), user


def update_profile(db: Session, user: User, payload: ProfileUpdate) -> User:
    """Apply the allow-listed fields of ``payload`` to the account and its profile."""
    changes = payload.model_dump(include={"name", "phone", "avatar"}, exclude_unset=True)
    if "name" in changes and not (changes["name"] or "").strip():
        raise ValidationError("Name cannot be empty")
    for field, value in changes.items():
        setattr(user, field, value)

    # Profiles are edited only when they match the current role
    if user.role == Role.BUSINESS.value and payload.business_profile and user.business_profile:
        for field, value in payload.business_profile.model_dump(
            include=set(BUSINESS_EDITABLE_FIELDS), exclude_unset=True, exclude_none=True,
        ).items():
            setattr(user.business_profile, field, value)

    if user.role == Role.COMMUNITY.value and payload.community_profile and user.community_profile:
        for field, value in payload.community_profile.model_dump(
            include=set(COMMUNITY_EDITABLE_FIELDS), exclude_unset=True, exclude_none=True,
        ).items():
            setattr(user.community_profile, field, value)

    db.commit()
    db.refresh(user)
    return user


def change_password(db: Session, user: User, payload: PasswordChange) -> None:
    if not payload.current_password or not payload.new_password:
        raise ValidationError("Current and new password are required")

    _check_password_length(payload.new_password, label="New password")

    if not verify_password(payload.current_password, user.password_hash):
        raise AuthError("Current password is incorrect")

    user.password_hash = get_password_hash(payload.new_password)
    db.commit()
