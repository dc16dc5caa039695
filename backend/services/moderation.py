# backend/services/moderation.py
"""
Admin moderation: account lifecycle transitions and profile verification.

Every transition stages its AdminAction entry in the same session and
commits once, so the state change and its log row persist together or not
at all. Callers must already hold the admin role; that is checked by the
route dependencies, not here.
"""
import logging
from datetime import datetime, timedelta, timezone

from sqlalchemy import case, func, or_
from sqlalchemy.orm import Session

from models.admin_action import AdminAction, AdminActionType, AdminTargetType
from models.business_profile import BusinessProfile, VerificationStatus
from models.community_profile import CommunityProfile
from models.log import Log
from models.users import AccountStatus, Role, User
from utils.audit import record_admin_action
from utils.errors import NotFound, ValidationError

logger = logging.getLogger(__name__)

PROFILE_MODELS = {
    AdminTargetType.BUSINESS.value: BusinessProfile,
    AdminTargetType.COMMUNITY.value: CommunityProfile,
}


def _get_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFound("User not found")
    return user


# --- Account lifecycle ---

def suspend(db: Session, user_id: int, reason, admin_id: int) -> User:
    user = _get_user(db, user_id)
    if user.id == admin_id:
        raise ValidationError("Cannot suspend yourself")

    previous = user.status
    try:
        user.status = AccountStatus.SUSPENDED.value
        record_admin_action(
            db,
            admin_id=admin_id,
            action_type=AdminActionType.SUSPEND,
            target_type=AdminTargetType.USER,
            target_id=user.id,
            reason=reason,
            previous_state={"status": previous},
            new_state={"status": user.status},
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info("Admin %s suspended user %s", admin_id, user.id)
    db.refresh(user)
    return user


def activate(db: Session, user_id: int, admin_id: int) -> User:
    user = _get_user(db, user_id)

    previous = user.status
    try:
        user.status = AccountStatus.ACTIVE.value
        record_admin_action(
            db,
            admin_id=admin_id,
            action_type=AdminActionType.ACTIVATE,
            target_type=AdminTargetType.USER,
            target_id=user.id,
            previous_state={"status": previous},
            new_state={"status": user.status},
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info("Admin %s activated user %s", admin_id, user.id)
    db.refresh(user)
    return user


def change_role(db: Session, user_id: int, new_role: str, admin_id: int) -> User:
    """Overwrite the account role. Linked profiles are left untouched."""
    if new_role not in {r.value for r in Role}:
        raise ValidationError("Invalid role")

    user = _get_user(db, user_id)
    if user.id == admin_id:
        raise ValidationError("Cannot change your own role")

    previous = user.role
    try:
        user.role = new_role
        record_admin_action(
            db,
            admin_id=admin_id,
            action_type=AdminActionType.ROLE_CHANGE,
            target_type=AdminTargetType.USER,
            target_id=user.id,
            previous_state={"role": previous},
            new_state={"role": new_role},
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info("Admin %s changed role of user %s: %s -> %s", admin_id, user.id, previous, new_role)
    db.refresh(user)
    return user


def update_account_details(db: Session, user_id: int, changes: dict) -> User:
    # Role and status only change through the logged transitions above
    user = _get_user(db, user_id)
    for field in ("name", "phone"):
        if field in changes and changes[field] is not None:
            setattr(user, field, changes[field])
    db.commit()
    db.refresh(user)
    return user


# --- Profile verification ---

def _profile_model(kind: str):
    try:
        return PROFILE_MODELS[kind]
    except KeyError:
        raise ValidationError(f"Unknown profile kind: {kind}")


def verify_profile(db: Session, kind: str, profile_id: int, admin_id: int, decision: str, notes=None):
    """Move a pending profile to approved or rejected.

    Approved and rejected are terminal; deciding on them again is refused.
    The move is a conditional UPDATE on ``verification_status = 'pending'``,
    so of two concurrent decisions only the first one lands.
    """
    if decision == "verified":
        decision = VerificationStatus.APPROVED.value
    if decision not in (VerificationStatus.APPROVED.value, VerificationStatus.REJECTED.value):
        raise ValidationError("Status must be approved or rejected")

    model = _profile_model(kind)
    pending = VerificationStatus.PENDING.value
    action = AdminActionType.VERIFY if decision == VerificationStatus.APPROVED.value else AdminActionType.REJECT
    try:
        updated = (
            db.query(model)
            .filter(model.id == profile_id, model.verification_status == pending)
            .update(
                {
                    model.verification_status: decision,
                    model.verification_notes: notes,
                    model.verified_by: admin_id,
                    model.verified_at: datetime.now(timezone.utc),
                },
                synchronize_session="fetch",
            )
        )
        if updated:
            record_admin_action(
                db,
                admin_id=admin_id,
                action_type=action,
                target_type=kind,
                target_id=profile_id,
                reason=notes,
                previous_state={"verification_status": pending},
                new_state={"verification_status": decision},
            )
        db.commit()
    except Exception:
        db.rollback()
        raise

    profile = db.get(model, profile_id)
    if profile is None:
        raise NotFound(f"{kind.capitalize()} profile not found")
    if not updated:
        raise ValidationError(f"Profile is already {profile.verification_status}")

    logger.info("Admin %s set %s profile %s to %s", admin_id, kind, profile.id, decision)
    return profile


# --- Queries ---

def list_users(db: Session, *, search=None, role=None, status=None, page=1, page_size=20,
               sort_by="created_at", order="desc"):
    query = db.query(User)

    if search:
        like = f"%{search.lower()}%"
        query = query.filter(or_(func.lower(User.name).like(like), func.lower(User.email).like(like)))
    if role:
        query = query.filter(User.role == role)
    if status:
        query = query.filter(User.status == status)

    sort_map = {
        "id": User.id,
        "email": User.email,
        "name": User.name,
        "role": User.role,
        "status": User.status,
        "created_at": User.created_at,
        "last_login": User.last_login,
    }
    col = sort_map.get(sort_by, User.created_at)
    query = query.order_by(col.asc() if order == "asc" else col.desc(), User.id.asc())

    total = query.count()
    users = query.offset((page - 1) * page_size).limit(page_size).all()
    return users, total


def get_user(db: Session, user_id: int) -> User:
    return _get_user(db, user_id)


def _with_owner(profile, user: User) -> dict:
    data = {c.name: getattr(profile, c.name) for c in profile.__table__.columns}
    data["owner_name"] = user.name
    data["owner_email"] = user.email
    data["account_status"] = user.status
    return data


def list_profiles(db: Session, kind: str, *, status=None, city=None, category=None, search=None,
                  page=1, page_size=20, oldest_first=False):
    """Profiles of one kind joined with their owner.

    ``category`` filters on industry sector for businesses and organization
    type for communities.
    """
    model = _profile_model(kind)
    query = db.query(model, User).join(User, model.user_id == User.id)

    if status:
        query = query.filter(model.verification_status == status)
    if city:
        query = query.filter(model.city == city)

    if kind == AdminTargetType.BUSINESS.value:
        name_col, ident_col, category_col = model.business_name, model.gst_number, model.industry_sector
    else:
        name_col, ident_col, category_col = model.organization_name, model.registration_number, model.organization_type

    if category:
        query = query.filter(category_col == category)
    if search:
        like = f"%{search}%"
        query = query.filter(or_(name_col.ilike(like), ident_col.ilike(like)))

    ordering = model.created_at.asc() if oldest_first else model.created_at.desc()
    query = query.order_by(ordering, model.id.asc())

    total = query.count()
    rows = query.offset((page - 1) * page_size).limit(page_size).all()
    return [_with_owner(profile, user) for profile, user in rows], total


def list_pending_profiles(db: Session, kind: str, page=1, page_size=20):
    # Verification queue, oldest submissions first
    return list_profiles(
        db, kind, status=VerificationStatus.PENDING.value,
        page=page, page_size=page_size, oldest_first=True,
    )


def list_admin_actions(db: Session, *, page=1, page_size=50, admin_id=None, action_type=None,
                       target_type=None, target_id=None):
    query = db.query(AdminAction)
    if admin_id is not None:
        query = query.filter(AdminAction.admin_id == admin_id)
    if action_type:
        query = query.filter(AdminAction.action_type == action_type)
    if target_type:
        query = query.filter(AdminAction.target_type == target_type)
    if target_id is not None:
        query = query.filter(AdminAction.target_id == target_id)

    query = query.order_by(AdminAction.created_at.desc(), AdminAction.id.desc())
    total = query.count()
    actions = query.offset((page - 1) * page_size).limit(page_size).all()

    items = []
    for a in actions:
        items.append({
            "id": a.id,
            "admin_id": a.admin_id,
            "admin_name": a.admin.name if a.admin else None,
            "admin_email": a.admin.email if a.admin else None,
            "action_type": a.action_type,
            "target_type": a.target_type,
            "target_id": a.target_id,
            "reason": a.reason,
            "previous_state": a.previous_state,
            "new_state": a.new_state,
            "created_at": a.created_at,
        })
    return items, total


def _count_when(condition):
    return func.coalesce(func.sum(case((condition, 1), else_=0)), 0)


def user_stats(db: Session, now: datetime = None) -> dict:
    now = now or datetime.now(timezone.utc)
    today = now.replace(hour=0, minute=0, second=0, microsecond=0)

    row = db.query(
        func.count(User.id),
        _count_when(User.role == Role.INDIVIDUAL.value),
        _count_when(User.role == Role.BUSINESS.value),
        _count_when(User.role == Role.COMMUNITY.value),
        _count_when(User.role == Role.ADMIN.value),
        _count_when(User.status == AccountStatus.ACTIVE.value),
        _count_when(User.status == AccountStatus.SUSPENDED.value),
        _count_when(User.created_at >= today),
        _count_when(User.created_at >= now - timedelta(days=7)),
        _count_when(User.created_at >= now - timedelta(days=30)),
    ).one()

    keys = (
        "total_users", "individuals", "businesses", "communities", "admins",
        "active_users", "suspended_users", "today_signups", "week_signups", "month_signups",
    )
    return {k: int(v or 0) for k, v in zip(keys, row)}


def pending_counts(db: Session) -> dict:
    pending = VerificationStatus.PENDING.value
    return {
        "pending_businesses": db.query(BusinessProfile).filter(BusinessProfile.verification_status == pending).count(),
        "pending_communities": db.query(CommunityProfile).filter(CommunityProfile.verification_status == pending).count(),
    }


def recent_activity(db: Session, limit: int = 20):
    return db.query(Log).order_by(Log.ts.desc(), Log.id.desc()).limit(limit).all()
