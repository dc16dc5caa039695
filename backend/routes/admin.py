# backend/routes/admin.py
from fastapi import APIRouter, Depends, Query
from typing import Literal, Optional
from sqlalchemy.orm import Session

from database import get_db
from models.users import Role, User
from schemas import admin as schemas
from schemas.profile import VerifyRequest
from schemas.user import AdminUserUpdate, MessageResponse, RoleUpdate, SuspendRequest, UserResponse
from services import moderation
from utils.tokenJWT import role_required

# Every route here requires an active admin account
require_admin = role_required(Role.ADMIN)

router = APIRouter(prefix="/admin", tags=["Admin"], dependencies=[Depends(require_admin)])


@router.get("/dashboard", response_model=schemas.DashboardResponse)
def dashboard(db: Session = Depends(get_db)):
    return {
        "users": moderation.user_stats(db),
        "pending": moderation.pending_counts(db),
        "recent_activity": moderation.recent_activity(db),
    }


# Retrieve a list of users with filtering, sorting, and pagination
@router.get("/users", response_model=schemas.PaginatedUsersResponse)
def get_all_users(
    search: Optional[str] = Query(None, description="Search by name or e-mail"),
    role: Optional[str] = Query(None, description="Filter by role"),
    status: Optional[str] = Query(None, description="Filter by status"),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    sort_by: Literal["id", "email", "name", "role", "status", "created_at", "last_login"] = "created_at",
    order: Literal["asc", "desc"] = "desc",
    db: Session = Depends(get_db),
):
    users, total = moderation.list_users(
        db, search=search, role=role, status=status,
        page=page, page_size=page_size, sort_by=sort_by, order=order,
    )
    return {"items": users, "total": total, "page": page, "page_size": page_size}


@router.get("/users/{user_id}", response_model=UserResponse)
def get_user(user_id: int, db: Session = Depends(get_db)):
    return moderation.get_user(db, user_id)


# Update plain account details; role and status have dedicated endpoints
@router.put("/users/{user_id}", response_model=UserResponse)
def update_user(user_id: int, payload: AdminUserUpdate, db: Session = Depends(get_db)):
    return moderation.update_account_details(db, user_id, payload.model_dump(exclude_unset=True))


@router.post("/users/{user_id}/suspend", response_model=MessageResponse)
def suspend_user(
    user_id: int,
    payload: SuspendRequest = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    reason = payload.reason if payload else None
    moderation.suspend(db, user_id, reason, current_user.id)
    return {"message": "User suspended successfully"}


@router.post("/users/{user_id}/activate", response_model=MessageResponse)
def activate_user(user_id: int, db: Session = Depends(get_db), current_user: User = Depends(require_admin)):
    moderation.activate(db, user_id, current_user.id)
    return {"message": "User activated successfully"}


# Update user role
@router.post("/users/{user_id}/role", response_model=MessageResponse)
def update_user_role(
    user_id: int,
    new_role: RoleUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    user = moderation.change_role(db, user_id, new_role.role, current_user.id)
    return {"message": f"User {user.email} role updated to {user.role}"}


# Pending business and community verifications, first page of each
@router.get("/pending", response_model=schemas.PendingProfilesResponse)
def pending(db: Session = Depends(get_db)):
    businesses, _ = moderation.list_pending_profiles(db, "business", page=1, page_size=10)
    communities, _ = moderation.list_pending_profiles(db, "community", page=1, page_size=10)
    return {"businesses": businesses, "communities": communities}


# --- Business verification ---

@router.get("/businesses", response_model=schemas.BusinessProfilePage)
def list_businesses(
    status: Optional[str] = Query(None, description="Verification status"),
    city: Optional[str] = None,
    sector: Optional[str] = None,
    search: Optional[str] = Query(None, description="Search by name or GST number"),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
):
    items, total = moderation.list_profiles(
        db, "business", status=status, city=city, category=sector, search=search,
        page=page, page_size=page_size,
    )
    return {"items": items, "total": total, "page": page, "page_size": page_size}


@router.get("/businesses/pending", response_model=schemas.BusinessProfilePage)
def pending_businesses(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
):
    items, total = moderation.list_pending_profiles(db, "business", page=page, page_size=page_size)
    return {"items": items, "total": total, "page": page, "page_size": page_size}


@router.post("/businesses/{profile_id}/verify", response_model=schemas.BusinessVerifyResponse)
def verify_business(
    profile_id: int,
    payload: VerifyRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    profile = moderation.verify_profile(db, "business", profile_id, current_user.id, payload.status, payload.notes)
    return {"message": f"Business {profile.verification_status}", "profile": profile}


# --- Community verification ---

@router.get("/communities", response_model=schemas.CommunityProfilePage)
def list_communities(
    status: Optional[str] = Query(None, description="Verification status"),
    city: Optional[str] = None,
    type: Optional[str] = Query(None, description="Organization type"),
    search: Optional[str] = Query(None, description="Search by name or registration number"),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
):
    items, total = moderation.list_profiles(
        db, "community", status=status, city=city, category=type, search=search,
        page=page, page_size=page_size,
    )
    return {"items": items, "total": total, "page": page, "page_size": page_size}


@router.get("/communities/pending", response_model=schemas.CommunityProfilePage)
def pending_communities(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
):
    items, total = moderation.list_pending_profiles(db, "community", page=page, page_size=page_size)
    return {"items": items, "total": total, "page": page, "page_size": page_size}


@router.post("/communities/{profile_id}/verify", response_model=schemas.CommunityVerifyResponse)
def verify_community(
    profile_id: int,
    payload: VerifyRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    profile = moderation.verify_profile(db, "community", profile_id, current_user.id, payload.status, payload.notes)
    return {"message": f"Community {profile.verification_status}", "profile": profile}


# Admin action log, newest first
@router.get("/logs", response_model=schemas.AdminActionPage)
def admin_logs(
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=200),
    action_type: Optional[str] = None,
    target_type: Optional[str] = None,
    target_id: Optional[int] = None,
    db: Session = Depends(get_db),
):
    items, total = moderation.list_admin_actions(
        db, page=page, page_size=page_size, action_type=action_type,
        target_type=target_type, target_id=target_id,
    )
    return {"items": items, "total": total, "page": page, "page_size": page_size}
