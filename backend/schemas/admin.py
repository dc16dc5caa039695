# backend/schemas/admin.py
from pydantic import BaseModel
from typing import Any, List, Optional
from datetime import datetime

from schemas.user import UserResponse
from schemas.profile import BusinessProfileOut, CommunityProfileOut


# Schema for paginated user list response
class PaginatedUsersResponse(BaseModel):
    items: List[UserResponse]
    total: int
    page: int
    page_size: int


# Profile row with the owning account's contact details
class BusinessProfileWithOwner(BusinessProfileOut):
    owner_name: Optional[str] = None
    owner_email: Optional[str] = None
    account_status: Optional[str] = None


class CommunityProfileWithOwner(CommunityProfileOut):
    owner_name: Optional[str] = None
    owner_email: Optional[str] = None
    account_status: Optional[str] = None


class BusinessProfilePage(BaseModel):
    items: List[BusinessProfileWithOwner]
    total: int
    page: int
    page_size: int


class CommunityProfilePage(BaseModel):
    items: List[CommunityProfileWithOwner]
    total: int
    page: int
    page_size: int


class PendingProfilesResponse(BaseModel):
    businesses: List[BusinessProfileWithOwner]
    communities: List[CommunityProfileWithOwner]


class BusinessVerifyResponse(BaseModel):
    message: str
    profile: BusinessProfileOut


class CommunityVerifyResponse(BaseModel):
    message: str
    profile: CommunityProfileOut


class AdminActionOut(BaseModel):
    id: int
    admin_id: int
    admin_name: Optional[str] = None
    admin_email: Optional[str] = None
    action_type: str
    target_type: str
    target_id: int
    reason: Optional[str] = None
    previous_state: Optional[Any] = None
    new_state: Optional[Any] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class AdminActionPage(BaseModel):
    items: List[AdminActionOut]
    total: int
    page: int
    page_size: int


class UserStats(BaseModel):
    total_users: int = 0
    individuals: int = 0
    businesses: int = 0
    communities: int = 0
    admins: int = 0
    active_users: int = 0
    suspended_users: int = 0
    today_signups: int = 0
    week_signups: int = 0
    month_signups: int = 0


class PendingCounts(BaseModel):
    pending_businesses: int = 0
    pending_communities: int = 0


class ActivityItem(BaseModel):
    id: int
    user_id: Optional[int] = None
    action: str
    resource: str
    status: str
    ts: Optional[datetime] = None

    class Config:
        from_attributes = True


class DashboardResponse(BaseModel):
    users: UserStats
    pending: PendingCounts
    recent_activity: List[ActivityItem]
