from pydantic import BaseModel, ConfigDict, EmailStr, Field
from typing import List, Optional
from datetime import datetime

from schemas.profile import (
    BusinessProfileCreate, BusinessProfileOut, BusinessProfileUpdate,
    CommunityProfileCreate, CommunityProfileOut, CommunityProfileUpdate,
)

# Shared properties for user models
class UserBase(BaseModel):
    email: EmailStr

# Schema for user authentication credentials
class UserLogin(UserBase):
    password: str

# Schema for user registration requests
class UserCreate(UserBase):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    password: str
    role: str = "individual"  # default role
    phone: Optional[str] = None
    business_profile: Optional[BusinessProfileCreate] = Field(None, alias="businessProfile")
    community_profile: Optional[CommunityProfileCreate] = Field(None, alias="communityProfile")

# Impact counters shown on the dashboard
class ImpactOut(BaseModel):
    total_co2_saved: float = 0
    total_trees_planted: int = 0
    total_waste_exchanged: float = 0
    total_rides_taken: int = 0
    total_events_attended: int = 0
    total_volunteer_hours: float = 0

    class Config:
        from_attributes = True

# Output schema for account details; the password hash is never part of it
class UserResponse(UserBase):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    name: str
    role: str
    status: str
    phone: Optional[str] = None
    avatar: Optional[str] = None
    email_verified: bool = False
    created_at: Optional[datetime] = None
    last_login: Optional[datetime] = None
    business_profile: Optional[BusinessProfileOut] = Field(None, serialization_alias="businessProfile")
    community_profile: Optional[CommunityProfileOut] = Field(None, serialization_alias="communityProfile")
    impact: Optional[ImpactOut] = None

# Token and account returned by register and login
class AuthResponse(BaseModel):
    message: str
    token: str
    token_type: str = "bearer"
    user: UserResponse

class CurrentUserResponse(BaseModel):
    user: UserResponse

# Self-service profile update; only these fields are ever written
class ProfileUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = None
    phone: Optional[str] = None
    avatar: Optional[str] = None
    business_profile: Optional[BusinessProfileUpdate] = Field(None, alias="businessProfile")
    community_profile: Optional[CommunityProfileUpdate] = Field(None, alias="communityProfile")

class ProfileUpdateResponse(BaseModel):
    message: str
    user: UserResponse

class PasswordChange(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    current_password: str = Field(alias="currentPassword")
    new_password: str = Field(alias="newPassword")

class PermissionsResponse(BaseModel):
    role: str
    permissions: List[str]

# Schema for administrative role updates
class RoleUpdate(BaseModel):
    role: str

class SuspendRequest(BaseModel):
    reason: Optional[str] = None

# Admin edit of plain account details
class AdminUserUpdate(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None

class MessageResponse(BaseModel):
    message: str
