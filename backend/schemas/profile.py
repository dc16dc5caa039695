# backend/schemas/profile.py
from pydantic import BaseModel, Field, AliasChoices, field_validator
from typing import List, Literal, Optional
from datetime import datetime


# Business details submitted at registration; "name"/"type" are accepted as shorthand
class BusinessProfileCreate(BaseModel):
    business_name: Optional[str] = Field(None, validation_alias=AliasChoices("business_name", "name"))
    business_type: Optional[str] = Field(None, validation_alias=AliasChoices("business_type", "type"))
    gst_number: Optional[str] = None
    msme_registration: Optional[str] = None
    industry_sector: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    pincode: Optional[str] = None
    website: Optional[str] = None
    employee_count: Optional[int] = None
    annual_turnover: Optional[str] = None


# Owner-editable business fields; anything else in the payload is dropped
class BusinessProfileUpdate(BaseModel):
    business_name: Optional[str] = None
    business_type: Optional[str] = None
    gst_number: Optional[str] = None
    msme_registration: Optional[str] = None
    industry_sector: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    pincode: Optional[str] = None
    website: Optional[str] = None
    employee_count: Optional[int] = None
    annual_turnover: Optional[str] = None


class BusinessProfileOut(BaseModel):
    id: int
    user_id: int
    business_name: str
    business_type: str
    gst_number: Optional[str] = None
    msme_registration: Optional[str] = None
    industry_sector: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    pincode: Optional[str] = None
    website: Optional[str] = None
    employee_count: Optional[int] = None
    annual_turnover: Optional[str] = None
    verification_status: str
    verification_notes: Optional[str] = None
    verified_by: Optional[int] = None
    verified_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class CommunityProfileCreate(BaseModel):
    organization_name: Optional[str] = Field(None, validation_alias=AliasChoices("organization_name", "name"))
    organization_type: Optional[str] = Field(None, validation_alias=AliasChoices("organization_type", "type"))
    registration_number: Optional[str] = None
    focus_areas: List[str] = []
    description: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    pincode: Optional[str] = None
    website: Optional[str] = None
    member_count: Optional[int] = None


class CommunityProfileUpdate(BaseModel):
    organization_name: Optional[str] = None
    organization_type: Optional[str] = None
    registration_number: Optional[str] = None
    focus_areas: Optional[List[str]] = None
    description: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    pincode: Optional[str] = None
    website: Optional[str] = None
    member_count: Optional[int] = None


class CommunityProfileOut(BaseModel):
    id: int
    user_id: int
    organization_name: str
    organization_type: str
    registration_number: Optional[str] = None
    focus_areas: List[str] = []
    description: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    pincode: Optional[str] = None
    website: Optional[str] = None
    member_count: Optional[int] = None
    verification_status: str
    verification_notes: Optional[str] = None
    verified_by: Optional[int] = None
    verified_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# Admin decision on a pending profile
class VerifyRequest(BaseModel):
    status: Literal["approved", "rejected"]
    notes: Optional[str] = None

    @field_validator("status", mode="before")
    @classmethod
    def _verified_alias(cls, value):
        # Older clients send "verified" for an approval
        return "approved" if value == "verified" else value
