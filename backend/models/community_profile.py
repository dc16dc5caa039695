# backend/models/community_profile.py
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, JSON, func
from sqlalchemy.orm import relationship
from database import Base
from models.business_profile import VerificationStatus


# Organization details attached to a community (NGO, resident group, ...) account
class CommunityProfile(Base):
    __tablename__ = "community_profiles"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False, index=True)

    organization_name = Column(String(255), nullable=False)
    organization_type = Column(String(100), nullable=False, index=True)
    registration_number = Column(String(64), nullable=True)
    focus_areas = Column(JSON, nullable=False, default=list)
    description = Column(Text, nullable=True)
    address = Column(String, nullable=True)
    city = Column(String(100), nullable=True, index=True)
    state = Column(String(100), nullable=True)
    pincode = Column(String(16), nullable=True)
    website = Column(String, nullable=True)
    member_count = Column(Integer, nullable=True)

    verification_status = Column(String(20), nullable=False, default=VerificationStatus.PENDING.value, index=True)
    verification_notes = Column(Text, nullable=True)
    verified_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    verified_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="community_profile", foreign_keys=[user_id])


COMMUNITY_EDITABLE_FIELDS = (
    "organization_name", "organization_type", "registration_number",
    "focus_areas", "description", "address", "city", "state", "pincode",
    "website", "member_count",
)
