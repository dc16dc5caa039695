# backend/models/business_profile.py
import enum
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from database import Base


# Admin-controlled verification state shared by business and community profiles.
# PENDING is the only state with outgoing transitions.
class VerificationStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


# Organization details attached to a business account
class BusinessProfile(Base):
    __tablename__ = "business_profiles"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False, index=True)

    business_name = Column(String(255), nullable=False)
    business_type = Column(String(100), nullable=False)
    gst_number = Column(String(32), nullable=True)  # Tax registration identifier
    msme_registration = Column(String(64), nullable=True)
    industry_sector = Column(String(100), nullable=True, index=True)
    address = Column(String, nullable=True)
    city = Column(String(100), nullable=True, index=True)
    state = Column(String(100), nullable=True)
    pincode = Column(String(16), nullable=True)
    website = Column(String, nullable=True)
    employee_count = Column(Integer, nullable=True)
    annual_turnover = Column(String(64), nullable=True)

    verification_status = Column(String(20), nullable=False, default=VerificationStatus.PENDING.value, index=True)
    verification_notes = Column(Text, nullable=True)
    verified_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    verified_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="business_profile", foreign_keys=[user_id])


# Fields the owner may edit after registration
BUSINESS_EDITABLE_FIELDS = (
    "business_name", "business_type", "gst_number", "msme_registration",
    "industry_sector", "address", "city", "state", "pincode", "website",
    "employee_count", "annual_turnover",
)
