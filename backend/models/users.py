# backend/models/users.py
import enum
from sqlalchemy import Column, Integer, String, Boolean, DateTime, func
from sqlalchemy.orm import relationship
from database import Base


# Account classification, fixed at registration and changed only by an admin
class Role(str, enum.Enum):
    INDIVIDUAL = "individual"
    BUSINESS = "business"
    COMMUNITY = "community"
    ADMIN = "admin"


# Roles a visitor may pick when registering
SELF_SERVICE_ROLES = (Role.INDIVIDUAL, Role.BUSINESS, Role.COMMUNITY)


class AccountStatus(str, enum.Enum):
    ACTIVE = "active"
    SUSPENDED = "suspended"


# Represents a user account with authentication details and system role
class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String, nullable=False)
    name = Column(String(255), nullable=False)
    phone = Column(String(32), nullable=True)
    avatar = Column(String, nullable=True)

    role = Column(String(20), nullable=False, default=Role.INDIVIDUAL.value, index=True)
    status = Column(String(20), nullable=False, default=AccountStatus.ACTIVE.value, index=True)
    email_verified = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
    last_login = Column(DateTime(timezone=True), nullable=True)

    # One-to-one extensions keyed by user id; never cascade-deleted with the account
    business_profile = relationship(
        "BusinessProfile",
        uselist=False,
        back_populates="user",
        foreign_keys="BusinessProfile.user_id",
    )
    community_profile = relationship(
        "CommunityProfile",
        uselist=False,
        back_populates="user",
        foreign_keys="CommunityProfile.user_id",
    )
    impact = relationship("UserImpact", uselist=False, back_populates="user")

    @property
    def is_suspended(self) -> bool:
        return self.status == AccountStatus.SUSPENDED.value
