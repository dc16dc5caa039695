# backend/models/admin_action.py
import enum
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, JSON, func
from sqlalchemy.orm import relationship
from database import Base


class AdminActionType(str, enum.Enum):
    SUSPEND = "suspend"
    ACTIVATE = "activate"
    ROLE_CHANGE = "modify"
    VERIFY = "verify"
    REJECT = "reject"


class AdminTargetType(str, enum.Enum):
    USER = "user"
    BUSINESS = "business"
    COMMUNITY = "community"


# Append-only record of admin-initiated state changes.
# Written in the same transaction as the change it records.
class AdminAction(Base):
    __tablename__ = "admin_actions"

    id = Column(Integer, primary_key=True, index=True)
    admin_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    action_type = Column(String(20), nullable=False, index=True)
    target_type = Column(String(20), nullable=False, index=True)
    target_id = Column(Integer, nullable=False, index=True)
    reason = Column(Text, nullable=True)

    # Snapshots of the changed fields, e.g. {"role": "individual"}
    previous_state = Column(JSON, nullable=True)
    new_state = Column(JSON, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    admin = relationship("User", lazy="joined", uselist=False)
