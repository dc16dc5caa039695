# backend/models/impact.py
from sqlalchemy import Column, Integer, Float, ForeignKey
from sqlalchemy.orm import relationship
from database import Base


# Running sustainability counters for one account, created zeroed at registration
class UserImpact(Base):
    __tablename__ = "user_impact"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False, index=True)

    total_co2_saved = Column(Float, nullable=False, default=0.0)
    total_trees_planted = Column(Integer, nullable=False, default=0)
    total_waste_exchanged = Column(Float, nullable=False, default=0.0)
    total_rides_taken = Column(Integer, nullable=False, default=0)
    total_events_attended = Column(Integer, nullable=False, default=0)
    total_volunteer_hours = Column(Float, nullable=False, default=0.0)

    user = relationship("User", back_populates="impact")
