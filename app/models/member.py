"""
Event membership model
"""

from sqlalchemy import Column, Integer, String, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from app.core.db import Base

class EventMember(Base):
    __tablename__ = "event_members"

    id = Column(Integer, primary_key=True, index=True)
    event_id = Column(String(32), ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    email = Column(String(255), nullable=False)

    # Relationships
    event = relationship("Event", back_populates="member_rows")

    # One row per (event, email): joining is add-if-absent
    __table_args__ = (UniqueConstraint("event_id", "email", name="uq_event_member"),)
