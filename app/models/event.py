"""
Event model
"""

import secrets
from datetime import datetime
from sqlalchemy import Column, String, Text, DateTime
from sqlalchemy.orm import relationship

from app.core.db import Base

def new_event_id() -> str:
    """Opaque 24-character hex identifier"""
    return secrets.token_hex(12)

class Event(Base):
    __tablename__ = "events"

    id = Column(String(32), primary_key=True, index=True, default=new_event_id)
    title = Column(String(255))
    description = Column(Text)
    location = Column(String(255))
    type = Column(String(100), default="")
    thumbnail_url = Column(String(2048), default="")
    event_date = Column(DateTime)
    created_by = Column(String(255), default="", index=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    member_rows = relationship(
        "EventMember",
        back_populates="event",
        cascade="all, delete-orphan",
        order_by="EventMember.id",
    )

    @property
    def members(self):
        return [row.email for row in self.member_rows]
