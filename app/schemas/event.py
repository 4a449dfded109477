"""
Event-related Pydantic schemas

Wire names are camelCase (``eventDate``, ``thumbnailUrl``...); Python code
uses the snake_case field names. Both are accepted on input.
"""

from datetime import datetime, timezone
from typing import List, Optional
from pydantic import BaseModel, EmailStr, field_validator
from pydantic.alias_generators import to_camel

def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive timestamps and convert aware ones to UTC"""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)

class EventSchema(BaseModel):
    """Base for event payloads exchanged in camelCase"""

    class Config:
        alias_generator = to_camel
        populate_by_name = True

    @field_validator("event_date", "created_at", check_fields=False)
    @classmethod
    def _normalize_timestamps(cls, value):
        return as_utc(value)

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)

class EventCreate(EventSchema):
    """Schema for creating an event

    Required fields are checked by the event service so that a missing
    field is reported the same way whichever store is active.
    """
    title: Optional[str] = None
    description: Optional[str] = None
    event_date: Optional[datetime] = None
    location: Optional[str] = None
    type: Optional[str] = None
    thumbnail_url: Optional[str] = None
    created_by: Optional[str] = None
    members: Optional[List[str]] = None
    created_at: Optional[datetime] = None

class EventReplace(EventSchema):
    """Full-field replacement; omitted fields are overwritten with empty values"""
    title: str = ""
    description: str = ""
    type: str = ""
    thumbnail_url: str = ""
    location: str = ""
    event_date: Optional[datetime] = None
    members: List[str] = []
    created_by: str = ""

class JoinRequest(EventSchema):
    """Join an event as ``userEmail``"""
    user_email: EmailStr

class EventOut(EventSchema):
    """A stored event as returned by the API and consumed by the client"""
    id: str
    title: Optional[str] = ""
    description: Optional[str] = ""
    location: Optional[str] = ""
    type: Optional[str] = ""
    event_date: Optional[datetime] = None
    thumbnail_url: Optional[str] = ""
    created_by: Optional[str] = ""
    members: List[str] = []
    created_at: Optional[datetime] = None
