"""
Client-side validation for the create and edit event forms.

The API accepts anything that has the four required create fields; the
stricter rules here are applied before a form is submitted.
"""

from datetime import datetime, timezone
from typing import Dict, Optional
from urllib.parse import urlparse

from pydantic import BaseModel

from app.client.views import EVENT_TYPES
from app.schemas.event import EventCreate, EventOut, EventReplace, as_utc

MIN_DESCRIPTION_LENGTH = 50


class EventForm(BaseModel):
    """Values entered on the create/edit event page"""
    title: str = ""
    description: str = ""
    type: str = ""
    thumbnail_url: str = ""
    location: str = ""
    event_date: Optional[datetime] = None


def _is_valid_url(value: str) -> bool:
    parsed = urlparse(value)
    return bool(parsed.scheme and parsed.netloc)


def validate_event_form(form: EventForm, now: Optional[datetime] = None) -> Dict[str, str]:
    """Return field name -> error message; empty when the form is valid"""
    errors: Dict[str, str] = {}
    now = as_utc(now) or datetime.now(timezone.utc)

    if not form.title.strip():
        errors["title"] = "Event title is required"

    if not form.description.strip():
        errors["description"] = "Event description is required"
    elif len(form.description) < MIN_DESCRIPTION_LENGTH:
        errors["description"] = f"Description must be at least {MIN_DESCRIPTION_LENGTH} characters long"

    if not form.location.strip():
        errors["location"] = "Event location is required"

    if form.type and form.type not in EVENT_TYPES:
        errors["type"] = "Please choose a listed event type"

    if not form.thumbnail_url.strip():
        errors["thumbnail_url"] = "Thumbnail image URL is required"
    elif not _is_valid_url(form.thumbnail_url):
        errors["thumbnail_url"] = "Please enter a valid URL"

    event_date = as_utc(form.event_date)
    if event_date is None or event_date <= now:
        errors["event_date"] = "Event date must be in the future"

    return errors


def to_create_payload(form: EventForm, creator_email: str) -> EventCreate:
    return EventCreate(
        title=form.title,
        description=form.description,
        type=form.type,
        thumbnail_url=form.thumbnail_url,
        location=form.location,
        event_date=form.event_date,
        created_by=creator_email,
        members=[],
        created_at=datetime.now(timezone.utc),
    )


def to_replace_payload(form: EventForm, event: EventOut) -> EventReplace:
    """Edit payload; members and creator are carried over from ``event``"""
    return EventReplace(
        title=form.title,
        description=form.description,
        type=form.type,
        thumbnail_url=form.thumbnail_url,
        location=form.location,
        event_date=form.event_date,
        members=list(event.members),
        created_by=event.created_by or "",
    )
