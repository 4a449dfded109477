"""
Event lifecycle service: create, read, join, replace and delete
"""

import logging
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from app.schemas.event import EventCreate, EventOut, EventReplace
from app.services.repositories import EventRepo, event_to_dict, use_firestore

logger = logging.getLogger(__name__)

REQUIRED_CREATE_FIELDS = ("title", "description", "event_date", "location")


class EventServiceError(Exception):
    """Base class for event service failures"""


class EventNotFoundError(EventServiceError):
    def __init__(self, event_id: str):
        super().__init__(f"Event {event_id} not found")
        self.event_id = event_id


class EventValidationError(EventServiceError):
    def __init__(self, missing: List[str]):
        super().__init__("Title, description, eventDate, and location are required")
        self.missing = missing


class EventOwnershipError(EventServiceError):
    """Raised when a caller other than the creator tries to change an event"""


def unique_members(emails: Iterable[str]) -> List[str]:
    """Drop repeated emails, keeping first-seen order"""
    seen = set()
    result = []
    for email in emails:
        if email not in seen:
            seen.add(email)
            result.append(email)
    return result


class EventService:
    """Service for event store operations"""

    @staticmethod
    def list_events(db: Session) -> List[EventOut]:
        if use_firestore():
            records = EventRepo.list_fs()
        else:
            records = EventRepo.list_sql(db)
        return [EventOut(**record) for record in records]

    @staticmethod
    def get_event(event_id: str, db: Session) -> EventOut:
        if use_firestore():
            record = EventRepo.get_by_id_fs(event_id)
        else:
            event = EventRepo.get_by_id_sql(db, event_id)
            record = event_to_dict(event) if event else None

        if record is None:
            raise EventNotFoundError(event_id)
        return EventOut(**record)

    @staticmethod
    def create_event(event_data: EventCreate, db: Session) -> str:
        """Persist a new event and return its generated id"""
        missing = [
            field for field in REQUIRED_CREATE_FIELDS
            if not getattr(event_data, field)
        ]
        if missing:
            raise EventValidationError(missing)

        data = {
            "title": event_data.title,
            "description": event_data.description,
            "event_date": event_data.event_date,
            "location": event_data.location,
            "members": unique_members(event_data.members or []),
            "type": event_data.type or "",
            "thumbnail_url": event_data.thumbnail_url or "",
            "created_by": event_data.created_by or "",
            "created_at": event_data.created_at or datetime.now(timezone.utc),
        }

        if use_firestore():
            event_id = EventRepo.create_fs(data)
        else:
            event_id = EventRepo.create_sql(db, data)

        logger.info("Created event %s for %r", event_id, data["created_by"])
        return event_id

    @staticmethod
    def add_member(event_id: str, email: str, db: Session) -> bool:
        """Join ``email`` to the event; returns False when already a member"""
        if use_firestore():
            added = EventRepo.add_member_fs(event_id, email)
        else:
            added = EventRepo.add_member_sql(db, event_id, email)

        if added is None:
            raise EventNotFoundError(event_id)
        if added:
            logger.info("%s joined event %s", email, event_id)
        return added

    @staticmethod
    def _require_owner(event_id: str, caller_email: Optional[str], db: Session) -> EventOut:
        event = EventService.get_event(event_id, db)
        if not caller_email or event.created_by != caller_email:
            logger.warning("Rejected change to event %s by %r (owner %r)", event_id, caller_email, event.created_by)
            raise EventOwnershipError("Only the event creator can change this event")
        return event

    @staticmethod
    def replace_event(
        event_id: str,
        event_data: EventReplace,
        caller_email: Optional[str],
        db: Session
    ) -> bool:
        """Overwrite every editable field; the stored creator is kept"""
        existing = EventService._require_owner(event_id, caller_email, db)

        data = {
            "title": event_data.title,
            "description": event_data.description,
            "type": event_data.type,
            "thumbnail_url": event_data.thumbnail_url,
            "location": event_data.location,
            "event_date": event_data.event_date,
            "members": unique_members(event_data.members),
            "created_by": existing.created_by,
        }

        if use_firestore():
            modified = EventRepo.replace_fs(event_id, data)
        else:
            modified = EventRepo.replace_sql(db, event_id, data)

        if modified is None:
            raise EventNotFoundError(event_id)
        logger.info("Replaced event %s (modified=%s)", event_id, modified)
        return modified

    @staticmethod
    def delete_event(event_id: str, caller_email: Optional[str], db: Session) -> None:
        EventService._require_owner(event_id, caller_email, db)

        if use_firestore():
            deleted = EventRepo.delete_fs(event_id)
        else:
            deleted = EventRepo.delete_sql(db, event_id)

        if not deleted:
            raise EventNotFoundError(event_id)
        logger.info("Deleted event %s", event_id)
