"""
Repository layer abstracting storage (SQLAlchemy vs Firebase Firestore).

Both backends exchange plain dicts keyed by the snake_case event field names.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from firebase_admin import firestore
from google.api_core.exceptions import NotFound
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.models import Event, EventMember
from app.services.firebase_client import get_firestore_client


def use_firestore() -> bool:
    return settings.USE_FIREBASE is True


def event_to_dict(event: Event) -> Dict[str, Any]:
    return {
        "id": event.id,
        "title": event.title,
        "description": event.description,
        "location": event.location,
        "type": event.type,
        "thumbnail_url": event.thumbnail_url,
        "event_date": event.event_date,
        "created_by": event.created_by,
        "members": event.members,
        "created_at": event.created_at,
    }


def _sql_fields(data: Dict[str, Any]) -> Dict[str, Any]:
    """SQL DateTime columns hold naive UTC values."""
    fields = dict(data)
    for key in ("event_date", "created_at"):
        value = fields.get(key)
        if isinstance(value, datetime) and value.tzinfo is not None:
            fields[key] = value.astimezone(timezone.utc).replace(tzinfo=None)
    return fields


def _changed(before: Dict[str, Any], after: Dict[str, Any]) -> bool:
    return any(before.get(key) != value for key, value in after.items())


# -------- Event repository --------

class EventRepo:
    @staticmethod
    def list_sql(db: Session) -> List[Dict[str, Any]]:
        return [event_to_dict(e) for e in db.query(Event).all()]

    @staticmethod
    def get_by_id_sql(db: Session, event_id: str) -> Optional[Event]:
        return db.query(Event).filter(Event.id == event_id).first()

    @staticmethod
    def create_sql(db: Session, data: Dict[str, Any]) -> str:
        fields = _sql_fields(data)
        members = fields.pop("members", [])
        event = Event(**fields)
        event.member_rows = [EventMember(email=email) for email in members]
        db.add(event)
        db.commit()
        db.refresh(event)
        return event.id

    @staticmethod
    def add_member_sql(db: Session, event_id: str, email: str) -> Optional[bool]:
        """Add ``email`` to the event's members; None if the event is missing.

        The (event_id, email) unique constraint makes the insert an atomic
        add-if-absent: a concurrent duplicate fails and is treated as a no-op.
        """
        event = EventRepo.get_by_id_sql(db, event_id)
        if not event:
            return None
        if email in event.members:
            return False
        db.add(EventMember(event_id=event_id, email=email))
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            return False
        return True

    @staticmethod
    def replace_sql(db: Session, event_id: str, data: Dict[str, Any]) -> Optional[bool]:
        event = EventRepo.get_by_id_sql(db, event_id)
        if not event:
            return None
        fields = _sql_fields(data)
        modified = _changed(event_to_dict(event), fields)

        members = fields.pop("members", [])
        for key, value in fields.items():
            setattr(event, key, value)
        # Retained emails reuse their existing rows
        existing = {row.email: row for row in event.member_rows}
        event.member_rows = [existing.get(email) or EventMember(email=email) for email in members]
        db.commit()
        return modified

    @staticmethod
    def delete_sql(db: Session, event_id: str) -> bool:
        event = EventRepo.get_by_id_sql(db, event_id)
        if not event:
            return False
        db.delete(event)
        db.commit()
        return True

    # Firestore shape: collection "<EVENTS_COLLECTION>/{auto id}" document with fields
    @staticmethod
    def _collection_fs():
        fs = get_firestore_client()
        return fs.collection(settings.EVENTS_COLLECTION)

    @staticmethod
    def list_fs() -> List[Dict[str, Any]]:
        results: List[Dict[str, Any]] = []
        for doc in EventRepo._collection_fs().stream():
            item = doc.to_dict()
            item["id"] = doc.id
            results.append(item)
        return results

    @staticmethod
    def get_by_id_fs(event_id: str) -> Optional[Dict[str, Any]]:
        doc = EventRepo._collection_fs().document(event_id).get()
        if not doc.exists:
            return None
        data = doc.to_dict()
        data["id"] = doc.id
        return data

    @staticmethod
    def create_fs(data: Dict[str, Any]) -> str:
        ref = EventRepo._collection_fs().document()
        ref.set(data)
        return ref.id

    @staticmethod
    def add_member_fs(event_id: str, email: str) -> Optional[bool]:
        ref = EventRepo._collection_fs().document(event_id)
        doc = ref.get()
        if not doc.exists:
            return None
        already_member = email in (doc.to_dict().get("members") or [])
        # ArrayUnion is applied server-side and never duplicates an element
        try:
            ref.update({"members": firestore.ArrayUnion([email])})
        except NotFound:
            return None
        return not already_member

    @staticmethod
    def replace_fs(event_id: str, data: Dict[str, Any]) -> Optional[bool]:
        ref = EventRepo._collection_fs().document(event_id)
        doc = ref.get()
        if not doc.exists:
            return None
        modified = _changed(doc.to_dict(), data)
        try:
            ref.update(data)
        except NotFound:
            return None
        return modified

    @staticmethod
    def delete_fs(event_id: str) -> bool:
        ref = EventRepo._collection_fs().document(event_id)
        if not ref.get().exists:
            return False
        ref.delete()
        return True
