"""
Database models package
"""

from .event import Event, new_event_id
from .member import EventMember

__all__ = ["Event", "EventMember", "new_event_id"]
