"""
Derived event views used by the listing pages, plus per-user membership state.
"""

import math
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional, Sequence

from app.schemas.event import EventOut, as_utc

EVENT_TYPES = [
    "Cleanup",
    "Plantation",
    "Donation",
    "Education",
    "Healthcare",
    "Community Building",
    "Environmental",
    "Other",
]
ALL_TYPES = "All"
EVENTS_PER_PAGE = 12


class MembershipState(str, Enum):
    NOT_JOINED = "not_joined"
    JOINED = "joined"


class EventWindow(str, Enum):
    UPCOMING = "upcoming"
    PAST = "past"


def _now(now: Optional[datetime]) -> datetime:
    return as_utc(now) or datetime.now(timezone.utc)


def membership_state(event: EventOut, email: Optional[str]) -> MembershipState:
    if email and email in event.members:
        return MembershipState.JOINED
    return MembershipState.NOT_JOINED


def event_window(event: EventOut, now: Optional[datetime] = None) -> EventWindow:
    """Upcoming only when the event date is strictly after ``now``"""
    if event.event_date is not None and event.event_date > _now(now):
        return EventWindow.UPCOMING
    return EventWindow.PAST


def is_upcoming(event: EventOut, now: Optional[datetime] = None) -> bool:
    return event_window(event, now) is EventWindow.UPCOMING


def top_by_members(events: Sequence[EventOut], limit: int = 3) -> List[EventOut]:
    """Featured events: most members first.

    Events with at least one member are ranked by member count (the sort is
    stable, so ties keep their original order). If fewer than ``limit`` have
    members, the rest are filled from the remaining events in original order.
    """
    with_members = [e for e in events if e.members]
    featured = sorted(with_members, key=lambda e: len(e.members), reverse=True)[:limit]
    if len(featured) < limit:
        chosen = {id(e) for e in featured}
        featured.extend([e for e in events if id(e) not in chosen][:limit - len(featured)])
    return featured


def filter_by_category(events: Sequence[EventOut], category: Optional[str]) -> List[EventOut]:
    if not category or category == ALL_TYPES:
        return list(events)
    return [e for e in events if e.type == category]


def matches_search(event: EventOut, search: str) -> bool:
    term = search.lower()
    return any(
        term in (value or "").lower()
        for value in (event.title, event.location, event.description)
    )


def filter_upcoming(
    events: Sequence[EventOut],
    search: str = "",
    category: Optional[str] = None,
    now: Optional[datetime] = None,
) -> List[EventOut]:
    """Upcoming events matching ``search`` in title, location or description"""
    now = _now(now)
    return [
        e for e in filter_by_category(events, category)
        if is_upcoming(e, now) and matches_search(e, search)
    ]


def _date_key(event: EventOut) -> datetime:
    return event.event_date or datetime.max.replace(tzinfo=timezone.utc)


def joined_events(events: Sequence[EventOut], email: Optional[str]) -> List[EventOut]:
    """Events ``email`` has joined, earliest first"""
    if not email:
        return []
    joined = [e for e in events if membership_state(e, email) is MembershipState.JOINED]
    return sorted(joined, key=_date_key)


def created_events(events: Sequence[EventOut], email: Optional[str]) -> List[EventOut]:
    if not email:
        return []
    return [e for e in events if e.created_by == email]


def page_count(total: int, per_page: int = EVENTS_PER_PAGE) -> int:
    return math.ceil(total / per_page)


def paginate(events: Sequence[EventOut], page: int = 1, per_page: int = EVENTS_PER_PAGE) -> List[EventOut]:
    start = (max(page, 1) - 1) * per_page
    return list(events[start:start + per_page])


def members_label(event: EventOut) -> str:
    count = len(event.members)
    return f"{count} member{'s' if count != 1 else ''} joined"
