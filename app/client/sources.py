"""
Event data sources for the client.

Reads go to the remote API first. When that fails for any reason the bundled
static snapshot is used instead; results from the two tiers are never merged.
"""

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from app.client.api_client import ApiError, EventsApiClient, NotFoundError
from app.client.session import AuthSession
from app.core.config import settings
from app.schemas.event import EventOut

logger = logging.getLogger(__name__)

REMOTE = "remote"
STATIC = "static"


class EventsUnavailableError(Exception):
    """Neither the API nor the static snapshot could provide events"""


@dataclass
class EventListing:
    events: List[EventOut]
    source: str

    @property
    def from_fallback(self) -> bool:
        return self.source == STATIC


def slugify(title: str) -> str:
    """``"Beach Cleanup!"`` -> ``"beach-cleanup"``"""
    slug = re.sub(r"\s+", "-", title.lower())
    return re.sub(r"[^a-z0-9-]", "", slug)


class StaticEventSource:
    """Bundled JSON array of events (the same field names as the API)"""

    def __init__(self, path: str):
        self.path = path

    @classmethod
    def from_settings(cls) -> "StaticEventSource":
        return cls(settings.STATIC_EVENTS_FILE)

    @staticmethod
    def _normalize(item: Dict[str, Any], index: int) -> EventOut:
        data = dict(item)
        # Snapshot entries usually carry no id; their list position stands in
        data["id"] = str(item.get("id") or item.get("_id") or index)
        data["members"] = item.get("members") or []
        return EventOut(**data)

    def load(self) -> List[EventOut]:
        with open(self.path, "r", encoding="utf-8") as f:
            raw = json.load(f)
        if not isinstance(raw, list):
            raise ValueError(f"{self.path} must contain a JSON array of events")
        return [self._normalize(item, index) for index, item in enumerate(raw)]

    def find(self, event_id: str) -> Optional[EventOut]:
        """Look an event up by id or by the slug of its title"""
        for event in self.load():
            if event.id == event_id or slugify(event.title or "") == event_id:
                return event
        return None


class TieredEventSource:
    """Remote-primary, static-secondary read path"""

    def __init__(self, primary: EventsApiClient, fallback: StaticEventSource):
        self.primary = primary
        self.fallback = fallback

    @classmethod
    def from_settings(cls) -> "TieredEventSource":
        return cls(EventsApiClient.from_settings(), StaticEventSource.from_settings())

    def load_events(self) -> EventListing:
        try:
            events = self.primary.list_events()
            logger.debug("Fetched %d events from server", len(events))
            return EventListing(events=events, source=REMOTE)
        except ApiError as e:
            logger.warning("Server not available (%s), falling back to local data", e)

        try:
            events = self.fallback.load()
        except (OSError, ValueError) as e:
            logger.error("Error loading static events from %s: %s", self.fallback.path, e)
            raise EventsUnavailableError("Failed to load events. Please try again later.") from e

        logger.info("Loaded %d events from local file", len(events))
        return EventListing(events=events, source=STATIC)

    def get_event(self, event_id: str, session: Optional[AuthSession]) -> EventOut:
        try:
            return self.primary.get_event(event_id, session)
        except ApiError as e:
            logger.warning("Server not available (%s), falling back to local data", e)

        try:
            event = self.fallback.find(event_id)
        except (OSError, ValueError) as e:
            logger.error("Error loading static events from %s: %s", self.fallback.path, e)
            raise EventsUnavailableError("Failed to load event details.") from e

        if event is None:
            raise NotFoundError("Event not found", status_code=404)
        return event
