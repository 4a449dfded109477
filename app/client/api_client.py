"""
HTTP client for the events API.

Every API response uses the standard envelope
``{"success": ..., "message": ..., "data": ...}``; this client returns the
``data`` part and turns error responses into typed exceptions.
"""

import logging
from typing import Any, List, Optional

import httpx
from pydantic import ValidationError

from app.client.session import AuthSession
from app.core.config import settings
from app.schemas.event import EventCreate, EventOut, EventReplace

logger = logging.getLogger(__name__)


# ============================================================================
# Exceptions
# ============================================================================


class ApiError(Exception):
    """Base exception for API errors."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ApiConnectionError(ApiError):
    """Raised when the API cannot be reached."""

    pass


class ApiValidationError(ApiError):
    """Raised when the API rejects a request body (400)."""

    pass


class AuthenticationError(ApiError):
    """Raised when the identity token is missing or rejected (401)."""

    pass


class PermissionDeniedError(ApiError):
    """Raised when the caller may not change the event (403)."""

    pass


class NotFoundError(ApiError):
    """Raised when the event does not exist (404)."""

    pass


ERRORS_BY_STATUS = {
    400: ApiValidationError,
    401: AuthenticationError,
    403: PermissionDeniedError,
    404: NotFoundError,
}


# ============================================================================
# EventsApiClient Class
# ============================================================================


class EventsApiClient:
    """
    HTTP client for the events API.

    Calls that need a verified caller take an ``AuthSession`` argument; the
    client itself holds no identity.

    Attributes:
        base_url: Base URL of the events API
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        if not base_url:
            raise ValueError("base_url is required")

        self._base_url = base_url.rstrip("/")
        self._client = httpx.Client(
            base_url=self._base_url,
            headers={"Accept": "application/json"},
            timeout=timeout,
            transport=transport,
            follow_redirects=True,
        )

    @classmethod
    def from_settings(cls, transport: Optional[httpx.BaseTransport] = None) -> "EventsApiClient":
        return cls(settings.API_BASE_URL, timeout=settings.CLIENT_TIMEOUT, transport=transport)

    @property
    def base_url(self) -> str:
        return self._base_url

    def close(self) -> None:
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    # -------------------------------------------------------------------------
    # Transport
    # -------------------------------------------------------------------------

    def _request(
        self,
        method: str,
        path: str,
        session: Optional[AuthSession] = None,
        json: Any = None,
    ) -> Any:
        headers = session.authorization_header if session else {}
        try:
            response = self._client.request(method, path, headers=headers, json=json)
        except httpx.TimeoutException as e:
            raise ApiConnectionError(f"Connection timed out: {e}")
        except httpx.HTTPError as e:
            raise ApiConnectionError(f"Failed to connect to server: {e}")

        if response.is_success:
            try:
                body = response.json()
            except ValueError:
                raise ApiError("Server returned an invalid response", status_code=response.status_code)
            if not isinstance(body, dict):
                raise ApiError("Server response is not an envelope", status_code=response.status_code)
            return body.get("data")

        message = self._error_message(response)
        error_class = ERRORS_BY_STATUS.get(response.status_code, ApiError)
        raise error_class(message, status_code=response.status_code)

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return f"Request failed with status {response.status_code}"
        if isinstance(body, dict) and body.get("message"):
            return body["message"]
        return f"Request failed with status {response.status_code}"

    @staticmethod
    def _parse_event(item: Any) -> EventOut:
        if not isinstance(item, dict):
            raise ApiError("Server returned a malformed event")
        try:
            return EventOut(**item)
        except ValidationError as e:
            raise ApiError(f"Server returned an invalid event: {e}")

    # -------------------------------------------------------------------------
    # Events
    # -------------------------------------------------------------------------

    def list_events(self) -> List[EventOut]:
        data = self._request("GET", "/events")
        if data is None:
            return []
        if not isinstance(data, list):
            raise ApiError("Server returned a malformed event list")
        return [self._parse_event(item) for item in data]

    def get_event(self, event_id: str, session: Optional[AuthSession]) -> EventOut:
        data = self._request("GET", f"/events/{event_id}", session=session)
        return self._parse_event(data)

    def create_event(self, event: EventCreate, session: Optional[AuthSession] = None) -> str:
        """Create an event and return its id"""
        payload = event.model_dump(mode="json", by_alias=True, exclude_none=True)
        data = self._request("POST", "/events", session=session, json=payload)
        return data["eventId"]

    def join_event(self, event_id: str, session: AuthSession) -> bool:
        """Join as ``session.email``; False when already a member"""
        data = self._request(
            "PATCH",
            f"/events/{event_id}",
            session=session,
            json={"userEmail": session.email},
        )
        return bool(data["modifiedCount"])

    def replace_event(self, event_id: str, event: EventReplace, session: AuthSession) -> bool:
        data = self._request("PUT", f"/events/{event_id}", session=session, json=event.to_wire())
        return bool(data["modifiedCount"])

    def delete_event(self, event_id: str, session: AuthSession) -> None:
        self._request("DELETE", f"/events/{event_id}", session=session)
        logger.info("Deleted event %s", event_id)
