"""
Event API routes

Listing, creating and joining are open; reading a single event requires a
verified identity token, and replacing or deleting requires the caller to be
the event's creator.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.db import get_db
from app.schemas.event import EventCreate, EventReplace, JoinRequest
from app.services.event_service import (
    EventService,
    EventNotFoundError,
    EventOwnershipError,
    EventValidationError,
)
from app.utils.security import CurrentUser, get_current_user
from app.utils.responses import success_response, validation_error, not_found_error, forbidden_error

router = APIRouter()

@router.get("/events")
async def list_events(db: Session = Depends(get_db)):
    """List every event"""
    events = EventService.list_events(db)
    return success_response(
        message="Events retrieved successfully",
        data=[event.to_wire() for event in events]
    )

@router.get("/events/{event_id}")
async def get_event(
    event_id: str,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(get_current_user)
):
    """Get a single event"""
    try:
        event = EventService.get_event(event_id, db)
    except EventNotFoundError:
        not_found_error("Event")

    return success_response(
        message="Event retrieved successfully",
        data=event.to_wire()
    )

@router.post("/events")
async def create_event(
    event_data: EventCreate,
    db: Session = Depends(get_db)
):
    """Create a new event"""
    try:
        event_id = EventService.create_event(event_data, db)
    except EventValidationError as e:
        validation_error(str(e), errors=e.missing)

    return success_response(
        message="Event created successfully",
        data={"eventId": event_id},
        status_code=status.HTTP_201_CREATED
    )

@router.patch("/events/{event_id}")
async def join_event(
    event_id: str,
    join_data: JoinRequest,
    db: Session = Depends(get_db)
):
    """Add the user to the event's members; joining twice is a no-op"""
    try:
        added = EventService.add_member(event_id, join_data.user_email, db)
    except EventNotFoundError:
        not_found_error("Event")

    return success_response(
        message="Event updated successfully",
        data={"modifiedCount": int(added)}
    )

@router.put("/events/{event_id}")
async def replace_event(
    event_id: str,
    event_data: EventReplace,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(get_current_user)
):
    """Replace an event's fields (creator only)"""
    try:
        modified = EventService.replace_event(event_id, event_data, user.email, db)
    except EventNotFoundError:
        not_found_error("Event")
    except EventOwnershipError as e:
        forbidden_error(str(e))

    return success_response(
        message="Event updated successfully",
        data={"modifiedCount": int(modified)}
    )

@router.delete("/events/{event_id}")
async def delete_event(
    event_id: str,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(get_current_user)
):
    """Delete an event (creator only)"""
    try:
        EventService.delete_event(event_id, user.email, db)
    except EventNotFoundError:
        not_found_error("Event")
    except EventOwnershipError as e:
        forbidden_error(str(e))

    return success_response(message="Event deleted successfully")
