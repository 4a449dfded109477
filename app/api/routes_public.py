"""
Public API routes - service status
"""

from fastapi import APIRouter

from app.utils.responses import success_response

router = APIRouter()

@router.get("/")
async def root():
    """Root endpoint with basic info"""
    return success_response(
        message="Social events API is running",
        data={"events_url": "/events", "static_events_url": "/static/eventsData.json"}
    )

@router.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "ok"}
