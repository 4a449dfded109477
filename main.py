"""
Social Events - FastAPI Backend
Main application entry point
"""

import os
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
import uvicorn

from app.core.config import settings
from app.core.db import engine, Base
from app.api import routes_events, routes_public
from app.services.firebase_client import load_credentials_info
from app.services.repositories import use_firestore
from app.utils.responses import error_response

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)

ERROR_CODES = {
    status.HTTP_400_BAD_REQUEST: "validation_error",
    status.HTTP_401_UNAUTHORIZED: "unauthorized",
    status.HTTP_403_FORBIDDEN: "forbidden",
    status.HTTP_404_NOT_FOUND: "not_found",
}

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management"""
    if use_firestore():
        logger.info("Using Firestore collection %r", settings.EVENTS_COLLECTION)
    else:
        # Create database tables
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created")
    if load_credentials_info() is None:
        logger.warning("No Firebase credentials configured; requests needing an identity token will be rejected with 401")
    yield
    logger.info("Application shutdown")

# Create FastAPI application
app = FastAPI(
    title="Social Events API",
    description="Backend for creating, joining and managing community events",
    version="1.0.0",
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Render HTTP errors in the standard error envelope"""
    if isinstance(exc.detail, dict):
        message = exc.detail.get("message", "Request failed")
        details = exc.detail.get("errors")
    else:
        message = str(exc.detail)
        details = None
    return error_response(
        message=message,
        error_code=ERROR_CODES.get(exc.status_code),
        details=details,
        status_code=exc.status_code,
        headers=getattr(exc, "headers", None)
    )

@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies are reported as 400"""
    errors = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]
    return error_response(
        message="Invalid request body",
        error_code="validation_error",
        details=errors,
        status_code=status.HTTP_400_BAD_REQUEST
    )

@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """Log unexpected failures and hide their details from the caller"""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(
        message="Internal server error",
        error_code="internal_error",
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
    )

# Mount static files (serves the eventsData.json fallback snapshot)
os.makedirs("static", exist_ok=True)
app.mount("/static", StaticFiles(directory="static"), name="static")

# Include routers
app.include_router(routes_public.router, tags=["public"])
app.include_router(routes_events.router, tags=["events"])

# Note: Run this ASGI app directly with Uvicorn or Hypercorn. For Gunicorn,
# use `uvicorn.workers.UvicornWorker` instead of wrapping the app.

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host="127.0.0.1",
        port=8000,
        reload=True
    )
