"""
CampVerse FastAPI Application

Main entry point for the CampVerse notification and assistant API.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# Common library imports
from common.database import RealtimeDatabase, set_realtime_database, get_realtime_database
from common.utils import APIException, success_response, error_response

# App-specific imports
from campverse.config import settings

# Import routers
from campverse.routers import notifications_router, chatbot_router

# Import service initialization
from campverse.dependencies import init_all_services, shutdown_services


logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

VERSION = "1.0.0"


# =============================================================================
# Application Lifespan
# =============================================================================
@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Connects to the Realtime Database when one is configured and the
    environment allows it, then initializes services. A failed connection
    leaves notifications on local storage.
    """
    # Startup
    logger.info(f"Starting CampVerse API ({settings.ENVIRONMENT})...")
    settings.validate_required()

    realtime_db = None
    if settings.allows_remote_store():
        realtime_db = RealtimeDatabase()
        try:
            realtime_db.connect(
                database_url=settings.FIREBASE_DATABASE_URL,
                credentials_path=settings.FIREBASE_CREDENTIALS_PATH,
                project_id=settings.FIREBASE_PROJECT_ID,
            )
        except Exception as e:
            logger.warning(f"Realtime Database unavailable, using local storage: {e}")
            realtime_db = None
    else:
        logger.info("No remote notification store configured, using local storage")

    set_realtime_database(realtime_db)

    init_all_services(settings, realtime_db)
    logger.info("CampVerse API started successfully!")

    yield

    # Shutdown
    logger.info("Shutting down CampVerse API...")
    shutdown_services()
    if realtime_db is not None:
        realtime_db.disconnect()
    set_realtime_database(None)
    logger.info("CampVerse API shut down complete.")


# =============================================================================
# FastAPI Application
# =============================================================================
app = FastAPI(
    title="CampVerse API",
    description="Campus notifications with audience targeting and an assistant chat",
    version=VERSION,
    lifespan=lifespan,
    docs_url="/docs" if settings.is_development() else None,
    redoc_url="/redoc" if settings.is_development() else None,
)

# =============================================================================
# CORS Middleware
# =============================================================================
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Error Envelope
# =============================================================================
@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Render HTTP errors in the standard error envelope."""
    if isinstance(exc, APIException):
        body = exc.to_response()
    else:
        body = error_response(message=str(exc.detail))

    return JSONResponse(status_code=exc.status_code, content=body, headers=exc.headers)


# =============================================================================
# Include Routers (all under /api prefix)
# =============================================================================
API_PREFIX = "/api"

app.include_router(notifications_router, prefix=API_PREFIX, tags=["Notifications"])
app.include_router(chatbot_router, prefix=API_PREFIX, tags=["Assistant"])


# =============================================================================
# Health Check Endpoint
# =============================================================================
@app.get("/health", tags=["Health"])
async def health():
    """
    Health check endpoint.

    Returns the status of the API and which notification store is in use.
    """
    realtime_db = get_realtime_database()
    return success_response({
        "status": "ok",
        "version": VERSION,
        "environment": settings.ENVIRONMENT,
        "realtimeDatabase": realtime_db.is_connected if realtime_db else False,
    })


# =============================================================================
# Run with Uvicorn
# =============================================================================
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.is_development(),
    )
