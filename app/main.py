# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the Ristretto API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload --port 8080
# =============================================================================

import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.auth import routes as auth_routes
from app.config import settings
from app.exceptions import (
    RistrettoException,
    ristretto_exception_handler,
    validation_exception_handler,
)
from app.routers import coffee_shops, favorites, health, visits
from lib.supabase_client import create_storage

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    - Startup: create the storage handle and the shared Places HTTP client
    - Shutdown: close the HTTP client
    """
    logger.info(f"Starting Ristretto API in {settings.ENVIRONMENT} mode")
    if not settings.CLERK_JWT_PUBLIC_KEY:
        logger.error("CLERK_JWT_PUBLIC_KEY is not set; every authenticated request will fail")
    if not settings.GOOGLE_PLACES_API_KEY:
        logger.warning("GOOGLE_PLACES_API_KEY is not set; Places requests will fail")
    if settings.use_places_fallback:
        logger.info("Places fallback data is enabled")

    app.state.storage = create_storage(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_KEY)
    app.state.http_client = httpx.AsyncClient(timeout=settings.PLACES_TIMEOUT_S)

    yield

    logger.info("Shutting down Ristretto API")
    await app.state.http_client.aclose()


# Create FastAPI application
app = FastAPI(
    title="Ristretto API",
    description="""
## Coffee Shop Discovery API

Finds coffee shops near you through Google Places, keeps your favorites and
your visit history.

### Authentication

Every endpoint except the health checks requires a Clerk session token:

```bash
curl -H "Authorization: Bearer $CLERK_TOKEN" \\
  "http://localhost:8080/coffee_shops?lat=37.7937&lng=-122.3965&radius=500&max=10"
```

The first authenticated request creates your local user record.
""",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "Coffee Shops",
            "description": "Nearby search and place details",
        },
        {
            "name": "Favorites",
            "description": "Save and remove favorite coffee shops",
        },
        {
            "name": "Visits",
            "description": "Record and list visits",
        },
        {
            "name": "User",
            "description": "The authenticated user's profile",
        },
        {
            "name": "Health",
            "description": "API health and readiness checks",
        },
    ],
)


# =============================================================================
# Middleware
# =============================================================================

# CORS middleware - answers real preflights before routing. Bearer tokens
# travel in a header, not a cookie, so no credentials mode is needed.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(RistrettoException)
async def handle_ristretto_exception(request: Request, exc: RistrettoException):
    """Handle custom Ristretto exceptions."""
    return await ristretto_exception_handler(request, exc)


@app.exception_handler(RequestValidationError)
async def handle_validation_exception(request: Request, exc: RequestValidationError):
    """Missing or malformed request fields."""
    return await validation_exception_handler(request, exc)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
    )


# =============================================================================
# Routers
# =============================================================================

# Health check endpoints (no auth)
app.include_router(
    health.router,
    tags=["Health"]
)

# Coffee shop endpoints
app.include_router(
    coffee_shops.router,
    prefix="/coffee_shops",
    tags=["Coffee Shops"]
)

# Favorite endpoints
app.include_router(
    favorites.router,
    prefix="/favorites",
    tags=["Favorites"]
)

# Visit endpoints
app.include_router(
    visits.router,
    prefix="/visits",
    tags=["Visits"]
)

# User profile endpoint
app.include_router(
    auth_routes.router,
    tags=["User"]
)


# =============================================================================
# Preflight and Root
# =============================================================================

@app.options("/{path:path}", include_in_schema=False)
async def preflight(path: str):
    """
    Answer OPTIONS without authentication.

    Browsers' CORS preflights are handled by the middleware; this catches
    bare OPTIONS requests from other clients.
    """
    return Response(status_code=200, headers=CORS_HEADERS)


@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "Ristretto API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health",
    }
