"""Main FastAPI application module.

This module initializes the FastAPI application and registers all route handlers.
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.routes import auth, currency
from config import API_HOST, API_PORT, APP_ENV, CORS_ALLOWED_ORIGINS
from core.database import init_db
from core.error_handlers import register_error_handlers
from core.logging_config import setup_logging

# Setup logging
setup_logging()
logger = logging.getLogger(__name__)

API_TITLE = "Currency Exchange API"
API_VERSION = "1.0.0"

# Initialize FastAPI application
app = FastAPI(
    title=API_TITLE,
    description="Exchange rate management and currency conversion service.",
    version=API_VERSION,
)

# Configure CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

# Register route handlers
app.include_router(auth.router)
app.include_router(currency.router)


@app.on_event("startup")
def startup_tasks() -> None:
    """Create database tables if they do not exist."""
    init_db()
    logger.info("Server running in %s mode", APP_ENV)


@app.get("/", summary="API root", tags=["Info"])
def root() -> dict:
    """Return API information and documentation links."""
    return {
        "success": True,
        "name": API_TITLE,
        "version": API_VERSION,
        "docs": {
            "swagger": "/docs",
            "redoc": "/redoc",
        },
        "health": "/api/health",
    }


@app.get("/api/health", summary="Health check", tags=["Health"])
def health() -> dict:
    """Health check endpoint.

    Returns:
        Dictionary with status "ok".
    """
    return {"status": "ok"}


# --- Startup code for direct execution ---
if __name__ == "__main__":
    import uvicorn

    server_url = f"http://{API_HOST}:{API_PORT}"
    print(f"Starting {API_TITLE} on {server_url} (docs: {server_url}/docs)")
    uvicorn.run("app:app", host=API_HOST, port=API_PORT, reload=APP_ENV == "development")
