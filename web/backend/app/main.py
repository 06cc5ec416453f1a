"""FastAPI application for the Alumni Connect moderation service.

Provides REST API endpoints wrapping the alumod package for:
- Lexical scanning and submission moderation
- Advisory AI classification before publishing
- The admin alert review queue and dashboard stats
- User warning listing, acknowledgment and expiry sweeps
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the alumod package is importable by adding the project root to sys.path.
_project_root = str(Path(__file__).resolve().parents[3])
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from alumod import __version__
from alumod.config import Settings
from alumod.log import configure_logging
from web.backend.app.routers import moderation

configure_logging(Settings.from_env().log_level)

app = FastAPI(
    title="Alumni Connect Moderation API",
    description=(
        "REST API for content moderation: lexical scanning, escalating user "
        "warnings, the admin alert queue, and advisory AI classification."
    ),
    version=__version__,
)

# ---------------------------------------------------------------------------
# CORS middleware (allow all origins for development)
# ---------------------------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(moderation.router)


# ---------------------------------------------------------------------------
# Root and health-check endpoints
# ---------------------------------------------------------------------------


@app.get("/", tags=["meta"])
async def root():
    """Return basic API information."""
    return {
        "name": "Alumni Connect Moderation API",
        "version": __version__,
        "docs": "/docs",
        "openapi": "/openapi.json",
    }


@app.get("/health", tags=["meta"])
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
