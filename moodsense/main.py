"""
Mood Sense Relay
================
FastAPI application entry point. Mount routers here.

Run with the console script:

    GROQ_API_KEY=... moodsense-relay

or directly under uvicorn (`uvicorn moodsense.main:app`). Either way the
relay refuses to start without a Groq API key.
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from moodsense.config import Settings, get_settings
from moodsense.routers import insight

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def require_api_key(settings: Settings) -> None:
    """Halt the process if the completion API credential is missing."""
    if not settings.groq_api_key:
        logger.critical("Missing Groq API Key in environment variables")
        raise SystemExit(1)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """startup: verify credentials before accepting traffic."""
    require_api_key(get_settings())
    logger.info("Mood Sense relay ready")
    yield


app = FastAPI(
    title="Mood Sense API",
    description="Relay between the Mood Sense journal and the Groq completion API",
    version="0.1.0",
    docs_url="/api/docs" if settings.environment != "production" else None,
    redoc_url="/api/redoc" if settings.environment != "production" else None,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(insight.router)


def run() -> None:
    """Console-script entry point: check config, then serve."""
    current = get_settings()
    require_api_key(current)
    logger.info("Server running on port %d", current.port)
    uvicorn.run(app, host=current.host, port=current.port, log_level=current.log_level.lower())
