"""
Insight Router
==============
GET  /                  : Liveness check.
POST /api/mood-insight  : Generate a supportive insight for a mood entry.

The relay is stateless: every request builds its own prompt, makes one
completion call and returns. If the completion call fails for any
reason the caller gets a generic 500. The upstream error detail is
logged here and never forwarded since it can contain request ids, quota
information and similar vendor internals.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from moodsense.config import get_settings
from moodsense.models.mood import ErrorResponse, MoodInsightRequest, MoodInsightResponse
from moodsense.services.completion import CompletionParams, get_completion_service
from moodsense.services.insight import generate_insight

logger = logging.getLogger(__name__)

router = APIRouter(tags=["insight"])

HEALTH_MESSAGE = "Mood Sense API is running Fine!"
GENERATION_FAILED = "Failed to generate insight"


@router.get("/", summary="Liveness check")
async def root() -> dict:
    return {"message": HEALTH_MESSAGE}


@router.post(
    "/api/mood-insight",
    response_model=MoodInsightResponse,
    status_code=status.HTTP_200_OK,
    summary="Generate a mood insight",
    description=(
        "Builds a fixed empathetic-therapist prompt from the mood scale and "
        "description and relays the completion API's reply."
    ),
    responses={
        200: {"description": "Insight generated (or the fixed fallback text)"},
        500: {"model": ErrorResponse, "description": "Completion API call failed"},
    },
)
async def create_mood_insight(body: MoodInsightRequest):
    """Generate an insight for one mood entry."""
    logger.debug("Mood insight requested: scale=%r", body.scale)

    try:
        completion = get_completion_service()
        insight = await generate_insight(
            completion,
            body.scale,
            body.description,
            CompletionParams.from_settings(get_settings()),
        )
    except Exception:
        logger.exception("Error generating insight")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": GENERATION_FAILED},
        )

    return MoodInsightResponse(insight=insight)
