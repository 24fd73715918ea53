"""
Insight Prompt
==============
Builds the fixed prompt for a mood entry and turns the completion into
the text we hand back to the client.

The prompt is intentionally a plain template: scale and description are
interpolated exactly as received, even when they are missing or not the
type we expect. The model copes with odd input far better than a 422
would.
"""

from __future__ import annotations

from typing import Any

from moodsense.services.completion import CompletionParams, CompletionService

SYSTEM_MESSAGE = (
    "You are an empathetic AI therapist skilled in providing emotional "
    "support and practical advice."
)

_USER_MESSAGE_TEMPLATE = """\
As an empathetic AI therapist, analyze the following mood entry:
Mood Scale (1-5): {scale}
Description: {description}

Please provide a thoughtful, supportive response that:
1. Acknowledges their feelings
2. Offers perspective on potential factors influencing their mood
3. Suggests one or two practical steps they could take to maintain or improve their emotional well-being

Keep the response concise but warm and supportive."""

FALLBACK_INSIGHT = (
    "I apologize, but I couldn't generate an insight at this moment. "
    "Please try again."
)


def build_user_message(scale: Any, description: Any) -> str:
    return _USER_MESSAGE_TEMPLATE.format(scale=scale, description=description)


async def generate_insight(
    completion: CompletionService,
    scale: Any,
    description: Any,
    params: CompletionParams | None = None,
) -> str:
    """Ask the completion API for an insight on one mood entry.

    Falls back to FALLBACK_INSIGHT when the API answered without text.
    CompletionError propagates to the caller.
    """
    text = await completion.generate(
        SYSTEM_MESSAGE,
        build_user_message(scale, description),
        params,
    )
    return text or FALLBACK_INSIGHT
