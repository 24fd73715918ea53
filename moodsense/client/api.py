"""
Insight Client
==============
Thin HTTP wrapper around the Mood Sense relay.

One call, one request: there is no retry here. A failed request surfaces
as InsightRequestError and it is up to the user to submit again.
"""

from __future__ import annotations

from typing import Optional

import httpx

INSIGHT_PATH = "/api/mood-insight"


class InsightRequestError(Exception):
    """The relay could not be reached or did not return an insight."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class InsightClient:
    """Makes requests to the relay service."""

    def __init__(
        self,
        base_url: str,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        kwargs: dict = {}
        if self._timeout is not None:
            kwargs["timeout"] = self._timeout
        if self._transport is not None:
            kwargs["transport"] = self._transport
        return httpx.AsyncClient(**kwargs)

    async def request_insight(self, scale: int, description: str) -> str:
        """POST /api/mood-insight and return the insight text."""
        try:
            async with self._client() as client:
                response = await client.post(
                    f"{self._base_url}{INSIGHT_PATH}",
                    json={"scale": scale, "description": description},
                )
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise InsightRequestError(f"Failed to reach relay: {exc}") from exc

        if not response.is_success:
            raise InsightRequestError(
                f"Relay returned {response.status_code}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise InsightRequestError("Relay returned a non-JSON body") from exc

        insight = data.get("insight") if isinstance(data, dict) else None
        if not isinstance(insight, str):
            raise InsightRequestError("Relay response has no insight")
        return insight

    async def health(self) -> str:
        """GET / and return the relay's confirmation message."""
        try:
            async with self._client() as client:
                response = await client.get(f"{self._base_url}/")
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise InsightRequestError(f"Failed to reach relay: {exc}") from exc

        if not response.is_success:
            raise InsightRequestError(
                f"Relay returned {response.status_code}",
                status_code=response.status_code,
            )
        try:
            return str(response.json().get("message", ""))
        except (ValueError, AttributeError) as exc:
            raise InsightRequestError("Relay returned an unexpected health payload") from exc
