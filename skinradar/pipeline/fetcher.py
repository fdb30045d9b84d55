"""
Skin Radar — Category Listing Fetcher

Fetches the HTML for one weapon category. Only 429 responses are retried,
with a linear backoff (backoff_seconds × attempt); the upstream limiter is
lenient and short-lived so exponential growth would only slow the batch.
"""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable

import httpx
import structlog
from pydantic import BaseModel, ConfigDict, Field

from skinradar.config import settings
from skinradar.errors import FetchError

logger = structlog.get_logger(__name__)

Sleep = Callable[[float], Awaitable[Any]]


class RetryPolicy(BaseModel):
    """
    Bounded retry policy for category fetches.

    sleep is injectable so tests can replace asyncio.sleep with a recorder.
    """

    model_config = ConfigDict(frozen=True)

    max_attempts: int = Field(default=4, ge=1)
    backoff_seconds: float = Field(default=0.6, ge=0)
    retryable_statuses: frozenset[int] = frozenset({429})
    sleep: Sleep = asyncio.sleep

    @classmethod
    def from_settings(cls, sleep: Sleep = asyncio.sleep) -> RetryPolicy:
        return cls(
            max_attempts=settings.FETCH_MAX_ATTEMPTS,
            backoff_seconds=settings.FETCH_BACKOFF_SECONDS,
            sleep=sleep,
        )

    def should_retry(self, status_code: int, attempt: int) -> bool:
        return status_code in self.retryable_statuses and attempt < self.max_attempts

    def backoff(self, attempt: int) -> float:
        return self.backoff_seconds * attempt


class ListingFetcher:
    """
    Fetches category pages through a shared httpx.AsyncClient.

    Usage:
        async with httpx.AsyncClient() as client:
            fetcher = ListingFetcher(client)
            html = await fetcher.fetch_category_page("ak-47")
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        policy: RetryPolicy | None = None,
    ) -> None:
        self._client = client
        self._policy = policy or RetryPolicy.from_settings()

    @property
    def policy(self) -> RetryPolicy:
        return self._policy

    async def fetch_category_page(self, slug: str) -> str:
        """
        Return the raw HTML of {BASE_URL}/weapons/{slug}.

        Raises:
            FetchError: on a transport error, a non-retryable status, or a
                retryable status on the final attempt.
        """
        url = settings.category_url(slug)
        headers = {"User-Agent": settings.USER_AGENT}

        status_code: int | None = None
        attempt = 0

        for attempt in range(1, self._policy.max_attempts + 1):
            try:
                response = await self._client.get(url, headers=headers)
            except httpx.HTTPError as e:
                raise FetchError(slug, attempts=attempt, reason=str(e)) from e

            if response.is_success:
                return response.text

            status_code = response.status_code
            if not self._policy.should_retry(status_code, attempt):
                break

            wait_time = self._policy.backoff(attempt)
            logger.warning(
                "fetch_rate_limited",
                slug=slug,
                attempt=attempt,
                wait_seconds=wait_time,
                source="fetcher",
            )
            await self._policy.sleep(wait_time)

        logger.error(
            "fetch_failed",
            slug=slug,
            status_code=status_code,
            attempt=attempt,
            source="fetcher",
        )
        raise FetchError(slug, status_code=status_code, attempts=attempt)
