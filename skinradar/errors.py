"""
Skin Radar — Error taxonomy

Only DiscoveryError is allowed to escape a run. FetchError is caught per
category by the runner; malformed data and forex failures never raise.
"""

from __future__ import annotations


class SkinRadarError(Exception):
    """Base class for all Skin Radar errors."""


class DiscoveryError(SkinRadarError):
    """The discovery page could not be fetched. Fatal for the run."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


FatalDiscoveryError = DiscoveryError


class FetchError(SkinRadarError):
    """A category page could not be fetched after retries were exhausted."""

    def __init__(
        self,
        slug: str,
        status_code: int | None = None,
        attempts: int = 1,
        reason: str | None = None,
    ) -> None:
        detail = reason if reason is not None else str(status_code)
        super().__init__(f"Could not fetch {slug}: {detail}")
        self.slug = slug
        self.status_code = status_code
        self.attempts = attempts
