"""Custom exception hierarchy for wikisync."""

from __future__ import annotations


class WikiSyncError(Exception):
    """Base exception for all wikisync errors."""


class SyncConfigError(WikiSyncError):
    """Invalid or missing configuration."""


class ReadinessError(WikiSyncError):
    """Host is not in a syncable state (logged out, player not loaded)."""


class WikiSyncTransportError(WikiSyncError):
    """HTTP-level failure (network, timeout, invalid body)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class ManifestFetchError(WikiSyncTransportError):
    """Manifest could not be fetched or parsed.

    The previously cached manifest, if any, stays in effect.
    """


class ServerRejectedError(WikiSyncTransportError):
    """Collector answered a submission with a non-2xx status.

    Treated exactly like a transport failure: the baseline is not committed
    and the next cycle recomputes the delta.
    """
