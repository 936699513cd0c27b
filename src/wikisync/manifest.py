"""Cached manifest with failure-tolerant refresh."""

from __future__ import annotations

import json
import logging

from pydantic import ValidationError

from wikisync._constants import MANIFEST_URL, SUBMIT_TIMEOUT_SECONDS, UPLOADS_PER_MANIFEST_CHECK
from wikisync._transport import Transport
from wikisync.exceptions import ManifestFetchError, WikiSyncTransportError
from wikisync.models.manifest import Manifest

_logger = logging.getLogger(__name__)


class ManifestCache:
    """Owns the current manifest and replaces it wholesale on refresh.

    A failed refresh never clears an existing manifest.
    """

    def __init__(
        self,
        transport: Transport,
        *,
        url: str = MANIFEST_URL,
        refresh_every: int = UPLOADS_PER_MANIFEST_CHECK,
        timeout: float = SUBMIT_TIMEOUT_SECONDS,
    ) -> None:
        if refresh_every < 1:
            raise ValueError(f"refresh_every must be >= 1, got {refresh_every}")
        self._transport = transport
        self._url = url
        self._refresh_every = refresh_every
        self._timeout = timeout
        self._manifest: Manifest | None = None

    def current(self) -> Manifest | None:
        return self._manifest

    def is_refresh_due(self, tick: int) -> bool:
        """Whether the scheduler should refresh on *tick*.

        Tick 0 is always due; a cache that has never loaded a manifest is
        due on every tick.
        """
        return self._manifest is None or tick % self._refresh_every == 0

    async def refresh(self) -> Manifest:
        """Fetch and parse the manifest, replacing the cached one on success."""
        try:
            response = await self._transport.get(self._url, timeout=self._timeout)
        except WikiSyncTransportError as exc:
            raise ManifestFetchError(str(exc), endpoint=self._url) from exc

        if not response.ok:
            raise ManifestFetchError(
                f"HTTP {response.status} from manifest endpoint: {response.text[:200]}",
                status_code=response.status,
                endpoint=self._url,
            )

        try:
            payload = response.json()
        except json.JSONDecodeError as exc:
            raise ManifestFetchError(
                f"Invalid JSON from manifest endpoint: {response.text[:200]}",
                status_code=response.status,
                endpoint=self._url,
            ) from exc

        if not isinstance(payload, dict):
            raise ManifestFetchError(
                "Manifest payload is not a JSON object",
                status_code=response.status,
                endpoint=self._url,
            )

        try:
            manifest = Manifest.model_validate(payload)
        except ValidationError as exc:
            raise ManifestFetchError(
                f"Manifest failed validation: {exc.error_count()} error(s)",
                status_code=response.status,
                endpoint=self._url,
            ) from exc

        previous = self._manifest
        self._manifest = manifest
        if previous is None or previous.fingerprint != manifest.fingerprint:
            _logger.debug(
                "Manifest updated fingerprint=%s varbits=%d varps=%d levels=%d",
                manifest.fingerprint[:12],
                len(manifest.varbits),
                len(manifest.varps),
                len(manifest.levels),
            )
        return manifest
