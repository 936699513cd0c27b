"""Delta submission to the remote collector."""

from __future__ import annotations

import logging

from wikisync._constants import SUBMIT_TIMEOUT_SECONDS, SUBMIT_URL
from wikisync._redact import summarize_for_log
from wikisync._transport import Transport
from wikisync.exceptions import ServerRejectedError
from wikisync.models.profile import ProfileKey
from wikisync.models.snapshot import Delta
from wikisync.models.submission import Submission, SubmissionResult

_logger = logging.getLogger(__name__)


class SubmissionClient:
    """Sends one delta per request.

    Has no side effects on failure; committing a new baseline is the
    caller's decision and must only follow a returned result.
    """

    def __init__(
        self,
        transport: Transport,
        *,
        url: str = SUBMIT_URL,
        timeout: float = SUBMIT_TIMEOUT_SECONDS,
    ) -> None:
        self._transport = transport
        self._url = url
        self._timeout = timeout

    async def submit(self, key: ProfileKey, delta: Delta) -> SubmissionResult:
        """POST *delta* for *key*.

        Raises
        ------
        WikiSyncTransportError
            Network failure or timeout.
        ServerRejectedError
            The collector answered with a non-2xx status.
        """
        payload = Submission.for_profile(key, delta).to_wire()
        _logger.debug("Submitting profile=%s payload=%s", key, summarize_for_log(payload))

        response = await self._transport.post_json(self._url, payload, timeout=self._timeout)
        if not response.ok:
            raise ServerRejectedError(
                f"HTTP {response.status} from submit endpoint: {response.text[:200]}",
                status_code=response.status,
                endpoint=self._url,
            )
        return SubmissionResult(
            status_code=response.status,
            field_count=delta.field_count(),
        )
