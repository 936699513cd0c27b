"""HTTP transport with per-request timeouts and error mapping."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol

import aiohttp

from wikisync._constants import USER_AGENT
from wikisync.exceptions import WikiSyncTransportError

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HttpResponse:
    """Status and body of a completed HTTP exchange."""

    status: int
    text: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def json(self) -> Any:
        return json.loads(self.text)


class Transport(Protocol):
    """Structural transport interface used by the manifest and submission clients.

    Having a protocol here makes it easy to pass test doubles while keeping
    the production implementation (`HttpTransport`) concrete.  Implementations
    raise :class:`WikiSyncTransportError` for network failures and timeouts and
    return non-2xx responses to the caller unchanged.
    """

    async def get(self, url: str, *, timeout: float) -> HttpResponse:
        ...

    async def post_json(self, url: str, payload: Mapping[str, Any], *, timeout: float) -> HttpResponse:
        ...


class HttpTransport:
    """aiohttp-backed transport with a total timeout per call."""

    def __init__(self, http_session: aiohttp.ClientSession) -> None:
        self._http = http_session

    async def get(self, url: str, *, timeout: float) -> HttpResponse:
        return await self._send("GET", url, timeout=timeout)

    async def post_json(self, url: str, payload: Mapping[str, Any], *, timeout: float) -> HttpResponse:
        body = json.dumps(payload, separators=(",", ":"))
        return await self._send("POST", url, timeout=timeout, body=body)

    async def _send(self, method: str, url: str, *, timeout: float, body: str | None = None) -> HttpResponse:
        headers: dict[str, str] = {"user-agent": USER_AGENT}
        if body is not None:
            headers["content-type"] = "application/json; charset=utf-8"

        _logger.debug("%s %s", method, url)

        try:
            async with self._http.request(
                method,
                url,
                data=body,
                headers=headers,
                timeout=aiohttp.ClientTimeout(total=timeout),
            ) as resp:
                status = resp.status
                raw = await resp.read()
                charset = resp.charset or "utf-8"
        except asyncio.TimeoutError as exc:
            raise WikiSyncTransportError(
                f"{method} {url} timed out after {timeout}s",
                endpoint=url,
            ) from exc
        except aiohttp.ClientError as exc:
            raise WikiSyncTransportError(
                f"{method} {url} failed: {exc}",
                endpoint=url,
            ) from exc

        # Status alone decides success; undecodable bytes are replaced.
        try:
            text = raw.decode(charset, errors="replace")
        except LookupError:
            text = raw.decode("utf-8", errors="replace")

        _logger.debug("%s %s -> HTTP %s (%d bytes)", method, url, status, len(raw))
        return HttpResponse(status=status, text=text)
