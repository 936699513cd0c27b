"""High-level async client wiring the sync engine to a host."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Any

import aiohttp

from wikisync._transport import HttpTransport, Transport
from wikisync.collector import SnapshotCollector
from wikisync.config import SyncConfig
from wikisync.exceptions import WikiSyncError
from wikisync.host import HostClient, MainContext, ThreadMainContext
from wikisync.manifest import ManifestCache
from wikisync.scheduler import CycleOutcome, SyncScheduler
from wikisync.state.store import ProfileStateStore
from wikisync.submission import SubmissionClient

_logger = logging.getLogger(__name__)


class WikiSyncClient:
    """Async facade owning the HTTP session and the sync components.

    Usage::

        async with WikiSyncClient(host, SyncConfig.from_env()) as client:
            client.start()
            ...
            await client.stop()
    """

    def __init__(
        self,
        host: HostClient,
        config: SyncConfig | None = None,
        *,
        main: MainContext | None = None,
        session: aiohttp.ClientSession | None = None,
        transport: Transport | None = None,
        store: ProfileStateStore | None = None,
    ) -> None:
        self._host = host
        self._config = config or SyncConfig()
        self._owns_main = main is None
        self._main: MainContext = main or ThreadMainContext()
        self._external_session = session is not None
        self._http_session = session
        self._owns_transport = transport is None
        self._transport = transport
        self._store = store or ProfileStateStore()
        self._collector = SnapshotCollector(host, self._main, config=self._config)
        self._manifests: ManifestCache | None = None
        self._scheduler: SyncScheduler | None = None
        self._task: asyncio.Task[None] | None = None
        self._stop_event: asyncio.Event | None = None

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> WikiSyncClient:
        try:
            if self._transport is None:
                if self._http_session is None:
                    self._http_session = aiohttp.ClientSession()
                self._transport = HttpTransport(self._http_session)
            self._manifests = ManifestCache(
                self._transport,
                url=self._config.manifest_url,
                refresh_every=self._config.uploads_per_manifest_check,
                timeout=self._config.manifest_timeout,
            )
            self._scheduler = SyncScheduler(
                collector=self._collector,
                manifests=self._manifests,
                store=self._store,
                submitter=SubmissionClient(
                    self._transport,
                    url=self._config.submit_url,
                    timeout=self._config.submit_timeout,
                ),
                interval=self._config.interval,
            )
            if self._config.sync_varbits:
                await self._collector.load_compositions()
        except BaseException:
            _logger.debug("Client startup failed; releasing owned resources")
            await self._release()
            raise
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.stop()
        await self._release()

    async def _release(self) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        if self._owns_transport:
            self._transport = None
        if self._owns_main and isinstance(self._main, ThreadMainContext):
            self._main.close()
        self._scheduler = None
        self._manifests = None

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def store(self) -> ProfileStateStore:
        return self._store

    @property
    def manifests(self) -> ManifestCache:
        if self._manifests is None:
            raise WikiSyncError("Client not initialized. Use 'async with WikiSyncClient(...) as client:'")
        return self._manifests

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def _require_scheduler(self) -> SyncScheduler:
        if self._scheduler is None:
            raise WikiSyncError("Client not initialized. Use 'async with WikiSyncClient(...) as client:'")
        return self._scheduler

    # ------------------------------------------------------------------
    # Sync control
    # ------------------------------------------------------------------

    async def sync_once(self) -> CycleOutcome:
        """Run a single cycle immediately (serialized with the background loop)."""
        return await self._require_scheduler().run_cycle()

    def start(self) -> None:
        """Start the periodic sync loop as a background task."""
        scheduler = self._require_scheduler()
        if self.is_running:
            return
        self._stop_event = asyncio.Event()
        self._task = asyncio.create_task(scheduler.run(self._stop_event), name="wikisync-scheduler")
        _logger.debug("Sync loop started interval=%ss", self._config.interval)

    async def stop(self) -> None:
        """Stop the periodic sync loop.

        A cycle interrupted mid-submission commits nothing; the next start
        recomputes the delta against the unchanged baseline.
        """
        task = self._task
        self._task = None
        if task is None:
            return
        if self._stop_event is not None:
            self._stop_event.set()
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        _logger.debug("Sync loop stopped")
