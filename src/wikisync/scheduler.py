"""Periodic sync cycle: readiness, manifest, collect, diff, submit, commit.

Every failure in a cycle degrades to "try again next tick"; nothing here is
fatal to the host.  Each failure kind is logged with a stable ``event`` name
in the record's ``extra`` so operators can filter on it.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from enum import StrEnum

from wikisync._constants import SECONDS_BETWEEN_UPLOADS
from wikisync.collector import SnapshotCollector
from wikisync.exceptions import (
    ManifestFetchError,
    ReadinessError,
    ServerRejectedError,
    WikiSyncTransportError,
)
from wikisync.manifest import ManifestCache
from wikisync.state.diff import diff
from wikisync.state.store import ProfileStateStore
from wikisync.submission import SubmissionClient

_logger = logging.getLogger(__name__)


class CycleState(StrEnum):
    IDLE = "idle"
    CHECKING_READINESS = "checking_readiness"
    MANIFEST_REFRESH = "manifest_refresh"
    DIFFING = "diffing"
    SUBMITTING = "submitting"


class CycleOutcome(StrEnum):
    NOT_READY = "not_ready"
    NO_MANIFEST = "no_manifest"
    UNCHANGED = "unchanged"
    SUBMITTED = "submitted"
    FAILED = "failed"


class SyncScheduler:
    """Drives sync cycles on a fixed interval.

    Cycles never overlap: :meth:`run_cycle` holds a lock for its whole
    duration, so two submissions for the same profile cannot race to commit
    different baselines.  The clock and sleep function are injectable so
    tests can run the loop on virtual time.
    """

    def __init__(
        self,
        *,
        collector: SnapshotCollector,
        manifests: ManifestCache,
        store: ProfileStateStore,
        submitter: SubmissionClient,
        interval: float = SECONDS_BETWEEN_UPLOADS,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self._collector = collector
        self._manifests = manifests
        self._store = store
        self._submitter = submitter
        self._interval = interval
        self._clock = clock
        self._sleep = sleep
        self._lock = asyncio.Lock()
        self._tick = 0
        self._state = CycleState.IDLE

    @property
    def tick(self) -> int:
        """Number of cycles that got past the readiness and manifest guards."""
        return self._tick

    @property
    def state(self) -> CycleState:
        return self._state

    async def run_cycle(self) -> CycleOutcome:
        """Run exactly one cycle, waiting for any in-flight cycle first."""
        async with self._lock:
            try:
                return await self._cycle()
            finally:
                self._state = CycleState.IDLE

    async def _cycle(self) -> CycleOutcome:
        self._state = CycleState.CHECKING_READINESS
        try:
            profile = await self._collector.read_profile()
        except ReadinessError as exc:
            _logger.debug("Skipping cycle: %s", exc, extra={"event": "sync.not_ready"})
            return CycleOutcome.NOT_READY

        if self._manifests.is_refresh_due(self._tick):
            self._state = CycleState.MANIFEST_REFRESH
            try:
                await self._manifests.refresh()
            except ManifestFetchError as exc:
                _logger.warning(
                    "Manifest refresh failed url=%s status=%s: %s",
                    exc.endpoint,
                    exc.status_code,
                    exc,
                    extra={"event": "sync.manifest_fetch_failed"},
                )

        manifest = self._manifests.current()
        if manifest is None:
            _logger.debug("Skipping cycle: no manifest available", extra={"event": "sync.no_manifest"})
            return CycleOutcome.NO_MANIFEST

        self._tick += 1

        self._state = CycleState.DIFFING
        snapshot = await self._collector.collect(manifest)
        baseline = self._store.get(profile, manifest_fingerprint=manifest.fingerprint)
        delta = diff(snapshot, baseline)
        if delta.is_empty:
            return CycleOutcome.UNCHANGED

        self._state = CycleState.SUBMITTING
        try:
            result = await self._submitter.submit(profile, delta)
        except ServerRejectedError as exc:
            _logger.warning(
                "Submission rejected profile=%s status=%s fields=%d",
                profile,
                exc.status_code,
                delta.field_count(),
                extra={"event": "sync.submit_rejected"},
            )
            return CycleOutcome.FAILED
        except WikiSyncTransportError as exc:
            _logger.warning(
                "Submission failed profile=%s fields=%d: %s",
                profile,
                delta.field_count(),
                exc,
                extra={"event": "sync.submit_failed"},
            )
            return CycleOutcome.FAILED

        # Baseline is the full snapshot, never the delta.
        self._store.commit(profile, snapshot, manifest_fingerprint=manifest.fingerprint)
        _logger.info(
            "Submitted profile=%s fields=%d status=%s",
            profile,
            result.field_count,
            result.status_code,
            extra={"event": "sync.submitted"},
        )
        return CycleOutcome.SUBMITTED

    async def run(self, stop_event: asyncio.Event | None = None) -> None:
        """Run cycles every ``interval`` seconds until *stop_event* is set.

        A cycle that overruns the interval delays the next one; missed
        deadlines are skipped rather than replayed.
        """
        stop = stop_event or asyncio.Event()
        next_tick = self._clock()
        while not stop.is_set():
            try:
                await self.run_cycle()
            except Exception:
                _logger.exception("Sync cycle aborted", extra={"event": "sync.cycle_error"})

            if stop.is_set():
                break
            next_tick += self._interval
            now = self._clock()
            if next_tick < now:
                next_tick = now
            await self._sleep(next_tick - now)
