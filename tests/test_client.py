from __future__ import annotations

import asyncio
from collections.abc import Sequence

import pytest

from conftest import FakeCollectorBackend, FakeHost
from wikisync.client import WikiSyncClient
from wikisync.config import SyncConfig
from wikisync.exceptions import WikiSyncError
from wikisync.host import InlineMainContext
from wikisync.models.profile import ProfileKey, ProfileType
from wikisync.models.snapshot import Snapshot
from wikisync.scheduler import CycleOutcome

KEY = ProfileKey(username="Zezima", profile_type=ProfileType.STANDARD)


@pytest.mark.asyncio
async def test_sync_once_runs_full_cycle(host: FakeHost, backend: FakeCollectorBackend) -> None:
    async with WikiSyncClient(host, SyncConfig(), main=InlineMainContext(), transport=backend) as client:
        assert await client.sync_once() == CycleOutcome.SUBMITTED
        assert await client.sync_once() == CycleOutcome.UNCHANGED

        assert client.store.get(KEY) == Snapshot(varb={10: 5}, varp={7: 42}, level={"Attack": 99})
        manifest = client.manifests.current()
        assert manifest is not None
        assert manifest.varps == (7,)
    assert len(backend.posts) == 1


@pytest.mark.asyncio
async def test_background_loop_submits_and_stops(host: FakeHost, backend: FakeCollectorBackend) -> None:
    config = SyncConfig(interval=0.01)
    async with WikiSyncClient(host, config, main=InlineMainContext(), transport=backend) as client:
        client.start()
        assert client.is_running
        for _ in range(100):
            if backend.posts:
                break
            await asyncio.sleep(0.01)
        await client.stop()
        assert not client.is_running

    assert len(backend.posts) == 1


@pytest.mark.asyncio
async def test_compositions_loaded_on_enter(host: FakeHost, backend: FakeCollectorBackend) -> None:
    async with WikiSyncClient(host, main=InlineMainContext(), transport=backend) as client:
        assert client._collector.compositions_loaded  # noqa: SLF001


@pytest.mark.asyncio
async def test_client_requires_context_manager(host: FakeHost) -> None:
    client = WikiSyncClient(host, main=InlineMainContext())

    with pytest.raises(WikiSyncError):
        await client.sync_once()
    with pytest.raises(WikiSyncError):
        client.start()


class BrokenArchiveHost(FakeHost):
    def varbit_ids(self) -> Sequence[int] | None:
        raise LookupError("varbit archive unreadable")


@pytest.mark.asyncio
async def test_failed_enter_releases_owned_session_and_main_context() -> None:
    client = WikiSyncClient(BrokenArchiveHost())

    with pytest.raises(LookupError, match="archive unreadable"):
        async with client:
            pytest.fail("body must not run when startup fails")

    assert client._http_session is None  # noqa: SLF001
    assert client._transport is None  # noqa: SLF001
    with pytest.raises(WikiSyncError):
        await client.sync_once()
    # The owned single-thread executor has been shut down.
    with pytest.raises(RuntimeError):
        await client._main.call(lambda: None)  # noqa: SLF001
