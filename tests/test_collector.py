from __future__ import annotations

import threading

import pytest

from conftest import FakeHost
from wikisync.collector import SnapshotCollector
from wikisync.config import SyncConfig
from wikisync.exceptions import ReadinessError
from wikisync.host import GameState, InlineMainContext, ThreadMainContext, VarbitComposition
from wikisync.models.manifest import Manifest
from wikisync.models.profile import ProfileKey, ProfileType
from wikisync.models.snapshot import Snapshot


def _manifest() -> Manifest:
    return Manifest.model_validate({"varbits": [10, 404], "varps": [7, 999], "levels": ["Attack", "Sailing"]})


@pytest.mark.asyncio
async def test_collect_reads_every_manifest_field_with_sentinels(host: FakeHost) -> None:
    collector = SnapshotCollector(host, InlineMainContext())

    snapshot = await collector.collect(_manifest())

    assert snapshot == Snapshot(
        varb={10: 5, 404: -1},
        varp={7: 42, 999: -1},
        level={"Attack": 99, "Sailing": -1},
    )


@pytest.mark.asyncio
async def test_negative_varp_is_decoded_not_treated_as_unreadable(host: FakeHost) -> None:
    host.varps[5] = -1
    collector = SnapshotCollector(host, InlineMainContext())

    snapshot = await collector.collect(Manifest.model_validate({"varbits": [10], "varps": [], "levels": []}))

    assert snapshot.varb == {10: 0b111}


@pytest.mark.asyncio
async def test_compositions_load_once_index_is_ready(host: FakeHost) -> None:
    host.index_ready = False
    collector = SnapshotCollector(host, InlineMainContext())

    assert await collector.load_compositions() is False
    first = await collector.collect(_manifest())
    assert first.varb[10] == -1
    assert not collector.compositions_loaded

    host.index_ready = True
    second = await collector.collect(_manifest())

    assert collector.compositions_loaded
    assert second.varb[10] == 5


@pytest.mark.asyncio
async def test_disabled_categories_are_skipped(host: FakeHost) -> None:
    config = SyncConfig(sync_varbits=False, sync_levels=False)
    collector = SnapshotCollector(host, InlineMainContext(), config=config)

    snapshot = await collector.collect(_manifest())

    assert snapshot == Snapshot(varp={7: 42, 999: -1})
    assert not collector.compositions_loaded


@pytest.mark.asyncio
async def test_reads_happen_on_main_context_thread(host: FakeHost) -> None:
    main = ThreadMainContext()
    collector = SnapshotCollector(host, main)
    try:
        await collector.read_profile()
        await collector.collect(_manifest())
    finally:
        main.close()

    assert len(host.read_threads) == 1
    assert threading.get_ident() not in host.read_threads


@pytest.mark.asyncio
async def test_read_profile_returns_key(host: FakeHost) -> None:
    host.profile = ProfileType.BETA
    collector = SnapshotCollector(host, InlineMainContext())

    assert await collector.read_profile() == ProfileKey(username="Zezima", profile_type=ProfileType.BETA)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("game", "name"),
    [
        (GameState.LOGIN_SCREEN, "Zezima"),
        (GameState.HOPPING, "Zezima"),
        (GameState.LOGGED_IN, None),
        (GameState.LOGGED_IN, ""),
    ],
)
async def test_read_profile_raises_when_not_ready(game: GameState, name: str | None) -> None:
    host = FakeHost(game=game, player_name=name)
    collector = SnapshotCollector(host, InlineMainContext())

    with pytest.raises(ReadinessError):
        await collector.read_profile()


@pytest.mark.asyncio
async def test_composition_table_ignores_ids_without_definition() -> None:
    host = FakeHost(
        varps={1: 0b11},
        compositions={3: VarbitComposition(varp_index=1, least_significant_bit=0, most_significant_bit=1)},
    )
    collector = SnapshotCollector(host, InlineMainContext())

    assert await collector.load_compositions() is True
    snapshot = await collector.collect(Manifest.model_validate({"varbits": [3, 4], "varps": [], "levels": []}))

    assert snapshot.varb == {3: 3, 4: -1}
