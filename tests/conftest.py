from __future__ import annotations

import json
import threading
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

import pytest

from wikisync._transport import HttpResponse
from wikisync.exceptions import WikiSyncTransportError
from wikisync.host import GameState, VarbitComposition
from wikisync.models.profile import ProfileType

MANIFEST_URL = "https://sync.example.test/manifest"
SUBMIT_URL = "https://sync.example.test/submit"


@dataclass
class FakeHost:
    game: GameState = GameState.LOGGED_IN
    player_name: str | None = "Zezima"
    profile: ProfileType = ProfileType.STANDARD
    varps: dict[int, int] = field(default_factory=dict)
    compositions: dict[int, VarbitComposition] = field(default_factory=dict)
    levels: dict[str, int] = field(default_factory=dict)
    index_ready: bool = True
    read_threads: set[int] = field(default_factory=set)

    def _touch(self) -> None:
        self.read_threads.add(threading.get_ident())

    def game_state(self) -> GameState:
        self._touch()
        return self.game

    def local_player_name(self) -> str | None:
        self._touch()
        return self.player_name

    def profile_type(self) -> ProfileType:
        self._touch()
        return self.profile

    def varbit_ids(self) -> Sequence[int] | None:
        self._touch()
        if not self.index_ready:
            return None
        return sorted(self.compositions)

    def varbit_composition(self, varbit_id: int) -> VarbitComposition | None:
        self._touch()
        return self.compositions.get(varbit_id)

    def varp_value(self, varp_id: int) -> int:
        self._touch()
        return self.varps[varp_id]

    def real_skill_level(self, skill: str) -> int:
        self._touch()
        return self.levels[skill]


@dataclass
class FakeCollectorBackend:
    """Records every request and answers from configurable state."""

    manifest: Any = field(default_factory=lambda: {"varbits": [], "varps": []})
    manifest_status: int = 200
    manifest_error: Exception | None = None
    submit_status: int = 200
    submit_error: Exception | None = None
    gets: list[str] = field(default_factory=list)
    posts: list[dict[str, Any]] = field(default_factory=list)

    async def get(self, url: str, *, timeout: float) -> HttpResponse:
        self.gets.append(url)
        if self.manifest_error is not None:
            raise self.manifest_error
        body = self.manifest if isinstance(self.manifest, str) else json.dumps(self.manifest)
        return HttpResponse(status=self.manifest_status, text=body)

    async def post_json(self, url: str, payload: Mapping[str, Any], *, timeout: float) -> HttpResponse:
        self.posts.append(json.loads(json.dumps(payload)))
        if self.submit_error is not None:
            raise self.submit_error
        return HttpResponse(status=self.submit_status, text="ok" if self.submit_status < 300 else "nope")

    def fail_transport(self) -> None:
        self.submit_error = WikiSyncTransportError("connection reset", endpoint=SUBMIT_URL)


@pytest.fixture
def host() -> FakeHost:
    return FakeHost(
        varps={5: 0b1011010, 7: 42},
        compositions={10: VarbitComposition(varp_index=5, least_significant_bit=1, most_significant_bit=3)},
        levels={"Attack": 99, "Defence": 70},
    )


@pytest.fixture
def backend() -> FakeCollectorBackend:
    return FakeCollectorBackend(manifest={"varbits": [10], "varps": [7], "levels": ["Attack"]})
