"""Manifest-driven snapshot collection from the host."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TypeVar

from wikisync._constants import UNREADABLE_VALUE
from wikisync.config import SyncConfig
from wikisync.exceptions import ReadinessError
from wikisync.host import GameState, HostClient, MainContext, VarbitComposition
from wikisync.models.manifest import Manifest
from wikisync.models.profile import ProfileKey
from wikisync.models.snapshot import Snapshot

_logger = logging.getLogger(__name__)

K = TypeVar("K")


class SnapshotCollector:
    """Reads every manifest field from the host in one main-context job.

    Fields the host cannot resolve are recorded as ``-1`` rather than
    omitted, so a missing key always means "not in the manifest".
    """

    def __init__(
        self,
        host: HostClient,
        main: MainContext,
        *,
        config: SyncConfig | None = None,
    ) -> None:
        self._host = host
        self._main = main
        self._config = config or SyncConfig()
        self._compositions: dict[int, VarbitComposition] | None = None

    @property
    def compositions_loaded(self) -> bool:
        return self._compositions is not None

    async def load_compositions(self) -> bool:
        """Load varbit compositions from the host cache.

        Returns ``False`` when the host's cache index is not ready yet; the
        load is retried by the next :meth:`collect`.
        """
        table = await self._main.call(self._read_compositions)
        if table is None:
            _logger.debug("Varbit index not ready; compositions not loaded")
            return False
        self._compositions = table
        _logger.debug("Loaded %d varbit compositions", len(table))
        return True

    def _read_compositions(self) -> dict[int, VarbitComposition] | None:
        ids = self._host.varbit_ids()
        if ids is None:
            return None
        table: dict[int, VarbitComposition] = {}
        for varbit_id in ids:
            composition = self._host.varbit_composition(varbit_id)
            if composition is not None:
                table[varbit_id] = composition
        return table

    async def read_profile(self) -> ProfileKey:
        """Return the active profile, or raise :class:`ReadinessError`."""
        return await self._main.call(self._read_profile)

    def _read_profile(self) -> ProfileKey:
        state = self._host.game_state()
        if state != GameState.LOGGED_IN:
            raise ReadinessError(f"host not logged in (state={state})")
        name = self._host.local_player_name()
        if not name or not name.strip():
            raise ReadinessError("local player not loaded")
        return ProfileKey(username=name, profile_type=self._host.profile_type())

    async def collect(self, manifest: Manifest) -> Snapshot:
        if self._config.sync_varbits and self._compositions is None:
            await self.load_compositions()
        return await self._main.call(lambda: self._read_snapshot(manifest))

    def _read_snapshot(self, manifest: Manifest) -> Snapshot:
        varb: dict[int, int] = {}
        varp: dict[int, int] = {}
        level: dict[str, int] = {}

        if self._config.sync_varbits:
            for varbit_id in manifest.varbits:
                varb[varbit_id] = self._varbit_value(varbit_id)
        if self._config.sync_varps:
            for varp_id in manifest.varps:
                varp[varp_id] = _read_or_sentinel(self._host.varp_value, varp_id)
        if self._config.sync_levels:
            for skill in manifest.levels:
                level[skill] = _read_or_sentinel(self._host.real_skill_level, skill)

        return Snapshot(varb=varb, varp=varp, level=level)

    def _varbit_value(self, varbit_id: int) -> int:
        composition = (self._compositions or {}).get(varbit_id)
        if composition is None:
            return UNREADABLE_VALUE
        try:
            raw = int(self._host.varp_value(composition.varp_index))
        except (LookupError, ValueError, TypeError):
            _logger.debug("Host could not read varp=%s for varbit=%s", composition.varp_index, varbit_id)
            return UNREADABLE_VALUE
        return composition.decode(raw)


def _read_or_sentinel(read: Callable[[K], int], key: K) -> int:
    try:
        return int(read(key))
    except (LookupError, ValueError, TypeError):
        _logger.debug("Host could not read field=%s", key, exc_info=True)
        return UNREADABLE_VALUE
