"""Host read surface and main-context marshalling.

The host (a game client) owns all observable state and only allows reads
from its own single-threaded main context.  wikisync never touches host
objects directly; it goes through :class:`HostClient` and runs every read
via a :class:`MainContext`.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Sequence
from concurrent.futures import Executor, ThreadPoolExecutor
from dataclasses import dataclass
from enum import StrEnum
from typing import Protocol, TypeVar

from wikisync.models.profile import ProfileType

_logger = logging.getLogger(__name__)

T = TypeVar("T")


def extract_bits(raw: int, low: int, high: int) -> int:
    """Extract bits ``low..high`` (inclusive) of *raw*.

    >>> extract_bits(0b1011010, 1, 3)
    5
    """
    if low < 0 or high < low:
        raise ValueError(f"invalid bit range [{low}, {high}]")
    mask = (1 << (high - low + 1)) - 1
    return (raw >> low) & mask


@dataclass(frozen=True)
class VarbitComposition:
    """Where a varbit lives: a bit range inside one varp."""

    varp_index: int
    least_significant_bit: int
    most_significant_bit: int

    def decode(self, varp_value: int) -> int:
        return extract_bits(varp_value, self.least_significant_bit, self.most_significant_bit)


class GameState(StrEnum):
    STARTING = "starting"
    LOGIN_SCREEN = "login_screen"
    LOGGING_IN = "logging_in"
    LOADING = "loading"
    LOGGED_IN = "logged_in"
    CONNECTION_LOST = "connection_lost"
    HOPPING = "hopping"
    UNKNOWN = "unknown"


class HostClient(Protocol):
    """Read-only view of the host's observable state.

    Every method must be called on the host's main context.
    """

    def game_state(self) -> GameState:
        ...

    def local_player_name(self) -> str | None:
        ...

    def profile_type(self) -> ProfileType:
        ...

    def varbit_ids(self) -> Sequence[int] | None:
        """Ids in the varbit archive, or ``None`` while the cache index is not loaded."""
        ...

    def varbit_composition(self, varbit_id: int) -> VarbitComposition | None:
        ...

    def varp_value(self, varp_id: int) -> int:
        ...

    def real_skill_level(self, skill: str) -> int:
        ...


class MainContext(Protocol):
    """Runs a callable on the host's main context and awaits its result."""

    async def call(self, fn: Callable[[], T]) -> T:
        ...


class InlineMainContext:
    """Runs callables directly on the calling thread.

    Only correct when the event loop itself runs on the host's main context.
    """

    async def call(self, fn: Callable[[], T]) -> T:
        return fn()


class ThreadMainContext:
    """Hands callables to a dedicated single thread and awaits completion.

    Pass the host's own executor when it exposes one; otherwise a
    single-worker pool is created and owned by this context.
    """

    def __init__(self, executor: Executor | None = None) -> None:
        self._owns_executor = executor is None
        self._executor: Executor = executor or ThreadPoolExecutor(
            max_workers=1,
            thread_name_prefix="wikisync-main",
        )

    async def call(self, fn: Callable[[], T]) -> T:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, fn)

    def close(self) -> None:
        if self._owns_executor:
            _logger.debug("Shutting down main-context executor")
            self._executor.shutdown(wait=False)
