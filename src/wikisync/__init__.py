"""wikisync - Incremental state sync from a game client to a remote collector."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("wikisync")
except PackageNotFoundError:
    __version__ = "0+local"
from wikisync.client import WikiSyncClient
from wikisync.collector import SnapshotCollector
from wikisync.config import SyncConfig
from wikisync.exceptions import (
    ManifestFetchError,
    ReadinessError,
    ServerRejectedError,
    SyncConfigError,
    WikiSyncError,
    WikiSyncTransportError,
)
from wikisync.host import (
    GameState,
    HostClient,
    InlineMainContext,
    MainContext,
    ThreadMainContext,
    VarbitComposition,
    extract_bits,
)
from wikisync.manifest import ManifestCache
from wikisync.models import (
    Delta,
    Manifest,
    ProfileKey,
    ProfileType,
    Snapshot,
    Submission,
    SubmissionResult,
)
from wikisync.scheduler import CycleOutcome, CycleState, SyncScheduler
from wikisync.state.diff import diff
from wikisync.state.store import ProfileStateStore
from wikisync.submission import SubmissionClient

__all__ = [
    "__version__",
    "CycleOutcome",
    "CycleState",
    "Delta",
    "GameState",
    "HostClient",
    "InlineMainContext",
    "MainContext",
    "Manifest",
    "ManifestCache",
    "ManifestFetchError",
    "ProfileKey",
    "ProfileStateStore",
    "ProfileType",
    "ReadinessError",
    "ServerRejectedError",
    "Snapshot",
    "SnapshotCollector",
    "Submission",
    "SubmissionClient",
    "SubmissionResult",
    "SyncConfig",
    "SyncConfigError",
    "SyncScheduler",
    "ThreadMainContext",
    "VarbitComposition",
    "WikiSyncClient",
    "WikiSyncError",
    "WikiSyncTransportError",
    "diff",
    "extract_bits",
]
