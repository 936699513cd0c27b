"""Client configuration for wikisync."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from wikisync._constants import (
    MANIFEST_URL,
    SECONDS_BETWEEN_UPLOADS,
    SUBMIT_TIMEOUT_SECONDS,
    SUBMIT_URL,
    UPLOADS_PER_MANIFEST_CHECK,
)
from wikisync.exceptions import SyncConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_number(env_key: str, value: str, cast: type[int] | type[float]) -> int | float:
    try:
        return cast(value)
    except ValueError as exc:
        raise SyncConfigError(f"{env_key} must be a number, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class SyncConfig:
    """Sync engine configuration.

    Parameters
    ----------
    manifest_url : str
        Endpoint serving the JSON manifest of fields to observe.
    submit_url : str
        Endpoint receiving delta submissions.
    interval : float
        Seconds between scheduler ticks.
    uploads_per_manifest_check : int
        The manifest is refreshed on every Nth tick.  The first tick always
        refreshes because no manifest exists yet.
    submit_timeout : float
        Total timeout in seconds for one submission request.
    manifest_timeout : float
        Total timeout in seconds for one manifest request.
    sync_varbits : bool
        Collect the ``varbits`` category.
    sync_varps : bool
        Collect the ``varps`` category.
    sync_levels : bool
        Collect the ``levels`` category.
    """

    manifest_url: str = MANIFEST_URL
    submit_url: str = SUBMIT_URL
    interval: float = SECONDS_BETWEEN_UPLOADS
    uploads_per_manifest_check: int = UPLOADS_PER_MANIFEST_CHECK
    submit_timeout: float = SUBMIT_TIMEOUT_SECONDS
    manifest_timeout: float = SUBMIT_TIMEOUT_SECONDS
    sync_varbits: bool = True
    sync_varps: bool = True
    sync_levels: bool = True

    def __post_init__(self) -> None:
        if self.interval <= 0:
            raise SyncConfigError(f"interval must be positive, got {self.interval}")
        if self.uploads_per_manifest_check < 1:
            raise SyncConfigError(
                f"uploads_per_manifest_check must be >= 1, got {self.uploads_per_manifest_check}"
            )
        if self.submit_timeout <= 0 or self.manifest_timeout <= 0:
            raise SyncConfigError("timeouts must be positive")

    @classmethod
    def from_env(cls, **overrides: Any) -> SyncConfig:
        """Create configuration from environment variables.

        Reads optional ``WIKISYNC_*`` variables. Explicit keyword arguments
        override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        SyncConfig
            Populated configuration.
        """
        env = os.environ
        config_kwargs: dict[str, Any] = {}

        for env_key, field_name in (
            ("WIKISYNC_MANIFEST_URL", "manifest_url"),
            ("WIKISYNC_SUBMIT_URL", "submit_url"),
        ):
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        _ENV_NUMERIC_MAP: dict[str, tuple[str, type[int] | type[float]]] = {
            "WIKISYNC_INTERVAL": ("interval", float),
            "WIKISYNC_UPLOADS_PER_MANIFEST_CHECK": ("uploads_per_manifest_check", int),
            "WIKISYNC_SUBMIT_TIMEOUT": ("submit_timeout", float),
            "WIKISYNC_MANIFEST_TIMEOUT": ("manifest_timeout", float),
        }
        for env_key, (field_name, cast) in _ENV_NUMERIC_MAP.items():
            val = env.get(env_key)
            if val is not None and field_name not in overrides:
                config_kwargs[field_name] = _env_number(env_key, val, cast)

        for env_key, field_name in (
            ("WIKISYNC_SYNC_VARBITS", "sync_varbits"),
            ("WIKISYNC_SYNC_VARPS", "sync_varps"),
            ("WIKISYNC_SYNC_LEVELS", "sync_levels"),
        ):
            if field_name not in overrides:
                config_kwargs[field_name] = _env_bool(env.get(env_key), True)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
