"""Scan and fusion configuration for pynlp."""

from __future__ import annotations

import dataclasses
import os
from typing import Any


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclasses.dataclass(frozen=True)
class ScanConfig:
    """Source and fusion configuration.

    Parameters
    ----------
    ignore_nomap : bool
        Skip Wi-Fi networks whose SSID ends with ``_nomap``.  Owners use
        that suffix to opt out of geolocation databases.
    fix_cell_mnc : bool
        Repair cell MNCs reported as ``mnc * 10 + 15`` by some modems.
    merge_neighboring_cells : bool
        Merge neighboring-cell reports into cell scans (deduplicated by CID).
    fusion_source : str
        Source tag attached to fused locations.
    redact_logs : bool
        Mask hardware addresses and network names in debug logs.
    """

    ignore_nomap: bool = True
    fix_cell_mnc: bool = True
    merge_neighboring_cells: bool = True
    fusion_source: str = "fused"
    redact_logs: bool = True

    @classmethod
    def from_env(cls, **overrides: Any) -> ScanConfig:
        """Create configuration from ``NLP_*`` environment variables.

        Explicit keyword arguments override environment values.  Boolean
        variables that cannot be parsed keep their default.
        """
        env = os.environ
        defaults = cls()

        _ENV_BOOL_MAP = {
            "NLP_IGNORE_NOMAP": "ignore_nomap",
            "NLP_FIX_CELL_MNC": "fix_cell_mnc",
            "NLP_MERGE_NEIGHBORING_CELLS": "merge_neighboring_cells",
            "NLP_REDACT_LOGS": "redact_logs",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_BOOL_MAP.items():
            if field_name in overrides:
                continue
            config_kwargs[field_name] = _env_bool(env.get(env_key), getattr(defaults, field_name))

        source_env = env.get("NLP_FUSION_SOURCE")
        if source_env is not None and source_env.strip() and "fusion_source" not in overrides:
            config_kwargs["fusion_source"] = source_env.strip()

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
