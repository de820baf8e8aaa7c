"""Settings for the solcanon command line.

Settings come from an optional YAML file and a few environment variables,
in that order. The canonicalization pass itself takes plain arguments; this
module only exists for the driving program.

Example ``solcanon.yaml``::

    canon:
      base_id: 1000
      root_marker: optimism
    l1:
      url: http://localhost:8545
      trust_rpc: false
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields
from pathlib import Path

import yaml

from solcanon.errors import ConfigError
from solcanon.layout.canonicalize import DEFAULT_BASE_ID
from solcanon.layout.paths import DEFAULT_ROOT_MARKER

DEFAULT_CONFIG_FILE = "solcanon.yaml"

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass
class CanonSettings:
    base_id: int = DEFAULT_BASE_ID
    root_marker: str = DEFAULT_ROOT_MARKER
    longest_match_first: bool = False


@dataclass
class L1Settings:
    url: str = ""
    trust_rpc: bool = False
    timeout: float = 10.0


@dataclass
class Settings:
    canon: CanonSettings = field(default_factory=CanonSettings)
    l1: L1Settings = field(default_factory=L1Settings)


def load_settings(path: str | Path | None = None) -> Settings:
    """Load settings from ``path`` (if given) and apply environment overrides.

    When ``path`` is None, ``solcanon.yaml`` in the working directory is used
    if it exists.
    """
    settings = Settings()

    if path is None and Path(DEFAULT_CONFIG_FILE).exists():
        path = DEFAULT_CONFIG_FILE

    if path is not None:
        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"{path}: top level must be a mapping")

        for section in data:
            if section not in ("canon", "l1"):
                raise ConfigError(f"{path}: unknown section '{section}'")
        _apply_section(settings.canon, data.get("canon") or {}, "canon")
        _apply_section(settings.l1, data.get("l1") or {}, "l1")

    _apply_env(settings)
    return settings


def _apply_section(target, values: dict, section: str) -> None:
    if not isinstance(values, dict):
        raise ConfigError(f"Section '{section}' must be a mapping")

    known = {f.name: f for f in fields(target)}
    for key, value in values.items():
        if key not in known:
            raise ConfigError(f"Unknown setting '{section}.{key}'")
        current = getattr(target, key)
        if isinstance(current, bool):
            ok = isinstance(value, bool)
        elif isinstance(current, int):
            ok = isinstance(value, int) and not isinstance(value, bool)
        elif isinstance(current, float):
            ok = isinstance(value, (int, float)) and not isinstance(value, bool)
            value = float(value) if ok else value
        else:
            ok = isinstance(value, str)
        if not ok:
            raise ConfigError(
                f"Setting '{section}.{key}' expects {type(current).__name__}, "
                f"got {type(value).__name__}"
            )
        setattr(target, key, value)


def _apply_env(settings: Settings) -> None:
    url = os.environ.get("SOLCANON_L1_URL")
    if url:
        settings.l1.url = url

    trust = os.environ.get("SOLCANON_L1_TRUST_RPC")
    if trust:
        settings.l1.trust_rpc = trust.strip().lower() in _TRUTHY

    marker = os.environ.get("SOLCANON_ROOT_MARKER")
    if marker:
        settings.canon.root_marker = marker
