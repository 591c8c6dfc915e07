"""Load and merge configuration from .patchpick.toml and env vars."""

from __future__ import annotations

import dataclasses
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from patchpick.config.schema import (
    COLLISION_POLICIES,
    GitConfig,
    OutputConfig,
    PatchConfig,
    PatchPickConfig,
    SplitConfig,
)

CONFIG_FILENAME = ".patchpick.toml"


class ConfigError(Exception):
    """Raised when config is malformed or unreadable."""


def find_config_file(repo_root: Path, override: Optional[str] = None) -> Optional[Path]:
    """Locate the config file. *override* takes precedence."""
    if override:
        p = Path(override)
        if not p.is_file():
            raise ConfigError(f"Config file not found: {override}")
        return p
    candidate = repo_root / CONFIG_FILENAME
    return candidate if candidate.is_file() else None


def _parse_toml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Failed to parse {path}: {exc}") from exc


def _positive_int(val: str) -> Optional[int]:
    try:
        num = int(val)
    except ValueError:
        return None
    return num if num > 0 else None


def _merge_env_overrides(cfg: PatchPickConfig) -> None:
    """Apply PATCHPICK_* environment variable overrides. Invalid values are ignored."""
    if val := os.environ.get("PATCHPICK_DEFAULT_NAME"):
        cfg.patch.default_name = val
    if val := os.environ.get("PATCHPICK_UNIFIED"):
        if val.isdigit():
            cfg.patch.unified = int(val)
    if val := os.environ.get("PATCHPICK_GIT_TIMEOUT"):
        if (timeout := _positive_int(val)) is not None:
            cfg.git.timeout = timeout
    if val := os.environ.get("PATCHPICK_ON_COLLISION"):
        if val in COLLISION_POLICIES:
            cfg.split.on_collision = val  # type: ignore[assignment]


def _build_section(data: Dict[str, Any], cls: type, section: str):
    """Build a dataclass from a TOML section dict, ignoring unknown keys."""
    valid_fields = {f.name for f in dataclasses.fields(cls)}
    filtered = {k: v for k, v in data.get(section, {}).items() if k in valid_fields}
    return cls(**filtered)


def _validate(cfg: PatchPickConfig) -> None:
    if cfg.split.on_collision not in COLLISION_POLICIES:
        raise ConfigError(
            f"split.on_collision must be one of {', '.join(COLLISION_POLICIES)}, "
            f"got {cfg.split.on_collision!r}"
        )
    if not isinstance(cfg.patch.unified, int) or cfg.patch.unified < 0:
        raise ConfigError(f"patch.unified must be a non-negative integer, got {cfg.patch.unified!r}")
    if not isinstance(cfg.git.timeout, int) or cfg.git.timeout <= 0:
        raise ConfigError(f"git.timeout must be a positive integer, got {cfg.git.timeout!r}")
    if len(cfg.split.separator) != 1 or cfg.split.separator in "/\\.":
        raise ConfigError(f"split.separator must be a single neutral character, got {cfg.split.separator!r}")


def load_config(
    repo_root: Path,
    config_override: Optional[str] = None,
) -> PatchPickConfig:
    """Load, validate, and return a PatchPickConfig."""
    config_path = find_config_file(repo_root, config_override)

    if config_path is None:
        cfg = PatchPickConfig()
    else:
        raw = _parse_toml(config_path)
        cfg = PatchPickConfig(
            version=raw.get("version", "1.0"),
            patch=_build_section(raw, PatchConfig, "patch"),
            git=_build_section(raw, GitConfig, "git"),
            split=_build_section(raw, SplitConfig, "split"),
            output=_build_section(raw, OutputConfig, "output"),
        )

    _merge_env_overrides(cfg)
    _validate(cfg)
    return cfg
