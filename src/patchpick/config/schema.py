"""Configuration schema — dataclasses for every config section."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

CollisionPolicy = Literal["error", "suffix"]

COLLISION_POLICIES = ("error", "suffix")


@dataclass
class PatchConfig:
    default_name: str = "changes.patch"
    unified: int = 3  # context lines per hunk


@dataclass
class GitConfig:
    timeout: int = 30  # seconds; a hung git call is fatal, never retried


@dataclass
class SplitConfig:
    output_dir: str = "."
    extension: str = ".patch"
    separator: str = "_"
    on_collision: CollisionPolicy = "error"


@dataclass
class OutputConfig:
    show_summary: bool = True


@dataclass
class PatchPickConfig:
    version: str = "1.0"
    patch: PatchConfig = field(default_factory=PatchConfig)
    git: GitConfig = field(default_factory=GitConfig)
    split: SplitConfig = field(default_factory=SplitConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
