"""Git interface layer — adapter, patch parsing, models."""

from patchpick.git.adapter import (
    DiffError,
    DiffSource,
    GitDiffSource,
    GitError,
    get_repo_root,
)
from patchpick.git.diff_parser import PatchParser, header_path, parse_patch_file
from patchpick.git.models import DiffSection, FileStatus, PatchDocument

__all__ = [
    "DiffError",
    "DiffSection",
    "DiffSource",
    "FileStatus",
    "GitDiffSource",
    "GitError",
    "PatchDocument",
    "PatchParser",
    "get_repo_root",
    "header_path",
    "parse_patch_file",
]
