"""Patch assembly, reconciliation, splitting and atomic writes."""

from patchpick.patch.assembler import PatchAssembler
from patchpick.patch.reconciler import PatchReconciler
from patchpick.patch.splitter import PatchSplitter, SplitCollisionError, sanitize_name
from patchpick.patch.writer import PatchWriteError, write_patch_atomic, write_text_atomic

__all__ = [
    "PatchAssembler",
    "PatchReconciler",
    "PatchSplitter",
    "PatchWriteError",
    "SplitCollisionError",
    "sanitize_name",
    "write_patch_atomic",
    "write_text_atomic",
]
