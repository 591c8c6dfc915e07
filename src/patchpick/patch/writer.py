"""Atomic patch writes via temp file + rename."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Union

from patchpick.git.models import PatchDocument

logger = logging.getLogger(__name__)


class PatchWriteError(OSError):
    """Raised when a patch file cannot be written in place."""


def write_text_atomic(target: Union[str, Path], content: str) -> Path:
    """Write *content* to *target* through a sibling temp file.

    The target is either fully replaced or left untouched.
    """
    target = Path(target)
    directory = target.parent
    try:
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{target.name}.", suffix=".tmp", dir=directory
        )
    except OSError as exc:
        raise PatchWriteError(f"Cannot create temp file in {directory}: {exc}") from exc

    try:
        with os.fdopen(fd, "w", encoding="utf-8", errors="surrogateescape", newline="") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        if target.exists():
            os.chmod(tmp_name, target.stat().st_mode & 0o7777)
        os.replace(tmp_name, target)
    except BaseException as exc:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        if isinstance(exc, OSError):
            raise PatchWriteError(f"Cannot write {target}: {exc}") from exc
        raise

    logger.debug("Wrote %d bytes to %s", len(content), target)
    return target


def write_patch_atomic(target: Union[str, Path], document: PatchDocument) -> Path:
    """Render *document* and atomically replace *target* with it."""
    if not len(document):
        raise PatchWriteError(f"Refusing to write an empty patch to {target}")
    return write_text_atomic(target, document.render())
