"""Split a combined patch into one file per section."""

from __future__ import annotations

import logging
import os
from collections import defaultdict
from pathlib import Path
from typing import Dict, List, Tuple, Union

from patchpick.config.schema import CollisionPolicy
from patchpick.git.models import PatchDocument

logger = logging.getLogger(__name__)


class SplitCollisionError(Exception):
    """Raised when distinct paths map to the same output file name."""

    def __init__(self, collisions: Dict[str, List[str]]) -> None:
        self.collisions = collisions
        details = "; ".join(
            f"{name}: {', '.join(paths)}" for name, paths in sorted(collisions.items())
        )
        super().__init__(f"Output file name collision — {details}")


def sanitize_name(path: str, separator: str = "_") -> str:
    """Flatten *path* into a file name.

    Path separators and the final extension dot are replaced:
    ``src/pkg/main.go`` becomes ``src_pkg_main_go``.
    """
    parts = path.replace("\\", "/").split("/")
    stem, dot, ext = parts[-1].rpartition(".")
    if dot and stem:
        parts[-1] = f"{stem}{separator}{ext}"
    return separator.join(parts)


class PatchSplitter:
    def __init__(
        self,
        *,
        extension: str = ".patch",
        separator: str = "_",
        on_collision: CollisionPolicy = "error",
    ) -> None:
        self.extension = extension
        self.separator = separator
        self.on_collision = on_collision

    def plan(self, document: PatchDocument) -> List[Tuple[str, str]]:
        """Return (path, file name) pairs in document order.

        Raises SplitCollisionError under the ``error`` policy.
        """
        names = [(s.path, sanitize_name(s.path, self.separator)) for s in document]

        by_name: Dict[str, List[str]] = defaultdict(list)
        for path, name in names:
            by_name[name].append(path)
        collisions = {name: paths for name, paths in by_name.items() if len(paths) > 1}
        if not collisions:
            return [(path, name + self.extension) for path, name in names]

        if self.on_collision == "error":
            raise SplitCollisionError(collisions)

        taken = set(by_name)
        seen: Dict[str, int] = defaultdict(int)
        planned: List[Tuple[str, str]] = []
        for path, name in names:
            seen[name] += 1
            if seen[name] == 1:
                planned.append((path, name + self.extension))
                continue
            n = seen[name]
            while f"{name}-{n}" in taken:
                n += 1
            unique = f"{name}-{n}"
            taken.add(unique)
            logger.warning("Name collision: writing %s as %s%s", path, unique, self.extension)
            planned.append((path, unique + self.extension))
        return planned

    def split(self, document: PatchDocument, output_dir: Union[str, Path]) -> int:
        """Write each section to its own file in *output_dir*; return the count written."""
        planned = self.plan(document)

        out = Path(output_dir)
        out.mkdir(parents=True, exist_ok=True)
        if not os.access(out, os.W_OK | os.X_OK):
            raise PermissionError(f"Output directory is not writable: {out}")

        written = 0
        for section, (path, filename) in zip(document, planned):
            target = out / filename
            with open(target, "w", encoding="utf-8", errors="surrogateescape", newline="") as f:
                f.write(section.text)
            logger.info("Wrote %s -> %s", path, target)
            written += 1
        return written
