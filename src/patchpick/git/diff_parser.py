"""Single-pass patch parser — splits patch text into per-file sections.

Boundaries are found only by the ``diff --git`` header line. Hunk content
lines always carry a leading ``+``, ``-``, ``space`` or ``\\`` so they can never
be mistaken for a header, and no line counting is needed.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import List, Optional, Union

from patchpick.git.models import DiffSection, PatchDocument

logger = logging.getLogger(__name__)

# --- Regex patterns for header parsing ---

_DIFF_HEADER_RE = re.compile(r"^diff --git (.+?)\r?\n?$")
_QUOTED_PAIR_RE = re.compile(r'^"a/((?:[^"\\]|\\.)*)" "b/((?:[^"\\]|\\.)*)"$')
_PLAIN_PAIR_RE = re.compile(r"^a/(.*) b/(.*)$")
# Lines end at "\n" only; "\r", form feeds and friends are line content
_LINE_RE = re.compile(r"[^\n]*\n|[^\n]+\Z")

_ESCAPES = {"n": "\n", "t": "\t", '"': '"', "\\": "\\"}


def _unquote(value: str) -> str:
    """Undo git's C-style path quoting (octal escapes included)."""
    raw = bytearray()
    idx = 0
    while idx < len(value):
        ch = value[idx]
        if ch == "\\" and idx + 1 < len(value):
            nxt = value[idx + 1]
            if nxt in "01234567" and idx + 4 <= len(value):
                raw.append(int(value[idx + 1:idx + 4], 8))
                idx += 4
                continue
            raw.extend(_ESCAPES.get(nxt, nxt).encode("utf-8"))
            idx += 2
            continue
        raw.extend(ch.encode("utf-8"))
        idx += 1
    return raw.decode("utf-8", errors="replace")


def header_path(line: str) -> Optional[str]:
    """Return the ``b/`` path named by a ``diff --git`` line, or None."""
    m = _DIFF_HEADER_RE.match(line)
    if not m:
        return None
    rest = m.group(1)

    qm = _QUOTED_PAIR_RE.match(rest)
    if qm:
        return _unquote(qm.group(2))

    # Unrenamed paths with spaces: "a/<p> b/<p>" splits exactly in half
    if rest.startswith("a/") and (len(rest) - 5) % 2 == 0:
        half = (len(rest) - 5) // 2
        candidate = rest[2:2 + half]
        if rest == f"a/{candidate} b/{candidate}":
            return candidate

    pm = _PLAIN_PAIR_RE.match(rest)
    if pm:
        return pm.group(2)
    return None


class PatchParser:
    """Parse patch text into a PatchDocument.

    Usage::

        document = PatchParser(patch_text).parse()
        for section in document:
            ...
    """

    def __init__(self, patch_text: str) -> None:
        self._lines = _LINE_RE.findall(patch_text)

    def parse(self) -> PatchDocument:
        preamble: List[str] = []
        document = PatchDocument()
        path: Optional[str] = None
        header = ""
        body: List[str] = []

        def flush() -> None:
            if path in document:
                logger.warning(
                    "Patch has more than one section for %s; keeping the last one", path
                )
            document.add(DiffSection(path=path, header=header, body=tuple(body)))

        for line in self._lines:
            new_path = header_path(line)
            if new_path is not None:
                if path is not None:
                    flush()
                path, header, body = new_path, line, []
            elif path is None:
                preamble.append(line)
            else:
                body.append(line)

        if path is not None:
            flush()
        document.preamble = "".join(preamble)
        return document


def parse_patch_file(path: Union[str, Path]) -> PatchDocument:
    """Read and parse a patch file from disk."""
    with open(path, "r", encoding="utf-8", errors="surrogateescape", newline="") as f:
        return PatchParser(f.read()).parse()
