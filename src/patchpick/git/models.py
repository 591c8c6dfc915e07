"""Data models for patch documents."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple


class FileStatus(str, Enum):
    MODIFIED = "modified"
    UNTRACKED = "untracked"


@dataclass(frozen=True)
class DiffSection:
    """The portion of a patch that belongs to a single file.

    ``header`` is the ``diff --git`` line and ``body`` every following line up
    to the next header. Line terminators are kept so the section can be
    written back byte for byte.
    """

    path: str
    header: str
    body: Tuple[str, ...] = ()

    @property
    def text(self) -> str:
        return self.header + "".join(self.body)

    @property
    def is_new_file(self) -> bool:
        return any(line.startswith("new file mode") for line in self.body[:4])


@dataclass
class PatchDocument:
    """An ordered sequence of DiffSection, keyed by path."""

    preamble: str = ""
    _sections: List[DiffSection] = field(default_factory=list, init=False, repr=False)
    _index: Dict[str, int] = field(default_factory=dict, init=False, repr=False)

    @classmethod
    def from_sections(cls, sections, preamble: str = "") -> "PatchDocument":
        doc = cls(preamble=preamble)
        for section in sections:
            doc.add(section)
        return doc

    def add(self, section: DiffSection) -> None:
        """Append *section*, or replace the existing section for its path in place."""
        pos = self._index.get(section.path)
        if pos is None:
            self._index[section.path] = len(self._sections)
            self._sections.append(section)
        else:
            self._sections[pos] = section

    def get(self, path: str) -> Optional[DiffSection]:
        pos = self._index.get(path)
        return None if pos is None else self._sections[pos]

    @property
    def paths(self) -> List[str]:
        return [s.path for s in self._sections]

    @property
    def sections(self) -> List[DiffSection]:
        return list(self._sections)

    def __contains__(self, path: object) -> bool:
        return path in self._index

    def __iter__(self) -> Iterator[DiffSection]:
        return iter(self._sections)

    def __len__(self) -> int:
        return len(self._sections)

    def render(self) -> str:
        """Return the document as patch text."""
        parts = [self.preamble]
        last = len(self._sections) - 1
        for i, section in enumerate(self._sections):
            text = section.text
            # Never let two sections fuse onto one line
            if i < last and not text.endswith("\n"):
                text += "\n"
            parts.append(text)
        return "".join(parts)
