"""The set of files chosen for the output patch."""

from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Set, Tuple

from patchpick.git.models import FileStatus, PatchDocument


class SelectionSet:
    """Included paths (in addition order) plus the subset marked for refresh."""

    def __init__(self, included: Iterable[str] = (), refresh: Iterable[str] = ()) -> None:
        self._included: Dict[str, None] = dict.fromkeys(included)
        self.refresh: Set[str] = {p for p in refresh if p in self._included}

    @classmethod
    def from_document(cls, document: PatchDocument) -> "SelectionSet":
        return cls(document.paths)

    @property
    def included(self) -> List[str]:
        return list(self._included)

    def __contains__(self, path: object) -> bool:
        return path in self._included

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._included))

    def __len__(self) -> int:
        return len(self._included)

    def __repr__(self) -> str:
        return f"SelectionSet(included={self.included!r}, refresh={sorted(self.refresh)!r})"

    def add_candidates(self, source) -> List[Tuple[str, FileStatus]]:
        """Modified and untracked paths that are not yet included, sorted by path."""
        modified = source.list_modified()
        untracked = source.list_untracked()
        candidates = []
        for path in sorted((modified | untracked) - set(self._included)):
            status = FileStatus.MODIFIED if path in modified else FileStatus.UNTRACKED
            candidates.append((path, status))
        return candidates

    def add(self, paths: Iterable[str]) -> None:
        for path in paths:
            self._included.setdefault(path, None)

    def remove_selected(self, subset: Iterable[str]) -> None:
        for path in subset:
            self._included.pop(path, None)
            self.refresh.discard(path)

    def mark_for_refresh(self, subset: Iterable[str]) -> None:
        """Mark included paths for regeneration; paths outside the selection are ignored."""
        self.refresh.update(p for p in subset if p in self._included)

    def unmark_refresh(self, subset: Iterable[str]) -> None:
        self.refresh.difference_update(subset)
