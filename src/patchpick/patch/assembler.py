"""Build a new patch from a list of files, one diff section per file."""

from __future__ import annotations

import logging
from typing import Iterable, List

from patchpick.git.adapter import DiffError, DiffSource
from patchpick.git.diff_parser import PatchParser
from patchpick.git.models import DiffSection, PatchDocument

logger = logging.getLogger(__name__)


class PatchAssembler:
    """Generate diff sections through a DiffSource.

    Files are diffed strictly in the order given. Untracked files are staged
    only for the duration of their own diff.
    """

    def __init__(self, source: DiffSource) -> None:
        self.source = source
        self.skipped: List[str] = []

    def generate_section(self, path: str) -> DiffSection:
        """Diff a single file and return its section. Raises DiffError."""
        if self.source.is_tracked(path):
            text = self.source.diff_working_tree(path)
        else:
            with self.source.staged(path):
                text = self.source.diff_staged(path)

        if not text.strip():
            raise DiffError(f"{path}: diff produced no output")

        document = PatchParser(text).parse()
        section = document.get(path)
        if section is None:
            if len(document) != 1:
                raise DiffError(f"{path}: diff output has no section for this path")
            section = document.sections[0]
        if section.path != path:
            section = DiffSection(path=path, header=section.header, body=section.body)
        return section

    def assemble(self, files: Iterable[str]) -> PatchDocument:
        """Return a PatchDocument with one section per file, in input order.

        Files missing from disk are skipped with a warning. Any diff failure
        aborts the whole assembly.
        """
        self.skipped = []
        document = PatchDocument()
        for path in files:
            if not self.source.exists(path):
                logger.warning("Skipping %s: file does not exist", path)
                self.skipped.append(path)
                continue
            document.add(self.generate_section(path))

        if not len(document):
            raise DiffError("No diff sections were produced")
        return document
