"""Rebuild an existing patch against an updated file selection.

Retained sections are copied verbatim in their original order, refreshed
sections are regenerated in place, and newly added files are appended in
the order they were added. Reconciling twice with an unchanged selection
therefore produces byte-identical output.
"""

from __future__ import annotations

import logging
from typing import List

from patchpick.git.adapter import DiffSource
from patchpick.git.models import DiffSection, PatchDocument
from patchpick.patch.assembler import PatchAssembler
from patchpick.session.selection import SelectionSet

logger = logging.getLogger(__name__)


class PatchReconciler:
    def __init__(self, source: DiffSource) -> None:
        self.source = source
        self.assembler = PatchAssembler(source)

    def reconcile(self, original: PatchDocument, selection: SelectionSet) -> PatchDocument:
        """Return the updated document. Raises DiffError before anything is written."""
        kept: List[DiffSection] = []
        for section in original:
            path = section.path
            if path not in selection:
                logger.info("Dropping %s", path)
                continue
            if path in selection.refresh:
                logger.info("Refreshing %s", path)
                kept.append(self.assembler.generate_section(path))
            else:
                kept.append(section)

        added: List[DiffSection] = []
        for path in selection.included:
            if path in original:
                continue
            logger.info("Adding %s", path)
            added.append(self.assembler.generate_section(path))

        return PatchDocument.from_sections(kept + added, preamble=original.preamble)
