"""Interactive curation loop — one state transition per user action."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Dict, List, Sequence, Set, Tuple

from patchpick.git.models import FileStatus
from patchpick.output.prompts import Prompter
from patchpick.session.selection import SelectionSet

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    IDLE = "idle"
    ADDING = "adding"
    REMOVING = "removing"
    REFRESHING = "refreshing"
    FINALIZING = "finalizing"


MENU_CHOICES: Sequence[Tuple[str, str, SessionState]] = (
    ("a", "Add files", SessionState.ADDING),
    ("r", "Remove files", SessionState.REMOVING),
    ("f", "Refresh files from the working tree", SessionState.REFRESHING),
    ("w", "Write patch", SessionState.FINALIZING),
)


def choose_files(source, prompter: Prompter, title: str = "Select files for the patch") -> List[str]:
    """Offer every modified and untracked file; return the chosen paths in display order."""
    candidates = SelectionSet().add_candidates(source)
    if not candidates:
        return []
    return prompter.checklist(title, [(path, status.value, False) for path, status in candidates])


class CurationSession:
    """Drive SelectionSet mutations until the user asks to write the patch.

    ``run`` returns the final selection; a dismissed prompt raises
    ``UserCancelled`` and leaves nothing written.
    """

    def __init__(self, source, selection: SelectionSet, prompter: Prompter) -> None:
        self.source = source
        self.selection = selection
        self.prompter = prompter
        self.state = SessionState.IDLE
        self._handlers: Dict[SessionState, Callable[[], SessionState]] = {
            SessionState.IDLE: self._idle,
            SessionState.ADDING: self._adding,
            SessionState.REMOVING: self._removing,
            SessionState.REFRESHING: self._refreshing,
        }

    def run(self) -> SelectionSet:
        while self.state is not SessionState.FINALIZING:
            self.state = self.step(self.state)
        return self.selection

    def step(self, state: SessionState) -> SessionState:
        logger.debug("Session state: %s", state.value)
        return self._handlers[state]()

    def _statuses(self) -> Tuple[Set[str], Set[str]]:
        return self.source.list_modified(), self.source.list_untracked()

    def _included_items(self, checked: Set[str]) -> List[Tuple[str, str, bool]]:
        modified, untracked = self._statuses()
        items = []
        for path in self.selection.included:
            if path in untracked:
                status = FileStatus.UNTRACKED.value
            elif path in modified:
                status = FileStatus.MODIFIED.value
            else:
                status = "unchanged"
            items.append((path, status, path in checked))
        return items

    def _idle(self) -> SessionState:
        title = (
            f"{len(self.selection)} file(s) in patch, "
            f"{len(self.selection.refresh)} marked for refresh"
        )
        key = self.prompter.menu(title, [(k, label) for k, label, _ in MENU_CHOICES])
        for k, _, target in MENU_CHOICES:
            if k == key:
                return target
        return SessionState.IDLE

    def _adding(self) -> SessionState:
        candidates = self.selection.add_candidates(self.source)
        if not candidates:
            logger.warning("No modified or untracked files left to add")
            return SessionState.IDLE
        chosen = self.prompter.checklist(
            "Add files", [(path, status.value, False) for path, status in candidates]
        )
        self.selection.add(chosen)
        return SessionState.IDLE

    def _removing(self) -> SessionState:
        if not len(self.selection):
            logger.warning("The patch has no files to remove")
            return SessionState.IDLE
        chosen = self.prompter.checklist("Remove files", self._included_items(set()))
        self.selection.remove_selected(chosen)
        return SessionState.IDLE

    def _refreshing(self) -> SessionState:
        if not len(self.selection):
            logger.warning("The patch has no files to refresh")
            return SessionState.IDLE
        current = set(self.selection.refresh)
        chosen = set(
            self.prompter.checklist("Refresh files", self._included_items(current))
        )
        self.selection.unmark_refresh(current - chosen)
        self.selection.mark_for_refresh(chosen)
        return SessionState.IDLE
