"""Test doubles and diff builders shared by the test modules."""

from __future__ import annotations

import subprocess
import textwrap
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from patchpick.git.adapter import DiffError
from patchpick.output.prompts import UserCancelled


def modified_diff(path: str, old: str = "old", new: str = "new") -> str:
    return textwrap.dedent(f"""\
        diff --git a/{path} b/{path}
        index 1234567..abcdef0 100644
        --- a/{path}
        +++ b/{path}
        @@ -1 +1 @@
        -{old}
        +{new}
    """)


def new_file_diff(path: str, content: str = "hello") -> str:
    return textwrap.dedent(f"""\
        diff --git a/{path} b/{path}
        new file mode 100644
        index 0000000..e69de29
        --- /dev/null
        +++ b/{path}
        @@ -0,0 +1 @@
        +{content}
    """)


class FakeDiffSource:
    """In-memory DiffSource with an observable staging index."""

    def __init__(
        self,
        tracked: Optional[Dict[str, str]] = None,
        untracked: Optional[Dict[str, str]] = None,
        *,
        missing: Iterable[str] = (),
        failing: Iterable[str] = (),
        staged: Iterable[str] = (),
    ) -> None:
        self.tracked = dict(tracked or {})
        self.untracked = dict(untracked or {})
        self.missing = set(missing)
        self.failing = set(failing)
        self.index = set(staged)
        self.calls: List[Tuple[str, str]] = []

    def list_modified(self):
        return set(self.tracked)

    def list_untracked(self):
        return set(self.untracked)

    def is_tracked(self, path):
        return path in self.tracked

    def exists(self, path):
        return path not in self.missing

    def diff_working_tree(self, path):
        self.calls.append(("diff", path))
        if path in self.failing:
            raise DiffError(f"{path}: simulated failure")
        return self.tracked[path]

    def stage(self, path):
        self.calls.append(("stage", path))
        self.index.add(path)

    def diff_staged(self, path):
        self.calls.append(("diff_staged", path))
        if path not in self.index:
            raise DiffError(f"{path}: not staged")
        if path in self.failing:
            raise DiffError(f"{path}: simulated failure")
        return self.untracked[path]

    def unstage(self, path):
        self.calls.append(("unstage", path))
        self.index.discard(path)

    @contextmanager
    def staged(self, path):
        self.stage(path)
        try:
            yield
        finally:
            self.unstage(path)


class ScriptedPrompter:
    """Prompter that replays canned answers; ``None`` cancels."""

    def __init__(
        self,
        *,
        checklists: Sequence[Optional[List[str]]] = (),
        menus: Sequence[Optional[str]] = (),
        texts: Sequence[Optional[str]] = (),
        confirms: Sequence[bool] = (),
    ) -> None:
        self.checklists = list(checklists)
        self.menus = list(menus)
        self.texts = list(texts)
        self.confirms = list(confirms)
        self.shown: List[Tuple[str, list]] = []

    @staticmethod
    def _next(queue):
        answer = queue.pop(0)
        if answer is None:
            raise UserCancelled()
        return answer

    def checklist(self, title, items):
        self.shown.append((title, list(items)))
        return self._next(self.checklists)

    def ask_text(self, prompt, default=""):
        answer = self._next(self.texts)
        return answer or default

    def confirm(self, prompt, default=False):
        return self.confirms.pop(0)

    def menu(self, title, choices):
        return self._next(self.menus)


def git_staged(repo: Path) -> set:
    out = subprocess.run(
        ["git", "diff", "--cached", "--name-only"],
        cwd=repo, capture_output=True, text=True, check=True,
    ).stdout
    return {line for line in out.splitlines() if line.strip()}
