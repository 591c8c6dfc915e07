"""Interactive prompting — checklists, text input, confirmations and menus.

The core only talks to the :class:`Prompter` protocol; :class:`RichPrompter`
is the terminal implementation used by the CLI.
"""

from __future__ import annotations

import re
from contextlib import contextmanager
from typing import Iterator, List, Optional, Protocol, Sequence, Tuple

from rich.console import Console
from rich.prompt import Confirm, Prompt
from rich.table import Table

# (label, status, checked)
ChecklistItem = Tuple[str, str, bool]

_RANGE_RE = re.compile(r"^(\d+)(?:-(\d+))?$")


class UserCancelled(Exception):
    """Raised when the user dismisses a prompt. Not an error."""


class Prompter(Protocol):
    def checklist(self, title: str, items: Sequence[ChecklistItem]) -> List[str]: ...

    def ask_text(self, prompt: str, default: str = "") -> str: ...

    def confirm(self, prompt: str, default: bool = False) -> bool: ...

    def menu(self, title: str, choices: Sequence[Tuple[str, str]]) -> str: ...


@contextmanager
def _cancellable() -> Iterator[None]:
    try:
        yield
    except (KeyboardInterrupt, EOFError) as exc:
        raise UserCancelled() from exc


def parse_toggles(answer: str, count: int) -> Optional[List[int]]:
    """Parse ``"1 3-5,7"`` into zero-based indexes. None if any token is invalid."""
    indexes: List[int] = []
    for token in re.split(r"[\s,]+", answer.strip()):
        if not token:
            continue
        m = _RANGE_RE.match(token)
        if not m:
            return None
        start = int(m.group(1))
        end = int(m.group(2)) if m.group(2) else start
        if start < 1 or end > count or start > end:
            return None
        indexes.extend(range(start - 1, end))
    return indexes


class RichPrompter:
    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console(stderr=True)

    def _render_checklist(self, title: str, items: Sequence[ChecklistItem], state: List[bool]) -> None:
        table = Table(title=title, title_style="bold", border_style="dim", show_lines=False)
        table.add_column("#", justify="right", style="green")
        table.add_column("", justify="center", width=3)
        table.add_column("Status", style="yellow")
        table.add_column("File", style="cyan")
        for i, (label, status, _) in enumerate(items):
            table.add_row(str(i + 1), "[bold]x[/bold]" if state[i] else " ", str(status), label)
        self.console.print(table)

    def checklist(self, title: str, items: Sequence[ChecklistItem]) -> List[str]:
        """Let the user toggle items; return the labels left checked, in display order."""
        state = [checked for _, _, checked in items]
        while True:
            self._render_checklist(title, items, state)
            with _cancellable():
                answer = Prompt.ask(
                    "Toggle numbers (e.g. 1 3-5), [bold]a[/bold]ll, [bold]n[/bold]one, "
                    "Enter to accept, [bold]q[/bold] to cancel",
                    console=self.console,
                    default="",
                    show_default=False,
                )
            answer = answer.strip().lower()
            if answer == "":
                return [label for (label, _, _), on in zip(items, state) if on]
            if answer == "q":
                raise UserCancelled()
            if answer in ("a", "n"):
                state = [answer == "a"] * len(items)
                continue
            toggles = parse_toggles(answer, len(items))
            if toggles is None:
                self.console.print(f"[red]Invalid selection:[/red] {answer}")
                continue
            for idx in toggles:
                state[idx] = not state[idx]

    def ask_text(self, prompt: str, default: str = "") -> str:
        with _cancellable():
            answer = Prompt.ask(prompt, console=self.console, default=default)
        answer = answer.strip()
        if not answer:
            raise UserCancelled()
        return answer

    def confirm(self, prompt: str, default: bool = False) -> bool:
        with _cancellable():
            return Confirm.ask(prompt, console=self.console, default=default)

    def menu(self, title: str, choices: Sequence[Tuple[str, str]]) -> str:
        """Show keyed choices and return the key picked; ``q`` cancels."""
        self.console.print()
        self.console.print(f"[bold]{title}[/bold]")
        for key, label in choices:
            self.console.print(f"  [green]{key}[/green]  {label}")
        keys = [key for key, _ in choices]
        with _cancellable():
            answer = Prompt.ask("Choice", console=self.console, choices=keys + ["q"], show_choices=False)
        if answer == "q":
            raise UserCancelled()
        return answer
