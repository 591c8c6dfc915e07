"""Rich terminal rendering for patch summaries."""

from __future__ import annotations

from typing import Iterable, Optional

from rich.console import Console
from rich.table import Table

from patchpick.git.models import PatchDocument


def render_document(
    console: Console,
    document: PatchDocument,
    *,
    title: str,
    refreshed: Iterable[str] = (),
    added: Iterable[str] = (),
) -> None:
    """Print one row per section with how it got into the document."""
    refreshed = set(refreshed)
    added = set(added)

    table = Table(title=title, title_style="bold", border_style="dim")
    table.add_column("#", justify="right", style="green")
    table.add_column("File", style="cyan")
    table.add_column("Kind", style="magenta")
    table.add_column("Source")
    table.add_column("Lines", justify="right")

    for i, section in enumerate(document, start=1):
        if section.path in added:
            source = "[green]added[/green]"
        elif section.path in refreshed:
            source = "[yellow]refreshed[/yellow]"
        else:
            source = "[dim]kept[/dim]"
        kind = "new file" if section.is_new_file else "modified"
        table.add_row(str(i), section.path, kind, source, str(len(section.body) + 1))

    console.print(table)


def render_summary(
    console: Console,
    *,
    target: str,
    sections: int,
    skipped: Optional[Iterable[str]] = None,
    removed: Optional[Iterable[str]] = None,
) -> None:
    console.print()
    console.print(f"[dim]Patch file:[/dim]  {target}")
    console.print(f"[dim]Sections:[/dim]    {sections}")
    if removed:
        console.print(f"[dim]Removed:[/dim]     {', '.join(removed)}")
    if skipped:
        console.print(f"[dim]Skipped:[/dim]     {', '.join(skipped)}")
