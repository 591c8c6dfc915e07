"""patchpick CLI — Typer application with create, update, split, and init commands."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from patchpick import __version__

app = typer.Typer(
    name="patchpick",
    help="Curate git changes into patch files, update them, and split them apart.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console(stderr=True)


def _setup_logging(verbose: bool) -> None:
    """Route the patchpick logger through Rich on stderr."""
    logger = logging.getLogger("patchpick")
    logger.handlers.clear()
    handler = RichHandler(console=console, show_time=False, show_path=False, markup=False)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


def _make_prompter():
    from patchpick.output.prompts import RichPrompter

    return RichPrompter(console)


def _resolve_repo_root() -> Path:
    """Find the git repo root, exit 2 on failure."""
    from patchpick.git.adapter import GitError, get_repo_root

    try:
        return get_repo_root()
    except GitError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc


def _load_config(root: Path, config: Optional[str]):
    from patchpick.config.loader import ConfigError, load_config

    try:
        return load_config(root, config)
    except ConfigError as exc:
        console.print(f"[bold red]Config error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc


def _cancelled() -> None:
    console.print("[dim]Cancelled — nothing written.[/dim]")
    raise typer.Exit(code=0)


# ── create ────────────────────────────────────────────────────────────────────


@app.command()
def create(
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Patch file to write"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .patchpick.toml"),
) -> None:
    """Pick modified and untracked files and assemble them into a new patch."""
    from patchpick.git.adapter import DiffError, GitDiffSource, GitError
    from patchpick.output import terminal
    from patchpick.output.prompts import UserCancelled
    from patchpick.patch.assembler import PatchAssembler
    from patchpick.patch.writer import PatchWriteError, write_patch_atomic
    from patchpick.session.menu import choose_files

    repo_root = _resolve_repo_root()
    cfg = _load_config(repo_root, config)
    source = GitDiffSource(repo_root, unified=cfg.patch.unified, timeout=cfg.git.timeout)
    prompter = _make_prompter()

    try:
        files = choose_files(source, prompter)
        if not files:
            console.print("[dim]No files selected — nothing written.[/dim]")
            raise typer.Exit(code=0)

        name = output or prompter.ask_text("Patch file name", default=cfg.patch.default_name)
        target = Path(name)
        if target.is_dir():
            console.print(f"[bold red]Error:[/bold red] {target} is a directory")
            raise typer.Exit(code=2)
        if target.exists() and not prompter.confirm(f"{target} already exists. Overwrite?"):
            _cancelled()

        assembler = PatchAssembler(source)
        with source.index_guard():
            document = assembler.assemble(files)
        write_patch_atomic(target, document)
    except UserCancelled:
        _cancelled()
    except DiffError as exc:
        console.print(f"[bold red]Diff error:[/bold red] {exc}")
        raise typer.Exit(code=1) from exc
    except GitError as exc:
        console.print(f"[bold red]Git error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc
    except PatchWriteError as exc:
        console.print(f"[bold red]Write error:[/bold red] {exc}")
        raise typer.Exit(code=1) from exc

    if cfg.output.show_summary:
        terminal.render_document(console, document, title="Patch sections", added=document.paths)
        terminal.render_summary(
            console, target=str(target), sections=len(document), skipped=assembler.skipped
        )
    console.print(f"[green]✓[/green] Wrote {len(document)} section(s) to {target}")


# ── update ────────────────────────────────────────────────────────────────────


@app.command()
def update(
    patch_file: Path = typer.Argument(
        ..., exists=True, dir_okay=False, readable=True, help="Existing patch file to update"
    ),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .patchpick.toml"),
) -> None:
    """Add, remove, or refresh file sections of an existing patch."""
    from patchpick.git.adapter import DiffError, GitDiffSource, GitError
    from patchpick.git.diff_parser import parse_patch_file
    from patchpick.output import terminal
    from patchpick.output.prompts import UserCancelled
    from patchpick.patch.reconciler import PatchReconciler
    from patchpick.patch.writer import PatchWriteError, write_patch_atomic
    from patchpick.session.menu import CurationSession
    from patchpick.session.selection import SelectionSet

    repo_root = _resolve_repo_root()
    cfg = _load_config(repo_root, config)
    source = GitDiffSource(repo_root, unified=cfg.patch.unified, timeout=cfg.git.timeout)

    try:
        original = parse_patch_file(patch_file)
    except OSError as exc:
        console.print(f"[bold red]Read error:[/bold red] {exc}")
        raise typer.Exit(code=1) from exc
    if not len(original):
        console.print(f"[bold red]Error:[/bold red] no diff sections found in {patch_file}")
        raise typer.Exit(code=1)

    session = CurationSession(source, SelectionSet.from_document(original), _make_prompter())
    try:
        selection = session.run()
        if not len(selection):
            console.print("[dim]No files left in the selection — patch left unchanged.[/dim]")
            raise typer.Exit(code=0)

        with source.index_guard():
            updated = PatchReconciler(source).reconcile(original, selection)
        write_patch_atomic(patch_file, updated)
    except UserCancelled:
        _cancelled()
    except DiffError as exc:
        console.print(f"[bold red]Diff error:[/bold red] {exc}")
        console.print(f"[dim]{patch_file} was not modified.[/dim]")
        raise typer.Exit(code=1) from exc
    except GitError as exc:
        console.print(f"[bold red]Git error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc
    except PatchWriteError as exc:
        console.print(f"[bold red]Write error:[/bold red] {exc}")
        raise typer.Exit(code=1) from exc

    added = [p for p in updated.paths if p not in original]
    removed = [p for p in original.paths if p not in updated]
    if cfg.output.show_summary:
        terminal.render_document(
            console, updated, title="Patch sections", refreshed=selection.refresh, added=added
        )
        terminal.render_summary(
            console, target=str(patch_file), sections=len(updated), removed=removed
        )
    console.print(f"[green]✓[/green] Updated {patch_file}")


# ── split ─────────────────────────────────────────────────────────────────────


@app.command()
def split(
    patch_file: Path = typer.Argument(
        ..., exists=True, dir_okay=False, readable=True, help="Patch file to split"
    ),
    output_dir: Optional[Path] = typer.Option(None, "--output-dir", "-d", help="Directory for the per-file patches"),
    on_collision: Optional[str] = typer.Option(None, "--on-collision", help="Name collisions: error | suffix"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .patchpick.toml"),
) -> None:
    """Split a combined patch into one patch file per changed path."""
    from patchpick.config.schema import COLLISION_POLICIES
    from patchpick.git.adapter import GitError, get_repo_root
    from patchpick.git.diff_parser import parse_patch_file
    from patchpick.patch.splitter import PatchSplitter, SplitCollisionError

    if on_collision is not None and on_collision not in COLLISION_POLICIES:
        console.print(f"[bold red]Invalid collision policy:[/bold red] {on_collision}")
        raise typer.Exit(code=2)

    # Splitting works outside a repository too; config is looked up where we can
    try:
        config_root = get_repo_root()
    except GitError:
        config_root = Path.cwd()
    cfg = _load_config(config_root, config)

    try:
        document = parse_patch_file(patch_file)
    except OSError as exc:
        console.print(f"[bold red]Read error:[/bold red] {exc}")
        raise typer.Exit(code=1) from exc
    if not len(document):
        console.print(f"[bold red]Error:[/bold red] no diff sections found in {patch_file}")
        raise typer.Exit(code=1)

    splitter = PatchSplitter(
        extension=cfg.split.extension,
        separator=cfg.split.separator,
        on_collision=on_collision or cfg.split.on_collision,  # type: ignore[arg-type]
    )
    out = output_dir or Path(cfg.split.output_dir)
    try:
        count = splitter.split(document, out)
    except SplitCollisionError as exc:
        console.print("[bold red]Name collision:[/bold red] these paths map to the same file:")
        for name, paths in sorted(exc.collisions.items()):
            console.print(f"  [yellow]{name}[/yellow]: {', '.join(paths)}")
        console.print("[dim]Re-run with --on-collision suffix to disambiguate.[/dim]")
        raise typer.Exit(code=1) from exc
    except OSError as exc:
        console.print(f"[bold red]Write error:[/bold red] {exc}")
        raise typer.Exit(code=1) from exc

    console.print(f"[green]✓[/green] Wrote {count} patch file(s) to {out}")


# ── init ──────────────────────────────────────────────────────────────────────


@app.command()
def init() -> None:
    """Generate a starter .patchpick.toml in the repo root."""
    from patchpick.config.defaults import DEFAULT_TOML
    from patchpick.config.loader import CONFIG_FILENAME

    repo_root = _resolve_repo_root()
    config_path = repo_root / CONFIG_FILENAME

    if config_path.exists():
        console.print(f"[yellow]⚠[/yellow]  {CONFIG_FILENAME} already exists at {config_path}")
        raise typer.Exit(code=1)

    config_path.write_text(DEFAULT_TOML, encoding="utf-8")
    console.print(f"[green]✓[/green] Created {config_path}")


# ── version ───────────────────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        print(f"patchpick {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-V", callback=_version_callback,
        is_eager=True, help="Show version and exit",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every git call and decision"),
) -> None:
    """patchpick — curate git changes into patch files."""
    _setup_logging(verbose)
