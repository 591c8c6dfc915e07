"""Git subprocess wrapper — file listings, per-file diffs, scoped staging."""

from __future__ import annotations

import logging
import subprocess
from contextlib import contextmanager
from pathlib import Path
from typing import ContextManager, Iterator, List, Optional, Protocol, Set


logger = logging.getLogger(__name__)


class GitError(Exception):
    """Raised when git is unavailable or returns an unexpected error."""


class DiffError(GitError):
    """Raised when a per-file diff fails or produces no output."""


def _run_git(args: List[str], cwd: Path, timeout: int = 30) -> str:
    """Run a git command and return stdout. Raises GitError on failure."""
    logger.debug("git %s", " ".join(args))
    try:
        result = subprocess.run(
            ["git", "-c", "core.quotepath=off", *args],
            cwd=cwd,
            capture_output=True,
            timeout=timeout,
        )
    except FileNotFoundError:
        raise GitError("git is not installed or not on PATH")
    except subprocess.TimeoutExpired:
        raise GitError(f"git command timed out after {timeout}s: git {' '.join(args)}")

    if result.returncode != 0:
        stderr = result.stderr.decode("utf-8", "replace").strip()
        raise GitError(f"git {args[0]} failed: {stderr or f'exit status {result.returncode}'}")
    # Decoded here; text mode would fold CRLF line endings in diff output
    return result.stdout.decode("utf-8", "surrogateescape")


def _lines(output: str) -> List[str]:
    return [line for line in output.split("\n") if line.strip()]


def get_repo_root(cwd: Optional[Path] = None, timeout: int = 30) -> Path:
    """Return the root of the current git repository."""
    cwd = cwd or Path.cwd()
    out = _run_git(["rev-parse", "--show-toplevel"], cwd=cwd, timeout=timeout)
    return Path(out.strip())


class DiffSource(Protocol):
    """Capability interface the assembler and reconciler diff through."""

    def list_modified(self) -> Set[str]: ...

    def list_untracked(self) -> Set[str]: ...

    def is_tracked(self, path: str) -> bool: ...

    def diff_working_tree(self, path: str) -> str: ...

    def stage(self, path: str) -> None: ...

    def diff_staged(self, path: str) -> str: ...

    def unstage(self, path: str) -> None: ...

    def exists(self, path: str) -> bool: ...

    def staged(self, path: str) -> ContextManager[None]: ...


class GitDiffSource:
    """DiffSource backed by the git binary in *repo_root*.

    The staging index is shared with the user's environment, so every
    method that touches it restores what it changed.
    """

    def __init__(self, repo_root: Path, *, unified: int = 3, timeout: int = 30) -> None:
        self.repo_root = repo_root
        self.unified = unified
        self.timeout = timeout

    def _git(self, *args: str) -> str:
        return _run_git(list(args), cwd=self.repo_root, timeout=self.timeout)

    def _diff_args(self) -> List[str]:
        return ["diff", "--no-color", "--no-ext-diff", f"--unified={self.unified}"]

    # --- listings ---

    def list_modified(self) -> Set[str]:
        """Tracked paths whose working tree differs from the index."""
        return set(_lines(self._git("diff", "--name-only", "--no-color")))

    def list_untracked(self) -> Set[str]:
        return set(_lines(self._git("ls-files", "--others", "--exclude-standard")))

    def list_staged(self) -> Set[str]:
        return set(_lines(self._git("diff", "--cached", "--name-only", "--no-color")))

    def is_tracked(self, path: str) -> bool:
        return bool(self._git("ls-files", "--", path).strip())

    def exists(self, path: str) -> bool:
        return (self.repo_root / path).exists()

    # --- diffs ---

    def diff_working_tree(self, path: str) -> str:
        """Working tree vs index for a tracked path."""
        try:
            return self._git(*self._diff_args(), "--", path)
        except GitError as exc:
            raise DiffError(f"{path}: {exc}") from exc

    def diff_staged(self, path: str) -> str:
        """Index vs HEAD (or the empty tree) for a staged path."""
        try:
            return self._git(*self._diff_args(), "--cached", "--", path)
        except GitError as exc:
            raise DiffError(f"{path}: {exc}") from exc

    # --- index ---

    def stage(self, path: str) -> None:
        try:
            self._git("add", "--", path)
        except GitError as exc:
            raise DiffError(f"{path}: {exc}") from exc

    def unstage(self, path: str) -> None:
        try:
            self._git("rm", "--cached", "--quiet", "--", path)
        except GitError as exc:
            raise DiffError(f"{path}: {exc}") from exc

    @contextmanager
    def staged(self, path: str) -> Iterator[None]:
        """Stage *path* for the duration of the block, unstaging on every exit path.

        A path that was already in the index is left alone.
        """
        if self.is_tracked(path):
            yield
            return
        self.stage(path)
        try:
            yield
        finally:
            self.unstage(path)

    @contextmanager
    def index_guard(self) -> Iterator[None]:
        """Unstage anything added to the index while the block ran."""
        before = self.list_staged()
        try:
            yield
        finally:
            leftover = sorted(self.list_staged() - before)
            for path in leftover:
                if self.is_tracked(path) and not self._in_head(path):
                    logger.warning("Restoring index: unstaging %s", path)
                    self.unstage(path)

    def _in_head(self, path: str) -> bool:
        try:
            return bool(self._git("ls-tree", "--name-only", "HEAD", "--", path).strip())
        except GitError:
            # No commits yet
            return False
