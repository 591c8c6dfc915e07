"""Shared test fixtures — sample patches and temp git repos."""

from __future__ import annotations

import subprocess
import textwrap
from pathlib import Path

import pytest

from helpers import modified_diff


@pytest.fixture
def three_file_patch() -> str:
    """A patch with sections for a.txt, b.txt and c.txt in that order."""
    return (
        modified_diff("a.txt", "a0", "a1")
        + modified_diff("b.txt", "b0", "b1")
        + modified_diff("c.txt", "c0", "c1")
    )


@pytest.fixture
def sample_patch_with_preamble() -> str:
    """A git format-patch style file: mail headers before the first section."""
    return textwrap.dedent("""\
        From 1111111111111111111111111111111111111111 Mon Sep 17 00:00:00 2001
        From: Test <test@test.com>
        Subject: [PATCH] tweak

        ---
         a.txt | 2 +-
         1 file changed, 1 insertion(+), 1 deletion(-)

    """) + modified_diff("a.txt")


@pytest.fixture
def sample_patch_rename() -> str:
    """A section for a renamed file."""
    return textwrap.dedent("""\
        diff --git a/old_name.py b/new_name.py
        similarity index 97%
        rename from old_name.py
        rename to new_name.py
        index abc1234..def5678 100644
        --- a/old_name.py
        +++ b/new_name.py
        @@ -1,0 +2,1 @@
        +# New line added after rename
    """)


@pytest.fixture
def tmp_git_repo(tmp_path: Path) -> Path:
    """Create a temporary git repository for integration tests."""
    subprocess.run(["git", "init", str(tmp_path)], capture_output=True, check=True)
    subprocess.run(
        ["git", "config", "user.email", "test@test.com"],
        cwd=tmp_path, capture_output=True, check=True,
    )
    subprocess.run(
        ["git", "config", "user.name", "Test"],
        cwd=tmp_path, capture_output=True, check=True,
    )
    # Initial commit
    readme = tmp_path / "README.md"
    readme.write_text("# Test\n")
    subprocess.run(["git", "add", "."], cwd=tmp_path, capture_output=True, check=True)
    subprocess.run(
        ["git", "commit", "-m", "init"],
        cwd=tmp_path, capture_output=True, check=True,
    )
    return tmp_path
