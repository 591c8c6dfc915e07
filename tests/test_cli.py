"""Tests for the CLI commands."""

import subprocess
from pathlib import Path

import pytest
from typer.testing import CliRunner

from helpers import ScriptedPrompter, git_staged, modified_diff, new_file_diff

from patchpick.cli import app

runner = CliRunner()


@pytest.fixture
def dirty_repo(tmp_git_repo: Path, monkeypatch) -> Path:
    monkeypatch.chdir(tmp_git_repo)
    (tmp_git_repo / "README.md").write_text("# Test\nmore\n")
    (tmp_git_repo / "x.txt").write_text("brand new\n")
    (tmp_git_repo / "y.txt").write_text("another\n")
    return tmp_git_repo


def _script(monkeypatch, prompter: ScriptedPrompter) -> ScriptedPrompter:
    monkeypatch.setattr("patchpick.cli._make_prompter", lambda: prompter)
    return prompter


class TestVersion:
    def test_version_flag(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "patchpick" in result.output


class TestInit:
    def test_creates_config(self, tmp_git_repo: Path, monkeypatch):
        monkeypatch.chdir(tmp_git_repo)
        result = runner.invoke(app, ["init"])
        assert result.exit_code == 0
        assert (tmp_git_repo / ".patchpick.toml").exists()

    def test_refuses_overwrite(self, tmp_git_repo: Path, monkeypatch):
        monkeypatch.chdir(tmp_git_repo)
        (tmp_git_repo / ".patchpick.toml").write_text("existing")
        result = runner.invoke(app, ["init"])
        assert result.exit_code == 1


class TestCreate:
    def test_creates_patch_in_selection_order(self, dirty_repo: Path, monkeypatch):
        _script(monkeypatch, ScriptedPrompter(checklists=[["x.txt", "README.md"]], texts=["out.patch"]))
        result = runner.invoke(app, ["create"])
        assert result.exit_code == 0, result.output
        text = (dirty_repo / "out.patch").read_text()
        assert text.index("diff --git a/x.txt") < text.index("diff --git a/README.md")
        assert git_staged(dirty_repo) == set()

    def test_output_option_skips_name_prompt(self, dirty_repo: Path, monkeypatch):
        _script(monkeypatch, ScriptedPrompter(checklists=[["y.txt"]]))
        result = runner.invoke(app, ["create", "-o", "y.patch"])
        assert result.exit_code == 0, result.output
        assert "+another" in (dirty_repo / "y.patch").read_text()

    def test_no_selection_is_clean_noop(self, dirty_repo: Path, monkeypatch):
        _script(monkeypatch, ScriptedPrompter(checklists=[[]]))
        result = runner.invoke(app, ["create"])
        assert result.exit_code == 0
        assert not list(dirty_repo.glob("*.patch"))

    def test_cancel_is_clean_noop(self, dirty_repo: Path, monkeypatch):
        _script(monkeypatch, ScriptedPrompter(checklists=[["x.txt"]], texts=[None]))
        result = runner.invoke(app, ["create"])
        assert result.exit_code == 0
        assert "Cancelled" in result.output
        assert not list(dirty_repo.glob("*.patch"))

    def test_declined_overwrite_keeps_file(self, dirty_repo: Path, monkeypatch):
        (dirty_repo / "out.patch").write_text("keep me\n")
        _script(monkeypatch, ScriptedPrompter(checklists=[["x.txt"]], confirms=[False]))
        result = runner.invoke(app, ["create", "-o", "out.patch"])
        assert result.exit_code == 0
        assert (dirty_repo / "out.patch").read_text() == "keep me\n"

    def test_not_a_repo(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        result = runner.invoke(app, ["create"])
        assert result.exit_code == 2


class TestUpdate:
    def _make_patch(self, repo: Path) -> Path:
        subprocess.run(["git", "add", "x.txt"], cwd=repo, check=True)
        text = subprocess.run(
            ["git", "diff", "--cached", "--", "x.txt"], cwd=repo, capture_output=True, text=True, check=True
        ).stdout
        subprocess.run(["git", "rm", "--cached", "--quiet", "--", "x.txt"], cwd=repo, check=True)
        text += subprocess.run(
            ["git", "diff", "--", "README.md"], cwd=repo, capture_output=True, text=True, check=True
        ).stdout
        patch = repo / "work.patch"
        patch.write_text(text)
        return patch

    def test_write_without_changes_is_byte_identical(self, dirty_repo: Path, monkeypatch):
        patch = self._make_patch(dirty_repo)
        before = patch.read_bytes()
        _script(monkeypatch, ScriptedPrompter(menus=["w"]))
        result = runner.invoke(app, ["update", str(patch)])
        assert result.exit_code == 0, result.output
        assert patch.read_bytes() == before

    def test_remove_and_add(self, dirty_repo: Path, monkeypatch):
        patch = self._make_patch(dirty_repo)
        _script(monkeypatch, ScriptedPrompter(menus=["r", "a", "w"], checklists=[["x.txt"], ["y.txt"]]))
        result = runner.invoke(app, ["update", str(patch)])
        assert result.exit_code == 0, result.output
        text = patch.read_text()
        assert "a/x.txt" not in text
        assert text.index("a/README.md") < text.index("a/y.txt")
        assert git_staged(dirty_repo) == set()

    def test_failed_refresh_leaves_patch_untouched(self, dirty_repo: Path, monkeypatch):
        patch = self._make_patch(dirty_repo)
        before = patch.read_bytes()
        # Reverting README.md makes its refreshed diff empty
        subprocess.run(["git", "checkout", "--", "README.md"], cwd=dirty_repo, check=True)
        _script(monkeypatch, ScriptedPrompter(menus=["f", "w"], checklists=[["README.md"]]))
        result = runner.invoke(app, ["update", str(patch)])
        assert result.exit_code == 1
        assert patch.read_bytes() == before

    def test_cancel_leaves_patch_untouched(self, dirty_repo: Path, monkeypatch):
        patch = self._make_patch(dirty_repo)
        before = patch.read_bytes()
        _script(monkeypatch, ScriptedPrompter(menus=["r", None], checklists=[["x.txt"]]))
        result = runner.invoke(app, ["update", str(patch)])
        assert result.exit_code == 0
        assert patch.read_bytes() == before

    def test_missing_patch_file(self, dirty_repo: Path):
        result = runner.invoke(app, ["update", "nope.patch"])
        assert result.exit_code == 2

    def test_patch_without_sections(self, dirty_repo: Path):
        (dirty_repo / "empty.patch").write_text("nothing here\n")
        result = runner.invoke(app, ["update", "empty.patch"])
        assert result.exit_code == 1


class TestSplit:
    def test_split_outside_repo(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        patch = tmp_path / "all.patch"
        patch.write_text(modified_diff("src/a.py") + new_file_diff("b.txt"))
        result = runner.invoke(app, ["split", str(patch), "-d", "parts"])
        assert result.exit_code == 0, result.output
        assert sorted(p.name for p in (tmp_path / "parts").iterdir()) == ["b_txt.patch", "src_a_py.patch"]

    def test_collision_exit_code(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        patch = tmp_path / "all.patch"
        patch.write_text(modified_diff("src/a.go") + new_file_diff("src_a.go"))
        result = runner.invoke(app, ["split", str(patch), "-d", "parts"])
        assert result.exit_code == 1
        assert "collision" in result.output.lower()

    def test_collision_suffix_flag(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        patch = tmp_path / "all.patch"
        patch.write_text(modified_diff("src/a.go") + new_file_diff("src_a.go"))
        result = runner.invoke(app, ["split", str(patch), "-d", "parts", "--on-collision", "suffix"])
        assert result.exit_code == 0, result.output
        assert (tmp_path / "parts" / "src_a_go-2.patch").exists()

    def test_bad_collision_flag(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        patch = tmp_path / "all.patch"
        patch.write_text(modified_diff("a.py"))
        result = runner.invoke(app, ["split", str(patch), "--on-collision", "overwrite"])
        assert result.exit_code == 2
