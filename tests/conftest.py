"""Shared test fixtures and configuration."""

import subprocess
import tempfile
from pathlib import Path

import pytest

from hunkstage.staging import ApplyFailed


# Line numbers in the comments are indices into the split diff.
MULTI_HUNK_DIFF = "\n".join([
    "diff --git a/app.py b/app.py",        # 0
    "index 83db48f..bf269f4 100644",       # 1
    "--- a/app.py",                        # 2
    "+++ b/app.py",                        # 3
    "@@ -1,4 +1,5 @@",                     # 4
    " import os",                          # 5
    "-import sys",                         # 6
    "+import sys, re",                     # 7
    "+import json",                        # 8
    " ",                                   # 9
    " def main():",                        # 10
    "@@ -20,2 +21,3 @@ def main():",       # 11
    "     a = 1",                          # 12
    "+    b = 2",                          # 13
    "     return a",                       # 14
    "@@ -40,3 +42,2 @@ def helper():",     # 15
    "     x = 1",                          # 16
    "-    y = 2",                          # 17
    "     return x",                       # 18
]) + "\n"


class FakeApplier:
    """Records apply_patch calls and fails the ones listed in failures."""

    def __init__(self, failures=()):
        self.calls = []
        self.failures = set(failures)

    def apply_patch(self, patch, reverse=False, index_only=False):
        self.calls.append((patch, reverse, index_only))
        if len(self.calls) in self.failures:
            raise ApplyFailed(f"patch {len(self.calls)} does not apply", patch=patch)


class FakeDiffSource:
    """Serves queued diffs to a staging panel."""

    def __init__(self, *diffs, unstaged=True):
        self.diffs = list(diffs)
        self.unstaged = unstaged
        self.fetches = 0

    def has_unstaged_changes(self, path):
        return self.unstaged

    def get_file_diff(self, path):
        self.fetches += 1
        if len(self.diffs) > 1:
            return self.diffs.pop(0)
        return self.diffs[0]


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def multi_hunk_diff():
    """Three-hunk diff of a single file."""
    return MULTI_HUNK_DIFF


@pytest.fixture
def fake_applier():
    """Factory for FakeApplier instances."""
    return FakeApplier


@pytest.fixture
def fake_source():
    """Factory for FakeDiffSource instances."""
    return FakeDiffSource


def _git(repo_dir, *args):
    return subprocess.run(
        ["git", *args],
        cwd=repo_dir,
        capture_output=True,
        text=True,
        check=True,
    )


@pytest.fixture
def temp_repo(tmp_path):
    """Create a temporary git repository with one modified file.

    app.txt is committed as one/two/three and then changed in the working
    tree so that git diff shows:

        @@ -1,3 +1,4 @@
         one
        -two
        +TWO
         three
        +four
    """
    repo_dir = tmp_path / "test_repo"
    repo_dir.mkdir()

    _git(repo_dir, "init")
    _git(repo_dir, "config", "user.email", "test@example.com")
    _git(repo_dir, "config", "user.name", "Test User")
    _git(repo_dir, "config", "core.autocrlf", "false")

    (repo_dir / "app.txt").write_text("one\ntwo\nthree\n")
    (repo_dir / "README.md").write_text("# Test Repo\n")
    _git(repo_dir, "add", "app.txt", "README.md")
    _git(repo_dir, "commit", "-m", "Initial commit")

    (repo_dir / "app.txt").write_text("one\nTWO\nthree\nfour\n")

    return repo_dir


@pytest.fixture
def git():
    """Run git in a directory and return the completed process."""
    return _git
