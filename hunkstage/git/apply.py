"""Patch application for hunkstage.

Contains:
- apply_patch: Apply a textual patch with git apply
- GitPatchApplier: Applier bound to a repository, used by the staging session
- cleanup_patch_files: Remove patch files left behind in .tmp/
"""

import glob
import itertools
import os
import subprocess
from pathlib import Path
from typing import Optional

from hunkstage.git.runner import get_repo_root
from hunkstage.staging.errors import ApplyFailed

_patch_counter = itertools.count(1)


def _patch_file_path(repo_root: Path) -> Path:
    tmp_dir = repo_root / ".tmp"
    tmp_dir.mkdir(exist_ok=True)
    return tmp_dir / f"hunkstage_patch_{os.getpid()}_{next(_patch_counter)}.patch"


def apply_patch(
    patch: str,
    reverse: bool = False,
    index_only: bool = False,
    repo_root: Optional[Path] = None,
    keep_patch: bool = False,
) -> None:
    """Apply a patch to the working tree and/or the index.

    Args:
        patch: Unified diff text (must end with a newline).
        reverse: Apply the inverse of the patch.
        index_only: Apply to the index only (git apply --cached).
        repo_root: Repository root path (defaults to the current repo).
        keep_patch: Leave the patch file in .tmp/ for inspection.

    Raises:
        ApplyFailed: If git rejects the patch.
        GitError: If not in a git repository.
    """
    if repo_root is None:
        repo_root = get_repo_root()

    patch_file = _patch_file_path(repo_root)
    # surrogateescape restores the raw bytes of non-UTF-8 file content
    patch_file.write_text(patch, encoding="utf-8", errors="surrogateescape")

    args = ["git", "apply"]
    if index_only:
        args.append("--cached")
    if reverse:
        args.append("--reverse")
    args.append(str(patch_file))

    try:
        result = subprocess.run(
            args,
            capture_output=True,
            encoding="utf-8",
            errors="surrogateescape",
            cwd=repo_root,
        )
    except FileNotFoundError:
        raise ApplyFailed("Git is not installed or not in PATH.", patch=patch)
    finally:
        if not keep_patch:
            patch_file.unlink(missing_ok=True)

    if result.returncode != 0:
        raise ApplyFailed(
            f"Failed to apply patch: {result.stderr.strip()}",
            patch=patch,
        )


class GitPatchApplier:
    """Applies patches to one repository."""

    def __init__(self, repo_root: Optional[Path] = None, keep_patches: bool = False):
        self.repo_root = repo_root
        self.keep_patches = keep_patches

    def apply_patch(self, patch: str, reverse: bool = False, index_only: bool = False) -> None:
        apply_patch(
            patch,
            reverse=reverse,
            index_only=index_only,
            repo_root=self.repo_root,
            keep_patch=self.keep_patches,
        )


def cleanup_patch_files(repo_root: Path, pid: Optional[int] = None) -> int:
    """Clean up patch files kept in .tmp/.

    Args:
        repo_root: Repository root path
        pid: Only remove files written by this process ID

    Returns:
        Number of files removed.
    """
    tmp_dir = repo_root / ".tmp"
    if not tmp_dir.exists():
        return 0

    pattern = f"hunkstage_patch_{pid}_*.patch" if pid is not None else "hunkstage_patch_*.patch"

    removed = 0
    for filepath in glob.glob(str(tmp_dir / pattern)):
        try:
            Path(filepath).unlink()
            removed += 1
        except OSError:
            pass
    return removed
