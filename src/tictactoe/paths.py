"""Location and provenance helpers for census output.

Environment variables take precedence; otherwise the nearest git checkout
or, failing that, the current working directory is used.
"""

from __future__ import annotations

import os
import subprocess
from pathlib import Path


def _find_git_root(start: Path) -> Path | None:
    for cur in [start] + list(start.parents)[:5]:
        if (cur / ".git").exists():
            return cur
    return None


def repo_root() -> Path:
    """TTT_REPO_ROOT, else the enclosing git checkout, else the CWD."""
    env = os.getenv("TTT_REPO_ROOT")
    if env:
        return Path(env)
    git_root = _find_git_root(Path(__file__).resolve())
    return git_root if git_root is not None else Path.cwd()


def data_raw() -> Path:
    p = os.getenv("TTT_DATA_RAW")
    return Path(p) if p else repo_root() / "data_raw"


def _git(*args: str) -> str | None:
    try:
        return subprocess.check_output(
            ["git", "-C", str(repo_root()), *args],
            stderr=subprocess.DEVNULL,
            text=True,
            timeout=2.0,
        )
    except (OSError, subprocess.SubprocessError):
        return None


def get_git_commit() -> str | None:
    """HEAD commit of the repository root, or None outside a git checkout."""
    out = _git("rev-parse", "HEAD")
    return out.strip() if out else None


def get_git_is_dirty() -> bool | None:
    """True with uncommitted changes, False when clean, None if unknown."""
    out = _git("status", "--porcelain")
    if out is None:
        return None
    return len(out.strip()) > 0
