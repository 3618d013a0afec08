"""Version information with git commit tracking.

Reports the package version plus the commit date and hash when running from
a git checkout, so editable installs show exactly which code is running.
All git commands run against this file's repo, not the caller's cwd.
"""

import os
import subprocess

PACKAGE_VERSION = "0.1.0"

_REPO_DIR = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


def _run_git(*args: str) -> str | None:
    """Run a git command in the source repo directory. Return stdout or None on failure."""
    try:
        result = subprocess.run(
            ["git", "-C", _REPO_DIR, *args],
            capture_output=True,
            text=True,
            timeout=5,
        )
        if result.returncode == 0:
            return result.stdout.strip()
    except (FileNotFoundError, subprocess.TimeoutExpired):
        pass
    return None


def format_version(commit: str | None, date: str | None, dirty: bool = False) -> str:
    """Return '0.1.0' or '0.1.0 (2026-02-13 g3a7f2c1+dirty)'. Pure function."""
    if not commit:
        return PACKAGE_VERSION
    suffix = "+dirty" if dirty else ""
    return f"{PACKAGE_VERSION} ({date or 'unknown'} g{commit}{suffix})"


def get_version() -> str:
    """Return the version string, with git details when available."""
    commit = _run_git("rev-parse", "--short", "HEAD")
    if not commit:
        return format_version(None, None)
    date = _run_git("log", "-1", "--format=%cs")
    dirty = (_run_git("status", "--porcelain") or "") != ""
    return format_version(commit, date, dirty)
