"""Version calculation for Jellyresume.

Version format: MAJOR.MINOR.PATCH where PATCH is the git commit count,
falling back to the installed distribution's version outside a checkout.
"""

from __future__ import annotations

import subprocess
from importlib.metadata import PackageNotFoundError, version

# Base version - bump this manually for releases
BASE_VERSION = "1.0"


def _get_commit_count() -> int | None:
    """Get the total number of commits in the repository.

    Returns:
        Commit count, or None if git is unavailable or not in a repo.
    """
    try:
        result = subprocess.run(
            ["git", "rev-list", "--count", "HEAD"],
            capture_output=True,
            text=True,
            timeout=5,
        )
        if result.returncode == 0:
            return int(result.stdout.strip())
    except (subprocess.SubprocessError, FileNotFoundError, ValueError, OSError):
        pass
    return None


def get_version() -> str:
    """Get the full version string.

    Returns:
        "MAJOR.MINOR.PATCH" from git history, else the installed package
        version, else "MAJOR.MINOR.0".
    """
    commit_count = _get_commit_count()
    if commit_count is not None:
        return f"{BASE_VERSION}.{commit_count}"
    try:
        return version("jellyresume")
    except PackageNotFoundError:
        return f"{BASE_VERSION}.0"


__version__ = get_version()
