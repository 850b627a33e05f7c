"""
xdpi: X11 resolution, dot pitch and scaling report
Reconciles core, Xinerama and RandR geometry into per-output DPI
"""

import subprocess
from pathlib import Path


def _get_git_hash() -> str:
    """Get short git hash, or 'dev' if not in git repo"""
    try:
        repo_path = Path(__file__).parent.parent
        result = subprocess.run(
            ["git", "rev-parse", "--short=4", "HEAD"],
            cwd=repo_path,
            capture_output=True,
            text=True,
            timeout=1,
        )
        if result.returncode == 0:
            return result.stdout.strip()
    except (OSError, subprocess.SubprocessError):
        pass
    return "dev"


__version__ = f"1.0.0.{_get_git_hash()}"
__author__ = "xdpi contributors"
