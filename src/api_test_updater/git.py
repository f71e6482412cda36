"""Read-only git access used to find changed spec files and their previous versions."""

import logging
import subprocess
from pathlib import Path

logger = logging.getLogger(__name__)


def _git(args: list[str], cwd: Path) -> subprocess.CompletedProcess:
    return subprocess.run(
        ["git", *args],
        capture_output=True,
        text=True,
        cwd=cwd,
    )


def is_git_repository(cwd: Path) -> bool:
    """True if cwd is inside a git work tree."""
    try:
        return _git(["rev-parse", "--git-dir"], cwd).returncode == 0
    except OSError:
        return False


def changed_files(cwd: Path, base: str = "HEAD~1") -> list[str]:
    """Files changed between base and HEAD, relative to the repository root."""
    result = _git(["diff", "--name-only", base, "HEAD"], cwd)
    if result.returncode != 0:
        logger.warning("Could not get changed files from git: %s", result.stderr.strip())
        return []
    return [line.strip() for line in result.stdout.splitlines() if line.strip()]


def file_at_revision(cwd: Path, file_path: str, revision: str = "HEAD~1") -> str | None:
    """Content of file_path at revision, or None if git cannot show it."""
    result = _git(["show", f"{revision}:{file_path}"], cwd)
    if result.returncode != 0:
        logger.warning("Could not get file %s at revision %s: %s", file_path, revision, result.stderr.strip())
        return None
    return result.stdout
