"""API spec change detector.

Finds spec files touched by the last commit and diffs each against its
previous revision.
"""

import logging
from fnmatch import fnmatch
from pathlib import Path

from pydantic import BaseModel, Field

from api_test_updater import git
from api_test_updater.config import UpdaterConfig
from api_test_updater.diff.differ import diff_documents
from api_test_updater.diff.models import ChangeRecord

logger = logging.getLogger(__name__)


class SpecDiff(BaseModel):
    """Changes detected in one spec file."""

    file: str
    changes: list[ChangeRecord] = Field(default_factory=list)


def matches_pattern(file_path: str, pattern: str) -> bool:
    """Glob match where a leading '**/' also matches files at the root."""
    if fnmatch(file_path, pattern):
        return True
    return pattern.startswith("**/") and fnmatch(file_path, pattern[3:])


def select_spec_files(files: list[str], patterns: list[str]) -> list[str]:
    return [f for f in files if any(matches_pattern(f, p) for p in patterns)]


def detect_spec_changes(repo: Path, config: UpdaterConfig) -> list[SpecDiff]:
    """Diff every spec file changed since config.base_revision."""
    if not git.is_git_repository(repo):
        logger.error("%s is not a git repository", repo)
        return []

    files = git.changed_files(repo, config.base_revision)
    logger.info("Found %d changed files", len(files))

    spec_files = select_spec_files(files, config.api_spec_paths)
    logger.info("Found %d relevant API spec changes: %s", len(spec_files), ", ".join(spec_files))

    diffs = []
    for file in spec_files:
        diff = diff_spec_file(repo, file, config.base_revision)
        if diff is not None:
            diffs.append(diff)
    return diffs


def diff_spec_file(repo: Path, file: str, revision: str) -> SpecDiff | None:
    """Diff one spec file against its content at revision; None when nothing to report."""
    logger.info("Processing API spec change: %s", file)

    old_spec = git.file_at_revision(repo, file, revision)
    current = repo / file
    new_spec = current.read_text(encoding="utf-8") if current.is_file() else None

    if not old_spec or not new_spec:
        logger.warning("Could not retrieve spec versions for %s, skipping", file)
        return None

    changes = diff_documents(old_spec, new_spec)
    if not changes:
        logger.info("No significant changes detected in %s", file)
        return None

    logger.info("Found %d changes in %s", len(changes), file)
    return SpecDiff(file=file, changes=changes)
