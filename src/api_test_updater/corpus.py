"""Test file discovery and reading for the ranking corpus."""

import logging
from pathlib import Path

from api_test_updater.errors import UnreadableDocument

logger = logging.getLogger(__name__)

IGNORED_DIRS = {"node_modules", ".git"}


def discover_test_files(root: Path, patterns: list[str]) -> list[Path]:
    """Find files under root matching any glob pattern.

    Results are deduplicated and keep pattern order; matches of a single
    pattern are sorted so discovery is stable across filesystems.
    """
    found: dict[Path, None] = {}
    for pattern in patterns:
        try:
            matches = sorted(root.glob(pattern))
        except ValueError as e:
            logger.warning("Could not find files matching pattern %s in %s: %s", pattern, root, e)
            continue
        for path in matches:
            if not path.is_file() or _is_ignored(path.relative_to(root)):
                continue
            found.setdefault(path)
    return list(found)


def read_document(path: Path) -> str:
    """Read a corpus document as UTF-8 text."""
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise UnreadableDocument(path, str(e)) from e


def _is_ignored(relative: Path) -> bool:
    return any(part in IGNORED_DIRS for part in relative.parts)
