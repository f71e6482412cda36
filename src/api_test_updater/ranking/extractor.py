"""Derive search identifiers from change records.

Intentionally permissive: the ranker does the precision filtering by
counting how many identifiers each document matches.
"""

import json
import re

from pydantic import BaseModel

EXCLUDED_IDENTIFIERS = {"/api", "/v1", "/v2"}

_TRAILING_PARAMS_RE = re.compile(r"/\{[^}]+\}(/.*)?$")
_SINGLE_LETTER_RE = re.compile(r"^/[a-z]$")
_QUOTED_PATH_RE = re.compile(r"[\"']([/][a-zA-Z0-9/_\-{}]+)[\"']")
_OPERATION_ID_RE = re.compile(r'"operationId":\s*"([^"]+)"')


def extract_endpoints(changes: list) -> list[str]:
    """Return deduplicated identifiers for the given changes, in first-seen order."""
    found: dict[str, None] = {}

    for change in changes:
        path = getattr(change, "path", None)
        if path:
            for identifier in path_variants(path):
                found.setdefault(identifier)

        details = getattr(change, "details", None)
        if details:
            for identifier in scan_details(_stringify(details)):
                found.setdefault(identifier)

    return [identifier for identifier in found if is_useful_identifier(identifier)]


def path_variants(path: str) -> list[str]:
    """Exact path, parameter-stripped path and parameter-free prefixes."""
    if not path.startswith("/") or len(path) <= 1:
        return []

    variants = [path]

    without_params = _TRAILING_PARAMS_RE.sub("", path)
    if without_params != path and len(without_params) > 1:
        variants.append(without_params)

    segments = [s for s in path.split("/") if s]
    for i in range(len(segments), 1, -1):
        prefix = "/" + "/".join(segments[:i])
        if "{" not in prefix:
            variants.append(prefix)

    return variants


def scan_details(details: str) -> list[str]:
    """Find path-like strings and an operationId-derived path in a details payload."""
    identifiers = []

    for match in _QUOTED_PATH_RE.finditer(details):
        candidate = match.group(1)
        if len(candidate) > 3 and "/" in candidate:
            identifiers.append(candidate)

    op_match = _OPERATION_ID_RE.search(details)
    if op_match:
        segments = split_operation_id(op_match.group(1))
        if segments:
            identifiers.append("/" + "/".join(segments))

    return identifiers


def split_operation_id(operation_id: str) -> list[str]:
    """listUserAccounts -> ['list', 'user', 'accounts']"""
    spaced = re.sub(r"([A-Z])", r"-\1", operation_id).lower()
    return [s for s in re.split(r"[-_]", spaced) if len(s) > 2]


def is_useful_identifier(identifier: str) -> bool:
    """Reject identifiers too generic to be a useful search key."""
    return (
        len(identifier) > 3
        and not _SINGLE_LETTER_RE.match(identifier)
        and identifier not in EXCLUDED_IDENTIFIERS
    )


def _stringify(details) -> str:
    items = [d.model_dump(by_alias=True) if isinstance(d, BaseModel) else d for d in details]
    return json.dumps(items)
