"""Exceptions raised by api-test-updater."""

from pathlib import Path


class UpdaterError(Exception):
    """Base class for all api-test-updater errors."""


class UnparsableSpec(UpdaterError):
    """A spec document could be decoded neither as JSON nor as YAML."""

    def __init__(self, json_error: str, yaml_error: str):
        self.json_error = json_error
        self.yaml_error = yaml_error
        super().__init__(f"Could not parse spec as JSON or YAML: {json_error}, {yaml_error}")


class UnreadableDocument(UpdaterError):
    """A corpus document could not be read."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Could not read {path}: {reason}")


class ConfigError(UpdaterError):
    """The configuration file is missing required keys or is malformed."""
