"""Configuration loading for api-test-updater.

The config file is JSON or YAML (PyYAML reads both). A missing file falls
back to defaults; the model can be overridden from the environment.
"""

import logging
import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError

from api_test_updater.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = ".test-updater-config.json"
MODEL_ENV_VAR = "API_TEST_UPDATER_MODEL"

REQUIRED_KEYS = ("api_spec_paths", "detector", "test_code_paths")


class UpdaterConfig(BaseModel):
    api_spec_paths: list[str] = Field(
        default_factory=lambda: [
            "**/openapi.yaml",
            "**/openapi.yml",
            "**/openapi.json",
            "**/swagger.json",
            "**/swagger.yaml",
        ]
    )
    test_code_paths: list[str] = Field(
        default_factory=lambda: [
            "tests/**/*.js",
            "tests/**/*.ts",
            "test/**/*.js",
            "test/**/*.ts",
            "tests/**/*.py",
        ]
    )
    detector: str = "api"
    model: str | None = None
    max_tokens: int = 4000
    temperature: float = 0.2
    per_document_char_budget: int = 1000
    total_token_budget: int = 8000
    base_revision: str = "HEAD~1"


def load_config(config_path: Path | None = None) -> UpdaterConfig:
    """Load configuration from a JSON/YAML file, falling back to defaults."""
    config_path = config_path or Path(DEFAULT_CONFIG_FILE)

    if config_path.exists():
        try:
            data = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Failed to load config file at {config_path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Config file {config_path} must contain a mapping")
        try:
            config = UpdaterConfig(**data)
        except ValidationError as e:
            raise ConfigError(f"Invalid config file {config_path}: {e}") from e
    else:
        logger.warning("Config file %s not found, using default configuration", config_path)
        config = UpdaterConfig()

    env_model = os.getenv(MODEL_ENV_VAR)
    if env_model:
        config.model = env_model

    return config


def validate_config(config: UpdaterConfig) -> None:
    """Raise ConfigError if any required key is empty."""
    missing = [key for key in REQUIRED_KEYS if not getattr(config, key)]
    if missing:
        raise ConfigError(f"Missing required config keys: {', '.join(missing)}")
