from pathlib import Path

import pytest

from api_test_updater.config import MODEL_ENV_VAR, UpdaterConfig, load_config, validate_config
from api_test_updater.errors import ConfigError

FIXTURES = Path(__file__).parent / "fixtures"


class TestLoadConfig:
    def test_missing_file_uses_defaults(self, tmp_path, monkeypatch):
        monkeypatch.delenv(MODEL_ENV_VAR, raising=False)
        config = load_config(tmp_path / "absent.json")
        assert config == UpdaterConfig()
        assert "**/openapi.yaml" in config.api_spec_paths

    def test_yaml_file(self, monkeypatch):
        monkeypatch.delenv(MODEL_ENV_VAR, raising=False)
        config = load_config(FIXTURES / "config.yaml")
        assert config.api_spec_paths == ["specs/*.yaml"]
        assert config.model == "gpt-4o"
        assert config.per_document_char_budget == 2000
        assert config.detector == "api"

    def test_json_file(self, tmp_path, monkeypatch):
        monkeypatch.delenv(MODEL_ENV_VAR, raising=False)
        path = tmp_path / "config.json"
        path.write_text('{"test_code_paths": ["spec/**/*.ts"], "total_token_budget": 500}')
        config = load_config(path)
        assert config.test_code_paths == ["spec/**/*.ts"]
        assert config.total_token_budget == 500

    def test_env_overrides_model(self, monkeypatch):
        monkeypatch.setenv(MODEL_ENV_VAR, "claude-sonnet-4-20250514")
        config = load_config(FIXTURES / "config.yaml")
        assert config.model == "claude-sonnet-4-20250514"

    def test_invalid_values_raise(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text('{"max_tokens": "lots"}')
        with pytest.raises(ConfigError):
            load_config(path)

    def test_non_mapping_raises(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("- just\n- a list\n")
        with pytest.raises(ConfigError):
            load_config(path)


class TestValidateConfig:
    def test_defaults_are_valid(self):
        validate_config(UpdaterConfig())

    def test_empty_required_keys(self):
        with pytest.raises(ConfigError, match="api_spec_paths, test_code_paths"):
            validate_config(UpdaterConfig(api_spec_paths=[], test_code_paths=[]))
