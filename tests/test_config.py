"""
Tests for settings loading — codeforge.yml parsing and env overrides.
"""

import textwrap
from pathlib import Path

import pytest

from codeforge.core.config.loader import (
    DEFAULT_GEMINI_MODEL,
    ConfigError,
    Settings,
    find_config_file,
    load_settings,
)


@pytest.fixture
def config_yml(tmp_path: Path) -> Path:
    """Create a codeforge.yml in a temp directory."""
    path = tmp_path / "codeforge.yml"
    path.write_text(textwrap.dedent("""\
        model: gemini-1.5-pro
        output_dir: build
        request_timeout: 30
    """))
    return path


class TestSettings:
    def test_defaults(self):
        settings = Settings()
        assert settings.model == DEFAULT_GEMINI_MODEL
        assert settings.output_dir == "."
        assert settings.endpoint == (
            "https://generativelanguage.googleapis.com/v1beta/models/"
            f"{DEFAULT_GEMINI_MODEL}:generateContent"
        )

    def test_endpoint_override(self):
        settings = Settings(api_endpoint="http://localhost:9999/generate")
        assert settings.endpoint == "http://localhost:9999/generate"

    def test_require_api_key(self):
        assert Settings(api_key="k").require_api_key() == "k"

    def test_missing_api_key(self):
        with pytest.raises(ConfigError, match="GEMINI_API_KEY environment variable not set"):
            Settings().require_api_key()


class TestLoadSettings:
    def test_no_file_no_env(self):
        settings = load_settings(env={}, search=False)
        assert settings == Settings()

    def test_from_file(self, config_yml: Path):
        settings = load_settings(config_yml, env={})
        assert settings.model == "gemini-1.5-pro"
        assert settings.output_dir == "build"
        assert settings.request_timeout == 30.0

    def test_nested_section(self, tmp_path: Path):
        path = tmp_path / "codeforge.yml"
        path.write_text("codeforge:\n  model: nested-model\n")
        assert load_settings(path, env={}).model == "nested-model"

    def test_empty_file(self, tmp_path: Path):
        path = tmp_path / "codeforge.yml"
        path.write_text("")
        assert load_settings(path, env={}) == Settings()

    def test_env_overrides_file(self, config_yml: Path):
        env = {
            "GEMINI_API_KEY": "secret",
            "GEMINI_MODEL": "env-model",
            "GEMINI_API_ENDPOINT": "http://proxy/generate",
        }
        settings = load_settings(config_yml, env=env)
        assert settings.api_key == "secret"
        assert settings.model == "env-model"
        assert settings.endpoint == "http://proxy/generate"

    def test_empty_env_value_ignored(self, config_yml: Path):
        assert load_settings(config_yml, env={"GEMINI_MODEL": ""}).model == "gemini-1.5-pro"

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="Config file not found"):
            load_settings(tmp_path / "nope.yml", env={})

    def test_invalid_yaml(self, tmp_path: Path):
        path = tmp_path / "codeforge.yml"
        path.write_text("model: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_settings(path, env={})

    def test_not_a_mapping(self, tmp_path: Path):
        path = tmp_path / "codeforge.yml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="Expected a YAML mapping"):
            load_settings(path, env={})

    def test_invalid_value(self, tmp_path: Path):
        path = tmp_path / "codeforge.yml"
        path.write_text("request_timeout: soon\n")
        with pytest.raises(ConfigError, match="Invalid configuration"):
            load_settings(path, env={})

    def test_search_from_cwd(self, config_yml: Path, monkeypatch: pytest.MonkeyPatch):
        sub = config_yml.parent / "a" / "b"
        sub.mkdir(parents=True)
        monkeypatch.chdir(sub)
        assert load_settings(env={}).model == "gemini-1.5-pro"


class TestFindConfigFile:
    def test_in_start_dir(self, config_yml: Path):
        assert find_config_file(config_yml.parent) == config_yml.resolve()

    def test_walks_up(self, config_yml: Path):
        deep = config_yml.parent / "x" / "y" / "z"
        deep.mkdir(parents=True)
        assert find_config_file(deep) == config_yml.resolve()

    def test_not_found(self, tmp_path: Path):
        # tmp_path lives under the system temp dir, which has no codeforge.yml
        assert find_config_file(tmp_path) is None
