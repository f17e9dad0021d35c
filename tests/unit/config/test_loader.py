"""
Unit tests for configuration loading.

Why: The worker refuses to start on a bad configuration, so loading must
     report precise errors and apply environment substitution.
What: Tests ConfigurationLoader file and dict loading, standard location
      search, and the MirrorConfig validators.
How: Writes YAML files under tmp_path and points environment variables at
     them with monkeypatch.
"""

from pathlib import Path

import pytest

from issue_mirror.config.exceptions import (
    ConfigurationFileError,
    ConfigurationValidationError,
)
from issue_mirror.config.loader import CONFIG_PATH_ENV_VAR, ConfigurationLoader
from issue_mirror.config.models import LogLevel

VALID_YAML = """
log_level: DEBUG
github:
  token: ${TEST_GITHUB_TOKEN}
  max_retries: 1
targets:
  - org: amznlabs
    repositories: [oss-dashboard, amznlabs/ion-java]
  - org: awslabs
"""


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    """Write a valid configuration file."""
    path = tmp_path / "issue_mirror.yaml"
    path.write_text(VALID_YAML)
    return path


class TestConfigurationLoader:
    """Test ConfigurationLoader."""

    def test_load_from_file(
        self, config_file: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test loading a complete file with environment substitution."""
        monkeypatch.setenv("TEST_GITHUB_TOKEN", "ghp_secret")
        loader = ConfigurationLoader()

        config = loader.load_from_file(config_file)

        assert config.log_level == LogLevel.DEBUG
        assert config.github.token == "ghp_secret"
        assert config.github.max_retries == 1
        assert config.targets[0].repositories == ["oss-dashboard", "ion-java"]
        assert config.targets[1].org == "awslabs"
        assert config.targets[1].repositories == []
        assert loader.config is config
        assert loader.config_file_path == config_file.resolve()

    def test_missing_environment_variable(
        self, config_file: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test that an unset variable without default fails validation."""
        monkeypatch.delenv("TEST_GITHUB_TOKEN", raising=False)

        with pytest.raises(ConfigurationValidationError):
            ConfigurationLoader().load_from_file(config_file)

    def test_environment_default(self, tmp_path: Path) -> None:
        """Test the ${VAR:default} form."""
        path = tmp_path / "config.yaml"
        path.write_text(
            "github:\n  token: ${UNSET_TEST_TOKEN:}\n"
            "  base_url: ${UNSET_TEST_URL:https://ghe.example.com/api/v3}\n"
            "targets:\n  - org: amznlabs\n"
        )

        config = ConfigurationLoader().load_from_file(path)

        assert config.github.token is None
        assert config.github.base_url == "https://ghe.example.com/api/v3"

    def test_missing_file(self, tmp_path: Path) -> None:
        """Test that a missing file raises ConfigurationFileError."""
        with pytest.raises(ConfigurationFileError) as exc_info:
            ConfigurationLoader().load_from_file(tmp_path / "missing.yaml")

        assert exc_info.value.file_path == str(tmp_path / "missing.yaml")
        assert str(exc_info.value).startswith(str(tmp_path / "missing.yaml"))

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        """Test that unparseable YAML raises ConfigurationFileError."""
        path = tmp_path / "broken.yaml"
        path.write_text("targets: [unclosed\n")

        with pytest.raises(ConfigurationFileError):
            ConfigurationLoader().load_from_file(path)

    def test_non_mapping_root(self, tmp_path: Path) -> None:
        """Test that a YAML list at the root is rejected."""
        path = tmp_path / "list.yaml"
        path.write_text("- org: amznlabs\n")

        with pytest.raises(ConfigurationFileError):
            ConfigurationLoader().load_from_file(path)

    def test_empty_targets_rejected(self) -> None:
        """Test that a configuration without targets is invalid."""
        with pytest.raises(ConfigurationValidationError) as exc_info:
            ConfigurationLoader().load_from_dict({"targets": []})

        problems = exc_info.value.problems
        assert any(problem.startswith("targets") for problem in problems)
        assert "1 invalid configuration value" in str(exc_info.value)

    def test_unknown_key_rejected(self) -> None:
        """Test that typos in keys are reported instead of ignored."""
        with pytest.raises(ConfigurationValidationError):
            ConfigurationLoader().load_from_dict(
                {"targets": [{"org": "amznlabs"}], "tragets": []}
            )

    def test_blank_token_is_anonymous(self) -> None:
        """Test that an empty token means unauthenticated access."""
        config = ConfigurationLoader().load_from_dict(
            {"github": {"token": "  "}, "targets": [{"org": "amznlabs"}]}
        )

        assert config.github.token is None

    def test_find_config_file_from_env(
        self, config_file: Path, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        """Test that the environment variable can name the directory."""
        monkeypatch.chdir(tmp_path.parent)
        monkeypatch.setenv(CONFIG_PATH_ENV_VAR, str(tmp_path))

        assert ConfigurationLoader().find_config_file() == config_file

    def test_auto_load_without_file(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        """Test that auto_load fails clearly when nothing is found."""
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv(CONFIG_PATH_ENV_VAR, raising=False)
        monkeypatch.setenv("HOME", str(tmp_path))

        with pytest.raises(ConfigurationFileError):
            ConfigurationLoader().auto_load()
