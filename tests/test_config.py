"""Tests for configuration loading and merging."""

from pathlib import Path

import pytest

from qualityhub.config import (
    CONFIG_FILE_NAME,
    QualityHubConfig,
    load_config,
    write_default_config,
)
from qualityhub.exceptions import ConfigurationError, InvalidConfigError


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """No global config and no QUALITYHUB_* variables leak into tests."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    for field_name in QualityHubConfig.__dataclass_fields__:
        monkeypatch.delenv(f"QUALITYHUB_{field_name.upper()}", raising=False)
    return home


@pytest.fixture
def root(tmp_path):
    project = tmp_path / "project"
    project.mkdir()
    return project


class TestDefaults:
    def test_defaults(self, root):
        config = load_config(root=root)
        assert config.project_name is None
        assert config.save_history is True
        assert config.output_format == "rich"
        assert config.verbosity == "normal"

    def test_history_path_relative_to_root(self, root):
        config = load_config(root=root)
        assert config.history_path(root) == root / ".qualityhub" / "history.json"

    def test_absolute_history_dir(self, tmp_path):
        config = QualityHubConfig(history_dir=str(tmp_path / "hist"))
        assert config.history_path(Path("/elsewhere")) == tmp_path / "hist" / "history.json"


class TestValidation:
    def test_bad_output_format(self):
        with pytest.raises(InvalidConfigError, match="output_format"):
            QualityHubConfig(output_format="html")

    def test_bad_verbosity(self):
        with pytest.raises(InvalidConfigError):
            QualityHubConfig(verbosity="loud")

    def test_empty_history_file(self):
        with pytest.raises(InvalidConfigError):
            QualityHubConfig(history_file="")

    def test_unknown_key(self, root):
        (root / CONFIG_FILE_NAME).write_text('colour = "blue"\n')
        with pytest.raises(ConfigurationError, match="Invalid configuration"):
            load_config(root=root)


class TestMerging:
    def test_project_file(self, root):
        (root / CONFIG_FILE_NAME).write_text('output_format = "markdown"\nproject_name = "billing"\n')
        config = load_config(root=root)
        assert config.output_format == "markdown"
        assert config.project_name == "billing"

    def test_project_overrides_global(self, root, isolated_env):
        (isolated_env / ".qualityhub.toml").write_text('output_format = "json"\nsave_history = false\n')
        (root / CONFIG_FILE_NAME).write_text('output_format = "markdown"\n')
        config = load_config(root=root)
        assert config.output_format == "markdown"
        assert config.save_history is False

    def test_explicit_file(self, root, tmp_path):
        explicit = tmp_path / "ci.toml"
        explicit.write_text('history_dir = "ci-history"\n')
        assert load_config(config_file=explicit, root=root).history_dir == "ci-history"

    def test_missing_explicit_file(self, root, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            load_config(config_file=tmp_path / "missing.toml", root=root)

    def test_invalid_toml(self, root):
        (root / CONFIG_FILE_NAME).write_text("output_format = \n")
        with pytest.raises(ConfigurationError, match="project config"):
            load_config(root=root)

    def test_env_overrides_files(self, root, monkeypatch):
        (root / CONFIG_FILE_NAME).write_text('output_format = "markdown"\n')
        monkeypatch.setenv("QUALITYHUB_OUTPUT_FORMAT", "json")
        monkeypatch.setenv("QUALITYHUB_SAVE_HISTORY", "no")
        config = load_config(root=root)
        assert config.output_format == "json"
        assert config.save_history is False

    def test_bad_env_bool(self, root, monkeypatch):
        monkeypatch.setenv("QUALITYHUB_SAVE_HISTORY", "maybe")
        with pytest.raises(InvalidConfigError, match="QUALITYHUB_SAVE_HISTORY"):
            load_config(root=root)

    def test_overrides_win(self, root, monkeypatch):
        monkeypatch.setenv("QUALITYHUB_OUTPUT_FORMAT", "json")
        config = load_config(root=root, output_format="markdown", output_file=None)
        assert config.output_format == "markdown"
        assert config.output_file is None

    @pytest.mark.parametrize(
        "flags,expected",
        [
            ({"verbose": True}, "verbose"),
            ({"quiet": True}, "quiet"),
            ({"verbose": False, "quiet": False}, "normal"),
        ],
    )
    def test_verbosity_flags(self, root, flags, expected):
        assert load_config(root=root, **flags).verbosity == expected


class TestWriteDefaultConfig:
    def test_template_loads_back(self, root):
        path = write_default_config(root / CONFIG_FILE_NAME)
        config = load_config(root=root)
        assert path.exists()
        assert config == QualityHubConfig()

    def test_never_overwrites(self, root):
        target = root / CONFIG_FILE_NAME
        target.write_text('output_format = "json"\n')
        with pytest.raises(ConfigurationError, match="already exists"):
            write_default_config(target)
        assert target.read_text() == 'output_format = "json"\n'


class TestLoggingSettings:
    def test_log_file_from_env(self, root, monkeypatch):
        monkeypatch.setenv("QUALITYHUB_LOG_FILE", "qh.log")
        monkeypatch.setenv("QUALITYHUB_VERBOSITY", "verbose")
        config = load_config(root=root)
        assert config.log_file == "qh.log"
        assert config.verbosity == "verbose"

    def test_quiet_flag_beats_file(self, root):
        (root / CONFIG_FILE_NAME).write_text('verbosity = "verbose"\n')
        assert load_config(root=root, quiet=True).verbosity == "quiet"


class TestServerSettings:
    def test_defaults(self, root):
        config = load_config(root=root)
        assert config.api_endpoint == "http://localhost:8080"
        assert config.api_key is None

    def test_api_key_from_env(self, root, monkeypatch):
        monkeypatch.setenv("QUALITYHUB_API_KEY", "s3cret")
        assert load_config(root=root).api_key == "s3cret"

    def test_endpoint_must_be_http(self):
        with pytest.raises(InvalidConfigError, match="api_endpoint"):
            QualityHubConfig(api_endpoint="ftp://hub")
