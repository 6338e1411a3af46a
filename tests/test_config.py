"""
Tests for configuration loading.
"""

from unittest.mock import patch

import pytest

from cargo_janitor.config import JanitorConfig, load_config
from cargo_janitor.exceptions import ConfigError


@pytest.fixture(autouse=True)
def no_user_config(tmp_path):
    with patch("cargo_janitor.config.DEFAULT_CONFIG_PATH", tmp_path / "absent.yaml"):
        yield


class TestJanitorConfig:
    def test_defaults(self):
        config = JanitorConfig()
        assert config.workers >= 1
        assert config.cargo == "cargo"
        assert config.target_dir == "target"
        assert "target" in config.skip_dirs
        assert config.command_timeout is None
        assert config.edit_manifest is True

    @pytest.mark.parametrize("kwargs", [
        {"workers": 0},
        {"workers": "4"},
        {"workers": True},
        {"cargo": ""},
        {"target_dir": "a/b"},
        {"skip_dirs": "target"},
        {"command_timeout": -1},
        {"edit_manifest": "yes"},
    ])
    def test_invalid_values(self, kwargs):
        with pytest.raises(ConfigError):
            JanitorConfig(**kwargs)


class TestLoadConfig:
    def test_no_file_no_env(self):
        config = load_config(environ={})
        assert config == JanitorConfig()

    def test_yaml_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            "workers: 3\n"
            "cargo: /opt/cargo/bin/cargo\n"
            "skip_dirs: [target, vendor]\n"
            "command_timeout: 120\n"
            "edit_manifest: false\n"
        )

        config = load_config(str(path), environ={})

        assert config.workers == 3
        assert config.cargo == "/opt/cargo/bin/cargo"
        assert config.skip_dirs == ["target", "vendor"]
        assert config.command_timeout == 120
        assert config.edit_manifest is False

    def test_empty_yaml_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("")
        assert load_config(str(path), environ={}) == JanitorConfig()

    def test_env_overrides_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("workers: 3\ncargo: cargo-nightly\n")
        environ = {
            "CARGO_JANITOR_WORKERS": "7",
            "CARGO_JANITOR_TARGET_DIR": "out",
            "CARGO_JANITOR_COMMAND_TIMEOUT": "30",
        }

        config = load_config(str(path), environ=environ)

        assert config.workers == 7
        assert config.cargo == "cargo-nightly"
        assert config.target_dir == "out"
        assert config.command_timeout == 30.0

    def test_config_path_from_env(self, tmp_path):
        path = tmp_path / "janitor.yaml"
        path.write_text("cargo: cargo-beta\n")
        config = load_config(environ={"CARGO_JANITOR_CONFIG": str(path)})
        assert config.cargo == "cargo-beta"

    def test_default_location_is_used_when_present(self, tmp_path):
        path = tmp_path / "default.yaml"
        path.write_text("workers: 2\n")
        with patch("cargo_janitor.config.DEFAULT_CONFIG_PATH", path):
            assert load_config(environ={}).workers == 2

    def test_missing_explicit_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_config(str(tmp_path / "missing.yaml"), environ={})

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("workers: [1, 2\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(str(path), environ={})

    def test_non_mapping_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("- workers\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_config(str(path), environ={})

    def test_unknown_keys(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("wrokers: 2\n")
        with pytest.raises(ConfigError, match="wrokers"):
            load_config(str(path), environ={})

    def test_bad_env_value(self):
        with pytest.raises(ConfigError, match="CARGO_JANITOR_WORKERS"):
            load_config(environ={"CARGO_JANITOR_WORKERS": "many"})
