"""Tests for layered configuration loading."""

import os
from pathlib import Path

import pytest

from vdc.config import (
    ConfigSource,
    EnvReader,
    get_config,
    get_default_config_path,
    load_config_file,
)
from vdc.exceptions import ConfigurationError, InvalidProfileError

CONFIG_TOML = """
root_dir = "site"
production = true

[cache]
dir = "build-cache"
download_binaries = true

[tools]
ffmpeg = "/opt/ffmpeg/bin/ffmpeg"
transcode_timeout = 900

[output]
public_dir = "dist"
gif_post_processor = "os.path:exists"

[logging]
level = "debug"
format = "json"
"""


@pytest.fixture
def config_file(temp_dir: Path) -> Path:
    path = temp_dir / "config.toml"
    path.write_text(CONFIG_TOML)
    return path


class TestLoadConfigFile:
    def test_missing_file(self, temp_dir):
        assert load_config_file(temp_dir / "absent.toml") == {}

    def test_invalid_toml(self, temp_dir):
        path = temp_dir / "config.toml"
        path.write_text("[cache\n")

        with pytest.raises(ConfigurationError, match="Invalid TOML"):
            load_config_file(path)

    def test_default_path_from_env(self, monkeypatch, temp_dir):
        monkeypatch.setenv("VDC_CONFIG_PATH", str(temp_dir / "vdc.toml"))

        assert get_default_config_path() == temp_dir / "vdc.toml"


class TestGetConfig:
    """Tests for get_config precedence."""

    def test_defaults(self, temp_dir):
        config = get_config(
            temp_dir / "absent.toml", env_reader=EnvReader({}), cwd=temp_dir
        )

        root = temp_dir.resolve()
        assert config.root_dir == root
        assert config.cache_dir == root / ".cache/vdc"
        assert config.cache_bin_dir == root / ".cache-video-bin"
        assert config.public_dir == root / "public"
        assert config.original_dir == root / ".cache/vdc/original"
        assert config.production is False
        assert config.download_binaries is False
        assert config.logging.level == "info"
        assert config.profiles == {}
        assert config.transcode_timeout is None
        assert config.gif_post_processor is None

    def test_file_values(self, config_file, temp_dir):
        config = get_config(config_file, env_reader=EnvReader({}), cwd=temp_dir)

        root = (temp_dir / "site").resolve()
        assert config.root_dir == root
        assert config.cache_dir == root / "build-cache"
        assert config.public_dir == root / "dist"
        assert config.ffmpeg_path == Path("/opt/ffmpeg/bin/ffmpeg")
        assert config.production is True
        assert config.download_binaries is True
        assert config.logging.format == "json"
        assert config.transcode_timeout == 900
        assert config.gif_post_processor is os.path.exists

    def test_env_overrides_file(self, config_file, temp_dir):
        env = EnvReader({"VDC_PRODUCTION": "false", "VDC_LOG_LEVEL": "warning"})

        config = get_config(config_file, env_reader=env, cwd=temp_dir)

        assert config.production is False
        assert config.logging.level == "warning"

    def test_cli_overrides_env(self, config_file, temp_dir):
        env = EnvReader({"VDC_LOG_LEVEL": "warning"})
        cli = ConfigSource(logging_level="error", root_dir=temp_dir / "other")

        config = get_config(config_file, cli=cli, env_reader=env, cwd=temp_dir)

        assert config.logging.level == "error"
        assert config.root_dir == (temp_dir / "other").resolve()
        assert config.cache_dir == (temp_dir / "other" / "build-cache").resolve()

    def test_absolute_paths_kept(self, temp_dir):
        env = EnvReader({"VDC_CACHE_DIR": str(temp_dir / "abs-cache")})

        config = get_config(temp_dir / "absent.toml", env_reader=env, cwd=temp_dir)

        assert config.cache_dir == temp_dir / "abs-cache"

    def test_invalid_log_level(self, temp_dir):
        env = EnvReader({"VDC_LOG_LEVEL": "chatty"})

        with pytest.raises(ConfigurationError, match="Invalid log level"):
            get_config(temp_dir / "absent.toml", env_reader=env, cwd=temp_dir)

    def test_profiles_from_toml_and_yaml(self, temp_dir):
        config_path = temp_dir / "config.toml"
        config_path.write_text(
            '[profiles.av1]\nextension = "mkv"\nconverter = "os.path:join"\n'
        )
        (temp_dir / "profiles").mkdir()
        (temp_dir / "profiles" / "hevc10.yaml").write_text(
            "extension: mp4\nconverter: os.path:basename\n"
        )

        config = get_config(config_path, env_reader=EnvReader({}), cwd=temp_dir)

        assert sorted(config.profiles) == ["av1", "hevc10"]
        assert config.profiles["av1"].extension == "mkv"

    def test_incomplete_profile_fails_at_load(self, temp_dir):
        config_path = temp_dir / "config.toml"
        config_path.write_text('[profiles.av1]\nconverter = "os.path:join"\n')

        with pytest.raises(InvalidProfileError, match="no extension specified"):
            get_config(config_path, env_reader=EnvReader({}), cwd=temp_dir)

    def test_transcode_timeout_from_env(self, config_file, temp_dir):
        env = EnvReader({"VDC_TRANSCODE_TIMEOUT": "60"})

        config = get_config(config_file, env_reader=env, cwd=temp_dir)

        assert config.transcode_timeout == 60

    def test_non_positive_timeout_rejected(self, temp_dir):
        env = EnvReader({"VDC_TRANSCODE_TIMEOUT": "0"})

        with pytest.raises(ConfigurationError, match="transcode_timeout"):
            get_config(temp_dir / "absent.toml", env_reader=env, cwd=temp_dir)

    def test_gif_post_processor_from_env(self, temp_dir):
        env = EnvReader({"VDC_GIF_POST_PROCESSOR": "os.path:isfile"})

        config = get_config(temp_dir / "absent.toml", env_reader=env, cwd=temp_dir)

        assert config.gif_post_processor is os.path.isfile

    def test_bad_gif_post_processor_fails_at_load(self, temp_dir):
        env = EnvReader({"VDC_GIF_POST_PROCESSOR": "vdc_no_such_module:optimise"})

        with pytest.raises(InvalidProfileError, match="Cannot import") as exc_info:
            get_config(temp_dir / "absent.toml", env_reader=env, cwd=temp_dir)

        assert exc_info.value.field == "post_processor"
