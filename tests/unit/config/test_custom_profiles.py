"""Tests for custom profile definitions."""

import os.path
from pathlib import Path

import pytest

from vdc.config import import_converter, load_profile_file, load_profiles
from vdc.config.profiles import list_profile_files, parse_profile_entry
from vdc.exceptions import InvalidProfileError


class TestImportConverter:
    """Tests for import_converter."""

    def test_resolves_function(self):
        assert import_converter("av1", "os.path:join") is os.path.join

    def test_dotted_attribute(self):
        assert import_converter("av1", "os:path.join") is os.path.join

    @pytest.mark.parametrize("reference", ["os.path.join", ":join", "os.path:"])
    def test_malformed(self, reference):
        with pytest.raises(InvalidProfileError, match="must look like"):
            import_converter("av1", reference)

    def test_missing_module(self):
        with pytest.raises(InvalidProfileError, match="Cannot import"):
            import_converter("av1", "vdc_no_such_module:convert")

    def test_missing_attribute(self):
        with pytest.raises(InvalidProfileError, match="has no attribute"):
            import_converter("av1", "os.path:no_such_function")

    def test_not_callable(self):
        with pytest.raises(InvalidProfileError, match="not callable"):
            import_converter("av1", "os:sep")


class TestParseProfileEntry:
    def test_valid_entry(self):
        config = parse_profile_entry(
            "av1",
            {"extension": "mkv", "converter": "os.path:join", "description": "AV1"},
            "config.toml",
        )

        assert config.extension == "mkv"
        assert config.converter is os.path.join
        assert config.description == "AV1"
        assert config.source == "config.toml"

    def test_callable_accepted(self):
        config = parse_profile_entry(
            "av1", {"extension": "mkv", "converter": os.path.join}, "api"
        )

        assert config.converter is os.path.join

    def test_unknown_keys(self):
        with pytest.raises(InvalidProfileError, match="Unknown keys"):
            parse_profile_entry(
                "av1", {"extension": "mkv", "converter": "os.path:join", "crf": 30}, "x"
            )

    def test_missing_converter(self):
        with pytest.raises(InvalidProfileError, match="no converter function"):
            parse_profile_entry("av1", {"extension": "mkv"}, "x")


class TestProfileFiles:
    """Tests for YAML profile files."""

    def test_load_profile_file(self, temp_dir: Path):
        path = temp_dir / "av1.yaml"
        path.write_text("extension: mkv\nconverter: os.path:join\n")

        config = load_profile_file(path)

        assert config.extension == "mkv"
        assert config.source == str(path)

    def test_invalid_yaml(self, temp_dir: Path):
        path = temp_dir / "av1.yaml"
        path.write_text("extension: [mkv\n")

        with pytest.raises(InvalidProfileError, match="Invalid YAML"):
            load_profile_file(path)

    def test_not_a_mapping(self, temp_dir: Path):
        path = temp_dir / "av1.yaml"
        path.write_text("- mkv\n")

        with pytest.raises(InvalidProfileError, match="must be a mapping"):
            load_profile_file(path)

    def test_list_profile_files(self, temp_dir: Path):
        (temp_dir / "b.yaml").write_text("")
        (temp_dir / "a.yaml").write_text("")
        (temp_dir / ".hidden.yaml").write_text("")
        (temp_dir / "notes.txt").write_text("")

        assert [p.name for p in list_profile_files(temp_dir)] == ["a.yaml", "b.yaml"]
        assert list_profile_files(temp_dir / "missing") == []

    def test_toml_wins_over_yaml(self, temp_dir: Path):
        (temp_dir / "av1.yaml").write_text("extension: webm\nconverter: os.path:join\n")

        profiles = load_profiles(
            {"av1": {"extension": "mkv", "converter": "os.path:join"}}, temp_dir
        )

        assert profiles["av1"].extension == "mkv"

    def test_profile_must_be_table(self):
        with pytest.raises(InvalidProfileError, match="must be a table"):
            load_profiles({"av1": "mkv"}, None)
