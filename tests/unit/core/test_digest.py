"""Tests for content digest helpers."""

import hashlib
from enum import Enum
from pathlib import Path

import pytest

from vdc.core.digest import canonical_json, content_digest, file_digest


class Color(Enum):
    RED = "red"


class TestCanonicalJson:
    """Tests for canonical_json."""

    def test_sorts_keys(self):
        """Key order in the input does not matter."""
        assert canonical_json({"b": 1, "a": 2}) == '{"a":2,"b":1}'

    def test_nested_mappings_sorted(self):
        a = canonical_json({"outer": {"z": 1, "y": [1, 2]}, "k": None})
        b = canonical_json({"k": None, "outer": {"y": [1, 2], "z": 1}})
        assert a == b

    def test_paths_and_enums(self):
        result = canonical_json({"path": Path("/tmp/x"), "color": Color.RED})
        assert result == '{"color":"red","path":"/tmp/x"}'

    def test_sets_are_sorted(self):
        assert canonical_json({3, 1, 2}) == "[1,2,3]"

    def test_unknown_type_raises(self):
        with pytest.raises(TypeError, match="not digestible"):
            canonical_json({"value": object()})


class TestContentDigest:
    """Tests for content_digest."""

    def test_string_hashed_directly(self):
        expected = hashlib.sha256(b"hello").hexdigest()
        assert content_digest("hello") == expected

    def test_bytes_hashed_directly(self):
        expected = hashlib.sha256(b"\x00\x01").hexdigest()
        assert content_digest(b"\x00\x01") == expected

    def test_mapping_is_order_independent(self):
        assert content_digest({"crf": 23, "fps": 30}) == content_digest(
            {"fps": 30, "crf": 23}
        )

    def test_different_values_differ(self):
        assert content_digest({"crf": 23}) != content_digest({"crf": 24})


class TestFileDigest:
    """Tests for file_digest."""

    def test_matches_sha256_of_content(self, temp_dir: Path):
        path = temp_dir / "clip.mp4"
        path.write_bytes(b"x" * 5000)

        assert file_digest(path, chunk_size=1024) == hashlib.sha256(
            b"x" * 5000
        ).hexdigest()

    def test_missing_file_raises(self, temp_dir: Path):
        with pytest.raises(OSError):
            file_digest(temp_dir / "missing.mp4")
