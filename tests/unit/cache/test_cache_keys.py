"""Tests for cache key derivation."""

import pytest

from vdc.cache import derive_key, hash_options
from vdc.exceptions import SourceIdentityError
from vdc.options import H264Options, ScreenshotOptions


class TestHashOptions:
    """Tests for hash_options."""

    def test_order_independent(self):
        assert hash_options({"crf": 23, "fps": 30}) == hash_options(
            {"fps": 30, "crf": 23}
        )

    def test_value_sensitive(self):
        assert hash_options({"crf": 23}) != hash_options({"crf": 24})

    def test_profile_mixed_in(self):
        options = {"max_width": 600}

        assert hash_options(options, "h264") != hash_options(options, "h265")
        assert hash_options(options, "h264") != hash_options(options)

    def test_model_and_mapping_agree(self):
        options = H264Options(fps=24)

        assert hash_options(options, "h264") == hash_options(
            options.model_dump(mode="json"), "h264"
        )


class TestDeriveKey:
    """Tests for derive_key."""

    def test_digest_first(self):
        key = derive_key("abc123", H264Options(), profile="h264")

        assert key.source_digest == "abc123"
        assert key.value == f"abc123-{key.options_hash}"

    def test_deterministic(self):
        first = derive_key("abc", H264Options(fps=24), profile="h264")
        second = derive_key("abc", H264Options(fps=24), profile="h264")

        assert first == second

    def test_source_changes_key(self):
        options = ScreenshotOptions(timestamps=("1",))

        assert derive_key("aaa", options, profile="screenshots") != derive_key(
            "bbb", options, profile="screenshots"
        )

    @pytest.mark.parametrize("digest", [None, ""])
    def test_missing_digest(self, digest):
        with pytest.raises(SourceIdentityError):
            derive_key(digest, {"crf": 23})
