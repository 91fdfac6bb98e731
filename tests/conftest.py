"""Shared test fixtures for the Video Delivery Converter."""

import json
import shutil
import tempfile
from pathlib import Path

import pytest

from vdc.domain import SourceAsset, StreamInfo, StreamMetadata
from vdc.introspector import parse_ffprobe_output


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test isolation."""
    dir_path = tempfile.mkdtemp()
    yield Path(dir_path)
    shutil.rmtree(dir_path, ignore_errors=True)


@pytest.fixture
def ffprobe_fixtures_dir() -> Path:
    """Return the path to the ffprobe fixtures directory."""
    return Path(__file__).parent / "fixtures" / "ffprobe"


def load_ffprobe_fixture(name: str) -> dict:
    """Load an ffprobe JSON fixture by name.

    Args:
        name: Name of the fixture file (without .json extension).

    Returns:
        Parsed JSON data from the fixture.
    """
    fixture_path = Path(__file__).parent / "fixtures" / "ffprobe" / f"{name}.json"
    return json.loads(fixture_path.read_text())


@pytest.fixture
def h264_1080p_fixture() -> dict:
    """Load the 1080p H.264 + AAC ffprobe fixture."""
    return load_ffprobe_fixture("h264_1080p")


@pytest.fixture
def no_duration_fixture() -> dict:
    """Load the fixture with no stream or container duration."""
    return load_ffprobe_fixture("no_duration")


@pytest.fixture
def hd_metadata(h264_1080p_fixture: dict) -> StreamMetadata:
    """Metadata of a 1920x1080, 29.97fps, 10s video."""
    return parse_ffprobe_output(h264_1080p_fixture)


def make_metadata(
    width: int | None = 1920,
    height: int | None = 1080,
    frame_rate: str | None = "30/1",
    duration: float | None = 10.0,
) -> StreamMetadata:
    """Build StreamMetadata with a single video stream."""
    return StreamMetadata(
        streams=(
            StreamInfo(
                index=0,
                codec_type="video",
                codec_name="h264",
                width=width,
                height=height,
                r_frame_rate=frame_rate,
                avg_frame_rate=frame_rate,
                duration=duration,
            ),
        ),
        format_name="mov,mp4,m4a,3gp,3g2,mj2",
        duration=duration,
    )


@pytest.fixture
def source_asset(temp_dir: Path) -> SourceAsset:
    """A resolved local source backed by a small file."""
    path = temp_dir / "intro.mp4"
    path.write_bytes(b"fake video content")
    return SourceAsset(
        asset_id="asset-1",
        digest="d" * 64,
        path=path,
        media_type="video/mp4",
        name="intro",
    )


class RecordingReporter:
    """Reporter that keeps every message as a (level, text) pair."""

    def __init__(self) -> None:
        self.messages: list[tuple[str, str]] = []

    def info(self, message: str) -> None:
        self.messages.append(("info", message))

    def verbose(self, message: str) -> None:
        self.messages.append(("verbose", message))

    def warn(self, message: str) -> None:
        self.messages.append(("warn", message))

    def error(self, message: str, error: BaseException | None = None) -> None:
        self.messages.append(("error", message))

    def texts(self, level: str | None = None) -> list[str]:
        return [text for lvl, text in self.messages if level in (None, lvl)]


@pytest.fixture
def reporter() -> RecordingReporter:
    return RecordingReporter()
