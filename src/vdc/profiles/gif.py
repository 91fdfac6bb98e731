"""Animated GIF profile.

Uses two-pass palette generation for quality output: the stream is split,
one branch generates an optimal palette and the other applies it.
https://engineering.giphy.com/how-to-make-gifs-with-ffmpeg/
"""

from __future__ import annotations

from vdc.domain.enums import ProfileVariant
from vdc.domain.models import StreamMetadata
from vdc.filters import join_filters
from vdc.options import VideoOptions
from vdc.profiles.base import EncodeSpec, PostProcessor, Profile

PALETTE_GRAPH = "split[a][b];[a]palettegen[p];[b][p]paletteuse"


def build_palette_graph(filters: list[str]) -> str:
    """Append the palette split/generate/apply chains to a filter chain."""
    chain = join_filters(filters)
    if not chain:
        return PALETTE_GRAPH
    return f"{chain},{PALETTE_GRAPH}"


class GifProfile(Profile):
    """GIF output; lossy optimisation is left to an optional post-processor."""

    variant = ProfileVariant.GIF

    def __init__(self, post_process: PostProcessor | None = None) -> None:
        super().__init__("gif", "gif")
        self.post_process = post_process

    def build(
        self,
        filters: list[str],
        options: VideoOptions,
        metadata: StreamMetadata,
    ) -> EncodeSpec:
        return EncodeSpec(
            video_codec="gif",
            filter_graph=build_palette_graph(filters),
        )
