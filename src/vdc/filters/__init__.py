"""Filter graph construction."""

from vdc.filters.graph import (
    build_filters,
    build_overlay_filter,
    build_scale_filter,
    build_time_remap_filter,
    floor_even,
    join_filters,
)

__all__ = [
    "build_filters",
    "build_overlay_filter",
    "build_scale_filter",
    "build_time_remap_filter",
    "floor_even",
    "join_filters",
]
