"""External tool location."""

from vdc.tools.binaries import (
    ToolPaths,
    locate_tool,
    platform_dir_name,
    resolve_tools,
)

__all__ = ["ToolPaths", "locate_tool", "platform_dir_name", "resolve_tools"]
