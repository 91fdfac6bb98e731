"""Core utilities package.

Pure helpers shared across the codebase: content digests, subprocess
invocation and display formatting.
"""

from vdc.core.digest import canonical_json, content_digest, file_digest
from vdc.core.formatting import format_eta, format_file_size
from vdc.core.subprocess_utils import run_command

__all__ = [
    "canonical_json",
    "content_digest",
    "file_digest",
    "format_eta",
    "format_file_size",
    "run_command",
]
