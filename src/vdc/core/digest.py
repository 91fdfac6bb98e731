"""Content digest helpers.

Digests are SHA-256 hex strings. Structured values are serialized to
canonical JSON (sorted keys, compact separators) before hashing, so two
mappings with the same contents always produce the same digest no matter
the insertion order of their keys.
"""

from __future__ import annotations

import hashlib
import json
from enum import Enum
from pathlib import Path
from typing import Any

# Read files in 1 MiB chunks when hashing
FILE_CHUNK_SIZE = 1024 * 1024


def _json_default(value: Any) -> Any:
    """Serialize values json does not handle natively."""
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (set, frozenset)):
        return sorted(value)
    raise TypeError(f"Object of type {type(value).__name__} is not digestible")


def canonical_json(value: Any) -> str:
    """Serialize a value to canonical JSON.

    Args:
        value: Any JSON-compatible value (Paths, Enums and sets allowed).

    Returns:
        JSON text with sorted keys and no insignificant whitespace.
    """
    return json.dumps(
        value,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        default=_json_default,
    )


def content_digest(value: Any) -> str:
    """Compute a stable digest for a value.

    Strings and bytes are hashed as-is; everything else is hashed via its
    canonical JSON form.

    Args:
        value: Value to digest.

    Returns:
        Hex-encoded SHA-256 digest.
    """
    if isinstance(value, bytes):
        data = value
    elif isinstance(value, str):
        data = value.encode("utf-8")
    else:
        data = canonical_json(value).encode("utf-8")
    return hashlib.sha256(data).hexdigest()


def file_digest(path: Path, chunk_size: int = FILE_CHUNK_SIZE) -> str:
    """Compute the SHA-256 digest of a file's content.

    Args:
        path: File to hash.
        chunk_size: Read size in bytes.

    Returns:
        Hex-encoded SHA-256 digest.

    Raises:
        OSError: If the file cannot be read.
    """
    hasher = hashlib.sha256()
    with open(path, "rb") as f:
        while chunk := f.read(chunk_size):
            hasher.update(chunk)
    return hasher.hexdigest()
