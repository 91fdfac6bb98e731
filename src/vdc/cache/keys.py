"""Cache key derivation.

A cache key names an artifact deterministically from the source content
digest and the resolved option set:

    <source digest>-<options hash>

The options hash covers the profile name as well as the option values,
so two profiles with identical options never share an artifact. Option
values are canonicalized (sorted keys) before hashing, which makes the
key independent of key insertion order.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol

from vdc.core.digest import content_digest
from vdc.domain.models import CacheKey
from vdc.exceptions import SourceIdentityError


class _HasIdentity(Protocol):
    def identity(self) -> dict[str, Any]: ...


OptionValues = _HasIdentity | Mapping[str, Any]


def _option_identity(options: OptionValues) -> dict[str, Any]:
    if isinstance(options, Mapping):
        return dict(options)
    return options.identity()


def hash_options(options: OptionValues, profile: str | None = None) -> str:
    """Hash an option set.

    Args:
        options: Option model (anything with ``identity()``) or a mapping.
        profile: Profile name mixed into the hash.

    Returns:
        Hex digest of the canonical option content.
    """
    identity = _option_identity(options)
    if profile is not None:
        identity = {"profile": profile, "options": identity}
    return content_digest(identity)


def derive_key(
    source_digest: str | None,
    options: OptionValues,
    *,
    profile: str | None = None,
) -> CacheKey:
    """Derive the cache key for one (source, options, profile) triple.

    Args:
        source_digest: Content digest of the source asset.
        options: Resolved option set.
        profile: Profile name (or "screenshots").

    Returns:
        CacheKey whose value is ``<source digest>-<options hash>``.

    Raises:
        SourceIdentityError: If the source digest is missing.
    """
    if not source_digest:
        raise SourceIdentityError(
            "Source has no content digest; cannot derive a cache key"
        )
    return CacheKey(
        source_digest=source_digest,
        options_hash=hash_options(options, profile),
    )
