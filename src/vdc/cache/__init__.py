"""Artifact cache: key derivation, tiered store and build lifecycle."""

from vdc.cache.keys import derive_key, hash_options
from vdc.cache.lifecycle import BuildLifecycle
from vdc.cache.tiers import TieredCacheStore, TierStatus

__all__ = [
    "BuildLifecycle",
    "TierStatus",
    "TieredCacheStore",
    "derive_key",
    "hash_options",
]
