"""Tier lifecycle around a build.

Rotation only happens for production builds: interactive development
cycles keep populating the same active tier.
"""

from __future__ import annotations

import logging

from vdc.cache.tiers import TieredCacheStore

logger = logging.getLogger(__name__)


class BuildLifecycle:
    """Runs tier rotation before a build and reconciliation after it."""

    def __init__(self, store: TieredCacheStore, production: bool = False) -> None:
        self.store = store
        self.production = production

    async def before_build(self) -> bool:
        """Rotate tiers for a production build.

        Returns:
            True if a rotation ran.
        """
        if not self.production:
            logger.debug("Development build, keeping active cache tier")
            return False
        await self.store.rotate()
        return True

    async def after_build(self) -> None:
        await self.store.reconcile()
