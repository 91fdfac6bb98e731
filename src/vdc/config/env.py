"""Typed access to environment variables."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

logger = logging.getLogger(__name__)

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


class EnvReader:
    """Reads VDC_* variables, returning None for unset or empty values."""

    def __init__(self, environ: Mapping[str, str] | None = None) -> None:
        self._environ = os.environ if environ is None else environ

    def get_str(self, name: str) -> str | None:
        value = self._environ.get(name)
        return value if value else None

    def get_path(self, name: str) -> Path | None:
        value = self.get_str(name)
        return Path(value).expanduser() if value else None

    def get_bool(self, name: str) -> bool | None:
        value = self.get_str(name)
        if value is None:
            return None
        lowered = value.strip().lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
        logger.warning("Ignoring %s=%r: expected a boolean", name, value)
        return None

    def get_int(self, name: str) -> int | None:
        value = self.get_str(name)
        if value is None:
            return None
        try:
            return int(value)
        except ValueError:
            logger.warning("Ignoring %s=%r: expected an integer", name, value)
            return None
