"""Reporter contract.

The conversion core reports progress and lifecycle messages through four
levels only (info, verbose, warn, error) and never depends on a specific
backend. LoggingReporter is the default, backed by the logging module.
"""

from __future__ import annotations

import logging
from typing import Protocol


class Reporter(Protocol):
    """Leveled message sink used by the conversion core."""

    def info(self, message: str) -> None: ...

    def verbose(self, message: str) -> None: ...

    def warn(self, message: str) -> None: ...

    def error(self, message: str, error: BaseException | None = None) -> None: ...


class LoggingReporter:
    """Reporter that forwards to a logging.Logger (verbose maps to DEBUG)."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or logging.getLogger("vdc.reporter")

    def info(self, message: str) -> None:
        self._logger.info(message)

    def verbose(self, message: str) -> None:
        self._logger.debug(message)

    def warn(self, message: str) -> None:
        self._logger.warning(message)

    def error(self, message: str, error: BaseException | None = None) -> None:
        if error is not None:
            self._logger.error(
                message, exc_info=(type(error), error, error.__traceback__)
            )
        else:
            self._logger.error(message)


class NullReporter:
    """Reporter that discards everything (tests, quiet mode)."""

    def info(self, message: str) -> None:
        pass

    def verbose(self, message: str) -> None:
        pass

    def warn(self, message: str) -> None:
        pass

    def error(self, message: str, error: BaseException | None = None) -> None:
        pass
