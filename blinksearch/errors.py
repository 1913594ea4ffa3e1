"""Error taxonomy for blink-search.

Every failure is terminal for the current invocation; the CLI maps
``BlinkError.exit_code`` onto the process exit status.
"""

from __future__ import annotations

ERROR_EXIT_CODE = 1
USER_ABORT_EXIT_CODE = 130


class BlinkError(Exception):
    """Base class for all fatal blink-search errors."""

    exit_code = ERROR_EXIT_CODE


class ConfigError(BlinkError):
    """Config file is unreadable, malformed, or missing required values."""


class MissingCacheFileError(ConfigError):
    def __init__(self, path) -> None:
        super().__init__(f"Cache file {path} not found. Please check your configuration.")
        self.path = path


class LaunchError(BlinkError):
    """An external program (fd, fzf, file opener) could not be started."""


class LocationNotFoundError(BlinkError):
    def __init__(self, query: str) -> None:
        super().__init__(f"No location found matching {query!r}")
        self.query = query


class FilterProtocolError(BlinkError):
    """fzf produced output that does not fit the selection protocol."""


class FilterExitError(BlinkError):
    def __init__(self, exit_code: int) -> None:
        super().__init__(f"fzf exited with code {exit_code}")
        self.filter_exit_code = exit_code


class FilterAbortedError(FilterExitError):
    """fzf was aborted by the user without producing a selection."""

    exit_code = USER_ABORT_EXIT_CODE

    def __init__(self) -> None:
        super().__init__(USER_ABORT_EXIT_CODE)
