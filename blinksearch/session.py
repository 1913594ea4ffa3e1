"""Location resolution and the main picker loop.

The loop keeps only the active location name: each fzf run either ends
the session with a path to open or sends the user to the location menu.
"""

from __future__ import annotations

import logging
from pathlib import Path

from .config import Config
from .errors import LocationNotFoundError
from .fzf import pick_location, run_filter
from .opener import open_path
from .protocol import MenuAction, OpenAction

logger = logging.getLogger(__name__)


def matching_locations(query: str, config: Config) -> list[str]:
    """Location names containing ``query``, case-insensitively, in config order."""
    folded = query.casefold()
    return [name for name in config.locations if folded in name.casefold()]


def resolve_location(requested: str | None, config: Config) -> str:
    """Map a user-typed location name to a configured one.

    No name picks the first location and an exact name wins outright.
    Otherwise a unique substring match is used, several matches open the
    location menu seeded with ``requested``, and no match is an error.
    """
    if requested is None:
        name = config.default_location_name()
        if name is None:
            raise LocationNotFoundError("")
        return name
    if requested in config.locations:
        return requested

    matches = matching_locations(requested, config)
    if not matches:
        raise LocationNotFoundError(requested)
    if len(matches) == 1:
        return matches[0]
    logger.debug("Location %r is ambiguous: %s", requested, matches)
    return pick_location(config, query=requested)


def run_session(config: Config, location_name: str) -> Path:
    """Run fzf for the active location until the user opens something.

    Returns the path handed to the file opener.
    """
    while True:
        location = config.locations[location_name]
        action = run_filter(location_name, location, config)
        if isinstance(action, OpenAction):
            logger.debug("Opening: %s", action.path)
            open_path(str(action.path))
            return action.path
        assert isinstance(action, MenuAction)
        location_name = pick_location(config)
        logger.info("Selected location: %s", location_name)


def open_in_location(config: Config, location_name: str, relative: str) -> Path:
    """Open ``relative`` under a location without going through fzf."""
    logger.debug("execute --open-path=%s with location %s", relative, location_name)
    path = config.locations[location_name].root / relative
    open_path(str(path))
    return path
