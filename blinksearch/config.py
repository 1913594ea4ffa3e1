"""Persistent YAML config for configured search locations.

Holds the ordered location map plus extra ``fd``/``fzf`` flags.
Loaded once at startup; a missing file is created with no locations.
"""

from __future__ import annotations

import enum
import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType

import yaml
from platformdirs import user_config_dir

from .errors import ConfigError

logger = logging.getLogger(__name__)

APP_NAME = "blink-search"
CONFIG_FILENAME = "blink.yml"
MENU_HISTORY_FILENAME = "history-menu.txt"
CONFIG_DIR = Path(user_config_dir(APP_NAME, appauthor=False))

EXAMPLE_CONFIG = """\
locations:
  home:
    path: /home/user
    mode: files
  nas:
    path: \\\\nas.local\\share
    mode: folders
    cache_file: .blink\\all-folders.txt
"""


class LocationMode(enum.Enum):
    FILES = "files"
    FOLDERS = "folders"


@dataclass(frozen=True)
class Location:
    path: str
    mode: LocationMode = LocationMode.FILES
    cache_file: str | None = None

    @property
    def root(self) -> Path:
        return Path(self.path)


@dataclass(frozen=True)
class Config:
    """Immutable view of the config file.

    ``locations`` keeps file order; the first entry is the default location.
    """

    locations: Mapping[str, Location] = field(default_factory=lambda: MappingProxyType({}))
    fd_flags: tuple[str, ...] = ()
    fzf_flags: tuple[str, ...] = ()

    def default_location_name(self) -> str | None:
        return next(iter(self.locations), None)

    def describe(self, name: str) -> str:
        """Menu line for ``name`` as shown by the location picker."""
        return f"{name} ({self.locations[name].path})"


def config_dir() -> Path:
    return CONFIG_DIR


def config_path() -> Path:
    return CONFIG_DIR / CONFIG_FILENAME


def location_id(name: str) -> str:
    """Filesystem-safe identifier for a location name."""
    return re.sub(r"[^a-zA-Z0-9]", "", name).lower()


def history_path(location_name: str) -> Path:
    return CONFIG_DIR / f"history-{location_id(location_name)}.txt"


def menu_history_path() -> Path:
    return CONFIG_DIR / MENU_HISTORY_FILENAME


def _parse_flags(data: dict, key: str) -> tuple[str, ...]:
    value = data.get(key)
    if value is None:
        return ()
    if not isinstance(value, list):
        raise ConfigError(f"{key} must be a list of strings")
    return tuple(str(item) for item in value)


def _parse_location(name: str, raw: object) -> Location:
    if not isinstance(raw, dict):
        raise ConfigError(f"location {name!r} must be a mapping")
    path = raw.get("path")
    if not isinstance(path, str) or not path:
        raise ConfigError(f"location {name!r} has no path")

    raw_mode = raw.get("mode", LocationMode.FILES.value)
    try:
        mode = LocationMode(str(raw_mode).lower())
    except ValueError as exc:
        raise ConfigError(f"location {name!r} has unknown mode {raw_mode!r}") from exc

    cache_file = raw.get("cache_file")
    if cache_file is not None and not isinstance(cache_file, str):
        raise ConfigError(f"location {name!r} has a non-string cache_file")
    return Location(path=path, mode=mode, cache_file=cache_file or None)


def parse_config(data: object) -> Config:
    """Build a ``Config`` from a decoded YAML document."""
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError("config must be a YAML mapping")

    raw_locations = data.get("locations") or {}
    if not isinstance(raw_locations, dict):
        raise ConfigError("locations must be a mapping of name to location")

    locations = {str(name): _parse_location(str(name), raw) for name, raw in raw_locations.items()}
    return Config(
        locations=MappingProxyType(locations),
        fd_flags=_parse_flags(data, "fd_flags"),
        fzf_flags=_parse_flags(data, "fzf_flags"),
    )


def default_config_text() -> str:
    return yaml.safe_dump({"locations": {}, "fd_flags": None, "fzf_flags": None}, sort_keys=False)


def load_config() -> Config:
    """Load the config file, creating an empty one on first run.

    Raises ``ConfigError`` when the file cannot be read or parsed.
    """
    path = config_path()
    if not path.exists():
        print(f"Creating new config file: {path}")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(default_config_text(), encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"cannot create config file {path}: {exc}") from exc
        return Config()

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"cannot read config file {path}: {exc}") from exc
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"cannot parse config file {path}: {exc}") from exc

    config = parse_config(data)
    logger.debug("Loaded %d location(s) from %s", len(config.locations), path)
    return config
