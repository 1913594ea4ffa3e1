"""Subprocess spawning shared by every pipeline stage.

Logs each command before it runs and turns start-up failures into
``LaunchError`` so missing tools surface as a readable message.
"""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
import sys
from collections.abc import Sequence

from .errors import LaunchError

logger = logging.getLogger(__name__)


def self_command() -> list[str]:
    """Command line that re-invokes this program in a child process."""
    return [sys.executable, "-m", "blinksearch"]


def shell_join(args: Sequence[str]) -> str:
    """Quote ``args`` for the shell that fzf runs ``execute(...)`` bindings in."""
    if os.name == "nt":
        return subprocess.list2cmdline(list(args))
    return shlex.join(args)


def spawn(cmd: Sequence[str], **kwargs) -> subprocess.Popen:
    logger.debug("Executing: %s (cwd=%s)", shell_join(cmd), kwargs.get("cwd"))
    try:
        return subprocess.Popen(list(cmd), **kwargs)
    except OSError as exc:
        raise LaunchError(f"failed to run {cmd[0]}: {exc}") from exc
