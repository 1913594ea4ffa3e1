"""Hand a path to the platform file manager.

Fire-and-forget: the launched process is not awaited.
"""

from __future__ import annotations

import logging
import re
import subprocess
import sys

from .process import spawn

logger = logging.getLogger(__name__)


def opener_command(path: str, platform: str | None = None) -> list[str]:
    """Build the file-manager command for ``path`` on ``platform``.

    Separators are normalized to ``/`` with repeats collapsed. On Windows a
    leading ``/`` is doubled again so UNC shares (``\\\\host\\share``) survive,
    then everything is converted back to backslashes for ``explorer``.
    """
    platform = sys.platform if platform is None else platform
    path = re.sub(r"/+", "/", path.strip().replace("\\", "/"))

    if platform.startswith("win"):
        if path.startswith("/"):
            path = "/" + path
        path = path.replace("/", "\\").rstrip("\\")
        return ["explorer", path]
    if platform == "darwin":
        return ["open", path]
    return ["xdg-open", path]


def open_path(path: str) -> None:
    logger.debug("open_path(%s)", path)
    spawn(
        opener_command(str(path)),
        stdin=subprocess.DEVNULL,
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
    )
