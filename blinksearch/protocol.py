"""fzf output protocol.

fzf talks back through its stdout: either a selected path or one of the
sentinel lines printed by our key bindings. ``FilterOutputDecoder`` turns
those lines plus the exit code into a single ``Action``.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Union

from .errors import FilterAbortedError, FilterExitError, FilterProtocolError, USER_ABORT_EXIT_CODE

MENU_SENTINEL = "TAB"
EDIT_CONFIG_SENTINEL = "EDIT_CONFIG"


@dataclass(frozen=True)
class OpenAction:
    path: Path


@dataclass(frozen=True)
class MenuAction:
    pass


Action = Union[OpenAction, MenuAction]


def parse_selection(line: str) -> str:
    """Strip a selection line, unwrapping quotes added by fzf's ``{}`` placeholder."""
    text = line.strip()
    if len(text) >= 2 and text.startswith('"') and text.endswith('"'):
        text = text[1:-1].replace("\\\\", "\\")
    return text


class FilterOutputDecoder:
    """Line-by-line decoder for one fzf run.

    At most one meaningful line is accepted; a second one is a protocol
    violation. ``finish`` reconciles the pending action with the exit code:
    a decoded selection always wins, ``TAB`` needs the abort code 130, and
    anything else is an error.
    """

    def __init__(self, root: Path, config_file: Path) -> None:
        self.root = root
        self.config_file = config_file
        self.pending: Action | None = None
        self._line: str | None = None

    def feed(self, line: str) -> None:
        line = line.rstrip("\r\n")
        if not line.strip():
            return
        if self.pending is not None:
            raise FilterProtocolError(
                f"fzf produced more than one output line: {self._line!r}, then {line!r}"
            )
        self._line = line
        if line == MENU_SENTINEL:
            self.pending = MenuAction()
        elif line == EDIT_CONFIG_SENTINEL:
            self.pending = OpenAction(self.config_file)
        else:
            self.pending = OpenAction(self.root / parse_selection(line))

    def finish(self, exit_code: int) -> Action:
        pending = self.pending
        if isinstance(pending, OpenAction):
            return pending
        if isinstance(pending, MenuAction) and exit_code == USER_ABORT_EXIT_CODE:
            return pending
        if pending is None and exit_code == USER_ABORT_EXIT_CODE:
            raise FilterAbortedError()
        raise FilterExitError(exit_code)
