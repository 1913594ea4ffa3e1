"""fzf invocations: the per-location file picker and the location menu.

The file picker gets key bindings that report back through stdout:
``tab`` asks for the location menu, ``alt-c`` asks to open the config file,
and ``ctrl-x`` opens the highlighted entry in a nested blink-search process
without leaving fzf.
"""

from __future__ import annotations

import logging
import subprocess

from . import config as config_mod
from .config import Config, Location
from .errors import USER_ABORT_EXIT_CODE, FilterAbortedError, FilterExitError
from .process import self_command, shell_join, spawn
from .protocol import EDIT_CONFIG_SENTINEL, MENU_SENTINEL, Action, FilterOutputDecoder
from .sources import candidate_source, spawn_candidates

logger = logging.getLogger(__name__)

FZF = "fzf"


def filter_command(location_name: str, config: Config) -> list[str]:
    """Arguments for the file picker of ``location_name``."""
    open_path_cmd = f"{shell_join(self_command())} --open-path={{}} {shell_join([location_name])}"
    return [
        FZF,
        "--scheme=path",
        f"--history={config_mod.history_path(location_name)}",
        f"--bind=tab:execute(echo {MENU_SENTINEL})+abort",
        f"--bind=ctrl-x:execute({open_path_cmd})",
        f"--bind=alt-c:execute(echo {EDIT_CONFIG_SENTINEL})+abort",
        *config.fzf_flags,
    ]


def run_filter(location_name: str, location: Location, config: Config) -> Action:
    """Let the user pick an entry of ``location`` and decode what happened.

    Raises ``BlinkError`` subclasses for a missing cache file, tools that
    cannot start, protocol violations and unexpected fzf exit codes.
    """
    candidates = spawn_candidates(candidate_source(location, config))
    try:
        proc = spawn(
            filter_command(location_name, config),
            stdin=candidates.stdout,
            stdout=subprocess.PIPE,
            stderr=None,
            text=True,
            encoding="utf-8",
            errors="replace",
        )
    except Exception:
        candidates.close()
        raise
    # fzf holds its own copy of the read end.
    candidates.stdout.close()

    decoder = FilterOutputDecoder(location.root, config_mod.config_path())
    try:
        assert proc.stdout is not None
        with proc.stdout:
            for line in proc.stdout:
                logger.debug("Reading fzf output line: %r", line)
                decoder.feed(line)
    finally:
        exit_code = proc.wait()
        candidates.close()

    logger.debug("fzf exited with code %s", exit_code)
    return decoder.finish(exit_code)


def menu_command(config: Config, query: str | None = None) -> list[str]:
    cmd = [
        FZF,
        f"--history={config_mod.menu_history_path()}",
        "--bind",
        "tab:accept",
    ]
    if query:
        cmd.append(f"--query={query}")
    cmd.extend(config.fzf_flags)
    return cmd


def pick_location(config: Config, query: str | None = None) -> str:
    """Show every configured location in fzf and return the chosen name."""
    proc = spawn(
        menu_command(config, query),
        stdin=subprocess.PIPE,
        stdout=subprocess.PIPE,
        stderr=None,
        text=True,
        encoding="utf-8",
        errors="replace",
    )
    menu = "".join(f"{config.describe(name)}\n" for name in config.locations)
    stdout, _ = proc.communicate(menu)
    exit_code = proc.returncode

    if exit_code == 0:
        chosen = stdout.strip()
        for name in config.locations:
            if config.describe(name) == chosen:
                return name
        logger.error("Location menu returned unknown entry %r", chosen)
    elif exit_code == USER_ABORT_EXIT_CODE:
        raise FilterAbortedError()
    raise FilterExitError(exit_code)
