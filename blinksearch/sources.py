"""Candidate path sources for a location.

A source is either a live ``fd`` scan or a precomputed cache file. Each
reports the record separator it produces, and its output always passes
through the normalizer process before reaching fzf.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass, field
from typing import BinaryIO, Protocol

from .config import Config, Location, LocationMode
from .errors import ConfigError, LaunchError, MissingCacheFileError
from .normalize import Separator
from .process import self_command, spawn

logger = logging.getLogger(__name__)

FD_TYPE_ARGS = {
    LocationMode.FILES: "f",
    LocationMode.FOLDERS: "d",
}


@dataclass
class RawStream:
    stream: BinaryIO
    process: subprocess.Popen | None = None


class CandidateSource(Protocol):
    separator: Separator

    def open(self) -> RawStream: ...


@dataclass(frozen=True)
class FdSource:
    """Live directory scan with ``fd``, NUL-delimited."""

    location: Location
    fd_flags: tuple[str, ...] = ()
    separator: Separator = field(default=Separator.NULL, init=False)

    def command(self) -> list[str]:
        return ["fd", ".", "--print0", "--type", FD_TYPE_ARGS[self.location.mode], *self.fd_flags]

    def open(self) -> RawStream:
        if not self.location.root.is_dir():
            raise ConfigError(f"Location path {self.location.path} is not a directory")
        proc = spawn(
            self.command(),
            cwd=self.location.path,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=None,
        )
        assert proc.stdout is not None
        return RawStream(proc.stdout, proc)


@dataclass(frozen=True)
class CacheFileSource:
    """Precomputed path list stored beside the location, newline-delimited."""

    location: Location
    separator: Separator = field(default=Separator.NEWLINE, init=False)

    def open(self) -> RawStream:
        assert self.location.cache_file is not None
        path = self.location.root / self.location.cache_file
        logger.info("Reading cache file: %s", path)
        try:
            return RawStream(open(path, "rb"))
        except FileNotFoundError as exc:
            logger.error("Cache file %s not found", path)
            raise MissingCacheFileError(path) from exc
        except OSError as exc:
            raise ConfigError(f"cannot read cache file {path}: {exc}") from exc


def candidate_source(location: Location, config: Config) -> CandidateSource:
    if location.cache_file:
        return CacheFileSource(location)
    return FdSource(location, config.fd_flags)


@dataclass
class CandidateStream:
    """Normalized candidate lines plus the processes producing them."""

    stdout: BinaryIO
    processes: list[subprocess.Popen] = field(default_factory=list)

    def close(self) -> None:
        """Release our end of the pipe and reap the producer processes.

        Producers still running are terminated; their output is no longer
        wanted once fzf has exited.
        """
        self.stdout.close()
        for proc in self.processes:
            if proc.poll() is None:
                proc.terminate()
            code = proc.wait()
            logger.debug("Candidate stage pid %s exited with code %s", proc.pid, code)


def normalizer_command(separator: Separator) -> list[str]:
    return [*self_command(), f"--normalize-paths={separator}"]


def spawn_candidates(source: CandidateSource) -> CandidateStream:
    """Open ``source`` and pipe it through a normalizer child process."""
    raw = source.open()
    processes = [raw.process] if raw.process is not None else []
    try:
        normalizer = spawn(
            normalizer_command(source.separator),
            stdin=raw.stream,
            stdout=subprocess.PIPE,
            stderr=None,
        )
    except LaunchError:
        for proc in processes:
            proc.kill()
            proc.wait()
        raise
    finally:
        # The normalizer owns the read end now.
        raw.stream.close()

    assert normalizer.stdout is not None
    return CandidateStream(normalizer.stdout, [*processes, normalizer])
