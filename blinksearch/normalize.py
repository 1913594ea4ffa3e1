"""Path-list normalization.

Turns NUL- or newline-delimited path records into clean, native-separator
paths, one per line. Runs in-process for tests and as a child process
(``--normalize-paths``) when used as a pipe stage in front of fzf.
"""

from __future__ import annotations

import enum
import os
import re
import unicodedata
from collections.abc import Iterator
from typing import BinaryIO

READ_CHUNK_SIZE = 64 * 1024
REPLACEMENT_CHARACTER = "\ufffd"
_RELATIVE_MARKERS = ("./", ".\\")
# Unicode White_Space; unlike str.isspace it excludes the \x1c-\x1f control characters.
WHITESPACE = "\t\n\x0b\x0c\r \x85\xa0\u1680\u2000\u2001\u2002\u2003\u2004\u2005\u2006\u2007\u2008\u2009\u200a\u2028\u2029\u202f\u205f\u3000"


class Separator(enum.Enum):
    NULL = "null"
    NEWLINE = "newline"

    @property
    def delimiters(self) -> bytes:
        """Bytes that terminate a record; a run of them ends a single record."""
        if self is Separator.NULL:
            return b"\0"
        return b"\n\r"

    def __str__(self) -> str:
        return self.value


def iter_records(stream: BinaryIO, separator: Separator, chunk_size: int = READ_CHUNK_SIZE) -> Iterator[bytes]:
    """Yield raw records from ``stream`` split on the separator's delimiters.

    Empty records (from delimiter runs or a trailing delimiter) are skipped.
    """
    splitter = re.compile(b"[" + re.escape(separator.delimiters) + b"]+")
    # read1 returns what the pipe has now instead of waiting for a full chunk.
    read = getattr(stream, "read1", stream.read)
    # Pieces of the current unterminated record; only new chunks are scanned.
    pending: list[bytes] = []
    while True:
        chunk = read(chunk_size)
        if not chunk:
            break
        if splitter.search(chunk) is None:
            pending.append(chunk)
            continue
        *records, tail = splitter.split(chunk)
        records[0] = b"".join(pending) + records[0]
        for record in records:
            if record:
                yield record
        pending = [tail] if tail else []
    last = b"".join(pending)
    if last:
        yield last


def _strip_relative_markers(text: str) -> str:
    while True:
        stripped = text.strip(WHITESPACE)
        for marker in _RELATIVE_MARKERS:
            if stripped.startswith(marker):
                stripped = stripped[len(marker):]
                break
        if stripped == text:
            return text
        text = stripped


def to_native_separators(text: str) -> str:
    for sep in ("/", "\\"):
        if sep != os.sep:
            text = text.replace(sep, os.sep)
    return text


def normalize_record(raw: bytes) -> str:
    """Normalize one raw record; returns ``""`` for records that should be dropped."""
    text = _strip_relative_markers(raw.decode("utf-8", errors="replace"))
    text = "".join(
        REPLACEMENT_CHARACTER if unicodedata.category(char) == "Cc" else char
        for char in text
    )
    return to_native_separators(text)


def iter_normalized(stream: BinaryIO, separator: Separator) -> Iterator[str]:
    for raw in iter_records(stream, separator):
        record = normalize_record(raw)
        if record:
            yield record


def normalize_stream(source: BinaryIO, sink: BinaryIO, separator: Separator) -> int:
    """Copy normalized records from ``source`` to ``sink``; returns the record count."""
    newline = os.linesep.encode("ascii")
    count = 0
    for record in iter_normalized(source, separator):
        sink.write(record.encode("utf-8") + newline)
        count += 1
    sink.flush()
    return count
