"""Public package surface for blink-search.

Exports ``main`` for programmatic CLI invocation.
Most implementation lives in submodules under ``blinksearch``.
"""

from __future__ import annotations


def main(*args, **kwargs):
    """Lazily import CLI entrypoint to keep normalizer start-up lightweight."""
    from .cli import main as _main

    return _main(*args, **kwargs)

__all__ = ["main"]
