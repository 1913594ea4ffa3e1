"""Pytest bootstrap for local source imports.

The ``pytest`` console script can run with a sys.path that excludes the
repository root. Ensure ``import blinksearch`` resolves to the local package,
also inside child processes that re-invoke ``python -m blinksearch``.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path


PROJECT_ROOT = Path(__file__).resolve().parent.parent
PROJECT_ROOT_STR = str(PROJECT_ROOT)

if PROJECT_ROOT_STR not in sys.path:
    sys.path.insert(0, PROJECT_ROOT_STR)

_pythonpath = os.environ.get("PYTHONPATH", "")
if PROJECT_ROOT_STR not in _pythonpath.split(os.pathsep):
    os.environ["PYTHONPATH"] = os.pathsep.join(part for part in (PROJECT_ROOT_STR, _pythonpath) if part)
