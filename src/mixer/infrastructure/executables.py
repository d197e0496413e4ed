"""Search-path lookup for external programs.

Results are never cached: a program installed while mixer runs is seen by
the next lookup.
"""

from __future__ import annotations

import os
import shutil


def find_program(name: str, search_path: str | None = None) -> str | None:
    """Return the full path of executable *name*, or None if unresolved.

    *search_path* uses the ``PATH`` format (``os.pathsep``-separated). When
    omitted the current process environment is consulted.
    """
    if search_path is None:
        search_path = os.environ.get("PATH", os.defpath)
    return shutil.which(name, path=search_path)
