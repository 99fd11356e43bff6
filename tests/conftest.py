"""Pytest bootstrap for local source imports.

The ``pytest`` console script can run with a sys.path that excludes the
repository root. Ensure ``import mailpick`` resolves to the local package and
``import browser_doubles`` to the shared test helpers.
"""

from __future__ import annotations

import sys
from pathlib import Path


PROJECT_ROOT = Path(__file__).resolve().parent.parent
SUPPORT_DIR = Path(__file__).resolve().parent / "support"

for entry in (str(PROJECT_ROOT), str(SUPPORT_DIR)):
    if entry not in sys.path:
        sys.path.insert(0, entry)
