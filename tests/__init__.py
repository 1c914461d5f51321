"""Tests for fantasy_recap; provider-shaped fixture documents live in ``samples``."""

import sys
from pathlib import Path

_SRC = Path(__file__).resolve().parent.parent / "src"
if _SRC.is_dir() and str(_SRC) not in sys.path:
    # Lets a plain checkout run ``pytest`` without an editable install.
    sys.path.insert(0, str(_SRC))
