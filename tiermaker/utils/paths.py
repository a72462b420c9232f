#!/usr/bin/env python
"""
paths.py – single source of truth for the files a ranking session touches.
           Import these constants everywhere.
"""

import os
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

# .env is read before anything looks at TIERMAKER_*; variables already set in
# the environment win over it.
load_dotenv(find_dotenv(usecwd=True))

# The items file is looked up next to where the user runs the tool unless
# TIERMAKER_ROOT says otherwise.
ROOT = os.environ.get('TIERMAKER_ROOT')
if ROOT:
    ROOT = Path(ROOT).resolve()
else:
    ROOT = Path.cwd().resolve()

ITEMS_FILE      = ROOT / "titles.txt"
CHECKPOINT_FILE = ROOT / "TierMaker.tmp"
RESULTS_FILE    = ROOT / "TierMakerResults.csv"
CONFIG_FILE     = ROOT / "tiermaker.yaml"
LOG_DIR         = ROOT / "logs"


def resolve(path: str | Path) -> Path:
    """Return *path* anchored at ROOT when it is relative."""
    path = Path(path).expanduser()
    if not path.is_absolute():
        path = ROOT / path
    return path
