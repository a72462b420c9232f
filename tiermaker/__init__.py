"""
TierMaker - rank a list of items by answering "which one is better?"

Packages:
- core: ranking engine, checkpoints, undo history, reconciliation, sessions
- utils: paths, settings, logging and file helpers
- bin: command-line entry points
"""

__version__ = "0.3.0"
