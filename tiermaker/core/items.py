"""
items.py - Where items come from and where the final order goes

The item source is a plain text file with one item per line; blank lines
are skipped. The result sink writes the finished order one ``item,`` line per
rank, best first.
"""

import pathlib
from typing import Iterable, List

from tiermaker.utils.io_helpers import normalize_text, read_utf8, write_utf8
from tiermaker.utils.logging_helper import get_logger

log = get_logger()


def parse_items(text: str) -> List[str]:
    """Split *text* into item names, dropping blank lines and line-end whitespace."""
    items = []
    for line in text.splitlines():
        name = normalize_text(line).rstrip()
        if name.strip():
            items.append(name)
    return items


def read_items(path: pathlib.Path) -> List[str]:
    """Return the items listed in *path*, or [] when the file is missing or empty."""
    path = pathlib.Path(path)
    if not path.exists():
        log.warning(f"Items file not found: {path}")
        return []
    items = parse_items(read_utf8(path))
    if not items:
        log.warning(f"Items file is empty: {path}")
    return items


def create_items_file(path: pathlib.Path) -> pathlib.Path:
    """Create an empty items file (if needed) for the user to fill in."""
    path = pathlib.Path(path)
    if not path.exists():
        write_utf8(path, "")
        log.info(f"Created empty items file {path}")
    return path


def format_results(ordered: Iterable[str]) -> str:
    return "".join(f"{name},\n" for name in ordered)


def write_results(path: pathlib.Path, ordered: Iterable[str]) -> pathlib.Path:
    """Write the final ranking to *path*, replacing any earlier results."""
    path = pathlib.Path(path)
    ordered = list(ordered)
    write_utf8(path, format_results(ordered))
    log.info(f"Saved ranking of {len(ordered)} items → {path}")
    return path


class ResultWriter:
    """Result sink bound to a file, callable with the ordered items."""

    def __init__(self, path: pathlib.Path):
        self.path = pathlib.Path(path)

    def __call__(self, ordered: Iterable[str]) -> None:
        write_results(self.path, ordered)
