#!/usr/bin/env python
"""
io_helpers.py – tiny utilities for BOM-safe UTF-8 reading / writing.

All project code should import these instead of calling Path.read_text().
"""

from pathlib import Path
import os

from ftfy import fix_text

BOM = b"\xef\xbb\xbf"

# ── public API ─────────────────────────────────────────────────────────────
def read_utf8(path: Path) -> str:
    """
    Return file contents as str, decoded UTF-8, stripping BOM if present.
    Undecodable bytes are replaced and the result run through ftfy so a
    titles file saved by a Windows editor still yields readable names.
    """
    raw = Path(path).read_bytes()
    if raw.startswith(BOM):
        raw = raw[len(BOM):]
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        return normalize_text(raw.decode("utf-8", errors="replace"))

def normalize_text(text: str) -> str:
    """
    Repair mojibake and normalize to NFC.
    Item names are identities, so the cosmetic fixes stay off: entities,
    full-width forms, ligatures and curly quotes come through as typed.
    """
    return fix_text(
        text,
        unescape_html=False,
        fix_character_width=False,
        fix_latin_ligatures=False,
        uncurl_quotes=False,
    )

def write_utf8(path: Path, text: str) -> None:
    """Write text to file using UTF-8 encoding, creating parent folders."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")

def atomic_write_utf8(path: Path, text: str) -> None:
    """
    Replace *path* with *text* so readers only ever see the old or the new
    content: write a sibling temp file, fsync it, then os.replace() it over.
    OSError propagates to the caller.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_name(path.name + ".part")
    try:
        with open(tmp, "w", encoding="utf-8") as f:
            f.write(text)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp, path)
    finally:
        if tmp.exists():
            tmp.unlink()

def quarantine(path: Path, suffix: str = ".quarantine") -> Path:
    """Rename *path* to the first free ``<name><suffix>[N]`` sibling and return it."""
    path = Path(path)
    candidate = path.with_name(f"{path.name}{suffix}")
    counter = 1
    while candidate.exists():
        candidate = path.with_name(f"{path.name}{suffix}{counter}")
        counter += 1
    path.rename(candidate)
    return candidate
