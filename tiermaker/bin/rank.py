#!/usr/bin/env python
"""
rank.py - Rank a list of items by answering "which one is better?"

Reads one item per line from the items file (titles.txt by default), asks
for pairwise choices until every item is placed, and writes the order to
TierMakerResults.csv. Progress is saved after every answer, so the session
can be closed at any time and picks up where it left off.

Keys:
    z   the ranked item on the left is better
    x   the new item on the right is better
    b   go back one answer
    q   quit (progress is kept)

Usage:
    python -m tiermaker.bin.rank
    python -m tiermaker.bin.rank --items games.txt --results games.csv
    python -m tiermaker.bin.rank --status
    python -m tiermaker.bin.rank --reset
"""

import argparse
import logging
import pathlib
import sys
from typing import Callable, List, Optional

from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich import box
from rich.markup import escape

from tiermaker.core.checkpoint import FileStore, deserialize
from tiermaker.core.errors import (
    CheckpointWriteError,
    CorruptCheckpointError,
    NoItemsError,
    ReconcileError,
)
from tiermaker.core.items import ResultWriter, create_items_file, read_items
from tiermaker.core.session import FRESH, Session, open_file_session
from tiermaker.utils.config import Settings, load_settings
from tiermaker.utils.io_helpers import read_utf8
from tiermaker.utils.logging_helper import configure_levels, get_logger

console = Console()
log = get_logger()

KEY_PIVOT = "z"
KEY_CANDIDATE = "x"
KEY_UNDO = "b"
KEY_QUIT = "q"

KeyReader = Callable[[], str]


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Rank items by pairwise choices")
    ap.add_argument("--items", type=pathlib.Path, help="File with one item per line")
    ap.add_argument("--checkpoint", type=pathlib.Path, help="Where progress is saved")
    ap.add_argument("--results", type=pathlib.Path, help="Where the final order is written")
    ap.add_argument("--config", type=pathlib.Path, help="YAML settings file")
    ap.add_argument("--no-undo", action="store_true", help="Do not keep an undo history")
    ap.add_argument("--no-reconcile", action="store_true",
                    help="Start over instead of adapting progress when the item list changed")
    ap.add_argument("--status", action="store_true", help="Show saved progress and exit")
    ap.add_argument("--reset", action="store_true",
                    help="Move the saved progress aside and exit")
    ap.add_argument("-v", "--verbose", action="store_true", help="Echo log messages to the terminal")
    return ap


def settings_from_args(args: argparse.Namespace) -> Settings:
    overrides = {
        "items_file": args.items,
        "checkpoint_file": args.checkpoint,
        "results_file": args.results,
    }
    if args.no_undo:
        overrides["history"] = False
    if args.no_reconcile:
        overrides["reconcile"] = False
    return load_settings(args.config, overrides)


# ── rendering ──────────────────────────────────────────────────────────────
def ranked_list(names: List[str]) -> Table:
    """Numbered "got so far" list, ranks right-aligned like the results file."""
    table = Table(box=None, show_header=False, padding=(0, 1))
    table.add_column(justify="right", style="dim")
    table.add_column(no_wrap=True, overflow="ellipsis")
    for rank, name in enumerate(names, 1):
        table.add_row(f"{rank}:", escape(name))
    return table


def render(session: Session, out: Console) -> None:
    pair = session.current_pair()
    if pair is None:
        return

    choice = Table(box=box.ROUNDED, expand=True, show_lines=False)
    choice.add_column("This one (Z)", justify="center", ratio=1)
    choice.add_column("This one (X)", justify="center", ratio=1)
    choice.add_row(f"[bold]{escape(pair.pivot)}[/]", f"[bold cyan]{escape(pair.candidate)}[/]")

    hint = "[dim]Z / X to choose, B to go back, Q to quit[/]"
    if not session.can_undo:
        hint = "[dim]Z / X to choose, Q to quit[/]"

    out.print()
    out.print(f"[bold]{session.remaining} left[/]", justify="center")
    out.print(Panel(Group(choice, hint), title="Which one is better?"))
    out.print(Panel(ranked_list(list(session.sorted_names)), title="Got so far"))


def show_results(out: Console, ordered, results_file: pathlib.Path) -> None:
    out.print(Panel(ranked_list(list(ordered)), title="Final ranking", border_style="green"))
    out.print(f"[bold green]✓ Everything is sorted.[/] Results have been stored in {results_file}")


# ── interaction ────────────────────────────────────────────────────────────
def run_loop(session: Session, out: Console, read_key: KeyReader) -> bool:
    """Ask questions until the ranking is done (True) or the user quits (False)."""
    while not session.is_done:
        render(session, out)
        pair = session.current_pair()
        key = read_key().strip().lower()

        if key == KEY_PIVOT:
            session.prefer_pivot(pair)
        elif key == KEY_CANDIDATE:
            session.prefer_candidate(pair)
        elif key == KEY_UNDO:
            if not session.undo():
                out.print("[yellow]Nothing to go back to[/]")
        elif key == KEY_QUIT:
            out.print(f"[dim]Progress saved ({len(session.sorted_names)} ranked, {session.remaining} left).[/]")
            return False
        else:
            out.print(f"[yellow]Unknown key {key!r}[/]")
    return True


def show_status(settings: Settings, out: Console) -> int:
    """Describe the saved session. Read-only: a damaged checkpoint is left in place."""
    items = read_items(settings.items_file)
    path = settings.checkpoint_file
    if not path.exists():
        out.print(f"No saved session ({len(items)} items in {settings.items_file})")
        return 0
    try:
        saved = deserialize(read_utf8(path))
    except CorruptCheckpointError as e:
        out.print(f"[yellow]Saved progress is damaged ({escape(str(e))}); "
                  "it will be moved aside on the next run.[/]")
        return 0

    state = saved.current
    out.print(Panel(ranked_list(list(state.sorted_names)), title="Got so far"))
    summary = f"{len(state.sorted_names)} ranked, {state.remaining} left"
    if settings.history:
        summary += f", {len(saved.states) - 1} answers can be undone"
    out.print(summary)
    if sorted(saved.order) != sorted(items):
        out.print("[yellow]The items file changed since this progress was saved; "
                  "it will be reconciled on the next run.[/]")
    return 0


def run(settings: Settings, out: Console, read_key: KeyReader) -> int:
    try:
        session = open_file_session(
            settings.items_file,
            settings.checkpoint_file,
            history=settings.history,
            reconcile=settings.reconcile,
        )
    except NoItemsError:
        create_items_file(settings.items_file)
        out.print(f"[yellow]Please fill in {settings.items_file}[/] (one item per line), then run again.")
        return 0

    if session.origin != FRESH:
        out.print(f"[dim]Session {session.origin}: {len(session.sorted_names)} of "
                  f"{len(session.items)} already ranked[/]")

    if not run_loop(session, out, read_key):
        return 0

    ordered = session.finish(ResultWriter(settings.results_file))
    show_results(out, ordered, settings.results_file)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        settings = settings_from_args(args)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Invalid configuration: {e}[/]")
        return 1

    file_level = getattr(logging, settings.log_level, logging.INFO)
    configure_levels(file_level, logging.DEBUG if args.verbose else logging.WARNING)

    if args.reset:
        moved = FileStore(settings.checkpoint_file).quarantine("reset requested")
        if moved is None:
            console.print("No saved session to reset.")
        else:
            console.print(f"Saved progress moved to {moved}")
        return 0

    if args.status:
        return show_status(settings, console)

    try:
        return run(settings, console, lambda: console.input("[bold]> [/]"))
    except (CheckpointWriteError, ReconcileError) as e:
        log.error(str(e))
        console.print(f"\n[bold red]FATAL:[/] {e}")
        return 1
    except (KeyboardInterrupt, EOFError):
        console.print("\nInterrupted. Progress up to the last answer is saved.")
        return 130


if __name__ == "__main__":
    sys.exit(main())
