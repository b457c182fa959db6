from __future__ import annotations

import logging
import webbrowser
from typing import Any, Callable, Optional

from rich import box
from rich.console import Console
from rich.table import Table

from notefinder.config import AppConfig
from notefinder.engine import SnapshotStore, distinct
from notefinder.model import FetchModule, NavigateToSubject, RecentEntry
from notefinder.parse import parse_intent
from notefinder.resolve import recent_entry_for, resolve
from notefinder.sheets import FetchError, fetch_module, fetch_subjects, load_sheet
from notefinder.storage import load_department, load_recent, record_recent, save_department

logger = logging.getLogger(__name__)

console = Console()


def _println(msg: str = "") -> None:
    console.print(msg)


def _prompt(msg: str) -> str:
    return console.input(msg)


def _safe_str(x: Any) -> str:
    return "" if x is None else str(x)


def _reload(store: SnapshotStore, cfg: AppConfig, loader: Callable[[AppConfig], list[dict[str, str]]]) -> bool:
    """
    Download the sheet and swap it into the store. Keeps the old snapshot on failure.
    """
    try:
        with console.status("Getting your notes..."):
            rows = loader(cfg)
    except FetchError as exc:
        logger.error("Could not load notes sheet: %s", exc)
        _println("[red]Could not load notes. Keeping the previous data.[/]")
        return False

    snapshot = store.load(rows)
    _println(f"Loaded {len(snapshot)} rows.")
    return True


def run_interactive(
    cfg: AppConfig,
    store: Optional[SnapshotStore] = None,
    loader: Callable[[AppConfig], list[dict[str, str]]] = load_sheet,
) -> None:
    """
    Interactive menu loop. The sheet is loaded once at start and can be
    reloaded with [5].
    """
    store = store if store is not None else SnapshotStore()
    if len(store.current) == 0:
        _reload(store, cfg, loader)

    dept = load_department(cfg.department_path)

    while True:
        _print_header(cfg, dept, len(store.current))

        choice = _prompt(
            "\n[1] Search\n"
            "[2] Recent modules\n"
            "[3] Subjects of a semester\n"
            "[4] Change department\n"
            "[5] Reload notes\n"
            "[0] Exit\n"
            "Select: "
        ).strip()

        if choice == "0":
            _println("Bye.")
            return

        if choice == "1":
            _flow_search(store, cfg, dept)
        elif choice == "2":
            _flow_recent(cfg)
        elif choice == "3":
            _flow_subjects(store, cfg, dept)
        elif choice == "4":
            dept = _flow_department(cfg, dept)
        elif choice == "5":
            _reload(store, cfg, loader)
        else:
            _println("Invalid choice.")


def _print_header(cfg: AppConfig, dept: str, rows: int) -> None:
    scheme = cfg.schemes[0] if cfg.schemes else "(none)"
    _println("\n=== notefinder (interactive) ===")
    _println(f"Scheme: {scheme} | Department: {dept or '(none)'} | Rows loaded: {rows}")


def _flow_search(store: SnapshotStore, cfg: AppConfig, dept: str) -> None:
    """
    Search until the user enters a blank line.
    """
    if not dept:
        _println("Select a department first ([4]).")
        return

    while True:
        text = _prompt("Search (e.g., 's2, chem, mod1' or 'chem') (blank = back): ").strip()
        if not text:
            return

        outcome = resolve(
            parse_intent(text),
            store.current,
            dept,
            fetcher=lambda d, s, sub, m: fetch_module(d, s, sub, m, settings=cfg),
        )

        if isinstance(outcome, NavigateToSubject):
            _println(f"Subject page: [bold cyan]{outcome.path}[/]")
        elif isinstance(outcome, FetchModule):
            record_recent(recent_entry_for(outcome), cfg.recent_path, limit=cfg.recent_limit)
            _println(f"[green]{outcome.link}[/]")
            if _prompt("Open in browser? (y/N): ").strip().lower() == "y":
                webbrowser.open(outcome.link, new=2)
        else:
            _println(f"[red]{outcome.message}[/]")


def _recent_table(entries: list[RecentEntry]) -> Table:
    table = Table(title="Recent", box=box.SIMPLE)
    table.add_column("#", justify="right")
    table.add_column("Module")
    table.add_column("Department")
    table.add_column("Link")
    for i, e in enumerate(entries, start=1):
        where = f"{e.department} | Sem {e.semester}" if e.semester else e.department
        table.add_row(str(i), f"[bold]{e.subject} - {e.module}[/]", where, e.link)
    return table


def _flow_recent(cfg: AppConfig) -> None:
    entries = load_recent(cfg.recent_path, limit=cfg.recent_limit)
    if not entries:
        _println("No recent modules viewed.")
        return

    console.print(_recent_table(entries))

    pick = _prompt("Enter number to open (blank = back): ").strip()
    if not pick:
        return
    if not pick.isdigit() or not (1 <= int(pick) <= len(entries)):
        _println("Out of range.")
        return
    webbrowser.open(entries[int(pick) - 1].link, new=2)


def _flow_subjects(store: SnapshotStore, cfg: AppConfig, dept: str) -> None:
    if not dept:
        _println("Select a department first ([4]).")
        return

    sem = _prompt("Semester number: ").strip()
    if not sem.isdigit():
        _println("Not a number.")
        return

    subjects = fetch_subjects(dept, sem, settings=cfg)
    if not subjects:
        # Remote listing empty or unavailable: answer from the loaded sheet
        subjects = distinct(store.current, "Subject", {"Department": dept, "Semester": sem})
    if not subjects:
        _println("No subjects found.")
        return

    table = Table(title=f"{dept} | Semester {sem}", box=box.SIMPLE)
    table.add_column("Subject")
    for s in subjects:
        table.add_row(_safe_str(s))
    console.print(table)


def _flow_department(cfg: AppConfig, current: str) -> str:
    # Selected department first, then the others
    ordered = [current] + [d for d in cfg.departments if d != current] if current else list(cfg.departments)
    _println("Departments: " + ", ".join(ordered))

    code = _prompt("Department (blank = keep): ").strip().upper()
    if not code:
        return current
    if code not in cfg.departments:
        _println("Unknown department.")
        return current

    save_department(code, cfg.department_path)
    _println(f"Department set: {code}")
    return code
