"""
CLI (Command Line Interface).

This module provides quick terminal commands, e.g.:

    notefinder search "s2, chem, mod1"
    notefinder search chem --dept IT
    notefinder subjects --sem 2
    notefinder recent
    notefinder dept CSE
    notefinder interactive

Note:
- The interactive UI lives in notefinder/interactive.py
- This CLI is intentionally simple and prints plain text (no rich formatting)
"""

from __future__ import annotations

import argparse
import logging
import webbrowser
from typing import Optional

from notefinder.config import AppConfig
from notefinder.engine import Snapshot, distinct, load_snapshot
from notefinder.model import FetchModule, NavigateToSubject
from notefinder.parse import parse_intent
from notefinder.resolve import recent_entry_for, resolve
from notefinder.sheets import FetchError, fetch_module, fetch_subjects, load_sheet
from notefinder.storage import load_department, load_recent, record_recent, save_department

logger = logging.getLogger(__name__)


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _load_session_snapshot(cfg: AppConfig) -> Optional[Snapshot]:
    """
    Load the whole sheet once for this run. Returns None if it cannot be loaded.
    """
    try:
        return load_snapshot(load_sheet(cfg))
    except FetchError as exc:
        logger.error("Could not load notes sheet: %s", exc)
        return None


def _current_department(args: argparse.Namespace, cfg: AppConfig) -> str:
    """
    --dept flag if given, otherwise the remembered department.
    """
    dept = (getattr(args, "dept", None) or "").strip().upper()
    return dept or load_department(cfg.department_path)


def _cmd_search(args: argparse.Namespace, cfg: AppConfig) -> int:
    """
    Resolve a free-text search and print where it leads.
    """
    text = (args.text or "").strip()
    if not text:
        print("Please provide a search text.")
        return 1

    dept = _current_department(args, cfg)
    if not dept:
        print("No department selected. Use --dept or 'notefinder dept <CODE>'.")
        return 1

    snapshot = _load_session_snapshot(cfg)
    if snapshot is None:
        print("Could not load notes. Please try again.")
        return 1

    intent = parse_intent(text)
    outcome = resolve(
        intent,
        snapshot,
        dept,
        fetcher=lambda d, s, sub, m: fetch_module(d, s, sub, m, settings=cfg),
    )

    if isinstance(outcome, NavigateToSubject):
        print(f"Subject page: {outcome.path}")
        return 0

    if isinstance(outcome, FetchModule):
        record_recent(recent_entry_for(outcome), cfg.recent_path, limit=cfg.recent_limit)
        print(outcome.link)
        if args.open:
            webbrowser.open(outcome.link, new=2)
        return 0

    # ValidationError / NoResultError
    print(outcome.message)
    return 1


def _cmd_subjects(args: argparse.Namespace, cfg: AppConfig) -> int:
    """
    List subjects of one semester in the current department.
    """
    dept = _current_department(args, cfg)
    sem = (args.sem or "").strip()
    if not dept or not sem.isdigit():
        print("Please provide a department and a numeric semester.")
        return 1

    subjects = fetch_subjects(dept, sem, settings=cfg)
    if not subjects:
        # Remote listing empty or unavailable: answer from the whole sheet
        snapshot = _load_session_snapshot(cfg)
        if snapshot is not None:
            subjects = distinct(snapshot, "Subject", {"Department": dept, "Semester": sem})
    if not subjects:
        print("No subjects found.")
        return 0

    print(f"{dept} | Semester {sem}")
    for s in subjects:
        print(f"- {s}")
    return 0


def _cmd_recent(args: argparse.Namespace, cfg: AppConfig) -> int:
    entries = load_recent(cfg.recent_path, limit=cfg.recent_limit)
    if not entries:
        print("No recent modules viewed.")
        return 0

    for e in entries:
        sem = f" | Sem {e.semester}" if e.semester else ""
        print(f"{e.subject} - {e.module} | {e.department}{sem} | {e.link}")
    return 0


def _cmd_dept(args: argparse.Namespace, cfg: AppConfig) -> int:
    """
    Show or set the remembered department.
    """
    code = (args.code or "").strip().upper()
    if not code:
        current = load_department(cfg.department_path)
        print(current if current else "No department selected.")
        return 0

    if code not in cfg.departments:
        print(f"Unknown department: {code} (choose from {', '.join(cfg.departments)})")
        return 1

    save_department(code, cfg.department_path)
    print(f"Department set: {code}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argparse CLI parser with sub-commands.
    """
    parser = argparse.ArgumentParser(prog="notefinder", description="Find notes, papers and syllabus links")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p_search = sub.add_parser("search", help="Search, e.g. 's2, chem, mod1' or just 'chem'")
    p_search.add_argument("text", type=str, help="Search text")
    p_search.add_argument("--dept", "-d", type=str, default=None, help="Department (e.g. CSE)")
    p_search.add_argument("--open", action="store_true", help="Open the found link in a browser")

    p_subjects = sub.add_parser("subjects", help="List subjects of a semester")
    p_subjects.add_argument("--sem", "-s", type=str, required=True, help="Semester number")
    p_subjects.add_argument("--dept", "-d", type=str, default=None, help="Department (e.g. CSE)")

    sub.add_parser("recent", help="Show recently opened modules")

    p_dept = sub.add_parser("dept", help="Show or set the department")
    p_dept.add_argument("code", type=str, nargs="?", default="", help="Department code (e.g. CSE)")

    sub.add_parser("interactive", help="Interactive menu mode")

    return parser


def main(argv: list[str] | None = None) -> None:
    """
    CLI entry point. Parses args, dispatches to command handlers,
    and exits via SystemExit with a return code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    _setup_logging(args.verbose)

    cfg = AppConfig.from_env()

    if args.command == "search":
        raise SystemExit(_cmd_search(args, cfg))
    if args.command == "subjects":
        raise SystemExit(_cmd_subjects(args, cfg))
    if args.command == "recent":
        raise SystemExit(_cmd_recent(args, cfg))
    if args.command == "dept":
        raise SystemExit(_cmd_dept(args, cfg))

    if args.command == "interactive":
        from notefinder.interactive import run_interactive

        run_interactive(cfg)
        raise SystemExit(0)

    raise SystemExit(2)
