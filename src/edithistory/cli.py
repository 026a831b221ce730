"""Command line utilities for inspecting the edit history of files."""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Any, Dict, Iterable, List

from .config import HistoryConfig
from .git.history import Edit, extract_history
from .git.index import extract_histories
from .logging import configure_logging
from .temporal.timeline import format_date, page_context


def _resolve_config(args: argparse.Namespace) -> HistoryConfig:
    config = HistoryConfig.load(args.config)
    if args.date_format is not None:
        config.date_format = args.date_format
    if args.no_search_parents:
        config.search_parent_directories = False
    return config


def _setup_logging(args: argparse.Namespace, config: HistoryConfig) -> None:
    level = config.log_level
    if args.debug:
        level = "DEBUG"
    elif args.verbose:
        level = "INFO"
    configure_logging(level, args.log_format or config.log_format)


def _histories(paths: List[Path], config: HistoryConfig, indexed: bool) -> Dict[str, List[Edit]]:
    if indexed:
        return extract_histories(paths, config)
    return {str(path): extract_history(path, config) for path in paths}


def _edit_to_dict(edit: Edit, date_format: str) -> Dict[str, Any]:
    return {
        "commit": edit.commit,
        "timestamp": edit.timestamp.isoformat() if edit.timestamp else None,
        "date": format_date(edit.timestamp, date_format),
        "summary": edit.summary,
        "message": edit.message,
    }


def _log(args: argparse.Namespace, config: HistoryConfig) -> None:
    histories = _histories(args.paths, config, args.indexed)

    if args.json:
        print(json.dumps(
            {
                path: [_edit_to_dict(edit, config.date_format) for edit in edits]
                for path, edits in histories.items()
            },
            indent=2,
        ))
        return

    for path, edits in histories.items():
        print(f"{path} ({len(edits)} edits)")
        if not edits:
            print("  No history available.")
        for edit in edits:
            date = format_date(edit.timestamp, config.date_format) or "unknown date"
            print(f"  {edit.commit[:8]}  {date}  {edit.summary}")


def _timeline(args: argparse.Namespace, config: HistoryConfig) -> None:
    edits = extract_history(args.path, config)
    context = page_context(edits, date_format=config.date_format)

    if args.json:
        print(json.dumps(context, indent=2))
        return

    print(f"Timeline for {args.path}:")
    print(f"  Published     : {context['published_time']}")
    print(f"  Last modified : {context['last_modified_time']}")
    print(f"  Date          : {context['date']}")
    print(f"  Edits         : {len(context['history'])}")
    for entry in context["history"]:
        print(f"\n  {entry['date']}  {entry['summary']}")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to the JSON configuration file (defaults to ~/.edithistory/config.json)",
    )
    parser.add_argument(
        "--date-format",
        help="strftime pattern for human readable dates",
    )
    parser.add_argument(
        "--no-search-parents",
        action="store_true",
        help="Only look for a repository in the file's own directory",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Show more log messages",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Show debug level log messages",
    )
    parser.add_argument(
        "--log-format",
        choices=["console", "json"],
        help="Format of log messages written to stderr",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    log_parser = subparsers.add_parser("log", help="List the commits that changed files")
    log_parser.add_argument("paths", nargs="+", type=Path, help="Files inside a git working tree")
    log_parser.add_argument(
        "--indexed",
        action="store_true",
        help="Walk each repository once and share the result between files",
    )
    log_parser.add_argument("--json", action="store_true", help="Print JSON instead of text")
    log_parser.set_defaults(func=_log)

    timeline_parser = subparsers.add_parser(
        "timeline", help="Show published and last-modified times of a file"
    )
    timeline_parser.add_argument("path", type=Path, help="File inside a git working tree")
    timeline_parser.add_argument("--json", action="store_true", help="Print JSON instead of text")
    timeline_parser.set_defaults(func=_timeline)

    return parser


def main(argv: Iterable[str] | None = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    config = _resolve_config(args)
    _setup_logging(args, config)
    args.func(args, config)


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    main()
