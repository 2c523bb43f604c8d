"""
Bracket Engine: command line entry point.

Usage:
    python main.py show [bracket.yaml] [--save snapshot.json]
    python main.py load snapshot.json
    python main.py options swiss

Wires together:  config / snapshot → tournament → rich display
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from bracketengine import snapshot
from bracketengine.cli.display import console, display_options, display_tournament
from bracketengine.config import load_config
from bracketengine.errors import BracketError
from bracketengine.tournaments import Tournament, TournamentKind


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate and inspect tournament brackets.")
    parser.add_argument("-v", "--verbose", action="store_true", help="log engine decisions")
    sub = parser.add_subparsers(dest="command", required=True)

    show = sub.add_parser("show", help="build a bracket from a YAML file and display it")
    show.add_argument("config", nargs="?", default="bracket.yaml", type=Path)
    show.add_argument("--save", type=Path, help="write a JSON snapshot after replaying results")

    load = sub.add_parser("load", help="display a saved JSON snapshot")
    load.add_argument("snapshot", type=Path)

    options = sub.add_parser("options", help="list the options a format accepts")
    options.add_argument("format", choices=[kind.value for kind in TournamentKind])
    return parser


def _run(args: argparse.Namespace) -> None:
    match args.command:
        case "show":
            try:
                config = load_config(args.config)
            except FileNotFoundError as exc:
                console.print(f"[red]Error:[/] {exc}")
                sys.exit(1)
            except ValueError as exc:
                console.print(f"[red]Config error:[/] {exc}")
                sys.exit(1)
            tournament = config.build()
            display_tournament(tournament)
            if args.save:
                path = snapshot.save(args.save, tournament)
                console.print(f"\n[dim]Snapshot saved to {path}[/]")
        case "load":
            try:
                tournament = snapshot.load_file(args.snapshot)
            except FileNotFoundError as exc:
                console.print(f"[red]Error:[/] {exc}")
                sys.exit(1)
            display_tournament(tournament)
        case "options":
            display_options(Tournament.options(args.format), args.format)


def main(argv: list[str] | None = None) -> None:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        _run(args)
    except BracketError as exc:
        console.print(f"[red]Bracket error:[/] {exc}")
        sys.exit(1)
    except ValueError as exc:
        console.print(f"[red]Error:[/] {exc}")
        sys.exit(1)


if __name__ == "__main__":
    main()
