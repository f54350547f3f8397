#!/usr/bin/env python3
"""
cli.py

Command line tools for the Baakh API.

Usage:
  baakh init-db
  baakh sync-romanizer [--full]
  baakh sync-hesudhar [--full]
  baakh correct "TEXT"
  baakh romanize "TEXT"
  baakh serve [--host HOST] [--port PORT]
"""

import argparse
import sys

from rich.console import Console
from rich.table import Table

console = Console()


def create_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="baakh",
        description="Manage the Baakh poetry database and lexicon files."
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands", required=True)

    subparsers.add_parser("init-db", help="Create any missing database tables")

    for name, label in (("sync-romanizer", "romanizer"), ("sync-hesudhar", "hesudhar")):
        sync_parser = subparsers.add_parser(name, help=f"Write new {label} entries to the lexicon file")
        sync_parser.add_argument(
            "--full", action="store_true", help="Rebuild the file from every live row"
        )

    correct_parser = subparsers.add_parser("correct", help="Apply hesudhar corrections to text")
    correct_parser.add_argument("text", help="Sindhi text")

    romanize_parser = subparsers.add_parser("romanize", help="Romanize Sindhi text")
    romanize_parser.add_argument("text", help="Sindhi text")

    serve_parser = subparsers.add_parser("serve", help="Run the development server")
    serve_parser.add_argument("--host", default="0.0.0.0")
    serve_parser.add_argument("--port", type=int, default=10000)
    serve_parser.add_argument("--debug", action="store_true")

    return parser


def init_db_cli(app, args):
    from baakh.database import init_db

    with app.app_context():
        init_db()
    console.print("[bold green]Database tables are ready.[/]")


def _print_sync_result(label, result):
    table = Table(title=f"{label} sync")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("New entries", str(result.new_entries))
    table.add_row("Added", str(result.added_count))
    table.add_row("Updated", str(result.updated_count))
    table.add_row("Removed", str(result.removed_count))
    table.add_row("Total in file", str(result.count))
    console.print(table)
    console.print(f"[bold]{result.message}[/]")


def sync_romanizer_cli(app, args):
    from baakh.lexicon import sync_roman_words

    with app.app_context():
        result = sync_roman_words(full=args.full)
    _print_sync_result("Romanizer", result)


def sync_hesudhar_cli(app, args):
    from baakh.lexicon import sync_hesudhar

    with app.app_context():
        result = sync_hesudhar(full=args.full)
    _print_sync_result("Hesudhar", result)


def correct_cli(app, args):
    from baakh.lexicon import get_corrector

    with app.app_context():
        result = get_corrector().correct(args.text)

    console.print(result.corrected_text)
    if result.corrections:
        table = Table(title=result.message)
        table.add_column("#", justify="right")
        table.add_column("Original")
        table.add_column("Corrected", style="green")
        for correction in result.corrections:
            table.add_row(str(correction.position), correction.original_word, correction.corrected_word)
        console.print(table)
    else:
        console.print(f"[dim]{result.message}[/]")


def romanize_cli(app, args):
    from baakh.lexicon import get_romanizer

    with app.app_context():
        romanizer = get_romanizer()
        result = romanizer.romanize(args.text)
        slug = romanizer.romanize_to_slug(args.text)

    console.print(result.romanized_text)
    console.print(f"[bold]slug:[/] {slug or '[red](empty)[/]'}")
    console.print(f"[dim]{result.message}[/]")


def serve_cli(app, args):
    app.run(host=args.host, port=args.port, debug=args.debug)


COMMAND_HANDLERS = {
    "init-db": init_db_cli,
    "sync-romanizer": sync_romanizer_cli,
    "sync-hesudhar": sync_hesudhar_cli,
    "correct": correct_cli,
    "romanize": romanize_cli,
    "serve": serve_cli,
}


def main(argv=None, app=None):
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if app is None:
        from baakh.app import create_app
        app = create_app()

    try:
        COMMAND_HANDLERS[args.command](app, args)
    except OSError as e:
        console.print(f"[bold red]File error:[/] {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
