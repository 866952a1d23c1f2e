"""Komenda: podrend symbols — wypisuje tablicę symboli korpusu."""

from __future__ import annotations

import argparse
import json

from rich import box
from rich.markup import escape
from rich.table import Table

from pod import PodError
from podrend.pipeline import build
from ._common import console, err_console, add_input_args, load_settings, print_diagnostics, require_input


def run(args: argparse.Namespace) -> None:
    settings = load_settings()
    input_dir, _ = require_input(args.input, settings)

    try:
        result = build(input_dir, None, jobs=settings.jobs, check_examples=False)
    except PodError as e:
        err_console.print(f"[red]Błąd:[/red] {escape(str(e))}")
        raise SystemExit(1)
    print_diagnostics(result.fatal)

    table = result.table
    names = [args.name] if args.name else table.names()

    if args.json:
        data = {n: [e.to_dict() for e in table.lookup(n)] for n in names}
        # print() zamiast console.print — czysty JSON bez markupu rich
        print(json.dumps(data, ensure_ascii=False, indent=2, sort_keys=True))
        return

    entries = [e for n in names for e in table.lookup(n)]
    if not entries:
        console.print("[yellow]Brak symboli.[/yellow]")
        raise SystemExit(1 if args.name else 0)

    out = Table(box=box.SIMPLE_HEAD, header_style="bold white", show_header=True)
    out.add_column("NAZWA",   style="bold cyan", no_wrap=True)
    out.add_column("RODZAJ",  style="dim", no_wrap=True)
    out.add_column("PLIK",    no_wrap=True)
    out.add_column("KOTWICA", style="dim")
    for e in entries:
        out.add_row(escape(e.name), escape(e.kind), escape(e.source), escape(e.anchor or "-"))
    console.print(out)
    console.print(f"  [dim]{len(entries)} wpisów[/dim]\n")


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "symbols",
        help="Wypisuje tablicę symboli (nazwa → dokumenty / kotwice).",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Parsuje katalog źródeł i wypisuje zebrane symbole: tytuły dokumentów,
nagłówki "<rodzaj> <nazwa>" (np. "method new") i hasła indeksu X<…>.

Przykłady:
  podrend symbols --input doc
  podrend symbols -i doc --name new
  podrend symbols -i doc --json > symbols.json
        """,
    )
    add_input_args(p)
    p.add_argument(
        "--name", "-n",
        metavar="NAZWA",
        default=None,
        help="Tylko symbole o tej nazwie.",
    )
    p.add_argument(
        "--json",
        action="store_true",
        help="Wynik jako JSON (format jak symbols.json).",
    )
    p.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Szczegółowe logi (DEBUG).",
    )
    p.set_defaults(func=run)
