"""Komenda: podrend check — diagnostyki bez zapisu plików."""

from __future__ import annotations

import argparse

from rich import box
from rich.markup import escape
from rich.table import Table

from pod import PodError
from podrend.pipeline import BuildResult, build
from ._common import (
    add_input_args,
    console,
    err_console,
    load_settings,
    print_diagnostics,
    print_summary,
    require_input,
)


# ---------------------------------------------------------------------------
# Wyświetlanie w terminalu
# ---------------------------------------------------------------------------

def _show_table(result: BuildResult) -> None:
    if not result.trees:
        console.print("[yellow]Brak dokumentów.[/yellow]")
        return

    per_source: dict[str, int] = {}
    for d in result.diagnostics:
        per_source[d.source] = per_source.get(d.source, 0) + 1

    table = Table(
        box=box.SIMPLE_HEAD,
        show_header=True,
        header_style="bold white",
        row_styles=["", "dim"],
        expand=False,
    )
    table.add_column("PLIK",     no_wrap=True, style="bold cyan")
    table.add_column("RODZAJ",   no_wrap=True, style="dim")
    table.add_column("NAGŁ.",    justify="right", no_wrap=True)
    table.add_column("ODSYŁ.",   justify="right", no_wrap=True)
    table.add_column("DIAG.",    justify="right", no_wrap=True)
    table.add_column("TYTUŁ",    no_wrap=False, max_width=50)

    for tree in result.trees:
        src = tree.source
        kind = "/".join(k for k in (src.kind, src.subkind) if k) or "-"
        diags = per_source.get(src.rel_path, 0)
        table.add_row(
            escape(src.rel_path),
            escape(kind),
            str(sum(len(v) for v in tree.headings.values())),
            str(len(tree.links())),
            f"[yellow]{diags}[/yellow]" if diags else "0",
            escape((tree.title or "")[:80]),
        )

    console.print()
    console.print(table)
    console.print(f"  [dim]{len(result.trees)} dokumentów[/dim]\n")


# ---------------------------------------------------------------------------
# Główna logika komendy
# ---------------------------------------------------------------------------

def run(args: argparse.Namespace) -> None:
    settings = load_settings()
    input_dir, total = require_input(args.input, settings)
    strict = args.strict or settings.strict

    err_console.print(f"Sprawdzanie [bold]{escape(str(input_dir))}[/bold]  plików: [bold]{total}[/bold]")
    try:
        result = build(input_dir, None, jobs=settings.jobs)
    except PodError as e:
        err_console.print(f"[red]Błąd:[/red] {escape(str(e))}")
        raise SystemExit(1)

    if args.show:
        _show_table(result)

    print_diagnostics(result.diagnostics)
    print_summary(result, strict)
    raise SystemExit(result.exit_code(strict))


# ---------------------------------------------------------------------------
# Rejestracja parsera
# ---------------------------------------------------------------------------

def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "check",
        help="Sprawdza źródła Pod (składnia, odsyłacze, przykłady) bez zapisu.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Wykonuje ten sam potok co render (parsowanie, tablica symboli, odsyłacze,
walidacja przykładów), ale nie zapisuje żadnych plików.

Przykłady:
  podrend check --input doc
  podrend check -i doc --strict
  podrend check -i doc --show
        """,
    )
    add_input_args(p)
    p.add_argument(
        "--strict",
        action="store_true",
        help="Nierozwiązane odsyłacze kończą się kodem wyjścia 1.",
    )
    p.add_argument(
        "--show",
        action="store_true",
        help="Wyświetla tabelę dokumentów w terminalu.",
    )
    p.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Szczegółowe logi (DEBUG).",
    )
    p.set_defaults(func=run)
