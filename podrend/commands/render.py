"""Komenda: podrend render — renderowanie katalogu źródeł Pod."""

from __future__ import annotations

import argparse

from rich.markup import escape
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn

from pod import PodError
from podrend.pipeline import build
from render import RENDERERS
from ._common import (
    add_input_args,
    err_console,
    load_settings,
    print_diagnostics,
    print_summary,
    require_input,
)


# ---------------------------------------------------------------------------
# Główna logika komendy
# ---------------------------------------------------------------------------

def run(args: argparse.Namespace) -> None:
    settings = load_settings()
    input_dir, total = require_input(args.input, settings)

    output_dir = args.output or settings.output_dir
    if not output_dir:
        err_console.print("[red]Nie podano katalogu wyjściowego[/red] (--output lub PODREND_OUTPUT).")
        raise SystemExit(1)

    fmt    = args.format or settings.format
    jobs   = args.jobs or settings.jobs
    strict = args.strict or settings.strict
    if fmt not in RENDERERS:
        err_console.print(
            f"[red]Nieznany format:[/red] {escape(fmt)} "
            f"(dostępne: {', '.join(sorted(RENDERERS))})"
        )
        raise SystemExit(1)

    err_console.print(
        f"Renderowanie [bold]{escape(str(input_dir))}[/bold] → [bold]{escape(output_dir)}[/bold]  "
        f"format=[cyan]{fmt}[/cyan]  wątki=[cyan]{jobs}[/cyan]  plików: [bold]{total}[/bold]"
    )

    with Progress(
        SpinnerColumn(),
        TextColumn("{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        console=err_console,
        transient=True,
    ) as progress:
        task = progress.add_task("Parsowanie", total=total)
        try:
            result = build(
                input_dir,
                output_dir,
                fmt=fmt,
                jobs=jobs,
                check_examples=not args.no_examples,
                on_file=lambda _: progress.advance(task),
            )
        except PodError as e:
            err_console.print(f"[red]Błąd:[/red] {escape(str(e))}")
            raise SystemExit(1)

    print_diagnostics(result.diagnostics)
    print_summary(result, strict)
    raise SystemExit(result.exit_code(strict))


# ---------------------------------------------------------------------------
# Rejestracja parsera
# ---------------------------------------------------------------------------

def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "render",
        help="Renderuje katalog źródeł Pod do HTML / tekstu / man.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Parsuje wszystkie pliki Pod (.pod6, .rakudoc, .pod) z katalogu wejściowego,
buduje tablicę symboli, rozwiązuje odsyłacze L<…>, sprawdza przykłady kodu
i zapisuje wyniki (z zachowaniem struktury katalogów) oraz symbols.json.

Kod wyjścia: 1 gdy którykolwiek plik nie dał się sparsować, a z --strict
również gdy pozostały nierozwiązane odsyłacze.

Przykłady:
  podrend render --input doc --output html
  podrend render -i doc -o out --format man --jobs 4
  podrend render -i doc -o out --strict --no-examples
        """,
    )
    add_input_args(p)
    p.add_argument(
        "--output", "-o",
        metavar="KATALOG",
        default=None,
        help="Katalog wynikowy (domyślnie: $PODREND_OUTPUT).",
    )
    p.add_argument(
        "--format", "-f",
        choices=sorted(RENDERERS),
        default=None,
        help="Format wyjścia (domyślnie: $PODREND_FORMAT lub html).",
    )
    p.add_argument(
        "--strict",
        action="store_true",
        help="Nierozwiązane odsyłacze kończą się kodem wyjścia 1.",
    )
    p.add_argument(
        "--jobs", "-j",
        type=int,
        metavar="N",
        default=None,
        help="Liczba wątków parsowania (domyślnie: $PODREND_JOBS lub 1).",
    )
    p.add_argument(
        "--no-examples",
        action="store_true",
        help="Pomija walidację przykładów kodu.",
    )
    p.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Szczegółowe logi (DEBUG).",
    )
    p.set_defaults(func=run)
