"""Wspólne elementy komend: opcje wejścia, wypisywanie diagnostyk i podsumowania."""

from __future__ import annotations

import argparse
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from data_model.diagnostics import Diagnostic
from pod import IOFailure, iter_sources
from podrend._config import Settings, get_settings
from podrend.pipeline import BuildResult

console = Console()
err_console = Console(stderr=True)

_STYLES = {"E": "red", "W": "yellow"}


def add_input_args(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--input", "-i",
        metavar="KATALOG",
        default=None,
        help="Katalog źródeł Pod (domyślnie: $PODREND_INPUT).",
    )


def load_settings() -> Settings:
    try:
        return get_settings()
    except ValueError as e:
        err_console.print(f"[red]Błąd konfiguracji:[/red] {escape(str(e))}")
        raise SystemExit(1)


def require_input(value: str | None, settings: Settings) -> tuple[Path, int]:
    """Zwraca katalog wejściowy i liczbę plików; brak katalogu → SystemExit(1)."""
    input_dir = value or settings.input_dir
    if not input_dir:
        err_console.print("[red]Nie podano katalogu wejściowego[/red] (--input lub PODREND_INPUT).")
        raise SystemExit(1)
    try:
        count = len(iter_sources(input_dir))
    except IOFailure as e:
        err_console.print(f"[red]Katalog nie istnieje:[/red] {escape(str(e.path))}")
        raise SystemExit(1)
    return Path(input_dir), count


def print_diagnostics(diagnostics: list[Diagnostic]) -> None:
    for d in diagnostics:
        style = _STYLES.get(d.code.value[0], "white")
        err_console.print(
            f"[dim]{escape(d.source)}:{d.line}:[/dim] "
            f"[{style}]{d.code.value}[/{style}] {escape(d.message)}"
        )


def print_summary(result: BuildResult, strict: bool) -> None:
    code = result.exit_code(strict)
    fatal = len(result.fatal)
    unresolved = len(result.unresolved)
    warnings = len(result.diagnostics) - fatal

    if code == 0 and not result.diagnostics:
        status = "[green]Gotowe[/green]"
    elif code == 0:
        status = f"[yellow]Gotowe z {warnings} ostrzeżeniami[/yellow]"
    else:
        status = "[red]Błąd[/red]"

    err_console.print()
    err_console.print(
        f"{status} — dokumentów: {len(result.trees)}, "
        f"zapisanych: {len(result.rendered)}, "
        f"pominiętych: {len(result.failed)}, "
        f"symboli: {len(result.table)}, "
        f"przykładów: {result.examples.checked} (pominiętych {result.examples.skipped}), "
        f"nierozwiązanych odsyłaczy: {unresolved}"
    )
