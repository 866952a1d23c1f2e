"""
podrend — renderer dokumentacji Pod6 (HTML / tekst / man) z odsyłaczami.

Użycie:
  podrend <komenda> [opcje]

Komendy:
  render    Parsuje katalog źródeł Pod, rozwiązuje odsyłacze i zapisuje wynik.
  check     To samo co render, ale bez zapisu — tylko diagnostyki.
  symbols   Wypisuje tablicę symboli (nazwa → dokumenty / kotwice).

Zmienne środowiskowe (również z pliku .env):
  PODREND_INPUT, PODREND_OUTPUT, PODREND_FORMAT, PODREND_JOBS, PODREND_STRICT
"""

from __future__ import annotations

import argparse
import logging
import sys

# Windows: terminal może używać cp1252 — wymuszamy UTF-8, żeby polskie znaki
# w tekstach pomocy argparse były wypisywane poprawnie.
if hasattr(sys.stdout, "reconfigure"):
    sys.stdout.reconfigure(encoding="utf-8", errors="replace")
if hasattr(sys.stderr, "reconfigure"):
    sys.stderr.reconfigure(encoding="utf-8", errors="replace")

from rich.console import Console
from rich.logging import RichHandler

from podrend.commands import check as cmd_check
from podrend.commands import render as cmd_render
from podrend.commands import symbols as cmd_symbols

VERSION = "0.1.0"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="podrend",
        description="podrend — renderer dokumentacji Pod6.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version", action="version", version=f"podrend {VERSION}"
    )

    subparsers = parser.add_subparsers(
        title="komendy",
        metavar="<komenda>",
        dest="command",
    )
    subparsers.required = True

    cmd_render.add_parser(subparsers)
    cmd_check.add_parser(subparsers)
    cmd_symbols.add_parser(subparsers)

    return parser


def setup_logging(verbose: bool) -> None:
    """--verbose → DEBUG przez RichHandler; w przeciwnym razie tylko WARNING."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False, rich_tracebacks=True)],
        force=True,
    )


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(getattr(args, "verbose", False))
    args.func(args)


if __name__ == "__main__":
    main()
