"""
data_model/diagnostics.py — kody i struktury diagnostyk potoku.

Diagnostic — pojedyncza uwaga o pliku źródłowym z kodem, linią i opisem.
Kody E_* są fatalne dla pliku (plik pominięty), W_* tylko raportowane.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class DiagCode(StrEnum):
    """Stałe kody diagnostyk."""

    # fatalne dla pliku
    MALFORMED_MARKUP         = "E_MALFORMED_MARKUP"
    IO_FAILURE               = "E_IO_FAILURE"

    # odsyłacze
    UNRESOLVED_LINK          = "W_UNRESOLVED_LINK"
    DUPLICATE_ANCHOR         = "W_DUPLICATE_ANCHOR"

    # przykłady kodu
    EXAMPLE_EMPTY            = "W_EXAMPLE_EMPTY"
    OUTPUT_NO_MARKER         = "W_OUTPUT_NO_MARKER"
    OUTPUT_UNTERMINATED      = "W_OUTPUT_UNTERMINATED"
    OUTPUT_STRAY_NEWLINE     = "W_OUTPUT_STRAY_NEWLINE_MARK"


@dataclass(slots=True)
class Diagnostic:
    """
    - code:    DiagCode
    - source:  ścieżka względna pliku
    - line:    numer linii (1-based; 0 gdy nieznany)
    - message: czytelny opis
    - details: opcjonalne dane dodatkowe (np. cel odsyłacza)
    """

    code: DiagCode
    source: str
    line: int
    message: str
    details: dict[str, Any] | None = None

    @property
    def fatal(self) -> bool:
        return self.code.value.startswith("E_")

    @property
    def sort_key(self) -> tuple[str, int, str]:
        return (self.source, self.line, self.code.value)

    def __str__(self) -> str:
        return f"{self.source}:{self.line}: {self.code.value}: {self.message}"
