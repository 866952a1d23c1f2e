"""pod/errors.py — wyjątki parsera i ładowania źródeł."""

from __future__ import annotations

from pathlib import Path


class PodError(Exception):
    """Bazowy wyjątek przetwarzania pojedynczego pliku."""


class MalformedMarkup(PodError):
    """
    Niezbalansowana lub nieznana dyrektywa.

    - line:      numer linii dyrektywy (1-based)
    - directive: treść dyrektywy, np. "=begin code"
    """

    def __init__(self, message: str, line: int, directive: str = "") -> None:
        super().__init__(f"linia {line}: {message}")
        self.reason = message
        self.line = line
        self.directive = directive


class IOFailure(PodError):
    """Plik nie daje się odczytać lub zapisać."""

    def __init__(self, path: str | Path, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = str(path)
        self.reason = reason
