"""
data_model/symbols.py — wpis tablicy symboli (udokumentowana encja).

SymbolEntry wskazuje miejsce definicji: plik źródłowy + kotwica nagłówka.
Nazwy nie są unikalne w korpusie (np. "new" jest metodą wielu typów),
dlatego tablica symboli mapuje nazwę na zbiór wpisów.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SymbolEntry:
    """
    - name:   nazwa symbolu, np. "Map", "new", "exceptions"
    - kind:   rodzaj: "class", "role", "method", "routine", "language" …
    - source: ścieżka względna pliku definiującego (POSIX)
    - anchor: kotwica nagłówka (None = początek dokumentu)
    - url:    adres dokumentu definiującego, np. "/type/Map"
    """
    name: str
    kind: str
    source: str
    anchor: str | None = None
    url: str = ""

    @property
    def sort_key(self) -> tuple[str, str, str, str]:
        return (self.source, self.anchor or "", self.kind, self.name)

    def to_dict(self) -> dict[str, str | None]:
        return {
            "source": self.source,
            "anchor": self.anchor,
            "kind":   self.kind,
            "url":    self.url,
        }
