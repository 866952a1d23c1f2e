"""
xref/table.py — tablica symboli całego korpusu.

SymbolTable buduje słowniki:
  _by_name:  nazwa  -> set[SymbolEntry]    (nazwy nie są unikalne)
  _by_url:   url    -> SymbolEntry         (wpis dokumentu, np. "/type/Map")
  _anchors:  source -> {kotwica -> SymbolEntry}

Budowa jest niezależna od kolejności drzew: zbiory + deterministyczny
wybór przy kolizji adresów (najmniejsza ścieżka źródła).
"""

from __future__ import annotations

from collections.abc import Iterable

from data_model.documents import DocumentTree
from data_model.symbols import SymbolEntry
from .symbols import collect_anchors, collect_symbols, document_entry


class SymbolTable:
    """
    Indeks symboli do wyszukiwania przez resolver odsyłaczy.

    Użycie:
        table   = SymbolTable.build(trees)
        entries = table.lookup("new")      # posortowana lista wpisów
    """

    def __init__(self) -> None:
        self._by_name: dict[str, set[SymbolEntry]] = {}
        self._by_url: dict[str, SymbolEntry] = {}
        self._anchors: dict[str, dict[str, SymbolEntry]] = {}

    @classmethod
    def build(cls, trees: Iterable[DocumentTree]) -> SymbolTable:
        table = cls()
        for tree in trees:
            table.add_tree(tree)
        return table

    def add_tree(self, tree: DocumentTree) -> None:
        for entry in collect_symbols(tree):
            self._by_name.setdefault(entry.name, set()).add(entry)

        doc = document_entry(tree)
        current = self._by_url.get(doc.url)
        if current is None or doc.sort_key < current.sort_key:
            self._by_url[doc.url] = doc

        self._anchors[tree.source.rel_path] = collect_anchors(tree)

    # ------------------------------------------------------------------
    # Wyszukiwanie
    # ------------------------------------------------------------------

    def lookup(self, name: str) -> list[SymbolEntry]:
        """Wszystkie wpisy o dokładnie tej nazwie, posortowane."""
        return sorted(self._by_name.get(name, ()), key=lambda e: e.sort_key)

    def lookup_url(self, url: str) -> SymbolEntry | None:
        return self._by_url.get(url.rstrip("/"))

    def lookup_anchor(self, source: str, anchor: str) -> SymbolEntry | None:
        return self._anchors.get(source, {}).get(anchor)

    def names(self) -> list[str]:
        return sorted(self._by_name)

    def entries(self) -> list[SymbolEntry]:
        return sorted(
            (e for es in self._by_name.values() for e in es),
            key=lambda e: (e.name, *e.sort_key),
        )

    def to_dict(self) -> dict[str, list[dict[str, str | None]]]:
        """Postać indeksu symboli: nazwa → lista {source, anchor, kind, url}."""
        return {name: [e.to_dict() for e in self.lookup(name)] for name in self.names()}

    def __len__(self) -> int:
        return len(self._by_name)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name
