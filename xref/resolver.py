"""
xref/resolver.py — rozwiązywanie odsyłaczy L<…> względem tablicy symboli.

Kolejność wyszukiwania celu:
  1. URL zewnętrzny (http://…, mailto:…)  → pomijany, bez diagnostyki
  2. "#kotwica"                           → nagłówek w tym samym dokumencie
  3. "/sekcja/nazwa[#kotwica]"            → dokument po adresie (i kotwica w nim),
                                            w przeciwnym razie symbol o nazwie "nazwa"
  4. "nazwa[#kotwica]"                    → symbol o dokładnie tej nazwie

Niejednoznaczne trafienia są zachowywane jako lista (posortowana);
brak trafień daje jedną diagnostykę W_UNRESOLVED_LINK na odsyłacz.
"""

from __future__ import annotations

import logging
from urllib.parse import unquote

from data_model.diagnostics import DiagCode, Diagnostic
from data_model.documents import DocumentTree, Link
from data_model.symbols import SymbolEntry
from .table import SymbolTable

logger = logging.getLogger(__name__)

_DOC_SCHEME = "doc:"


class Resolver:
    """
    Użycie:
        resolver    = Resolver(SymbolTable.build(trees))
        diagnostics = resolver.resolve(tree)   # wypełnia Link.resolved
    """

    def __init__(self, table: SymbolTable) -> None:
        self._table = table

    def resolve(self, tree: DocumentTree) -> list[Diagnostic]:
        diagnostics: list[Diagnostic] = []
        source = tree.source.rel_path
        for link in tree.links():
            if link.external:
                link.resolved = []
                continue
            link.resolved = self.lookup(link.target, source)
            if not link.resolved:
                diagnostics.append(_unresolved(link, source))
        if diagnostics:
            logger.debug("%s: %d nierozwiązanych odsyłaczy", source, len(diagnostics))
        return diagnostics

    def lookup(self, target: str, source: str) -> list[SymbolEntry]:
        """Cele odsyłacza `target` umieszczonego w pliku `source`."""
        if target.startswith(_DOC_SCHEME):
            target = target[len(_DOC_SCHEME):]
        path, _, anchor = target.partition("#")
        path = unquote(path).strip()
        anchor = unquote(anchor).strip()

        if not path:
            return self._anchor_in(source, anchor)

        if path.startswith("/"):
            doc = self._table.lookup_url(path)
            if doc is not None:
                return self._anchor_in(doc.source, anchor) if anchor else [doc]
            path = path.rstrip("/").rsplit("/", 1)[-1]

        entries = self._table.lookup(path)
        if not anchor:
            return entries
        found = {
            e for entry in entries
            if (e := self._table.lookup_anchor(entry.source, anchor)) is not None
        }
        return sorted(found, key=lambda e: e.sort_key)

    def _anchor_in(self, source: str, anchor: str) -> list[SymbolEntry]:
        if not anchor:
            return []
        entry = self._table.lookup_anchor(source, anchor)
        return [entry] if entry is not None else []


def _unresolved(link: Link, source: str) -> Diagnostic:
    return Diagnostic(
        code=DiagCode.UNRESOLVED_LINK,
        source=source,
        line=link.line,
        message=f"Nierozwiązany odsyłacz L<…|{link.target}>.",
        details={"target": link.target},
    )
