"""
xref — tablica symboli korpusu i rozwiązywanie odsyłaczy.

Interfejs publiczny:
    SymbolTable      — nazwa → zbiór SymbolEntry (+ adresy i kotwice dokumentów)
    Resolver         — wypełnia Link.resolved, zwraca diagnostyki W_UNRESOLVED_LINK
    collect_symbols  — symbole zadeklarowane w jednym drzewie

Typowe użycie:
    from xref import SymbolTable, Resolver

    table    = SymbolTable.build(trees)      # bariera: po parsowaniu wszystkich plików
    resolver = Resolver(table)
    for tree in trees:
        diagnostics += resolver.resolve(tree)
"""

from .symbols import (
    DECLARATORS,
    ROUTINE_KINDS,
    collect_anchors,
    collect_symbols,
    document_entry,
)
from .table import SymbolTable
from .resolver import Resolver

__all__ = [
    "DECLARATORS",
    "ROUTINE_KINDS",
    "collect_anchors",
    "collect_symbols",
    "document_entry",
    "SymbolTable",
    "Resolver",
]
