"""
data_model — struktury danych potoku dokumentacji Pod.

Użycie:
  from data_model import DocumentSource, DocumentTree, SymbolEntry, Diagnostic

Moduły:
  documents   — DocumentSource, DocumentTree, węzły blokowe i inline
  symbols     — SymbolEntry
  diagnostics — DiagCode, Diagnostic
"""

from .documents import (
    DocumentSource,
    DocumentTree,
    Text,
    Formatted,
    IndexEntry,
    Link,
    Inline,
    Heading,
    Paragraph,
    CodeBlock,
    Definition,
    DefinitionList,
    Item,
    Table,
    Block,
    Node,
    inline_text,
    block_inlines,
    iter_inlines,
)
from .symbols import SymbolEntry
from .diagnostics import DiagCode, Diagnostic

__all__ = [
    # documents
    "DocumentSource",
    "DocumentTree",
    "Text",
    "Formatted",
    "IndexEntry",
    "Link",
    "Inline",
    "Heading",
    "Paragraph",
    "CodeBlock",
    "Definition",
    "DefinitionList",
    "Item",
    "Table",
    "Block",
    "Node",
    "inline_text",
    "block_inlines",
    "iter_inlines",
    # symbols
    "SymbolEntry",
    # diagnostics
    "DiagCode",
    "Diagnostic",
]
