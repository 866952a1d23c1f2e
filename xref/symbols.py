"""
xref/symbols.py — wyszukiwanie udokumentowanych symboli w drzewie dokumentu.

Źródła symboli:
  =TITLE class Map         → SymbolEntry("Map", "class", anchor=None)
  =head2 method new        → SymbolEntry("new", "method", anchor="method_new")
  X<|Syntax,my>            → SymbolEntry("my", "syntax", anchor=bieżąca sekcja)

Publiczne API:
  document_entry(tree)   -> SymbolEntry          (wpis całego dokumentu)
  collect_symbols(tree)  -> list[SymbolEntry]    (symbole nazwane)
  collect_anchors(tree)  -> dict[str, SymbolEntry]  (kotwica → cel)
"""

from __future__ import annotations

from data_model.documents import (
    DocumentTree,
    Heading,
    IndexEntry,
    block_inlines,
    inline_text,
    iter_inlines,
)
from data_model.symbols import SymbolEntry

# Słowa deklarujące typ w =TITLE
DECLARATORS = frozenset({
    "class", "role", "module", "grammar", "enum", "subset", "package", "native",
})

# Rodzaje procedur rozpoznawane w nagłówkach "=headN <rodzaj> <nazwa>"
ROUTINE_KINDS = frozenset({
    "method", "submethod", "routine", "sub", "trait", "term",
    "infix", "prefix", "postfix", "circumfix", "postcircumfix", "listop",
})


def document_entry(tree: DocumentTree) -> SymbolEntry:
    """
    Wpis całego dokumentu. Rodzaj: słowo deklaratora z tytułu,
    w przeciwnym razie :subkind / :kind z metadanych.
    """
    src = tree.source
    fallback_kind = (src.subkind or src.kind or "doc").lower()
    if not tree.title:
        return SymbolEntry(src.stem, fallback_kind, src.rel_path, None, src.url)

    words = tree.title.split(None, 1)
    if len(words) == 2 and words[0].lower() in DECLARATORS:
        return SymbolEntry(words[1].strip(), words[0].lower(), src.rel_path, None, src.url)
    return SymbolEntry(tree.title, fallback_kind, src.rel_path, None, src.url)


def heading_symbol(tree: DocumentTree, heading: Heading) -> SymbolEntry | None:
    """Symbol zadeklarowany nagłówkiem, np. "method new"; None dla zwykłych sekcji."""
    words = inline_text(heading.children).split(None, 1)
    if len(words) != 2 or words[0] not in ROUTINE_KINDS:
        return None
    src = tree.source
    return SymbolEntry(words[1].strip(), words[0], src.rel_path, heading.anchor, src.url)


def collect_symbols(tree: DocumentTree) -> list[SymbolEntry]:
    """Symbole nazwane dokumentu w kolejności wystąpienia (bez duplikatów)."""
    src = tree.source
    found: list[SymbolEntry] = []
    if tree.title:
        found.append(document_entry(tree))

    anchor: str | None = None
    for block in tree.walk():
        if isinstance(block, Heading):
            anchor = block.anchor
            entry = heading_symbol(tree, block)
            if entry is not None:
                found.append(entry)
        for node in iter_inlines(block_inlines(block)):
            if not isinstance(node, IndexEntry):
                continue
            for category, term in node.entries:
                if term:
                    found.append(SymbolEntry(
                        term, (category or "index").lower(), src.rel_path, anchor, src.url,
                    ))

    return list(dict.fromkeys(found))


def collect_anchors(tree: DocumentTree) -> dict[str, SymbolEntry]:
    """
    Każda kotwica nagłówka → cel odsyłacza. Nagłówki niebędące symbolami
    dostają wpis rodzaju "section" (nie trafia do tablicy nazw).
    """
    src = tree.source
    anchors: dict[str, SymbolEntry] = {}
    for block in tree.walk():
        if not isinstance(block, Heading):
            continue
        entry = heading_symbol(tree, block) or SymbolEntry(
            inline_text(block.children).strip(), "section", src.rel_path, block.anchor, src.url,
        )
        anchors[block.anchor] = entry
    return anchors
