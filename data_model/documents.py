"""
data_model/documents.py — model dokumentu Pod (źródło + drzewo węzłów).

DocumentSource odpowiada jednemu plikowi wejściowemu; parser zamienia go na
DocumentTree, którego korzeń (Block "document") przechowuje węzły w kolejności
czytania dokumentu.

Węzły inline:  Text, Formatted, IndexEntry, Link
Węzły blokowe: Heading, Paragraph, CodeBlock, DefinitionList, Item, Table, Block
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterator

from .symbols import SymbolEntry


@dataclass(frozen=True, slots=True)
class DocumentSource:
    path: Path                 # ścieżka bezwzględna
    rel_path: str              # ścieżka względem katalogu wejściowego (POSIX)
    text: str                  # surowa treść pliku
    kind: str | None = None    # np. "Type", "Language"
    subkind: str | None = None  # np. "class", "role"
    category: str | None = None
    config: dict[str, Any] = field(default_factory=dict)

    @property
    def stem(self) -> str:
        return Path(self.rel_path).stem

    @property
    def url(self) -> str:
        """Adres dokumentu w serwisie, np. "/type/Map" dla Type/Map.pod6."""
        parent = Path(self.rel_path).parent
        section = (self.kind or parent.name or "doc").lower()
        return f"/{section}/{self.stem}"


# ---------------------------------------------------------------------------
# Węzły inline
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class Text:
    text: str


@dataclass(slots=True)
class Formatted:
    """Kod formatujący, np. B<…>, C<…>; `code` to litera kodu."""
    code: str
    children: list[Inline] = field(default_factory=list)


@dataclass(slots=True)
class IndexEntry:
    """
    X<tekst|Kategoria,hasło;Kategoria2,hasło2>

    - children: wyświetlany tekst
    - entries:  lista (kategoria, hasło); kategoria pusta gdy brak przecinka
    """
    children: list[Inline]
    entries: list[tuple[str, str]] = field(default_factory=list)


@dataclass(slots=True)
class Link:
    """
    L<etykieta|cel> lub L<cel>.

    resolved jest wypełniane przez resolver odsyłaczy; pusta lista oznacza
    odsyłacz nierozwiązany (chyba że external=True).
    """
    children: list[Inline]
    target: str
    line: int = 0
    resolved: list[SymbolEntry] = field(default_factory=list)
    external: bool = False


type Inline = Text | Formatted | IndexEntry | Link


# ---------------------------------------------------------------------------
# Węzły blokowe
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class Heading:
    level: int
    children: list[Inline]
    anchor: str = ""
    line: int = 0


@dataclass(slots=True)
class Paragraph:
    children: list[Inline]
    line: int = 0


@dataclass(slots=True)
class CodeBlock:
    text: str
    lang: str | None = None
    skip_test: str | None = None   # wartość :skip-test (None = testowany)
    config: dict[str, Any] = field(default_factory=dict)
    line: int = 0
    body_line: int = 0             # linia pierwszego wiersza text (0 = nieznana)
    implicit: bool = False         # True = blok wcięty, bez dyrektywy
    role: str = "code"             # "code" | "input" | "output"


@dataclass(slots=True)
class Definition:
    term: list[Inline]
    children: list[Inline]
    line: int = 0


@dataclass(slots=True)
class DefinitionList:
    items: list[Definition] = field(default_factory=list)
    line: int = 0


@dataclass(slots=True)
class Item:
    level: int
    children: list[Inline]
    line: int = 0


@dataclass(slots=True)
class Table:
    rows: list[list[list[Inline]]]
    header: list[list[Inline]] | None = None
    caption: str | None = None
    line: int = 0


@dataclass(slots=True)
class Block:
    """Ogólny nazwany blok (pod, nested, input, output, SYNOPSIS …)."""
    name: str
    config: dict[str, Any] = field(default_factory=dict)
    children: list[Node] = field(default_factory=list)
    line: int = 0


type Node = Heading | Paragraph | CodeBlock | DefinitionList | Item | Table | Block


def inline_text(nodes: list[Inline]) -> str:
    """Spłaszcza węzły inline do zwykłego tekstu (bez Z<> i N<>)."""
    out: list[str] = []
    for node in nodes:
        match node:
            case Text(text=text):
                out.append(text)
            case Formatted(code="Z") | Formatted(code="N"):
                pass
            case Formatted(children=children) | IndexEntry(children=children):
                out.append(inline_text(children))
            case Link(children=children, target=target):
                out.append(inline_text(children) if children else target)
    return "".join(out)


def block_inlines(block: Node) -> list[Inline]:
    """Węzły inline należące bezpośrednio do bloku (bez bloków zagnieżdżonych)."""
    match block:
        case Heading(children=children) | Paragraph(children=children) | Item(children=children):
            return list(children)
        case DefinitionList(items=items):
            return [n for d in items for n in (*d.term, *d.children)]
        case Table(rows=rows, header=header):
            return [n for row in ([header] if header else []) + rows for cell in row for n in cell]
    return []


def iter_inlines(nodes: list[Inline]) -> Iterator[Inline]:
    """Przechodzi węzły inline w głąb, w kolejności czytania."""
    for node in nodes:
        yield node
        if isinstance(node, (Formatted, IndexEntry, Link)):
            yield from iter_inlines(node.children)


# ---------------------------------------------------------------------------
# Drzewo dokumentu
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class DocumentTree:
    source: DocumentSource
    root: Block
    title: str | None = None
    subtitle: str | None = None
    headings: dict[int, list[Heading]] = field(default_factory=dict)
    # (linia, anchor) zduplikowanych kotwic, przemianowanych z sufiksem
    duplicate_anchors: list[tuple[int, str]] = field(default_factory=list)

    def walk(self) -> Iterator[Node]:
        """Przechodzi bloki w głąb, w kolejności czytania."""
        def _walk(nodes: list[Node]) -> Iterator[Node]:
            for node in nodes:
                yield node
                if isinstance(node, Block):
                    yield from _walk(node.children)
        return _walk(self.root.children)

    def inlines(self) -> Iterator[Inline]:
        """Wszystkie węzły inline (również zagnieżdżone) w kolejności czytania."""
        for block in self.walk():
            yield from iter_inlines(block_inlines(block))

    def links(self) -> list[Link]:
        return [n for n in self.inlines() if isinstance(n, Link)]

    def code_blocks(self) -> list[CodeBlock]:
        return [n for n in self.walk() if isinstance(n, CodeBlock)]
