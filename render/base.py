"""
render/base.py — wspólne elementy rendererów.

Renderer jest deterministyczny: to samo drzewo zawsze daje identyczny
tekst wyjściowy (brak znaczników czasu, stała kolejność elementów).
"""

from __future__ import annotations

import posixpath
from pathlib import PurePosixPath
from typing import Protocol
from urllib.parse import quote

from data_model.documents import DocumentTree, Heading, Item, Node
from data_model.symbols import SymbolEntry


class Renderer(Protocol):
    name: str
    suffix: str

    def render(self, tree: DocumentTree) -> str: ...


def output_rel_path(rel_path: str, suffix: str) -> str:
    """Ścieżka pliku wynikowego względem katalogu wyjściowego."""
    return PurePosixPath(rel_path).with_suffix(suffix).as_posix()


def href(entry: SymbolEntry, current_source: str, suffix: str) -> str:
    """Względny adres celu odsyłacza z dokumentu `current_source`."""
    fragment = f"#{quote(entry.anchor, safe='_-.~')}" if entry.anchor else ""
    if entry.source == current_source:
        return fragment or "#"
    target = output_rel_path(entry.source, suffix)
    start = posixpath.dirname(output_rel_path(current_source, suffix)) or "."
    return posixpath.relpath(target, start) + fragment


def describe(entry: SymbolEntry) -> str:
    """Krótki opis celu, np. "Type/Map.pod6#method_new"."""
    return entry.source + (f"#{entry.anchor}" if entry.anchor else "")


def group_items(nodes: list[Node]) -> list[Node | list[Item]]:
    """Łączy kolejne węzły Item w listy (do renderowania <ul> / punktorów)."""
    grouped: list[Node | list[Item]] = []
    for node in nodes:
        if isinstance(node, Item):
            if grouped and isinstance(grouped[-1], list):
                grouped[-1].append(node)
            else:
                grouped.append([node])
        else:
            grouped.append(node)
    return grouped


def heading_number(heading: Heading) -> int:
    """Poziom nagłówka HTML: =head1 → h2 (h1 to tytuł dokumentu)."""
    return min(heading.level + 1, 6)
