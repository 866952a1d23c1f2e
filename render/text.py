"""
render/text.py — renderer zwykłego tekstu (szerokość 78 kolumn).

  Tytuł             podkreślony "="
  =head1            podkreślony "-"
  =head2+           poprzedzony "#" × poziom
  kod               wcięty o 4 spacje
  odsyłacze         etykieta [cel] (cele rozwiązane: plik#kotwica)
"""

from __future__ import annotations

import textwrap

from data_model.documents import (
    Block,
    CodeBlock,
    DefinitionList,
    DocumentTree,
    Formatted,
    IndexEntry,
    Inline,
    Link,
    Node,
    Paragraph,
    Heading,
    Table,
    Text,
)
from .base import describe, group_items

WIDTH = 78


class TextRenderer:
    name = "text"
    suffix = ".txt"

    def render(self, tree: DocumentTree) -> str:
        title = tree.title or tree.source.stem
        out: list[str] = [title, "=" * len(title)]
        if tree.subtitle:
            out += ["", _fill(tree.subtitle)]
        footnotes: list[str] = []
        _blocks(tree.root.children, out, footnotes)
        if footnotes:
            out += ["", "-" * 10]
            for i, note in enumerate(footnotes, 1):
                out.append(_fill(note, initial=f"[{i}] ", indent="    "))
        return "\n".join(out).rstrip() + "\n"


def _blocks(nodes: list[Node], out: list[str], notes: list[str]) -> None:
    for node in group_items(nodes):
        if isinstance(node, list):
            out.append("")
            for item in node:
                pad = "  " * item.level
                out.append(_fill(_inline(item.children, notes), initial=f"{pad}* ", indent=pad + "  "))
            continue
        _block(node, out, notes)


def _block(node: Node, out: list[str], notes: list[str]) -> None:
    match node:
        case Heading(level=level, children=children):
            text = _inline(children, notes)
            out.append("")
            if level == 1:
                out += [text, "-" * len(text)]
            else:
                out.append(f"{'#' * level} {text}")
        case Paragraph(children=children):
            out += ["", _fill(_inline(children, notes))]
        case CodeBlock(text=text):
            out.append("")
            out += [("    " + l).rstrip() for l in text.splitlines()]
        case DefinitionList(items=items):
            for d in items:
                out += ["", _inline(d.term, notes)]
                if d.children:
                    out.append(_fill(_inline(d.children, notes), initial="    ", indent="    "))
        case Table():
            out.append("")
            if node.caption:
                out.append(node.caption)
            rows = ([node.header] if node.header else []) + node.rows
            for n, row in enumerate(rows):
                out.append(" | ".join(_inline(c, notes) for c in row))
                if n == 0 and node.header:
                    out.append("-" * len(out[-1]))
        case Block(name="nested", children=children):
            inner: list[str] = []
            _blocks(children, inner, notes)
            out += [("    " + l).rstrip() for l in inner]
        case Block(children=children):
            _blocks(children, out, notes)


def _inline(nodes: list[Inline], notes: list[str]) -> str:
    parts: list[str] = []
    for node in nodes:
        match node:
            case Text(text=text):
                parts.append(text)
            case Link():
                parts.append(_link(node, notes))
            case IndexEntry(children=children):
                parts.append(_inline(children, notes))
            case Formatted(code="Z"):
                pass
            case Formatted(code="N", children=children):
                notes.append(_inline(children, notes))
                parts.append(f"[{len(notes)}]")
            case Formatted(code="C", children=children):
                parts.append(f"`{_inline(children, notes)}`")
            case Formatted(code="B", children=children):
                parts.append(f"*{_inline(children, notes)}*")
            case Formatted(children=children):
                parts.append(_inline(children, notes))
    return "".join(parts)


def _link(link: Link, notes: list[str]) -> str:
    label = _inline(link.children, notes) if link.children else link.target
    if link.external:
        return f"{label} <{link.target}>"
    if not link.resolved:
        return label
    targets = ", ".join(describe(e) for e in link.resolved)
    return f"{label} [{targets}]"


def _fill(text: str, initial: str = "", indent: str = "") -> str:
    return textwrap.fill(
        text,
        width=WIDTH,
        initial_indent=initial,
        subsequent_indent=indent,
        break_on_hyphens=False,
        break_long_words=False,
    )
