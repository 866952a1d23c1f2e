"""
render/man.py — renderer stron man (roff, makra -man).

  .TH   nagłówek strony (tytuł, sekcja "3pod", kategoria)
  .SH   =head1 (oraz NAME z tytułem i podtytułem)
  .SS   =head2 i głębsze
  .PP   akapit
  .nf   blok kodu (.RS/.RE dla wcięcia)
  .IP   punktor listy
  .TP   definicja
"""

from __future__ import annotations

from data_model.documents import (
    Block,
    CodeBlock,
    DefinitionList,
    DocumentTree,
    Formatted,
    Heading,
    IndexEntry,
    Inline,
    Link,
    Node,
    Paragraph,
    Table,
    Text,
)
from .base import describe, group_items

SECTION = "3pod"

_FONTS = {"B": "B", "C": "B", "I": "I", "U": "I", "R": "I"}


class ManRenderer:
    name = "man"
    suffix = ".3pod"

    def render(self, tree: DocumentTree) -> str:
        src = tree.source
        title = tree.title or src.stem
        out: list[str] = [
            f'.TH "{_quote(title.upper())}" "{SECTION}" "" "" "{_quote(src.kind or "")}"',
            ".SH NAME",
            _escape(title) + (f" \\- {_escape(tree.subtitle)}" if tree.subtitle else ""),
        ]
        _blocks(tree.root.children, out)
        return "\n".join(out) + "\n"


def _blocks(nodes: list[Node], out: list[str]) -> None:
    for node in group_items(nodes):
        if isinstance(node, list):
            for item in node:
                out.append(f".IP \\(bu {2 * item.level}")
                out.append(_line(_inline(item.children)))
            continue
        _block(node, out)


def _block(node: Node, out: list[str]) -> None:
    match node:
        case Heading(level=1, children=children):
            out.append(f'.SH "{_quote(_inline(children, upper=True))}"')
        case Heading(children=children):
            out.append(f'.SS "{_quote(_inline(children))}"')
        case Paragraph(children=children):
            out += [".PP", _line(_inline(children))]
        case CodeBlock(text=text):
            out += [".PP", ".RS 4", ".nf"]
            out += [_line(_escape(l)) for l in text.splitlines()]
            out += [".fi", ".RE"]
        case DefinitionList(items=items):
            for d in items:
                out += [".TP", _line(_inline(d.term)), _line(_inline(d.children))]
        case Table():
            out += [".PP", ".nf"]
            rows = ([node.header] if node.header else []) + node.rows
            for row in rows:
                out.append(_line("\t".join(_inline(c) for c in row)))
            out.append(".fi")
        case Block(name="nested", children=children):
            out.append(".RS 4")
            _blocks(children, out)
            out.append(".RE")
        case Block(children=children):
            _blocks(children, out)


def _inline(nodes: list[Inline], upper: bool = False) -> str:
    """upper: wielkie litery w treści, przed escapowaniem (nagłówki .SH)."""
    parts: list[str] = []
    for node in nodes:
        match node:
            case Text(text=text):
                parts.append(_escape(text.upper() if upper else text))
            case Link(children=children, target=target):
                label = _inline(children, upper) if children else _escape(target)
                if node.resolved:
                    label += f" ({_escape(describe(node.resolved[0]))})"
                elif node.external:
                    label += f" <{_escape(target)}>"
                parts.append(label)
            case IndexEntry(children=children):
                parts.append(_inline(children, upper))
            case Formatted(code="Z") | Formatted(code="N"):
                pass
            case Formatted(code=code, children=children) if code in _FONTS:
                parts.append(f"\\f{_FONTS[code]}{_inline(children, upper)}\\fP")
            case Formatted(children=children):
                parts.append(_inline(children, upper))
    return "".join(parts)


def _escape(text: str) -> str:
    return text.replace("\\", "\\e").replace("-", "\\-")


def _quote(text: str) -> str:
    return text.replace('"', "'")


def _line(text: str) -> str:
    """Linia tekstu nie może zaczynać się od kropki ani apostrofu."""
    if text.startswith((".", "'")):
        return "\\&" + text
    return text
