"""
render/html.py — renderer HTML.

Struktura wyniku:
  <!DOCTYPE html> … <article class="pod"> tytuł, podtytuł, bloki, przypisy

Odsyłacze:
  jeden cel          → <a href="…">
  kilka celów        → pierwszy jako <a>, pozostałe w <sup class="alternatives">
  brak celu          → <span class="unresolved">
  URL zewnętrzny     → <a class="external">
"""

from __future__ import annotations

from html import escape

from data_model.documents import (
    Block,
    CodeBlock,
    DefinitionList,
    DocumentTree,
    Formatted,
    Heading,
    IndexEntry,
    Inline,
    Item,
    Link,
    Node,
    Paragraph,
    Table,
    Text,
)
from .base import describe, group_items, heading_number, href

_TAGS = {
    "B": "strong",
    "I": "em",
    "U": "u",
    "C": "code",
    "K": "kbd",
    "T": "samp",
    "R": "var",
}

# Bloki przezroczyste — renderowane bez własnego elementu
_TRANSPARENT = frozenset({"document", "pod", "para"})


class HtmlRenderer:
    name = "html"
    suffix = ".html"

    def render(self, tree: DocumentTree) -> str:
        return _HtmlWriter(tree, self.suffix).render()


class _HtmlWriter:
    def __init__(self, tree: DocumentTree, suffix: str) -> None:
        self.tree = tree
        self.suffix = suffix
        self.source = tree.source.rel_path
        self.footnotes: list[str] = []
        self.out: list[str] = []

    def render(self) -> str:
        tree = self.tree
        src = tree.source
        title = tree.title or src.stem

        self.out += [
            "<!DOCTYPE html>",
            "<html>",
            "<head>",
            '<meta charset="utf-8">',
            f"<title>{escape(title)}</title>",
        ]
        for key in ("kind", "subkind", "category"):
            value = getattr(src, key)
            if value:
                self.out.append(f'<meta name="pod-{key}" content="{escape(value)}">')
        self.out += ["</head>", "<body>", '<article class="pod">']

        self.out.append(f'<h1 class="title">{escape(title)}</h1>')
        if tree.subtitle:
            self.out.append(f'<p class="subtitle">{escape(tree.subtitle)}</p>')

        self._blocks(tree.root.children)

        if self.footnotes:
            self.out.append('<section class="footnotes">')
            self.out.append("<ol>")
            for i, note in enumerate(self.footnotes, 1):
                self.out.append(
                    f'<li id="fn-{i}">{note} <a href="#fnref-{i}">&#8617;</a></li>'
                )
            self.out.append("</ol>")
            self.out.append("</section>")

        self.out += ["</article>", "</body>", "</html>"]
        return "\n".join(self.out) + "\n"

    # ------------------------------------------------------------------
    # Bloki
    # ------------------------------------------------------------------

    def _blocks(self, nodes: list[Node]) -> None:
        for node in group_items(nodes):
            if isinstance(node, list):
                self._items(node)
            else:
                self._block(node)

    def _block(self, node: Node) -> None:
        match node:
            case Heading():
                n = heading_number(node)
                self.out.append(
                    f'<h{n} id="{escape(node.anchor)}">{self._inline(node.children)}</h{n}>'
                )
            case Paragraph():
                self.out.append(f"<p>{self._inline(node.children)}</p>")
            case CodeBlock():
                lang = f' data-lang="{escape(node.lang)}"' if node.lang else ""
                self.out.append(
                    f'<pre class="{node.role}"{lang}><code>{escape(node.text)}</code></pre>'
                )
            case DefinitionList():
                self.out.append("<dl>")
                for d in node.items:
                    self.out.append(f"<dt>{self._inline(d.term)}</dt>")
                    self.out.append(f"<dd>{self._inline(d.children)}</dd>")
                self.out.append("</dl>")
            case Table():
                self._table(node)
            case Block(name=name) if name in _TRANSPARENT:
                self._blocks(node.children)
            case Block(name="nested"):
                self.out.append("<blockquote>")
                self._blocks(node.children)
                self.out.append("</blockquote>")
            case Block():
                self.out.append(f'<div class="pod-{escape(node.name)}">')
                self._blocks(node.children)
                self.out.append("</div>")

    def _items(self, items: list[Item]) -> None:
        self.out.append("<ul>")
        for item in items:
            self.out.append(
                f'<li class="level-{item.level}">{self._inline(item.children)}</li>'
            )
        self.out.append("</ul>")

    def _table(self, table: Table) -> None:
        self.out.append("<table>")
        if table.caption:
            self.out.append(f"<caption>{escape(table.caption)}</caption>")
        if table.header:
            cells = "".join(f"<th>{self._inline(c)}</th>" for c in table.header)
            self.out.append(f"<thead><tr>{cells}</tr></thead>")
        self.out.append("<tbody>")
        for row in table.rows:
            cells = "".join(f"<td>{self._inline(c)}</td>" for c in row)
            self.out.append(f"<tr>{cells}</tr>")
        self.out.append("</tbody>")
        self.out.append("</table>")

    # ------------------------------------------------------------------
    # Inline
    # ------------------------------------------------------------------

    def _inline(self, nodes: list[Inline]) -> str:
        return "".join(self._inline_node(n) for n in nodes)

    def _inline_node(self, node: Inline) -> str:
        match node:
            case Text(text=text):
                return escape(text)
            case Link():
                return self._link(node)
            case IndexEntry(children=children, entries=entries):
                terms = "; ".join(
                    f"{cat}, {term}" if cat else term for cat, term in entries
                )
                return (
                    f'<span class="index-entry" data-index="{escape(terms)}">'
                    f"{self._inline(children)}</span>"
                )
            case Formatted(code="Z"):
                return ""
            case Formatted(code="N", children=children):
                self.footnotes.append(self._inline(children))
                i = len(self.footnotes)
                return f'<sup><a href="#fn-{i}" id="fnref-{i}">{i}</a></sup>'
            case Formatted(code=code, children=children) if code in _TAGS:
                tag = _TAGS[code]
                return f"<{tag}>{self._inline(children)}</{tag}>"
            case Formatted(children=children):
                return self._inline(children)
        return ""

    def _link(self, link: Link) -> str:
        label = self._inline(link.children) if link.children else escape(link.target)
        if link.external:
            return f'<a class="external" href="{escape(link.target)}">{label}</a>'
        if not link.resolved:
            return f'<span class="unresolved" title="{escape(link.target)}">{label}</span>'

        first, *rest = link.resolved
        html = f'<a href="{escape(href(first, self.source, self.suffix))}">{label}</a>'
        if rest:
            alts = ", ".join(
                f'<a href="{escape(href(e, self.source, self.suffix))}" '
                f'title="{escape(describe(e))}">{i}</a>'
                for i, e in enumerate(rest, 2)
            )
            html += f'<sup class="alternatives">[{alts}]</sup>'
        return html

