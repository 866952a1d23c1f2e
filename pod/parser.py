"""
pod/parser.py — parsowanie źródła Pod do DocumentTree.

Architektura:
  tekst → linie → dyrektywy (=begin/=end/=for/=NAZWA) + akapity
  → stos otwartych bloków (=begin … =end muszą się równoważyć)
  → węzły blokowe; akapity przechodzą przez pod.inline.parse_inline
  → indeks nagłówków i kotwic → DocumentTree

Zasady:
  - pusta linia (same białe znaki) rozdziela akapity,
  - akapit, którego pierwsza linia jest wcięta względem bloku, to blok kodu,
  - treść bloków code/comment/input/output/table jest dosłowna.

Publiczne API:
  parse_source(source) -> DocumentTree
  parse_text(text, rel_path) -> DocumentTree
"""

from __future__ import annotations

import re
import textwrap
import unicodedata
from dataclasses import dataclass, field

from data_model.documents import (
    Block,
    CodeBlock,
    Definition,
    DefinitionList,
    DocumentSource,
    DocumentTree,
    Heading,
    Inline,
    Item,
    Node,
    Paragraph,
    Table,
    Text,
    inline_text,
)
from .directives import (
    VERBATIM_BLOCKS,
    Directive,
    heading_level,
    is_known_block,
    item_level,
    match_continuation,
    match_directive,
    parse_config,
)
from .errors import MalformedMarkup
from .inline import parse_inline
from .loader import source_from_text

_TABLE_SEPARATOR_RE = re.compile(r"^[\s|+]*[-=_][-=_\s|+]*$")
_TABLE_COLUMN_RE    = re.compile(r"\s{2,}")


# ---------------------------------------------------------------------------
# Publiczne API
# ---------------------------------------------------------------------------

def parse_source(source: DocumentSource) -> DocumentTree:
    """
    Parsuje DocumentSource i zwraca DocumentTree.

    Raises:
        MalformedMarkup: niezbalansowane lub nieznane dyrektywy,
                         niezamknięte kody formatujące.
    """
    return _Parser(source).parse()


def parse_text(text: str, rel_path: str = "<string>") -> DocumentTree:
    """Skrót: parsowanie tekstu bez pliku na dysku."""
    return parse_source(source_from_text(text, rel_path))


# ---------------------------------------------------------------------------
# Wewnętrzna implementacja
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class _Frame:
    """Otwarty blok ograniczony (=begin … =end)."""
    block: Block
    directive: Directive
    indent: int
    para: list[str] = field(default_factory=list)
    para_line: int = 0


class _Parser:
    def __init__(self, source: DocumentSource) -> None:
        self.source = source
        self.lines = source.text.splitlines()
        self.title: str | None = None
        self.subtitle: str | None = None
        root = Block("document", config=dict(source.config), line=0)
        self.stack: list[_Frame] = [
            _Frame(root, Directive("begin", "document", "", 0, 0, ""), indent=0)
        ]

    # ------------------------------------------------------------------
    # Pętla główna
    # ------------------------------------------------------------------

    def parse(self) -> DocumentTree:
        i = 0
        n = len(self.lines)
        while i < n:
            line = self.lines[i]
            lineno = i + 1

            if not line.strip():
                self._flush_paragraph()
                i += 1
                continue

            d = match_directive(line, lineno)
            if d is None:
                self._add_text_line(line, lineno)
                i += 1
                continue

            self._flush_paragraph()
            match d.kind:
                case "begin":
                    i = self._on_begin(d, i)
                case "end":
                    self._on_end(d)
                    i += 1
                case "for":
                    i = self._on_for(d, i)
                case _:
                    i = self._on_abbreviated(d, i)

        self._flush_paragraph()
        if len(self.stack) > 1:
            frame = self.stack[-1]
            raise MalformedMarkup(
                f"blok ={frame.directive.kind} {frame.directive.name} nie został zamknięty",
                frame.directive.line,
                frame.directive.raw,
            )

        return self._build_tree(self.stack[0].block)

    # ------------------------------------------------------------------
    # Akapity
    # ------------------------------------------------------------------

    @property
    def _frame(self) -> _Frame:
        return self.stack[-1]

    def _append(self, node: Node) -> None:
        self._frame.block.children.append(node)

    def _add_text_line(self, line: str, lineno: int) -> None:
        frame = self._frame
        if not frame.para:
            frame.para_line = lineno
        frame.para.append(line)

    def _flush_paragraph(self) -> None:
        frame = self._frame
        if not frame.para:
            return
        lines, line = frame.para, frame.para_line
        frame.para = []

        first = lines[0]
        indent = len(first) - len(first.lstrip())
        if indent > frame.indent:
            self._append(CodeBlock(
                text=textwrap.dedent("\n".join(lines)).rstrip(),
                line=line,
                body_line=line,
                implicit=True,
            ))
            return
        self._append(Paragraph(self._inline(lines, line), line=line))

    def _inline(self, lines: list[str], line: int) -> list[Inline]:
        text = "\n".join(l.strip() for l in lines).strip()
        return parse_inline(text, line)

    def _read_config(self, d: Directive, i: int) -> tuple[dict, int]:
        """Czyta konfigurację z linii dyrektywy i linii kontynuacji ("= …")."""
        parts = [d.rest]
        j = i + 1
        while j < len(self.lines):
            cont = match_continuation(self.lines[j])
            if cont is None:
                break
            parts.append(cont)
            j += 1
        return parse_config(" ".join(parts), d.line), j

    def _read_paragraph_body(self, start: int) -> tuple[list[str], int]:
        """Linie od start do pustej linii lub kolejnej dyrektywy."""
        body: list[str] = []
        j = start
        while j < len(self.lines):
            line = self.lines[j]
            if not line.strip() or match_directive(line, j + 1) is not None:
                break
            body.append(line)
            j += 1
        return body, j

    # ------------------------------------------------------------------
    # =begin / =end
    # ------------------------------------------------------------------

    def _on_begin(self, d: Directive, i: int) -> int:
        self._check_known(d)
        config, j = self._read_config(d, i)
        d.config = config

        if d.name in VERBATIM_BLOCKS:
            body_line = j + 1
            body, j = self._read_verbatim(d, j)
            self._add_verbatim(d.name, config, body, d.line, body_line)
            return j

        block = Block(d.name, config=config, line=d.line)
        self.stack.append(_Frame(block, d, indent=d.indent))
        return j

    def _read_verbatim(self, d: Directive, start: int) -> tuple[list[str], int]:
        """Czyta treść dosłowną do pasującego "=end NAZWA"."""
        j = start
        while j < len(self.lines):
            end = match_directive(self.lines[j], j + 1, strict=False)
            if end is not None and end.kind == "end" and end.name == d.name:
                return self.lines[start:j], j + 1
            j += 1
        raise MalformedMarkup(
            f"blok =begin {d.name} nie został zamknięty", d.line, d.raw
        )

    def _on_end(self, d: Directive) -> None:
        if self._frame.directive.name == d.name and len(self.stack) > 1:
            frame = self.stack.pop()
            node = self._finish_block(frame.block, frame.directive)
            if node is not None:
                self._append(node)
            return

        # =end nie pasuje do bieżącego bloku: jeśli pasuje do głębszego,
        # niezamknięty jest blok z wierzchołka stosu, w przeciwnym razie
        # niepasujące jest samo =end.
        if any(f.directive.name == d.name for f in self.stack[1:]):
            open_d = self._frame.directive
            raise MalformedMarkup(
                f"blok =begin {open_d.name} nie został zamknięty przed =end {d.name}",
                open_d.line,
                open_d.raw,
            )
        raise MalformedMarkup(
            f"=end {d.name} bez odpowiadającego =begin {d.name}", d.line, d.raw
        )

    def _finish_block(self, block: Block, d: Directive) -> Node | None:
        """Zamienia zamknięty blok ograniczony na węzeł docelowy."""
        inlines = _merge_paragraphs(block.children)
        if (level := heading_level(block.name)) is not None:
            return Heading(level, inlines, line=d.line)
        if (level := item_level(block.name)) is not None:
            return Item(level, inlines, line=d.line)
        match block.name:
            case "TITLE":
                self.title = inline_text(inlines).strip()
                return None
            case "SUBTITLE":
                self.subtitle = inline_text(inlines).strip()
                return None
            case "defn":
                paras = [c for c in block.children if isinstance(c, Paragraph)]
                term = paras[0].children if paras else []
                rest = _merge_paragraphs(paras[1:])
                self._add_definition(Definition(term, rest, line=d.line))
                return None
        return block

    # ------------------------------------------------------------------
    # =for / =NAZWA
    # ------------------------------------------------------------------

    def _on_for(self, d: Directive, i: int) -> int:
        self._check_known(d)
        config, j = self._read_config(d, i)
        body_line = j + 1
        body, j = self._read_paragraph_body(j)
        self._add_block(d.name, config, body, d.line, d.indent, body_line)
        return j

    def _on_abbreviated(self, d: Directive, i: int) -> int:
        self._check_known(d)
        body, j = self._read_paragraph_body(i + 1)
        body_line = i + 2
        if d.rest:
            body.insert(0, " " * (d.indent + 1) + d.rest)
            body_line = d.line
        self._add_block(d.name, {}, body, d.line, d.indent, body_line)
        return j

    def _check_known(self, d: Directive) -> None:
        if not is_known_block(d.name):
            raise MalformedMarkup(f"nieznana dyrektywa ={d.name}", d.line, d.raw)

    def _add_block(
        self,
        name: str,
        config: dict,
        body: list[str],
        line: int,
        indent: int,
        body_line: int = 0,
    ) -> None:
        if name in VERBATIM_BLOCKS:
            self._add_verbatim(name, config, body, line, body_line)
            return
        if name == "config":
            return

        if (level := heading_level(name)) is not None:
            self._append(Heading(level, self._inline(body, line), line=line))
            return
        if (level := item_level(name)) is not None:
            self._append(Item(level, self._inline(body, line), line=line))
            return

        match name:
            case "TITLE":
                self.title = inline_text(self._inline(body, line)).strip()
            case "SUBTITLE":
                self.subtitle = inline_text(self._inline(body, line)).strip()
            case "defn":
                term = body[:1]
                rest = body[1:]
                self._add_definition(Definition(
                    term=self._inline(term, line),
                    children=self._inline(rest, line + 1) if rest else [],
                    line=line,
                ))
            case _:
                para = Paragraph(self._inline(body, line), line=line) if body else None
                self._append(Block(
                    name,
                    config=config,
                    children=[para] if para else [],
                    line=line,
                ))

    def _add_definition(self, definition: Definition) -> None:
        children = self._frame.block.children
        if children and isinstance(children[-1], DefinitionList):
            children[-1].items.append(definition)
        else:
            children.append(DefinitionList([definition], line=definition.line))

    def _add_verbatim(
        self,
        name: str,
        config: dict,
        body: list[str],
        line: int,
        body_line: int = 0,
    ) -> None:
        match name:
            case "comment" | "data":
                return
            case "table":
                self._append(_parse_table(body, config, line))
            case "code" | "input" | "output":
                leading = next((k for k, l in enumerate(body) if l.strip()), 0)
                text = textwrap.dedent("\n".join(body)).strip("\n").rstrip()
                skip = config.get("skip-test")
                self._append(CodeBlock(
                    text=text,
                    lang=_config_str(config.get("lang")),
                    skip_test=None if skip is None or skip is False else (_config_str(skip) or ""),
                    config=config,
                    line=line,
                    body_line=body_line + leading if body_line else 0,
                    role=name,
                ))

    # ------------------------------------------------------------------
    # Drzewo wynikowe
    # ------------------------------------------------------------------

    def _build_tree(self, root: Block) -> DocumentTree:
        tree = DocumentTree(
            source=self.source,
            root=root,
            title=self.title,
            subtitle=self.subtitle,
        )
        used: set[str] = set()
        counts: dict[str, int] = {}
        for node in tree.walk():
            if not isinstance(node, Heading):
                continue
            base = make_anchor(inline_text(node.children))
            anchor = base
            if base in used:
                # sufiks nie może trafić w kotwicę innego nagłówka ("A 2" → A_2)
                n = counts.get(base, 1) + 1
                while f"{base}_{n}" in used:
                    n += 1
                counts[base] = n
                anchor = f"{base}_{n}"
                tree.duplicate_anchors.append((node.line, base))
            used.add(anchor)
            node.anchor = anchor
            tree.headings.setdefault(node.level, []).append(node)
        return tree


# ---------------------------------------------------------------------------
# Funkcje pomocnicze
# ---------------------------------------------------------------------------

def make_anchor(text: str) -> str:
    """Tekst nagłówka → kotwica, np. "method new" → "method_new"."""
    text = unicodedata.normalize("NFKC", text).strip()
    text = re.sub(r"\s+", "_", text)
    return text or "section"


def _merge_paragraphs(nodes: list[Node]) -> list[Inline]:
    """Łączy treść akapitów w jedną listę inline (rozdzieloną spacjami)."""
    merged: list[Inline] = []
    for node in nodes:
        if not isinstance(node, Paragraph):
            continue
        if merged:
            merged.append(Text(" "))
        merged.extend(node.children)
    return merged


def _config_str(value: object) -> str | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, list):
        return " ".join(str(v) for v in value)
    return str(value)


def _parse_table(body: list[str], config: dict, line: int) -> Table:
    """
    Tabela: wiersze oddzielone liniami, kolumny znakiem "|" lub 2+ spacjami.
    Wiersz separatora (=, -, +) po pierwszych wierszach oznacza nagłówek.
    """
    rows: list[list[list[Inline]]] = []
    header: list[list[Inline]] | None = None
    for offset, raw in enumerate(body):
        if not raw.strip():
            continue
        if _TABLE_SEPARATOR_RE.match(raw):
            if header is None and len(rows) == 1:
                header = rows.pop()
            continue
        cells = _split_row(raw)
        rows.append([parse_inline(c, line + 1 + offset) for c in cells])
    return Table(rows=rows, header=header, caption=_config_str(config.get("caption")), line=line)


def _split_row(raw: str) -> list[str]:
    text = raw.strip()
    if "|" in text:
        cells = [c.strip() for c in text.strip("|").split("|")]
    else:
        cells = [c.strip() for c in _TABLE_COLUMN_RE.split(text)]
    return cells
