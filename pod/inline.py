"""
pod/inline.py — parsowanie kodów formatujących Pod wewnątrz akapitów.

Kod formatujący to wielka litera ze zbioru CODES i ogranicznik:
  B<…>   B<<…>>   B«…»
Kody się zagnieżdżają; treść C<>, V<> i E<> jest dosłowna.

Publiczne API:
  parse_inline(text, line) -> list[Inline]
"""

from __future__ import annotations

import html.entities
import re

from data_model.documents import Formatted, IndexEntry, Inline, Link, Text, inline_text
from .errors import MalformedMarkup

CODES = frozenset("BCEIKLNPRTUVXZ")
VERBATIM_CODES = frozenset("CVE")

_CLOSE = {"<": ">", "«": "»"}

_WS_RE = re.compile(r"\s+")
_EXTERNAL_RE = re.compile(r"^(?:[a-z][a-z0-9+.-]*://|mailto:|irc:)", re.IGNORECASE)


def parse_inline(text: str, line: int = 0) -> list[Inline]:
    """
    Zamienia tekst akapitu na listę węzłów inline.

    Args:
        text: treść akapitu (linie połączone "\\n")
        line: numer pierwszej linii akapitu (do komunikatów błędów)
    """
    return _Parser(text, line).parse(0, len(text))


def is_external(target: str) -> bool:
    """Cel odsyłacza wskazuje poza korpus (URL ze schematem lub mailto:)."""
    return bool(_EXTERNAL_RE.match(target))


def decode_entity(raw: str) -> str:
    """
    Dekoduje treść E<…>: nazwy encji, liczby dziesiętne i 0x….
    Nieznane nazwy i liczby spoza zakresu Unicode zostają dosłownie.
    """
    out: list[str] = []
    for part in raw.split(";"):
        part = part.strip()
        if not part:
            continue
        if part in html.entities.name2codepoint:
            out.append(chr(html.entities.name2codepoint[part]))
            continue
        try:
            if part.isdigit():
                out.append(chr(int(part)))
            elif part.lower().startswith("0x"):
                out.append(chr(int(part, 16)))
            else:
                out.append(part)
        except (ValueError, OverflowError):
            out.append(part)
    return "".join(out)


class _Parser:
    __slots__ = ("text", "line")

    def __init__(self, text: str, line: int) -> None:
        self.text = text
        self.line = line

    def _line_at(self, pos: int) -> int:
        return self.line + self.text.count("\n", 0, pos)

    def parse(self, start: int, end: int) -> list[Inline]:
        nodes: list[Inline] = []
        buf: list[str] = []
        text = self.text
        i = start

        def flush() -> None:
            if buf:
                nodes.append(Text(_WS_RE.sub(" ", "".join(buf))))
                buf.clear()

        while i < end:
            ch = text[i]
            if (
                ch in CODES
                and i + 1 < end
                and text[i + 1] in _CLOSE
                and (i == start or not text[i - 1].isalnum())
            ):
                body_start, body_end, after = self._find_close(i + 1, end)
                flush()
                nodes.append(self._make_node(ch, i, body_start, body_end))
                i = after
                continue
            buf.append(ch)
            i += 1

        flush()
        return nodes

    def _find_close(self, pos: int, end: int) -> tuple[int, int, int]:
        """
        Szuka ogranicznika zamykającego dla ogranicznika zaczynającego się w pos.
        Zwraca (początek treści, koniec treści, pozycja za ogranicznikiem).
        """
        text = self.text
        opener = text[pos]
        closer = _CLOSE[opener]
        width = 1
        if opener == "<":
            while pos + width < end and text[pos + width] == "<":
                width += 1
        open_tok = opener * width
        close_tok = closer * width

        body_start = pos + width
        depth = 1
        i = body_start
        while i < end:
            if text.startswith(close_tok, i):
                depth -= 1
                if depth == 0:
                    return body_start, i, i + width
                i += width
            elif text.startswith(open_tok, i):
                depth += 1
                i += width
            else:
                i += 1

        code = text[pos - 1]
        raise MalformedMarkup(
            f"niezamknięty kod formatujący {code}{open_tok}",
            self._line_at(pos),
            f"{code}{open_tok}",
        )

    def _make_node(self, code: str, pos: int, start: int, end: int) -> Inline:
        body = self.text[start:end]
        # Ograniczniki << >> dopuszczają spacje wokół treści
        if self.text[pos + 1:pos + 3] == "<<":
            while start < end and self.text[start].isspace():
                start += 1
            while end > start and self.text[end - 1].isspace():
                end -= 1
            body = self.text[start:end]

        match code:
            case "E":
                return Text(decode_entity(body))
            case "C" | "V":
                return Formatted(code, [Text(_WS_RE.sub(" ", body))])
            case "L":
                return self._make_link(pos, start, end)
            case "X":
                return self._make_index(start, end)
            case _:
                return Formatted(code, self.parse(start, end))

    def _make_link(self, pos: int, start: int, end: int) -> Link:
        bar = self._split_top(start, end, "|")
        if bar is None:
            children = self.parse(start, end)
            target = inline_text(children).strip()
        else:
            children = self.parse(start, bar)
            target = _WS_RE.sub("", self.text[bar + 1:end])
        return Link(
            children=children,
            target=target,
            line=self._line_at(pos),
            external=is_external(target),
        )

    def _make_index(self, start: int, end: int) -> IndexEntry:
        bar = self._split_top(start, end, "|")
        if bar is None:
            children = self.parse(start, end)
            terms = inline_text(children).strip()
            return IndexEntry(children, [("", terms)] if terms else [])

        children = self.parse(start, bar)
        entries: list[tuple[str, str]] = []
        for entry in self.text[bar + 1:end].split(";"):
            entry = _WS_RE.sub(" ", entry).strip()
            if not entry:
                continue
            category, sep, term = entry.partition(",")
            if sep:
                entries.append((category.strip(), term.strip()))
            else:
                entries.append(("", category.strip()))
        return IndexEntry(children, entries)

    def _split_top(self, start: int, end: int, sep: str) -> int | None:
        """Pozycja pierwszego separatora poza zagnieżdżonymi kodami."""
        depth = 0
        for i in range(start, end):
            ch = self.text[i]
            if ch in _CLOSE:
                depth += 1
            elif ch in (">", "»"):
                depth = max(0, depth - 1)
            elif ch == sep and depth == 0:
                return i
        return None
