"""
pod/directives.py — rozpoznawanie dyrektyw Pod i parsowanie konfiguracji.

Każda linia zaczynająca się (po wcięciu) od "=identyfikator" jest dyrektywą:
  =begin NAZWA [konfiguracja]   — początek bloku ograniczonego
  =end NAZWA                    — koniec bloku ograniczonego
  =for NAZWA [konfiguracja]     — blok akapitowy (do pustej linii)
  =NAZWA [treść]                — blok skrócony

Konfiguracja: :klucz<wartość>, :klucz("x"), :klucz(42), :klucz[1, 2],
:klucz (True), :!klucz (False).
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Literal

from .errors import MalformedMarkup

# ---------------------------------------------------------------------------
# Nazwy bloków
# ---------------------------------------------------------------------------

HEADING_RE = re.compile(r"^head(\d)?$")
ITEM_RE    = re.compile(r"^item(\d)?$")

# Bloki, których treść jest dosłowna (bez dyrektyw i kodów formatujących)
VERBATIM_BLOCKS = frozenset({"code", "comment", "input", "output", "table", "data"})

STANDARD_BLOCKS = frozenset({
    "pod", "para", "code", "comment", "input", "output", "nested",
    "table", "defn", "data", "config", "TITLE", "SUBTITLE",
})

_DIRECTIVE_RE = re.compile(r"^(?P<indent>[ \t]*)=(?P<name>[A-Za-z][\w-]*)(?P<rest>.*)$")
_CONTINUATION_RE = re.compile(r"^[ \t]*=[ \t]+(?P<rest>\S.*)$")

_CONFIG_RE = re.compile(
    r"""
    :(?P<neg>!)?(?P<key>[A-Za-z][\w-]*)
    (?:
        <(?P<angle>[^>]*)>
      | «(?P<guil>[^»]*)»
      | \((?P<paren>[^)]*)\)
      | \[(?P<bracket>[^\]]*)\]
      | \{(?P<brace>[^}]*)\}
    )?
    """,
    re.VERBOSE,
)

_INT_RE   = re.compile(r"^[+-]?\d+$")
_FLOAT_RE = re.compile(r"^[+-]?\d+\.\d+$")


def is_known_block(name: str) -> bool:
    """Czy nazwa jest dozwolonym typem bloku Pod."""
    if name in STANDARD_BLOCKS:
        return True
    if HEADING_RE.match(name) or ITEM_RE.match(name):
        return True
    # Bloki semantyczne (NAME, AUTHOR, SYNOPSIS …) — same wielkie litery
    return name.isupper()


def heading_level(name: str) -> int | None:
    m = HEADING_RE.match(name)
    if not m:
        return None
    return int(m.group(1) or 1)


def item_level(name: str) -> int | None:
    m = ITEM_RE.match(name)
    if not m:
        return None
    return int(m.group(1) or 1)


# ---------------------------------------------------------------------------
# Dyrektywy
# ---------------------------------------------------------------------------

DirectiveKind = Literal["begin", "end", "for", "abbreviated"]


@dataclass(slots=True)
class Directive:
    """
    Sparsowana linia dyrektywy.

    - kind:   "begin" | "end" | "for" | "abbreviated"
    - name:   nazwa bloku, np. "code", "head2"
    - rest:   reszta linii (konfiguracja lub treść bloku skróconego)
    - line:   numer linii (1-based)
    - indent: szerokość wcięcia dyrektywy
    - raw:    oryginalna linia bez końcowych białych znaków
    """
    kind: DirectiveKind
    name: str
    rest: str
    line: int
    indent: int
    raw: str
    config: dict[str, Any] = field(default_factory=dict)


def match_directive(text: str, line: int, strict: bool = True) -> Directive | None:
    """
    Zwraca Directive gdy linia jest dyrektywą, w przeciwnym razie None.
    strict=False: "=begin" bez nazwy bloku nie jest błędem (treść dosłowna).
    """
    m = _DIRECTIVE_RE.match(text)
    if not m:
        return None
    name = m.group("name")
    rest = m.group("rest")
    # "=identyfikator" musi być zakończony białym znakiem lub końcem linii
    if rest and not rest[0].isspace():
        return None
    indent = len(m.group("indent").expandtabs(4))
    raw = text.rstrip()

    if name in ("begin", "end", "for"):
        parts = rest.strip().split(None, 1)
        if not parts:
            if not strict:
                return None
            raise MalformedMarkup(f"dyrektywa ={name} bez nazwy bloku", line, raw)
        block_name = parts[0]
        block_rest = parts[1] if len(parts) > 1 else ""
        return Directive(name, block_name, block_rest, line, indent, raw)  # type: ignore[arg-type]

    return Directive("abbreviated", name, rest.strip(), line, indent, raw)


def match_continuation(text: str) -> str | None:
    """Linia kontynuacji konfiguracji: "=" + biały znak + treść."""
    m = _CONTINUATION_RE.match(text)
    return m.group("rest") if m else None


# ---------------------------------------------------------------------------
# Konfiguracja
# ---------------------------------------------------------------------------

def parse_config(text: str, line: int = 0) -> dict[str, Any]:
    """
    Parsuje konfigurację bloku do słownika.

    Przykład:
        parse_config(':kind("Type") :subkind<class> :!solo')
        → {"kind": "Type", "subkind": "class", "solo": False}
    """
    config: dict[str, Any] = {}
    pos = 0
    text = text.strip()
    while pos < len(text):
        if text[pos].isspace():
            pos += 1
            continue
        m = _CONFIG_RE.match(text, pos)
        if not m:
            raise MalformedMarkup(
                f"nieprawidłowa konfiguracja bloku: {text[pos:]!r}", line, text
            )
        config[m.group("key")] = _config_value(m)
        pos = m.end()
    return config


def _config_value(m: re.Match[str]) -> Any:
    if m.group("neg"):
        return False
    if m.group("angle") is not None:
        return _words(m.group("angle"))
    if m.group("guil") is not None:
        return _words(m.group("guil"))
    if m.group("paren") is not None:
        return _scalar_or_list(m.group("paren"))
    if m.group("bracket") is not None:
        return [_scalar(v) for v in _split_commas(m.group("bracket"))]
    if m.group("brace") is not None:
        return m.group("brace").strip()
    return True


def _words(text: str) -> str | list[str]:
    words = text.split()
    if len(words) == 1:
        return words[0]
    if not words:
        return ""
    return words


def _scalar_or_list(text: str) -> Any:
    values = _split_commas(text)
    if len(values) == 1:
        return _scalar(values[0])
    return [_scalar(v) for v in values]


def _split_commas(text: str) -> list[str]:
    """Dzieli po przecinkach poza cudzysłowami."""
    out: list[str] = []
    buf: list[str] = []
    quote: str | None = None
    for ch in text:
        if quote:
            buf.append(ch)
            if ch == quote:
                quote = None
        elif ch in "\"'":
            quote = ch
            buf.append(ch)
        elif ch == ",":
            out.append("".join(buf).strip())
            buf = []
        else:
            buf.append(ch)
    tail = "".join(buf).strip()
    if tail or out:
        out.append(tail)
    return out


def _scalar(value: str) -> Any:
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        return value[1:-1]
    if _INT_RE.match(value):
        return int(value)
    if _FLOAT_RE.match(value):
        return float(value)
    match value:
        case "True":
            return True
        case "False":
            return False
    return value
