"""
pod/loader.py — wyszukiwanie i wczytywanie plików źródłowych Pod.

Publiczne API:
  iter_sources(root, suffixes)        -> list[Path]  (względne, posortowane)
  load_source(path, root)             -> DocumentSource
  source_from_text(text, rel_path)    -> DocumentSource
  read_metadata(text)                 -> dict  (konfiguracja "=begin pod")
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from data_model.documents import DocumentSource
from .directives import match_continuation, match_directive, parse_config
from .errors import IOFailure

logger = logging.getLogger(__name__)

DEFAULT_SUFFIXES: tuple[str, ...] = (".pod6", ".rakudoc", ".pod")


def iter_sources(
    root: str | Path,
    suffixes: tuple[str, ...] = DEFAULT_SUFFIXES,
) -> list[Path]:
    """
    Zwraca ścieżki plików źródłowych względem root, posortowane.

    Raises:
        IOFailure: root nie istnieje lub nie jest katalogiem.
    """
    root = Path(root)
    if not root.is_dir():
        raise IOFailure(root, "katalog wejściowy nie istnieje")
    found = [
        p.relative_to(root)
        for p in root.rglob("*")
        if p.is_file() and p.suffix.lower() in suffixes
    ]
    return sorted(found, key=lambda p: p.as_posix())


def load_source(path: str | Path, root: str | Path) -> DocumentSource:
    """
    Wczytuje plik (UTF-8) i odczytuje metadane z dyrektywy "=begin pod".

    Args:
        path: ścieżka pliku względem root (lub bezwzględna wewnątrz root)
        root: katalog wejściowy
    """
    root = Path(root)
    full = path if Path(path).is_absolute() else root / path
    full = Path(full)
    try:
        text = full.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise IOFailure(full, f"niepoprawne UTF-8 ({e.reason})") from e
    except OSError as e:
        raise IOFailure(full, e.strerror or str(e)) from e

    # leksykalnie, bez resolve(): dowiązanie może wskazywać poza root
    if Path(path).is_absolute():
        try:
            rel = full.relative_to(root).as_posix()
        except ValueError as e:
            raise IOFailure(full, f"plik spoza katalogu wejściowego {root}") from e
    else:
        rel = Path(path).as_posix()
    logger.debug("wczytano %s (%d znaków)", rel, len(text))
    return source_from_text(text, rel, full.resolve())


def source_from_text(
    text: str,
    rel_path: str = "<string>",
    path: Path | None = None,
) -> DocumentSource:
    """Tworzy DocumentSource z gotowego tekstu (np. w testach)."""
    meta = read_metadata(text)
    return DocumentSource(
        path=path or Path(rel_path),
        rel_path=rel_path,
        text=text,
        kind=_as_str(meta.get("kind")),
        subkind=_as_str(meta.get("subkind")),
        category=_as_str(meta.get("category")),
        config=meta,
    )


def read_metadata(text: str) -> dict[str, Any]:
    """
    Zwraca konfigurację pierwszej dyrektywy pliku, jeśli jest to "=begin pod".
    Brak metadanych nie jest błędem (pusty słownik).
    """
    lines = text.splitlines()
    for i, line in enumerate(lines):
        if not line.strip():
            continue
        d = match_directive(line, i + 1)
        if d is None or d.kind != "begin" or d.name != "pod":
            return {}
        parts = [d.rest]
        for nxt in lines[i + 1:]:
            cont = match_continuation(nxt)
            if cont is None:
                break
            parts.append(cont)
        return parse_config(" ".join(parts), d.line)
    return {}


def _as_str(value: Any) -> str | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, list):
        return " ".join(str(v) for v in value)
    return str(value)
