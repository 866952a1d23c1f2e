"""
render/writer.py — zapis wyników renderowania na dysk.

Publiczne API:
  write_document(tree, out_root, renderer)  -> Path
  write_symbol_index(table, out_root)       -> Path   (symbols.json)
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from data_model.documents import DocumentTree
from pod.errors import IOFailure
from xref.table import SymbolTable
from .base import Renderer, output_rel_path

logger = logging.getLogger(__name__)

SYMBOL_INDEX = "symbols.json"


def write_document(tree: DocumentTree, out_root: str | Path, renderer: Renderer) -> Path:
    """
    Renderuje drzewo i zapisuje wynik pod out_root/<rel_path z nowym sufiksem>.

    Raises:
        IOFailure: nie można utworzyć katalogu lub zapisać pliku.
    """
    target = Path(out_root) / output_rel_path(tree.source.rel_path, renderer.suffix)
    content = renderer.render(tree)
    _write(target, content)
    logger.debug("zapisano %s", target)
    return target


def write_symbol_index(table: SymbolTable, out_root: str | Path) -> Path:
    """Zapisuje indeks symboli: {nazwa: [{source, anchor, kind, url}, …]}."""
    target = Path(out_root) / SYMBOL_INDEX
    content = json.dumps(table.to_dict(), ensure_ascii=False, indent=2, sort_keys=True)
    _write(target, content + "\n")
    return target


def _write(target: Path, content: str) -> None:
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        # newline="" — identyczne bajty niezależnie od platformy
        with target.open("w", encoding="utf-8", newline="") as fh:
            fh.write(content)
    except OSError as e:
        raise IOFailure(target, e.strerror or str(e)) from e
