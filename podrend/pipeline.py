"""
podrend/pipeline.py — wsadowy potok: wczytanie → parsowanie → walidacja
przykładów → tablica symboli → odsyłacze → renderowanie → indeks symboli.

Każdy plik jest parsowany niezależnie (opcjonalnie równolegle, jobs > 1).
Tablica symboli powstaje raz, po sparsowaniu wszystkich plików (bariera).
Błędy MalformedMarkup / IOFailure są fatalne tylko dla swojego pliku:
plik jest pomijany, błąd trafia do diagnostyk, potok idzie dalej.

Publiczne API:
  build(input_dir, output_dir, fmt, jobs, check_examples, on_file) -> BuildResult
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path

from data_model.diagnostics import DiagCode, Diagnostic
from data_model.documents import DocumentTree
from pod import IOFailure, MalformedMarkup, iter_sources, load_source, parse_source
from render import SYMBOL_INDEX, get_renderer, output_rel_path, write_document, write_symbol_index
from validator import ExampleValidator, ValidationReport
from xref import Resolver, SymbolTable

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class BuildResult:
    """
    Wynik przebiegu potoku.

    - trees:       sparsowane drzewa (kolejność ścieżek)
    - table:       tablica symboli korpusu
    - rendered:    ścieżki względne zapisanych plików (pusta w trybie check)
    - failed:      ścieżki względne plików pominiętych przez błąd fatalny
    - diagnostics: wszystkie diagnostyki, posortowane (plik, linia, kod)
    - examples:    zbiorczy raport walidacji przykładów
    """

    trees: list[DocumentTree] = field(default_factory=list)
    table: SymbolTable = field(default_factory=SymbolTable)
    rendered: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)
    examples: ValidationReport = field(default_factory=ValidationReport)

    @property
    def fatal(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.fatal]

    @property
    def unresolved(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.code is DiagCode.UNRESOLVED_LINK]

    def exit_code(self, strict: bool = False) -> int:
        """1 gdy wystąpił błąd fatalny lub (strict) nierozwiązany odsyłacz."""
        if self.fatal:
            return 1
        if strict and self.unresolved:
            return 1
        return 0


def build(
    input_dir: str | Path,
    output_dir: str | Path | None = None,
    fmt: str = "html",
    jobs: int = 1,
    check_examples: bool = True,
    on_file: Callable[[str], None] | None = None,
) -> BuildResult:
    """
    Uruchamia potok dla katalogu input_dir.

    Args:
        input_dir:      katalog źródeł Pod
        output_dir:     katalog wynikowy; None = tylko sprawdzenie (bez zapisu)
        fmt:            format wyjścia (html | text | man)
        jobs:           liczba wątków parsowania
        check_examples: czy walidować przykłady kodu
        on_file:        wywoływane po przetworzeniu każdego pliku (postęp)

    Raises:
        IOFailure:  katalog wejściowy nie istnieje
        ValueError: nieznany format
    """
    renderer = get_renderer(fmt) if output_dir is not None else None
    root = Path(input_dir)
    paths = iter_sources(root)
    logger.info("znaleziono %d plików w %s", len(paths), root)

    result = BuildResult()

    # Krok 1: wczytanie + parsowanie (niezależnie dla każdego pliku)
    def _parse_one(rel: Path) -> DocumentTree | Diagnostic:
        try:
            return parse_source(load_source(rel, root))
        except MalformedMarkup as e:
            return Diagnostic(
                code=DiagCode.MALFORMED_MARKUP,
                source=rel.as_posix(),
                line=e.line,
                message=e.reason,
                details={"directive": e.directive} if e.directive else None,
            )
        except IOFailure as e:
            return Diagnostic(
                code=DiagCode.IO_FAILURE,
                source=rel.as_posix(),
                line=0,
                message=e.reason,
            )
        finally:
            if on_file is not None:
                on_file(rel.as_posix())

    if jobs > 1:
        with ThreadPoolExecutor(max_workers=jobs) as pool:
            parsed = list(pool.map(_parse_one, paths))
    else:
        parsed = [_parse_one(p) for p in paths]

    for item in parsed:
        if isinstance(item, Diagnostic):
            result.failed.append(item.source)
            result.diagnostics.append(item)
            logger.warning("%s", item)
        else:
            result.trees.append(item)
            result.diagnostics.extend(_anchor_diagnostics(item))

    # Krok 2: bariera — tablica symboli z wszystkich sparsowanych drzew
    result.table = SymbolTable.build(result.trees)
    resolver = Resolver(result.table)
    validator = ExampleValidator()

    # Krok 3: odsyłacze, przykłady, renderowanie
    claimed: dict[str, str] = {}
    for tree in result.trees:
        result.diagnostics.extend(resolver.resolve(tree))
        if check_examples:
            report = validator.validate(tree)
            result.examples.merge(report)
            result.diagnostics.extend(report.diagnostics)
        if renderer is None or output_dir is None:
            continue
        out_rel = output_rel_path(tree.source.rel_path, renderer.suffix)
        if out_rel in claimed:
            # Type/Map.pod6 i Type/Map.rakudoc → ten sam Type/Map.html
            result.failed.append(tree.source.rel_path)
            result.diagnostics.append(Diagnostic(
                code=DiagCode.IO_FAILURE,
                source=tree.source.rel_path,
                line=0,
                message=f"{out_rel} jest już zapisywany z {claimed[out_rel]}",
                details={"output": out_rel, "conflict": claimed[out_rel]},
            ))
            continue
        claimed[out_rel] = tree.source.rel_path
        try:
            write_document(tree, output_dir, renderer)
        except IOFailure as e:
            result.failed.append(tree.source.rel_path)
            result.diagnostics.append(Diagnostic(
                code=DiagCode.IO_FAILURE,
                source=tree.source.rel_path,
                line=0,
                message=e.reason,
            ))
            continue
        result.rendered.append(out_rel)

    # Krok 4: indeks symboli
    if output_dir is not None:
        try:
            write_symbol_index(result.table, output_dir)
        except IOFailure as e:
            result.diagnostics.append(Diagnostic(
                code=DiagCode.IO_FAILURE,
                source=SYMBOL_INDEX,
                line=0,
                message=e.reason,
            ))

    result.diagnostics.sort(key=lambda d: d.sort_key)
    return result


def _anchor_diagnostics(tree: DocumentTree) -> list[Diagnostic]:
    return [
        Diagnostic(
            code=DiagCode.DUPLICATE_ANCHOR,
            source=tree.source.rel_path,
            line=line,
            message=f"Zduplikowana kotwica '{anchor}' — nadano sufiks.",
            details={"anchor": anchor},
        )
        for line, anchor in tree.duplicate_anchors
    ]
