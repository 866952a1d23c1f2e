import pytest
from pathlib import Path

from corpus import BROKEN_POD, CORPUS
from pod import parse_text
from xref import Resolver, SymbolTable


def write_files(root: Path, files: dict[str, str]) -> Path:
    for rel, text in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    return root


# Common test fixtures
@pytest.fixture
def corpus_dir(tmp_path: Path) -> Path:
    """Katalog z trzema poprawnymi dokumentami."""
    return write_files(tmp_path / "doc", CORPUS)


@pytest.fixture
def broken_corpus_dir(tmp_path: Path) -> Path:
    """Korpus z jednym plikiem o niezbalansowanych dyrektywach."""
    return write_files(tmp_path / "doc", {**CORPUS, "Language/broken.pod6": BROKEN_POD})


@pytest.fixture
def resolved_trees():
    """Sparsowane drzewa korpusu z rozwiązanymi odsyłaczami (rel_path → drzewo)."""
    trees = [parse_text(text, rel) for rel, text in CORPUS.items()]
    resolver = Resolver(SymbolTable.build(trees))
    for tree in trees:
        resolver.resolve(tree)
    return {t.source.rel_path: t for t in trees}
