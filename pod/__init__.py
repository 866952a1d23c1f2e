"""
pod — wczytywanie i parsowanie źródeł dokumentacji w formacie Pod.

Interfejs publiczny:
    iter_sources, load_source   — wyszukiwanie i odczyt plików
    parse_source, parse_text    — parser blokowy → DocumentTree
    parse_inline                — kody formatujące (B<>, C<>, L<> …)
    MalformedMarkup, IOFailure  — błędy fatalne dla pojedynczego pliku

Typowe użycie:
    from pod import iter_sources, load_source, parse_source

    for rel in iter_sources("doc"):
        tree = parse_source(load_source(rel, "doc"))
        print(tree.title, len(tree.links()))
"""

from .errors import IOFailure, MalformedMarkup, PodError
from .loader import DEFAULT_SUFFIXES, iter_sources, load_source, source_from_text
from .inline import parse_inline, is_external
from .parser import make_anchor, parse_source, parse_text

__all__ = [
    "PodError",
    "MalformedMarkup",
    "IOFailure",
    "DEFAULT_SUFFIXES",
    "iter_sources",
    "load_source",
    "source_from_text",
    "parse_inline",
    "is_external",
    "make_anchor",
    "parse_source",
    "parse_text",
]
