"""
render — renderery drzewa dokumentu (html, text, man) i zapis wyników.

Typowe użycie:
    from render import get_renderer, write_document, write_symbol_index

    renderer = get_renderer("html")
    write_document(tree, "out", renderer)
    write_symbol_index(table, "out")
"""

from .base import Renderer, href, output_rel_path
from .html import HtmlRenderer
from .man import ManRenderer
from .text import TextRenderer
from .writer import SYMBOL_INDEX, write_document, write_symbol_index

RENDERERS: dict[str, type[HtmlRenderer] | type[TextRenderer] | type[ManRenderer]] = {
    "html": HtmlRenderer,
    "text": TextRenderer,
    "man":  ManRenderer,
}


def get_renderer(fmt: str) -> Renderer:
    """Zwraca renderer dla formatu; nieznany format → ValueError."""
    try:
        return RENDERERS[fmt]()
    except KeyError:
        raise ValueError(
            f"Nieznany format '{fmt}'. Dostępne: {', '.join(sorted(RENDERERS))}"
        ) from None


__all__ = [
    "Renderer",
    "RENDERERS",
    "get_renderer",
    "href",
    "output_rel_path",
    "HtmlRenderer",
    "TextRenderer",
    "ManRenderer",
    "SYMBOL_INDEX",
    "write_document",
    "write_symbol_index",
]
