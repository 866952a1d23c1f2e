"""
Testy tablicy symboli i rozwiązywania odsyłaczy.
"""

from corpus import CORPUS, HASH_POD, MAP_POD
from data_model.diagnostics import DiagCode
from data_model.symbols import SymbolEntry
from pod import parse_text
from xref import Resolver, SymbolTable, collect_anchors, collect_symbols, document_entry


def _trees(files: dict[str, str]):
    return [parse_text(text, rel) for rel, text in files.items()]


class TestCollectSymbols:
    """Testy collect_symbols / document_entry."""

    def test_collect_when_type_document_then_title_and_methods(self):
        tree = parse_text(MAP_POD, "Type/Map.pod6")
        assert collect_symbols(tree) == [
            SymbolEntry("Map", "class", "Type/Map.pod6", None, "/type/Map"),
            SymbolEntry("new", "method", "Type/Map.pod6", "method_new", "/type/Map"),
            SymbolEntry("elems", "method", "Type/Map.pod6", "method_elems", "/type/Map"),
        ]

    def test_collect_when_language_document_then_kind_from_metadata(self):
        tree = parse_text(CORPUS["Language/intro.pod6"], "Language/intro.pod6")
        entry = document_entry(tree)
        assert (entry.name, entry.kind, entry.url) == ("Introduction", "language", "/language/intro")

    def test_collect_when_index_entry_then_anchored_to_section(self):
        tree = parse_text(CORPUS["Language/intro.pod6"], "Language/intro.pod6")
        (entry,) = [e for e in collect_symbols(tree) if e.name == "intro"]
        assert entry.kind == "reference"
        assert entry.anchor == "Overview"

    def test_collect_when_role_title_then_kind_role(self):
        tree = parse_text("=TITLE role Positional\n", "Type/Positional.pod6")
        assert document_entry(tree).kind == "role"
        assert document_entry(tree).name == "Positional"

    def test_collect_when_no_title_then_only_stem_entry(self):
        tree = parse_text("=head1 Notes\n", "misc/notes.pod6")
        assert collect_symbols(tree) == []
        assert document_entry(tree).name == "notes"
        assert document_entry(tree).kind == "doc"

    def test_collect_when_plain_heading_then_section_anchor(self):
        tree = parse_text(MAP_POD, "Type/Map.pod6")
        anchors = collect_anchors(tree)
        assert anchors["Methods"].kind == "section"
        assert anchors["method_new"].kind == "method"


class TestSymbolTable:
    """Testy SymbolTable."""

    def test_lookup_when_name_defined_twice_then_both_entries(self):
        table = SymbolTable.build(_trees(CORPUS))
        entries = table.lookup("new")
        assert [(e.source, e.anchor) for e in entries] == [
            ("Type/Hash.pod6", "method_new"),
            ("Type/Map.pod6", "method_new"),
        ]

    def test_build_when_trees_reordered_then_same_table(self):
        trees = _trees(CORPUS)
        forward = SymbolTable.build(trees).to_dict()
        backward = SymbolTable.build(list(reversed(trees))).to_dict()
        assert forward == backward

    def test_lookup_url_when_document_url_then_document_entry(self):
        table = SymbolTable.build(_trees(CORPUS))
        entry = table.lookup_url("/type/Map/")
        assert entry is not None
        assert entry.source == "Type/Map.pod6"
        assert entry.anchor is None

    def test_build_when_url_collision_then_smallest_source_wins(self):
        files = {"Type/Map.pod6": MAP_POD, "Alt/Type/Map.pod6": MAP_POD}
        for trees in (_trees(files), list(reversed(_trees(files)))):
            assert SymbolTable.build(trees).lookup_url("/type/Map").source == "Alt/Type/Map.pod6"

    def test_table_when_built_then_names_and_len(self):
        table = SymbolTable.build(_trees(CORPUS))
        assert table.names() == ["Hash", "Introduction", "Map", "elems", "intro", "new"]
        assert len(table) == 6
        assert "new" in table
        assert "Frobnicate" not in table

    def test_to_dict_when_built_then_index_shape(self):
        table = SymbolTable.build(_trees({"Type/Hash.pod6": HASH_POD}))
        assert table.to_dict()["Hash"] == [
            {"source": "Type/Hash.pod6", "anchor": None, "kind": "class", "url": "/type/Hash"},
        ]


class TestResolver:
    """Testy Resolver."""

    def test_resolve_when_corpus_then_links_filled(self, resolved_trees):
        intro = resolved_trees["Language/intro.pod6"]
        by_target = {l.target: l.resolved for l in intro.links()}
        assert [e.source for e in by_target["new"]] == ["Type/Hash.pod6", "Type/Map.pod6"]
        assert [(e.source, e.anchor) for e in by_target["/type/Map"]] == [("Type/Map.pod6", None)]
        assert [(e.source, e.anchor) for e in by_target["#Overview"]] == [
            ("Language/intro.pod6", "Overview"),
        ]
        assert by_target["Frobnicate"] == []
        assert by_target["https://raku.org"] == []

    def test_resolve_when_unknown_symbol_then_exactly_one_diagnostic(self):
        trees = _trees(CORPUS)
        resolver = Resolver(SymbolTable.build(trees))
        intro = next(t for t in trees if t.source.rel_path == "Language/intro.pod6")
        (d,) = resolver.resolve(intro)
        assert d.code is DiagCode.UNRESOLVED_LINK
        assert d.line == 12
        assert d.details == {"target": "Frobnicate"}
        assert not d.fatal

    def test_resolve_when_external_link_then_no_diagnostic(self):
        tree = parse_text("See L<docs|https://docs.raku.org> and L<mail|mailto:a@b.c>.\n", "x.pod6")
        resolver = Resolver(SymbolTable.build([tree]))
        assert resolver.resolve(tree) == []

    def test_lookup_when_url_with_anchor_then_heading_entry(self):
        resolver = Resolver(SymbolTable.build(_trees(CORPUS)))
        (entry,) = resolver.lookup("/type/Map#method_new", "Language/intro.pod6")
        assert (entry.source, entry.name, entry.kind) == ("Type/Map.pod6", "new", "method")

    def test_lookup_when_name_with_anchor_then_filtered_by_anchor(self):
        resolver = Resolver(SymbolTable.build(_trees(CORPUS)))
        assert len(resolver.lookup("new#method_new", "x.pod6")) == 2
        assert resolver.lookup("Map#method_elems", "x.pod6")[0].name == "elems"

    def test_lookup_when_unknown_url_then_falls_back_to_name(self):
        resolver = Resolver(SymbolTable.build(_trees(CORPUS)))
        assert [e.source for e in resolver.lookup("/routine/new", "x.pod6")] == [
            "Type/Hash.pod6", "Type/Map.pod6",
        ]
        assert resolver.lookup("/language/missing", "x.pod6") == []

    def test_lookup_when_missing_anchor_then_empty(self):
        resolver = Resolver(SymbolTable.build(_trees(CORPUS)))
        assert resolver.lookup("/type/Map#nope", "x.pod6") == []
        assert resolver.lookup("#nope", "Type/Map.pod6") == []

    def test_lookup_when_doc_scheme_then_stripped(self):
        resolver = Resolver(SymbolTable.build(_trees(CORPUS)))
        assert resolver.lookup("doc:Map", "x.pod6")[0].source == "Type/Map.pod6"
