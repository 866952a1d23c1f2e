"""
Testy parsera blokowego Pod (parse_text → DocumentTree).
"""

import pytest

from data_model.documents import (
    Block,
    DefinitionList,
    Heading,
    Item,
    Link,
    Paragraph,
    Table,
    Text,
    inline_text,
)
from pod import MalformedMarkup, make_anchor, parse_text

from corpus import MAP_POD


def _nodes(tree):
    return list(tree.walk())


class TestDocumentStructure:
    """Testy struktury drzewa dla kompletnego dokumentu."""

    def test_parse_when_full_document_then_title_and_metadata(self):
        tree = parse_text(MAP_POD, "Type/Map.pod6")
        assert tree.title == "class Map"
        assert tree.subtitle == "Immutable mapping from strings to values"
        assert tree.source.kind == "Type"
        assert tree.source.subkind == "class"
        assert tree.source.category == "composite"

    def test_parse_when_headings_then_indexed_by_level_with_anchors(self):
        tree = parse_text(MAP_POD, "Type/Map.pod6")
        assert [h.anchor for h in tree.headings[1]] == ["Methods"]
        assert [h.anchor for h in tree.headings[2]] == ["method_new", "method_elems"]
        assert tree.headings[2][0].line == 9

    def test_parse_when_code_block_then_verbatim_text(self):
        tree = parse_text(MAP_POD, "Type/Map.pod6")
        (code,) = tree.code_blocks()
        assert code.text == "my %m is Map = a => 1;\nsay %m<a>;  # OUTPUT: «1␤»"
        assert code.role == "code"
        assert code.implicit is False
        assert code.line == 13

    def test_parse_when_link_in_paragraph_then_collected(self):
        tree = parse_text(MAP_POD, "Type/Map.pod6")
        (link,) = tree.links()
        assert link.target == "/type/Hash"
        assert link.line == 11

    def test_parse_when_pod_block_then_kept_as_container(self):
        tree = parse_text(MAP_POD, "Type/Map.pod6")
        (pod,) = tree.root.children
        assert isinstance(pod, Block)
        assert pod.name == "pod"
        assert pod.config["kind"] == "Type"


class TestParagraphs:
    """Testy akapitów i bloków kodu bez dyrektywy."""

    def test_parse_when_blank_line_then_separate_paragraphs(self):
        tree = parse_text("First\nline.\n   \nSecond.\n")
        paras = [n for n in _nodes(tree) if isinstance(n, Paragraph)]
        assert [inline_text(p.children) for p in paras] == ["First line.", "Second."]
        assert [p.line for p in paras] == [1, 4]

    def test_parse_when_indented_paragraph_then_implicit_code(self):
        tree = parse_text("=begin pod\n\nText.\n\n    say 42;\n      say 43;\n\n=end pod\n")
        (code,) = tree.code_blocks()
        assert code.implicit is True
        assert code.text == "say 42;\n  say 43;"
        assert code.line == 5

    def test_parse_when_directive_follows_text_then_paragraph_closed(self):
        tree = parse_text("Some text\n=head1 Next\n")
        nodes = _nodes(tree)
        assert isinstance(nodes[0], Paragraph)
        assert isinstance(nodes[1], Heading)


class TestBlocks:
    """Testy poszczególnych rodzajów bloków."""

    def test_parse_when_delimited_heading_then_paragraphs_merged(self):
        tree = parse_text("=begin head1\nLong\nheading\n=end head1\n")
        (heading,) = tree.headings[1]
        assert inline_text(heading.children) == "Long heading"
        assert heading.anchor == "Long_heading"

    def test_parse_when_duplicate_headings_then_suffixed_anchors(self):
        tree = parse_text("=head2 method new\n\n=head2 method new\n\n=head2 method new\n")
        assert [h.anchor for h in tree.headings[2]] == ["method_new", "method_new_2", "method_new_3"]
        assert tree.duplicate_anchors == [(3, "method_new"), (5, "method_new")]

    @pytest.mark.parametrize("headings, expected", [
        (["A", "A", "A 2"], ["A", "A_2", "A_2_2"]),
        (["A 2", "A", "A"], ["A_2", "A", "A_3"]),
    ])
    def test_parse_when_suffix_matches_other_heading_then_anchors_unique(self, headings, expected):
        tree = parse_text("\n".join(f"=head2 {h}\n" for h in headings))
        assert [h.anchor for h in tree.headings[2]] == expected

    def test_parse_when_code_config_then_lang_and_skip_test(self):
        tree = parse_text(
            "=begin code :lang<raku> :skip-test<needs network>\nfetch();\n=end code\n"
            "\n=begin code :skip-test\nsleep;\n=end code\n"
        )
        first, second = tree.code_blocks()
        assert first.lang == "raku"
        assert first.skip_test == "needs network"
        assert second.skip_test == ""

    def test_parse_when_code_contains_directives_then_kept_verbatim(self):
        tree = parse_text("=begin code\n=head1 not a heading\n=begin\n=end code\n")
        (code,) = tree.code_blocks()
        assert code.text == "=head1 not a heading\n=begin"
        assert tree.headings == {}

    def test_parse_when_for_code_then_paragraph_body(self):
        tree = parse_text("=for code :lang<raku>\nsay 1;\nsay 2;\n\nAfter.\n")
        (code,) = tree.code_blocks()
        assert code.text == "say 1;\nsay 2;"
        assert code.lang == "raku"

    def test_parse_when_input_output_blocks_then_roles(self):
        tree = parse_text("=begin input\nabc\n=end input\n=begin output\nABC\n=end output\n")
        assert [c.role for c in tree.code_blocks()] == ["input", "output"]

    def test_parse_when_comment_then_dropped(self):
        tree = parse_text("=begin comment\nL<not|parsed\n=end comment\n\nVisible.\n")
        assert tree.links() == []
        assert len(_nodes(tree)) == 1

    def test_parse_when_items_then_levels(self):
        tree = parse_text("=item one\n=item2 two\n=item three\n")
        items = [n for n in _nodes(tree) if isinstance(n, Item)]
        assert [(i.level, inline_text(i.children)) for i in items] == [
            (1, "one"), (2, "two"), (1, "three"),
        ]

    def test_parse_when_consecutive_defn_then_single_list(self):
        tree = parse_text("=defn foo\nFoo thing.\n\n=defn bar\nBar thing.\n")
        (dl,) = [n for n in _nodes(tree) if isinstance(n, DefinitionList)]
        assert [inline_text(d.term) for d in dl.items] == ["foo", "bar"]
        assert inline_text(dl.items[1].children) == "Bar thing."

    def test_parse_when_table_with_separator_then_header(self):
        tree = parse_text(
            "=begin table :caption<Pairs>\n"
            "Name | Value\n"
            "=====|======\n"
            "a    | 1\n"
            "b    | 2\n"
            "=end table\n"
        )
        (table,) = [n for n in _nodes(tree) if isinstance(n, Table)]
        assert [inline_text(c) for c in table.header] == ["Name", "Value"]
        assert [[inline_text(c) for c in row] for row in table.rows] == [["a", "1"], ["b", "2"]]
        assert table.caption == "Pairs"

    def test_parse_when_table_with_space_columns_then_split(self):
        tree = parse_text("=begin table\nalpha  beta\ngamma  delta\n=end table\n")
        (table,) = [n for n in _nodes(tree) if isinstance(n, Table)]
        assert table.header is None
        assert [[inline_text(c) for c in row] for row in table.rows] == [
            ["alpha", "beta"], ["gamma", "delta"],
        ]

    def test_parse_when_semantic_block_then_generic_block(self):
        tree = parse_text("=SYNOPSIS Map.new\n")
        (block,) = tree.root.children
        assert isinstance(block, Block)
        assert block.name == "SYNOPSIS"

    def test_parse_when_config_continuation_then_merged(self):
        tree = parse_text('=begin pod :kind("Type")\n= :subkind<role>\n\nText.\n\n=end pod\n')
        assert tree.source.subkind == "role"
        assert tree.root.children[0].config == {"kind": "Type", "subkind": "role"}

    def test_parse_when_nested_formatting_in_heading_then_anchor_from_text(self):
        tree = parse_text("=head2 method C<new>\n")
        assert tree.headings[2][0].anchor == "method_new"


class TestMalformedMarkup:
    """Testy błędów MalformedMarkup (z numerem linii)."""

    def test_parse_when_end_closes_outer_block_then_reports_open_inner(self):
        with pytest.raises(MalformedMarkup) as exc:
            parse_text("=begin pod\n=begin nested\ntext\n=end pod\n")
        assert exc.value.line == 2
        assert exc.value.directive == "=begin nested"

    def test_parse_when_end_without_begin_then_reports_end_line(self):
        with pytest.raises(MalformedMarkup) as exc:
            parse_text("=begin pod\n\n=end foo\n=end pod\n")
        assert exc.value.line == 3

    def test_parse_when_begin_not_closed_then_reports_begin_line(self):
        with pytest.raises(MalformedMarkup) as exc:
            parse_text("Intro.\n\n=begin pod\n\nText.\n")
        assert exc.value.line == 3

    def test_parse_when_verbatim_not_closed_then_reports_begin_line(self):
        with pytest.raises(MalformedMarkup) as exc:
            parse_text("=begin code\nsay 1;\n")
        assert exc.value.line == 1

    def test_parse_when_unknown_directive_then_raises(self):
        with pytest.raises(MalformedMarkup) as exc:
            parse_text("Text.\n\n=frobnicate now\n")
        assert exc.value.line == 3

    def test_parse_when_unclosed_inline_code_then_paragraph_line(self):
        with pytest.raises(MalformedMarkup) as exc:
            parse_text("=head1 Title\n\nSee B<this\n")
        assert exc.value.line == 3


class TestMakeAnchor:
    """Testy make_anchor."""

    @pytest.mark.parametrize("text,expected", [
        ("method new", "method_new"),
        ("  Methods ", "Methods"),
        ("infix  +", "infix_+"),
        ("", "section"),
    ])
    def test_make_anchor(self, text, expected):
        assert make_anchor(text) == expected


def test_parse_when_links_everywhere_then_all_collected():
    """Odsyłacze w nagłówkach, punktach, definicjach i tabelach są zbierane."""
    tree = parse_text(
        "=head1 See L<a>\n\n=item L<b>\n\n=defn L<c>\nL<d>\n\n"
        "=begin table\nL<e> | x\n=end table\n"
    )
    assert [l.target for l in tree.links()] == ["a", "b", "c", "d", "e"]
    assert all(isinstance(l, Link) for l in tree.links())
    assert isinstance(tree.links()[0], Link) and tree.links()[0].children == [Text("a")]
