"""
Testy wyszukiwania i wczytywania plików źródłowych.
"""

import pytest

from pod import DEFAULT_SUFFIXES, IOFailure, iter_sources, load_source, source_from_text
from pod.loader import read_metadata


class TestIterSources:
    """Testy iter_sources."""

    def test_iter_when_nested_dirs_then_sorted_relative_paths(self, corpus_dir):
        (corpus_dir / "README.md").write_text("not pod", encoding="utf-8")
        paths = [p.as_posix() for p in iter_sources(corpus_dir)]
        assert paths == ["Language/intro.pod6", "Type/Hash.pod6", "Type/Map.pod6"]

    def test_iter_when_other_suffixes_then_included(self, tmp_path):
        for name in ("a.rakudoc", "b.pod", "c.txt"):
            (tmp_path / name).write_text("=head1 X\n", encoding="utf-8")
        assert [p.name for p in iter_sources(tmp_path)] == ["a.rakudoc", "b.pod"]
        assert ".pod6" in DEFAULT_SUFFIXES

    def test_iter_when_missing_dir_then_raises(self, tmp_path):
        with pytest.raises(IOFailure):
            iter_sources(tmp_path / "nope")


class TestLoadSource:
    """Testy load_source."""

    def test_load_when_valid_file_then_source_with_metadata(self, corpus_dir):
        src = load_source("Type/Map.pod6", corpus_dir)
        assert src.rel_path == "Type/Map.pod6"
        assert src.kind == "Type"
        assert src.stem == "Map"
        assert src.url == "/type/Map"
        assert src.path.is_absolute()

    def test_load_when_invalid_utf8_then_io_failure(self, tmp_path):
        (tmp_path / "bad.pod6").write_bytes(b"=head1 \xff\xfe\n")
        with pytest.raises(IOFailure) as exc:
            load_source("bad.pod6", tmp_path)
        assert "UTF-8" in exc.value.reason

    def test_load_when_missing_file_then_io_failure(self, tmp_path):
        with pytest.raises(IOFailure):
            load_source("missing.pod6", tmp_path)

    def test_load_when_symlink_outside_root_then_rel_path_from_corpus_name(self, tmp_path):
        outside = tmp_path / "outside"
        outside.mkdir()
        (outside / "Real.pod6").write_text("=head1 Real\n", encoding="utf-8")
        root = tmp_path / "docs"
        (root / "Type").mkdir(parents=True)
        (root / "Type" / "Link.pod6").symlink_to(outside / "Real.pod6")

        paths = iter_sources(root)
        assert [p.as_posix() for p in paths] == ["Type/Link.pod6"]
        src = load_source(paths[0], root)
        assert src.rel_path == "Type/Link.pod6"
        assert src.stem == "Link"

    def test_load_when_absolute_path_outside_root_then_io_failure(self, tmp_path):
        root = tmp_path / "docs"
        root.mkdir()
        stray = tmp_path / "stray.pod6"
        stray.write_text("=head1 Stray\n", encoding="utf-8")
        with pytest.raises(IOFailure):
            load_source(stray, root)


class TestMetadata:
    """Testy metadanych z dyrektywy =begin pod."""

    def test_metadata_when_absent_then_empty(self):
        assert read_metadata("=head1 Title\n") == {}
        src = source_from_text("=head1 Title\n", "Language/x.pod6")
        assert src.kind is None
        assert src.url == "/language/x"

    def test_metadata_when_leading_blank_lines_then_still_read(self):
        assert read_metadata("\n\n=begin pod :kind<Type>\n=end pod\n") == {"kind": "Type"}
