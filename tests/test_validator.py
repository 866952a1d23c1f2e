"""
Testy walidatora przykładów kodu (ExampleValidator).
"""

from data_model.diagnostics import DiagCode
from data_model.documents import CodeBlock
from pod import parse_text
from validator import ExampleValidator, ValidationReport


def _validate(text: str) -> ValidationReport:
    return ExampleValidator().validate(parse_text(text, "Type/X.pod6"))


def _code(body: str, config: str = "") -> str:
    return f"=begin code{(' ' + config) if config else ''}\n{body}\n=end code\n"


class TestExampleValidator:
    """Testy ExampleValidator.validate."""

    def test_validate_when_well_formed_output_then_no_diagnostics(self):
        report = _validate(_code("say 42;  # OUTPUT: «42␤»"))
        assert report.checked == 1
        assert report.is_valid

    def test_validate_when_nested_guillemets_then_valid(self):
        report = _validate(_code("say (a => «b»);  # OUTPUT: «(a => «b»)␤»"))
        assert report.is_valid

    def test_validate_when_output_spans_lines_then_valid(self):
        report = _validate(_code(".say for 1, 2;  # OUTPUT: «1␤\n2␤»"))
        assert report.is_valid

    def test_validate_when_empty_example_then_warning(self):
        report = _validate("=begin code\n=end code\n")
        assert [d.code for d in report.diagnostics] == [DiagCode.EXAMPLE_EMPTY]
        assert report.diagnostics[0].line == 1

    def test_validate_when_marker_without_guillemet_then_warning_on_line(self):
        report = _validate("Intro.\n\n" + _code("my $x = 1;\nsay $x;  # OUTPUT: 1"))
        (d,) = report.diagnostics
        assert d.code is DiagCode.OUTPUT_NO_MARKER
        assert d.line == 5
        assert d.source == "Type/X.pod6"

    def test_validate_when_unterminated_then_single_warning(self):
        report = _validate(_code("say 1;  # OUTPUT: «1␤\nsay 2;"))
        assert [d.code for d in report.diagnostics] == [DiagCode.OUTPUT_UNTERMINATED]
        assert report.diagnostics[0].line == 2

    def test_validate_when_newline_mark_outside_annotation_then_warning(self):
        report = _validate(_code('say "a␤b";'))
        assert [d.code for d in report.diagnostics] == [DiagCode.OUTPUT_STRAY_NEWLINE]

    def test_validate_when_several_markers_then_one_warning_each(self):
        report = _validate(_code("say 1;  # OUTPUT: 1\nsay 2;  # OUTPUT: 2"))
        assert [d.line for d in report.diagnostics] == [2, 3]

    def test_validate_when_skip_test_then_counted_as_skipped(self):
        report = _validate(_code("say 1;  # OUTPUT: 1", ":skip-test<broken on purpose>"))
        assert report.checked == 0
        assert report.skipped == 1
        assert report.is_valid

    def test_validate_when_input_output_blocks_then_ignored(self):
        report = _validate("=begin input\n# OUTPUT: x\n=end input\n=begin output\n␤\n=end output\n")
        assert report.checked == 0
        assert report.is_valid

    def test_validate_when_implicit_code_then_checked_from_first_line(self):
        report = _validate("=begin pod\n\nText.\n\n    say 1;  # OUTPUT: 1\n\n=end pod\n")
        (d,) = report.diagnostics
        assert d.line == 5

    def test_validate_when_all_warnings_then_none_fatal(self):
        report = _validate(_code('say "␤";  # OUTPUT: «x'))
        assert report.diagnostics
        assert not any(d.fatal for d in report.diagnostics)

    def test_validate_when_leading_blank_lines_then_line_of_body_text(self):
        report = _validate("=begin code\n\n\nsay 1;  # OUTPUT: 1\n=end code\n")
        (d,) = report.diagnostics
        assert d.line == 4

    def test_validate_when_config_continuation_then_line_after_config(self):
        report = _validate("=begin code :lang<raku>\n=   :allow<B>\nsay 1;  # OUTPUT: 1\n=end code\n")
        (d,) = report.diagnostics
        assert d.line == 3

    def test_validate_when_abbreviated_code_with_body_on_directive_then_same_line(self):
        report = _validate("Intro.\n\n=code say 1;  # OUTPUT: 1\n")
        (d,) = report.diagnostics
        assert d.line == 3


class TestCheckBlock:
    """Testy ExampleValidator.check_block."""

    def test_check_when_many_issues_then_capped(self):
        block = CodeBlock(text="␤ " * 50, line=1)
        issues = ExampleValidator().check_block(block, "x.pod6")
        assert len(issues) == 20


class TestValidationReport:
    """Testy ValidationReport."""

    def test_merge_when_two_reports_then_summed(self):
        a = _validate(_code("say 1;  # OUTPUT: 1"))
        b = _validate(_code("say 2;", ":skip-test"))
        a.merge(b)
        assert (a.checked, a.skipped, len(a.diagnostics)) == (1, 1, 1)
