"""
validator/example_validator.py — walidator przykładów kodu w dokumentacji.

ExampleValidator.validate(tree) -> ValidationReport

Przykłady nie są wykonywane (brak interpretera opisywanego języka);
sprawdzana jest tylko poprawność składniowa adnotacji oczekiwanego wyniku:

    say 42;   # OUTPUT: «42␤»

Etapy:
  A — pusty przykład
  B — znacznik "# OUTPUT:" bez otwierającego «
  C — niezamknięty « (brak » do końca bloku)
  D — znak ␤ poza adnotacją wyniku
"""

from __future__ import annotations

import logging
import re

from data_model.diagnostics import DiagCode, Diagnostic
from data_model.documents import CodeBlock, DocumentTree
from .types import ValidationReport

logger = logging.getLogger(__name__)

_OUTPUT_RE = re.compile(r"#\s*OUTPUT\s*:", re.IGNORECASE)

NEWLINE_MARK = "␤"

# Limit uwag na jeden przykład — po przekroczeniu przerywamy dalsze etapy
MAX_ISSUES = 20


class ExampleValidator:
    """
    Walidator przykładów kodu.

    Użycie:
        validator = ExampleValidator()
        report    = validator.validate(tree)
        for d in report.diagnostics:
            print(d)
    """

    def validate(self, tree: DocumentTree) -> ValidationReport:
        report = ValidationReport()
        source = tree.source.rel_path
        for block in tree.code_blocks():
            if block.role != "code":
                continue
            if block.skip_test is not None:
                report.skipped += 1
                continue
            report.checked += 1
            report.diagnostics.extend(self.check_block(block, source))
        logger.debug(
            "%s: sprawdzono %d przykładów, pominięto %d, uwag %d",
            source, report.checked, report.skipped, len(report.diagnostics),
        )
        return report

    def check_block(self, block: CodeBlock, source: str) -> list[Diagnostic]:
        """Sprawdza pojedynczy blok kodu i zwraca listę uwag."""
        first_line = block.body_line or (block.line if block.implicit else block.line + 1)

        # A — pusty przykład
        if not block.text.strip():
            return [Diagnostic(
                code=DiagCode.EXAMPLE_EMPTY,
                source=source,
                line=block.line,
                message="Pusty przykład kodu.",
            )]

        issues: list[Diagnostic] = []
        text = block.text
        spans: list[tuple[int, int]] = []

        # B, C — adnotacje wyniku
        for m in _OUTPUT_RE.finditer(text):
            if len(issues) >= MAX_ISSUES:
                break
            line = first_line + text.count("\n", 0, m.start())
            pos = m.end()
            while pos < len(text) and text[pos] in " \t":
                pos += 1
            if pos >= len(text) or text[pos] != "«":
                issues.append(Diagnostic(
                    code=DiagCode.OUTPUT_NO_MARKER,
                    source=source,
                    line=line,
                    message="Po '# OUTPUT:' brak otwierającego '«'.",
                ))
                continue
            end = _find_close(text, pos)
            if end is None:
                issues.append(Diagnostic(
                    code=DiagCode.OUTPUT_UNTERMINATED,
                    source=source,
                    line=line,
                    message="Adnotacja '# OUTPUT: «' nie jest zamknięta znakiem '»'.",
                ))
                spans.append((pos, len(text)))
                continue
            spans.append((pos, end + 1))

        # D — ␤ poza adnotacją wyniku
        for m in re.finditer(NEWLINE_MARK, text):
            if len(issues) >= MAX_ISSUES:
                break
            if any(a <= m.start() < b for a, b in spans):
                continue
            issues.append(Diagnostic(
                code=DiagCode.OUTPUT_STRAY_NEWLINE,
                source=source,
                line=first_line + text.count("\n", 0, m.start()),
                message=f"Znak {NEWLINE_MARK} poza adnotacją '# OUTPUT: «…»'.",
            ))

        return issues


def _find_close(text: str, pos: int) -> int | None:
    """Pozycja » zamykającego « z pozycji pos (z zagnieżdżeniem)."""
    depth = 0
    for i in range(pos, len(text)):
        ch = text[i]
        if ch == "«":
            depth += 1
        elif ch == "»":
            depth -= 1
            if depth == 0:
                return i
    return None
