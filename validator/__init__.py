"""
validator — walidator przykładów kodu osadzonych w dokumentacji.

Interfejs publiczny:
    ExampleValidator  — sprawdza bloki kodu drzewa dokumentu
    ValidationReport  — wynik walidacji (liczniki + diagnostyki)

Typowe użycie:
    from validator import ExampleValidator

    report = ExampleValidator().validate(tree)
    if not report.is_valid:
        for d in report.diagnostics:
            print(d.code, d.line, d.message)
"""

from .types import ValidationReport
from .example_validator import ExampleValidator, NEWLINE_MARK

__all__ = [
    "ValidationReport",
    "ExampleValidator",
    "NEWLINE_MARK",
]
