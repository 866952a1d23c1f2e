"""
validator/types.py — wynik walidacji przykładów kodu.

ValidationReport — liczba sprawdzonych i pominiętych przykładów oraz
    lista diagnostyk (Diagnostic z kodami W_EXAMPLE_* / W_OUTPUT_*).
"""

from __future__ import annotations

from dataclasses import dataclass, field

from data_model.diagnostics import Diagnostic


@dataclass(slots=True)
class ValidationReport:
    """
    Wynik walidacji przykładów jednego dokumentu.

    - checked:     liczba sprawdzonych bloków kodu
    - skipped:     liczba bloków z :skip-test
    - diagnostics: lista uwag (nigdy fatalnych)
    """

    checked: int = 0
    skipped: int = 0
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.diagnostics

    def merge(self, other: ValidationReport) -> None:
        self.checked += other.checked
        self.skipped += other.skipped
        self.diagnostics.extend(other.diagnostics)
