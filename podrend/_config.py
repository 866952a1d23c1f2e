"""
Konfiguracja podrend — zmienne środowiskowe (opcjonalnie z pliku .env).

  PODREND_INPUT    katalog źródeł Pod
  PODREND_OUTPUT   katalog wynikowy
  PODREND_FORMAT   html | text | man         (domyślnie: html)
  PODREND_JOBS     liczba wątków parsowania  (domyślnie: 1)
  PODREND_STRICT   1/true/yes → nierozwiązane odsyłacze dają kod wyjścia 1

Argumenty wiersza poleceń mają pierwszeństwo przed zmiennymi.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import find_dotenv, load_dotenv

_TRUE = {"1", "true", "yes", "on"}


@dataclass(frozen=True, slots=True)
class Settings:
    input_dir: str | None
    output_dir: str | None
    format: str
    jobs: int
    strict: bool

    @classmethod
    def from_env(cls) -> Settings:
        """
        Raises:
            ValueError: PODREND_JOBS nie jest liczbą całkowitą.
        """
        load_dotenv(find_dotenv(usecwd=True))
        raw_jobs = os.getenv("PODREND_JOBS", "1").strip() or "1"
        try:
            jobs = int(raw_jobs)
        except ValueError:
            raise ValueError(f"PODREND_JOBS musi być liczbą, otrzymano '{raw_jobs}'") from None
        return cls(
            input_dir  = os.getenv("PODREND_INPUT") or None,
            output_dir = os.getenv("PODREND_OUTPUT") or None,
            format     = os.getenv("PODREND_FORMAT") or "html",
            jobs       = max(1, jobs),
            strict     = os.getenv("PODREND_STRICT", "").strip().lower() in _TRUE,
        )


def get_settings() -> Settings:
    return Settings.from_env()
