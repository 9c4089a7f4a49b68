"""Configuration for the solution viewer API server."""

import os
from dataclasses import dataclass, field
from typing import List


def _split_locales(value: str) -> List[str]:
    return [part.strip() for part in value.split(',') if part.strip()]


@dataclass
class Settings:
    """
    Tunables of the solution viewer.

    Defaults can be overridden through the environment.
    Every field is overridable at construction for testing.
    """
    default_locale: str = "en"
    include_automatic_vertices: bool = False
    correction_excluded_locales: List[str] = field(default_factory=lambda: ["ja"])
    default_page_size: int = 20
    max_page_size: int = 200

    def __post_init__(self):
        if os.environ.get("DEFAULT_LOCALE"):
            self.default_locale = os.environ["DEFAULT_LOCALE"].strip()

        if os.environ.get("INCLUDE_AUTOMATIC_VERTICES", "").lower() in ("1", "true", "yes"):
            self.include_automatic_vertices = True

        env_excluded = os.environ.get("CORRECTION_EXCLUDED_LOCALES")
        if env_excluded is not None:
            self.correction_excluded_locales = _split_locales(env_excluded)

        env_page_size = os.environ.get("DEFAULT_PAGE_SIZE")
        if env_page_size is not None:
            try:
                self.default_page_size = int(env_page_size)
            except ValueError:
                pass

        self.default_page_size = max(1, min(self.default_page_size, self.max_page_size))
