"""Application configuration defaults."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

SOURCE_ENV_VAR = "PHONEDIR_SOURCE"
DEFAULT_SOURCE = "data/internos.xlsx"


def _get_default_source() -> str:
    """Source location from the environment, else the bundled data file."""
    return os.environ.get(SOURCE_ENV_VAR) or DEFAULT_SOURCE


@dataclass(slots=True)
class AppConfig:
    source: str | None = None
    http_timeout: float = 10.0
    host: str = "127.0.0.1"
    port: int = 8000

    def __post_init__(self) -> None:
        if self.source is None:
            self.source = _get_default_source()
        self.source = str(self.source)

    @property
    def is_remote(self) -> bool:
        return str(self.source).startswith(("http://", "https://"))

    def resolve_source(self, base_dir: Path | None = None) -> str:
        if self.source is None:
            self.source = _get_default_source()
        if self.is_remote or Path(self.source).is_absolute() or base_dir is None:
            return str(self.source)
        return str(base_dir / self.source)
