"""Release metadata for the El Águila backend."""

from __future__ import annotations

from pathlib import Path
from typing import Final, NamedTuple, Tuple

MIN_PYTHON_VERSION: Final[Tuple[int, int]] = (3, 11)
MIN_PYTHON_VERSION_STR: Final[str] = ".".join(str(part) for part in MIN_PYTHON_VERSION)
PYTHON_REQUIRES_SPECIFIER: Final[str] = f">={MIN_PYTHON_VERSION_STR}"


class VersionInfo(NamedTuple):
    """Semantic version triple parsed from the ``VERSION`` file."""

    major: int
    minor: int
    patch: int

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


def parse_version(raw: str) -> VersionInfo:
    """Parse ``MAJOR.MINOR.PATCH`` rejecting negative or partial versions."""

    parts = raw.strip().split(".")
    if len(parts) != 3:
        raise ValueError(f"version must have three components, got {raw!r}")
    numbers = tuple(int(part) for part in parts)
    if any(number < 0 for number in numbers):
        raise ValueError(f"version components must be non-negative, got {raw!r}")
    return VersionInfo(*numbers)


_VERSION_FILE = Path(__file__).resolve().parent.parent / "VERSION"
PROJECT_VERSION: Final[str] = _VERSION_FILE.read_text(encoding="utf-8").strip()
VERSION_INFO: Final[VersionInfo] = parse_version(PROJECT_VERSION)
__version__: Final[str] = PROJECT_VERSION

__all__ = [
    "MIN_PYTHON_VERSION",
    "MIN_PYTHON_VERSION_STR",
    "PYTHON_REQUIRES_SPECIFIER",
    "PROJECT_VERSION",
    "VERSION_INFO",
    "VersionInfo",
    "parse_version",
    "__version__",
]
