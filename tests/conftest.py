from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Dict, List, Tuple

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from src.storage.database import DatabaseManager


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "e2e: exercises the HTTP app end to end")


class StubModuleLogger:
    """Captures structured log payloads for assertions."""

    def __init__(self) -> None:
        self.records: List[Tuple[str, Dict[str, Any]]] = []

    def _record(self, level: str, payload: Any) -> None:
        self.records.append((level, payload if isinstance(payload, dict) else {"message": payload}))

    def info(self, payload: Any) -> None:
        self._record("info", payload)

    def warning(self, payload: Any) -> None:
        self._record("warning", payload)

    def error(self, payload: Any) -> None:
        self._record("error", payload)

    def debug(self, payload: Any) -> None:
        self._record("debug", payload)

    def events(self) -> List[str]:
        return [payload.get("event") for _level, payload in self.records]


class StubLoggerFactory:
    def __init__(self) -> None:
        self.module_logger = StubModuleLogger()

    def create_module_logger(self, name: str) -> StubModuleLogger:
        return self.module_logger


@pytest.fixture()
def logger_factory() -> StubLoggerFactory:
    return StubLoggerFactory()


@pytest.fixture()
def db_manager(tmp_path: Path) -> DatabaseManager:
    return DatabaseManager({"type": "sqlite", "path": tmp_path / "elaguila.db"})
