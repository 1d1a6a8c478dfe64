"""
Pytest configuration and shared fixtures for versiongate tests.

This module provides reusable fixtures and test utilities used across
the test suite.
"""

from __future__ import annotations

from pathlib import Path
import threading
from typing import Any

import pytest
import yaml

from versiongate.ledger import InMemoryLedger
from versiongate.logging import SilentLogger, set_global_logger


@pytest.fixture(autouse=True)
def reset_global_logger():
    """Keep the library silent between tests (CLI tests install a printer)."""
    set_global_logger(SilentLogger())
    yield
    set_global_logger(SilentLogger())


@pytest.fixture
def fixtures_dir() -> Path:
    """Provide path to test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def read_fixture(fixtures_dir: Path):
    """
    Factory fixture returning the text of a fixture document.

    Usage:
        raw = read_fixture("valid_update_full.json")
    """
    def _read(name: str) -> str:
        return (fixtures_dir / name).read_text(encoding="utf-8")

    return _read


@pytest.fixture
def create_yaml_file(tmp_path: Path):
    """
    Factory fixture for creating temporary YAML files.

    Usage:
        yaml_path = create_yaml_file("settings.yaml", {"key": "value"})
    """
    def _create(filename: str, data: dict[str, Any]) -> Path:
        path = tmp_path / filename
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            yaml.dump(data, f)
        return path

    return _create


@pytest.fixture
def ledger() -> InMemoryLedger:
    """Provide an empty in-memory notification ledger."""
    return InMemoryLedger()


class RecordingCallback:
    """UpdateCallback that records every call it receives."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        self.delivered = threading.Event()

    def on_new_update(self, version, mandatory, metadata):
        self.calls.append(("on_new_update", (version, mandatory, metadata)))
        self.delivered.set()

    def on_no_update(self, metadata):
        self.calls.append(("on_no_update", (metadata,)))
        self.delivered.set()

    def on_error(self, kind):
        self.calls.append(("on_error", (kind,)))
        self.delivered.set()


@pytest.fixture
def callback() -> RecordingCallback:
    """Provide a callback that records deliveries."""
    return RecordingCallback()
