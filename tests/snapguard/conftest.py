"""Shared fixtures for snapguard tests."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from snapguard.config import ENV_TOGGLES, _CI_ENV_VARS


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Tests start outside CI with every policy toggle unset."""
    for var in _CI_ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    for var in ENV_TOGGLES.values():
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def write_artifact(tmp_path: Path) -> Callable[[str, str], Path]:
    def _write(name: str, text: str) -> Path:
        path = tmp_path / name
        path.write_bytes(text.encode("utf-8"))
        return path

    return _write
