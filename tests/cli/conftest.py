from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import pytest
import yaml


@pytest.fixture
def pricing_defaults() -> dict[str, Any]:
    return {
        "market": {"spot": 100.0, "rate": 0.05, "volatility": 0.2},
        "option": {"type": "call", "strike": 100.0, "exercise": "european"},
        "engine": {"tree": "crr", "steps": 100},
    }


@pytest.fixture
def write_yaml(tmp_path: Path):
    def _write(name: str, data: Mapping[str, Any] | list[Any]) -> Path:
        path = tmp_path / name
        path.write_text(yaml.safe_dump(data), encoding="utf-8")
        return path

    return _write
