from __future__ import annotations

import sys
from pathlib import Path

import pytest

SRC_DIR = Path(__file__).resolve().parents[1] / "src"

if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))


@pytest.fixture
def sample_rows() -> list[dict[str, object]]:
    return [
        {"q": 1},
        {"q": 2},
        {"q": 2},
        {"q": 5},
        {"q": "3"},
        {"q": 9},
    ]


@pytest.fixture
def survey_rows() -> list[dict[str, object]]:
    return [
        {"clear-instructions": 4, "grading-scale": "5", "group-work": 1},
        {"clear-instructions": 4, "grading-scale": 3, "feedback": "yes"},
        {"clear-instructions": "2", "grading-scale": None, "practice": 5},
    ]
