from __future__ import annotations

import math

import numpy as np
import pytest

from likert_charts.config import QUESTIONS
from likert_charts.core.aggregator import (
    TOTAL_COL,
    CoercionPolicy,
    aggregate,
    parse_category,
    resolve_policy,
    summary_frame,
    to_plot_series,
)


@pytest.mark.parametrize(
    "raw, expected",
    [
        (1, 1),
        (5, 5),
        ("3", 3),
        (" 4 ", 4),
        (np.int64(2), 2),
        (0, None),
        (6, None),
        (-1, None),
        ("yes", None),
        ("", None),
        ("3.0", None),
        ("0_3", None),
        ("+3", None),
        ("03", None),
        ("\u0663", None),
        ("\uff13", None),
        (3.0, None),
        (2.5, None),
        (math.nan, None),
        (None, None),
        (True, None),
        ([3], None),
    ],
)
def test_parse_category_coerce(raw: object, expected: int | None) -> None:
    assert parse_category(raw) == expected


def test_parse_category_strict_skips_numeric_strings() -> None:
    assert parse_category("3", CoercionPolicy.STRICT) is None
    assert parse_category(3, CoercionPolicy.STRICT) == 3
    assert parse_category(False, CoercionPolicy.STRICT) is None


def test_resolve_policy_accepts_names_and_members() -> None:
    assert resolve_policy("STRICT ") is CoercionPolicy.STRICT
    assert resolve_policy(CoercionPolicy.COERCE) is CoercionPolicy.COERCE

    with pytest.raises(ValueError):
        resolve_policy("loose")


def test_aggregate_example(sample_rows: list[dict[str, object]]) -> None:
    assert aggregate(sample_rows, "q") == {1: 1, 2: 2, 3: 1, 4: 0, 5: 1}


def test_aggregate_strict_policy_drops_string_values(sample_rows: list[dict[str, object]]) -> None:
    assert aggregate(sample_rows, "q", CoercionPolicy.STRICT) == {1: 1, 2: 2, 3: 0, 4: 0, 5: 1}


def test_aggregate_empty_rows_returns_all_zero() -> None:
    assert aggregate([], "q") == {1: 0, 2: 0, 3: 0, 4: 0, 5: 0}


def test_aggregate_missing_key_counts_nothing(sample_rows: list[dict[str, object]]) -> None:
    result = aggregate(sample_rows, "not-a-question")

    assert list(result) == [1, 2, 3, 4, 5]
    assert sum(result.values()) == 0


@pytest.mark.parametrize("value", [1, 2, 3, 4, 5])
def test_aggregate_uniform_rows(value: int) -> None:
    rows = [{"q": value} for _ in range(7)]

    result = aggregate(rows, "q")

    assert result[value] == 7
    assert all(count == 0 for category, count in result.items() if category != value)


def test_aggregate_skips_loosely_numeric_text() -> None:
    rows = [{"q": "0_3"}, {"q": "\u0663"}, {"q": "+3"}, {"q": "3"}]

    assert aggregate(rows, "q")[3] == 1


def test_aggregate_skips_invalid_values() -> None:
    rows = [{"q": 0}, {"q": 6}, {"q": "yes"}, {"q": None}, {}]

    assert sum(aggregate(rows, "q").values()) == 0


def test_aggregate_is_idempotent_and_order_independent(sample_rows: list[dict[str, object]]) -> None:
    first = aggregate(sample_rows, "q")
    again = aggregate(sample_rows, "q")
    reversed_rows = aggregate(list(reversed(sample_rows)), "q")

    assert first == again == reversed_rows


def test_aggregate_does_not_mutate_rows(sample_rows: list[dict[str, object]]) -> None:
    snapshot = [dict(row) for row in sample_rows]

    aggregate(sample_rows, "q")

    assert sample_rows == snapshot


def test_aggregate_total_never_exceeds_row_count(survey_rows: list[dict[str, object]]) -> None:
    for q in QUESTIONS:
        result = aggregate(survey_rows, q.key)
        assert len(result) == 5
        assert all(isinstance(count, int) and count >= 0 for count in result.values())
        assert sum(result.values()) <= len(survey_rows)


def test_to_plot_series_is_ascending_and_complete() -> None:
    series = to_plot_series({5: 2, 1: 4, 3: 1})

    assert series == [(1, 4), (2, 0), (3, 1), (4, 0), (5, 2)]


def test_summary_frame_has_one_row_per_question(survey_rows: list[dict[str, object]]) -> None:
    df = summary_frame(survey_rows, QUESTIONS)

    assert list(df.index) == [q.key for q in QUESTIONS]
    assert df.loc["clear-instructions", 4] == 2
    assert df.loc["clear-instructions", 2] == 1
    assert df.loc["grading-scale", TOTAL_COL] == 2
    assert df.loc["feedback", TOTAL_COL] == 0
    assert df.loc["group-work", "title"] == "Work in groups"


def test_summary_frame_with_no_rows() -> None:
    df = summary_frame([], QUESTIONS)

    assert len(df) == len(QUESTIONS)
    assert (df[TOTAL_COL] == 0).all()
