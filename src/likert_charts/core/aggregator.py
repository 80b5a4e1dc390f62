from __future__ import annotations

import logging
import numbers
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

import pandas as pd

from likert_charts.config import LIKERT_CATEGORIES, QuestionDescriptor

logger = logging.getLogger(__name__)

TOTAL_COL = "total"

# Exact text accepted for a category; "03", "+3" and non-ASCII digits are skipped.
_CATEGORY_TEXT: Dict[str, int] = {str(c): c for c in LIKERT_CATEGORIES}


class CoercionPolicy(str, Enum):
    """
    How raw response values are matched against the 1..5 categories.

      COERCE: integers and numeric strings ("3", " 4 ") both count
      STRICT: only integer values count; "3" is skipped
    """

    COERCE = "coerce"
    STRICT = "strict"


def resolve_policy(value: CoercionPolicy | str) -> CoercionPolicy:
    if isinstance(value, CoercionPolicy):
        return value
    try:
        return CoercionPolicy(str(value).strip().lower())
    except ValueError as exc:
        raise ValueError(f"Unknown coercion policy: {value!r}") from exc


def parse_category(raw: Any, policy: CoercionPolicy = CoercionPolicy.COERCE) -> Optional[int]:
    """
    Return the Likert category (1..5) for a raw response value, or None.

    Booleans, floats, NaN, non-numeric text and out-of-range integers all
    map to None under both policies.
    """
    if raw is None or isinstance(raw, bool):
        return None

    if isinstance(raw, numbers.Integral):
        value = int(raw)
        return value if value in LIKERT_CATEGORIES else None

    if isinstance(raw, str) and policy is CoercionPolicy.COERCE:
        return _CATEGORY_TEXT.get(raw.strip())

    return None


def aggregate(
    rows: Sequence[Mapping[str, Any]],
    key: str,
    policy: CoercionPolicy = CoercionPolicy.COERCE,
) -> Dict[int, int]:
    """
    Count one question's responses per Likert category.

    All five categories are present in the result, zero-filled. Rows where
    the key is missing or the value does not parse are skipped.
    """
    counts: Dict[int, int] = {c: 0 for c in LIKERT_CATEGORIES}
    for row in rows:
        category = parse_category(row.get(key), policy)
        if category is not None:
            counts[category] += 1

    logger.debug("Aggregated %s over %d rows: %s", key, len(rows), counts)
    return counts


def to_plot_series(distribution: Mapping[int, int]) -> List[Tuple[int, int]]:
    """Reshape a distribution into (category, count) pairs in ascending category order."""
    return [(c, int(distribution.get(c, 0))) for c in LIKERT_CATEGORIES]


def summary_frame(
    rows: Sequence[Mapping[str, Any]],
    questions: Sequence[QuestionDescriptor],
    policy: CoercionPolicy = CoercionPolicy.COERCE,
) -> pd.DataFrame:
    """
    Build the supporting table shown under the chart grid.

    One row per question (indexed by key, in configured order) with the
    title, the five category counts and the number of counted responses.
    """
    records: List[Dict[str, Any]] = []
    for q in questions:
        dist = aggregate(rows, q.key, policy)
        records.append({"key": q.key, "title": q.title, **dist, TOTAL_COL: sum(dist.values())})

    columns = ["key", "title", *LIKERT_CATEGORIES, TOTAL_COL]
    df = pd.DataFrame.from_records(records, columns=columns)
    return df.set_index("key")
