from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Mapping, Optional, Sequence

from likert_charts.config import FETCH_TIMEOUT_SECONDS, QuestionDescriptor
from likert_charts.core.aggregator import CoercionPolicy, aggregate, to_plot_series
from likert_charts.core.data_loader import DataLoaderError, fetch_responses
from likert_charts.core.renderer import COMPACT_LAYOUT, ChartLayout, render
from likert_charts.core.ui_adapter import UIAdapter

logger = logging.getLogger(__name__)

NO_DATA_MESSAGE = "No data found."
LOAD_ERROR_MESSAGE = "Error loading data."
CONFIG_ERROR_MESSAGE = "Configuration Error."


@dataclass
class LoadOutcome:
    """
    Result of one page load.

    status_message is None when the rows loaded (the loading message
    should be hidden); otherwise it replaces the loading message.
    """
    status_message: Optional[str]
    rows_loaded: int = 0
    charts_rendered: int = 0
    rows: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status_message is None


def render_all_charts(
    rows: Sequence[Mapping[str, Any]],
    questions: Sequence[QuestionDescriptor],
    container: Any,
    *,
    layout: ChartLayout = COMPACT_LAYOUT,
    policy: CoercionPolicy = CoercionPolicy.COERCE,
    adapter: Optional[UIAdapter] = None,
) -> int:
    """Aggregate and render every question in configured order; return the chart count."""
    rendered = 0
    for q in questions:
        series = to_plot_series(aggregate(rows, q.key, policy))
        render(container, q.title, series, layout=layout, adapter=adapter)
        rendered += 1

    logger.info("Rendered %d charts from %d rows", rendered, len(rows))
    return rendered


def load_rows(
    url: Optional[str],
    *,
    timeout_seconds: int = FETCH_TIMEOUT_SECONDS,
) -> LoadOutcome:
    """
    Fetch the dataset and turn fetch problems into a status message.

    A successful outcome holds the rows and can be rendered any number of
    times with render_loaded without hitting the endpoint again.
    """
    if not url or not url.strip():
        logger.warning("Response endpoint URL is not configured.")
        return LoadOutcome(status_message=CONFIG_ERROR_MESSAGE)

    try:
        rows = fetch_responses(url, timeout_seconds=timeout_seconds)
    except DataLoaderError:
        logger.exception("Error fetching data from %s", url)
        return LoadOutcome(status_message=LOAD_ERROR_MESSAGE)

    if not rows:
        logger.warning("Response endpoint %s returned no rows.", url)
        return LoadOutcome(status_message=NO_DATA_MESSAGE)

    return LoadOutcome(status_message=None, rows_loaded=len(rows), rows=rows)


def render_loaded(
    loaded: LoadOutcome,
    questions: Sequence[QuestionDescriptor],
    container: Any,
    *,
    layout: ChartLayout = COMPACT_LAYOUT,
    policy: CoercionPolicy = CoercionPolicy.COERCE,
    adapter: Optional[UIAdapter] = None,
) -> LoadOutcome:
    """Draw the charts for an earlier load; failed loads are returned unchanged."""
    if not loaded.ok:
        return loaded

    rendered = render_all_charts(
        loaded.rows,
        questions,
        container,
        layout=layout,
        policy=policy,
        adapter=adapter,
    )
    return replace(loaded, charts_rendered=rendered)


def load_and_render(
    url: Optional[str],
    questions: Sequence[QuestionDescriptor],
    container: Any,
    *,
    layout: ChartLayout = COMPACT_LAYOUT,
    policy: CoercionPolicy = CoercionPolicy.COERCE,
    adapter: Optional[UIAdapter] = None,
    timeout_seconds: int = FETCH_TIMEOUT_SECONDS,
) -> LoadOutcome:
    """
    Fetch the dataset once, then draw one chart per question.

    Fetch problems never reach the renderer: they come back as the status
    message to show in place of the charts.
    """
    loaded = load_rows(url, timeout_seconds=timeout_seconds)
    return render_loaded(
        loaded,
        questions,
        container,
        layout=layout,
        policy=policy,
        adapter=adapter,
    )
