from __future__ import annotations

import logging
import traceback
from typing import Any, List, MutableMapping, Optional, Sequence

import streamlit as st

from likert_charts.config import (
    APP_NAME,
    APP_VERSION,
    CHART_LAYOUT,
    COERCION_POLICY,
    QUESTIONS,
    RESPONSES_URL,
    QuestionDescriptor,
)
from likert_charts.core.aggregator import resolve_policy, summary_frame
from likert_charts.core.pipeline import LoadOutcome, load_rows, render_loaded
from likert_charts.core.renderer import ChartElement, get_layout

logger = logging.getLogger(__name__)

GRID_COLUMNS = 3
MENU_ELEMENT = "question-menu"
LOADING_MESSAGE = "Loading survey results..."
ROWS_STATE_PREFIX = "rows::"
HIDDEN_STATE_PREFIX = "hidden::"


class StreamlitChartGrid:
    """Chart container that lays figures out left-to-right, GRID_COLUMNS per row."""

    def __init__(self, columns: int = GRID_COLUMNS) -> None:
        self._columns = max(1, int(columns))
        self._slots: list = []
        self.elements: List[ChartElement] = []

    def append(self, element: ChartElement) -> None:
        if len(self.elements) % self._columns == 0:
            self._slots = list(st.columns(self._columns))
        slot = self._slots[len(self.elements) % self._columns]
        with slot:
            st.pyplot(element.figure, use_container_width=False)
        self.elements.append(element)


class StreamlitUIAdapter:
    """
    UI adapter backed by the running Streamlit script.

    Visibility flags live in `state` (the session state unless another
    mapping is given); every element starts hidden.
    """

    def __init__(self, state: Optional[MutableMapping[str, Any]] = None) -> None:
        self._state = state

    @property
    def state(self) -> MutableMapping[str, Any]:
        return st.session_state if self._state is None else self._state

    def append_chart(self, container: StreamlitChartGrid, element: ChartElement) -> None:
        container.append(element)

    def toggle_visibility(self, element: str) -> bool:
        hidden = not self.is_hidden(element)
        self.state[HIDDEN_STATE_PREFIX + element] = hidden
        return hidden

    def hide(self, element: str) -> None:
        self.state[HIDDEN_STATE_PREFIX + element] = True

    def is_hidden(self, element: str) -> bool:
        return bool(self.state.get(HIDDEN_STATE_PREFIX + element, True))


def update_menu_visibility(adapter: StreamlitUIAdapter, trigger_clicked: bool) -> bool:
    """
    Return whether the question menu is hidden for this run.

    The trigger toggles the menu; any other rerun (a click elsewhere on the
    page, the menu's own Close button) collapses it.
    """
    if trigger_clicked:
        return adapter.toggle_visibility(MENU_ELEMENT)
    adapter.hide(MENU_ELEMENT)
    return True


def load_rows_once(state: MutableMapping[str, Any], url: str) -> LoadOutcome:
    """
    Fetch the rows on the first run of a session and reuse them afterwards.

    Only successful loads are kept, so a failed fetch is retried on the
    next run instead of sticking for the whole session.
    """
    key = ROWS_STATE_PREFIX + (url or "")
    cached = state.get(key)
    if cached is not None:
        return cached

    loaded = load_rows(url)
    if loaded.ok:
        state[key] = loaded
    return loaded


def _render_question_menu(adapter: StreamlitUIAdapter, questions: Sequence[QuestionDescriptor]) -> None:
    clicked = st.sidebar.button("Questions", key="menu_trigger")
    if update_menu_visibility(adapter, clicked):
        return

    for i, q in enumerate(questions, start=1):
        st.sidebar.write(f"{i}. {q.title}")
    st.sidebar.button("Close", key="menu_close")


def _render_summary_table(outcome: LoadOutcome, questions: Sequence[QuestionDescriptor]) -> None:
    with st.expander("Response counts (table)", expanded=False):
        df = summary_frame(outcome.rows, questions, resolve_policy(COERCION_POLICY))
        st.dataframe(df, use_container_width=True)
        st.caption(f"{outcome.rows_loaded} responses loaded.")


def run_app() -> None:
    st.set_page_config(page_title=APP_NAME, page_icon="📊", layout="wide")
    st.title(APP_NAME)
    st.caption(f"Version {APP_VERSION}")

    adapter = StreamlitUIAdapter()
    _render_question_menu(adapter, QUESTIONS)

    message = st.empty()
    message.info(LOADING_MESSAGE)

    try:
        layout = get_layout(CHART_LAYOUT)
        policy = resolve_policy(COERCION_POLICY)
    except ValueError as exc:
        logger.error("Invalid chart configuration: %s", exc)
        message.error("Configuration Error.")
        st.code(repr(exc))
        return

    loaded = load_rows_once(st.session_state, RESPONSES_URL)

    grid = StreamlitChartGrid()
    try:
        outcome = render_loaded(
            loaded,
            QUESTIONS,
            grid,
            layout=layout,
            policy=policy,
            adapter=adapter,
        )
    except Exception:
        message.error("Unexpected error while drawing the charts.")
        st.text_area("Traceback", value=traceback.format_exc(), height=260)
        return

    if not outcome.ok:
        message.warning(outcome.status_message)
        return

    message.empty()
    _render_summary_table(outcome, QUESTIONS)
