from __future__ import annotations

import pytest

from likert_charts.core import pipeline
from likert_charts.core.data_loader import DataLoaderError
from likert_charts.ui.app import (
    MENU_ELEMENT,
    StreamlitUIAdapter,
    load_rows_once,
    update_menu_visibility,
)

URL = "https://example.test/responses"


class _StubFetch:
    def __init__(self, *results: object) -> None:
        self._results = list(results)
        self.calls: list[str] = []

    def __call__(self, url: str, *, timeout_seconds: int) -> object:
        self.calls.append(url)
        result = self._results.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


def test_rows_are_fetched_once_per_session(monkeypatch: pytest.MonkeyPatch) -> None:
    fetch = _StubFetch([{"practice": 4}])
    monkeypatch.setattr(pipeline, "fetch_responses", fetch)
    state: dict[str, object] = {}

    first = load_rows_once(state, URL)
    second = load_rows_once(state, URL)

    assert first.ok
    assert second is first
    assert fetch.calls == [URL]


def test_failed_fetch_is_retried_on_next_run(monkeypatch: pytest.MonkeyPatch) -> None:
    fetch = _StubFetch(DataLoaderError("timeout"), [{"practice": 4}])
    monkeypatch.setattr(pipeline, "fetch_responses", fetch)
    state: dict[str, object] = {}

    failed = load_rows_once(state, URL)
    recovered = load_rows_once(state, URL)

    assert failed.status_message == pipeline.LOAD_ERROR_MESSAGE
    assert recovered.ok
    assert fetch.calls == [URL, URL]


def test_menu_toggle_does_not_touch_loaded_rows(monkeypatch: pytest.MonkeyPatch) -> None:
    fetch = _StubFetch([{"practice": 4}])
    monkeypatch.setattr(pipeline, "fetch_responses", fetch)
    state: dict[str, object] = {}
    adapter = StreamlitUIAdapter(state)

    load_rows_once(state, URL)
    update_menu_visibility(adapter, trigger_clicked=True)
    load_rows_once(state, URL)

    assert fetch.calls == [URL]


def test_menu_starts_hidden_and_trigger_toggles() -> None:
    adapter = StreamlitUIAdapter({})

    assert adapter.is_hidden(MENU_ELEMENT)
    assert update_menu_visibility(adapter, trigger_clicked=True) is False
    assert update_menu_visibility(adapter, trigger_clicked=True) is True


def test_menu_closes_on_any_other_rerun() -> None:
    adapter = StreamlitUIAdapter({})
    update_menu_visibility(adapter, trigger_clicked=True)

    assert update_menu_visibility(adapter, trigger_clicked=False) is True
    assert adapter.is_hidden(MENU_ELEMENT)
